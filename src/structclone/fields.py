"""
Per-field attribute metadata.

Every field handled by structclone is described by a `FieldAttributes` record: its value plus
three independent flags.

- ``mutable``: the field may be reassigned.
- ``visible``: the field is listed when the object is enumerated (``dir()``, ``visible_fields``).
- ``redefinable``: the field may be deleted or redefined with different flags.

`Record` is the dynamic-attribute container that stores these records explicitly, so any
combination of flags survives a round trip. Ordinary classes do not store flags; for them the
flags are implied by the type (frozen dataclass fields are neither mutable nor redefinable,
underscore-prefixed names are not visible).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import replace
from typing import Any

from structclone.exceptions import FieldMetadataError
from structclone.exceptions import FrozenFieldError
from structclone.exceptions import ReadOnlyFieldError
from structclone.utils import build_repr

_FIELDS_ATTR = "_structclone_fields"
_HEAPTYPE = 1 << 9  # Py_TPFLAGS_HEAPTYPE

DEFAULT_FLAGS = (True, True, True)
"""Flags of a freshly assigned field: ``(mutable, visible, redefinable)``."""


@dataclass(frozen=True)
class FieldAttributes:
    """A field's value together with its mutable/visible/redefinable flags."""

    value: Any
    mutable: bool = True
    visible: bool = True
    redefinable: bool = True

    @property
    def flags(self) -> tuple[bool, bool, bool]:
        """The ``(mutable, visible, redefinable)`` triple."""
        return (self.mutable, self.visible, self.redefinable)


class Record:
    """
    Attribute container that tracks metadata for every field.

    Attributes assigned normally get default flags; `define_field` sets them explicitly.
    Reconstruction by the deserializer never calls ``__init__``, so subclasses may run arbitrary
    setup logic in their initializer without it being repeated on a round trip.

    Examples:
        >>> point = Record(x=1)
        >>> point.define_field("y", 2, mutable=False)
        >>> point.y
        2
        >>> point.y = 3
        Traceback (most recent call last):
        ...
        structclone.exceptions.ReadOnlyFieldError: Field 'y' of Record is not mutable
        >>> point.field_attributes("y")
        FieldAttributes(value=2, mutable=False, visible=True, redefinable=True)
    """

    def __init__(self, **fields: Any) -> None:
        for name, value in fields.items():
            setattr(self, name, value)

    def __getattribute__(self, name: str) -> Any:
        # Fields win over class attributes and methods; data descriptors and dunders do not.
        if not _is_dunder(name) and not _is_data_descriptor(type(self), name):
            field = _record_fields(self).get(name)
            if field is not None:
                return field.value
        return object.__getattribute__(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if _is_data_descriptor(type(self), name):
            object.__setattr__(self, name, value)
            return

        fields = _record_fields(self)
        current = fields.get(name)
        if current is None:
            fields[name] = FieldAttributes(value)
        elif not current.mutable:
            raise ReadOnlyFieldError(f"Field {name!r} of {type(self).__name__} is not mutable")
        else:
            fields[name] = replace(current, value=value)

    def __delattr__(self, name: str) -> None:
        fields = _record_fields(self)
        current = fields.get(name)
        if current is None:
            object.__delattr__(self, name)
            return
        if not current.redefinable:
            raise FrozenFieldError(f"Field {name!r} of {type(self).__name__} is not redefinable")
        del fields[name]

    def __dir__(self) -> list[str]:
        names = set(super().__dir__())
        names.discard(_FIELDS_ATTR)
        names.update(self.visible_fields())
        return sorted(names)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return list(_record_fields(self).items()) == list(_record_fields(other).items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return build_repr(type(self).__name__, kwargs=self.visible_fields())

    def define_field(
        self,
        name: str,
        value: Any,
        *,
        mutable: bool = True,
        visible: bool = True,
        redefinable: bool = True,
    ) -> None:
        """
        Define (or redefine) a field with explicit flags.

        Args:
            name: Field name.
            value: Field value.
            mutable: Whether the field may be reassigned afterwards.
            visible: Whether the field shows up when the record is enumerated.
            redefinable: Whether the field may later be deleted or redefined.

        Raises:
            FrozenFieldError: If the field exists, is not redefinable and the new definition
                differs from the current one.
        """
        fields = _record_fields(self)
        new = FieldAttributes(value, mutable=mutable, visible=visible, redefinable=redefinable)
        current = fields.get(name)
        if current is not None and not current.redefinable and current != new:
            raise FrozenFieldError(f"Field {name!r} of {type(self).__name__} is not redefinable")
        fields[name] = new

    def field_attributes(self, name: str) -> FieldAttributes:
        """Return the attribute record of a field, raising AttributeError if it does not exist."""
        field = _record_fields(self).get(name)
        if field is None:
            raise AttributeError(f"{type(self).__name__!r} object has no field {name!r}")
        return field

    def visible_fields(self) -> dict[str, Any]:
        """Values of the visible fields, in definition order."""
        return {name: field.value for name, field in _record_fields(self).items() if field.visible}


def field_descriptors(obj: Any) -> dict[str, FieldAttributes]:
    """
    Collect the own fields of an object together with their metadata, in enumeration order.

    Args:
        obj: A plain ``dict``, a `Record` or an instance of an ordinary class.

    Returns:
        Mapping of field name to its attribute record.

    Examples:
        >>> field_descriptors({"a": 1})
        {'a': FieldAttributes(value=1, mutable=True, visible=True, redefinable=True)}
    """
    if type(obj) is dict:
        return {name: FieldAttributes(value) for name, value in obj.items()}
    if isinstance(obj, Record):
        return dict(_record_fields(obj))

    cls = type(obj)
    descriptors = {}
    for name, value in _own_attributes(obj):
        mutable, visible, redefinable = implied_flags(cls, name)
        descriptors[name] = FieldAttributes(value, mutable, visible, redefinable)
    return descriptors


def apply_field(obj: Any, name: str, attributes: FieldAttributes) -> None:
    """
    Set a field on an object, reproducing its recorded metadata.

    Assignment bypasses ``__setattr__`` overrides and frozen dataclasses: the object is being
    rebuilt, not mutated.

    Raises:
        FieldMetadataError: If ``obj`` cannot carry the recorded flags, i.e. it is not a `Record`
            and the flags differ from the ones its type implies.
    """
    if isinstance(obj, Record):
        _record_fields(obj)[name] = attributes
        return

    cls = type(obj)
    expected = DEFAULT_FLAGS if cls is dict else implied_flags(cls, name)
    if attributes.flags != expected:
        raise FieldMetadataError(
            f"Cannot restore field {name!r} with flags (mutable, visible, redefinable)="
            f"{attributes.flags} on {cls.__name__}, which implies {expected}; "
            f"derive the type from structclone.Record to carry arbitrary field metadata"
        )

    if cls is dict:
        obj[name] = attributes.value
    else:
        object.__setattr__(obj, name, attributes.value)


def implied_flags(cls: type, name: str) -> tuple[bool, bool, bool]:
    """Flags an ordinary (non-`Record`) class implies for one of its fields."""
    frozen = is_frozen_dataclass(cls)
    return (not frozen, not name.startswith("_"), not frozen)


def is_frozen_dataclass(cls: type) -> bool:
    """Whether a class is a dataclass declared with ``frozen=True``."""
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def native_base(cls: type) -> type:
    """
    Nearest class in ``cls.__mro__`` that is implemented natively rather than by a class statement.

    This is the base that allocates instances of ``cls``, picked with the same heap-type rule
    `copyreg` uses. State kept by a native base other than ``object`` lives outside ``__dict__``
    and ``__slots__``, so it is invisible to `field_descriptors`.

    Examples:
        >>> from datetime import date
        >>> class Holiday(date):
        ...     pass
        >>> native_base(Holiday) is date, native_base(Record) is object
        (True, True)
    """
    for klass in cls.__mro__:
        if not klass.__flags__ & _HEAPTYPE:
            return klass
    return object


# region Helpers


def _record_fields(record: Record) -> dict[str, FieldAttributes]:
    """Field table of a record, created on first access (``__init__`` may never have run)."""
    state = object.__getattribute__(record, "__dict__")
    fields = state.get(_FIELDS_ATTR)
    if fields is None:
        fields = state[_FIELDS_ATTR] = {}
    return fields


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _is_data_descriptor(cls: type, name: str) -> bool:
    for klass in cls.__mro__:
        if name in klass.__dict__:
            attr_type = type(klass.__dict__[name])
            return hasattr(attr_type, "__set__") or hasattr(attr_type, "__delete__")
    return False


def _own_attributes(obj: Any) -> Iterator[tuple[str, Any]]:
    """Yield instance ``__dict__`` entries followed by assigned ``__slots__`` entries."""
    state = getattr(obj, "__dict__", None) or {}
    yield from state.items()

    for name in _slot_names(type(obj)):
        if name in state:
            continue
        try:
            value = getattr(obj, name)
        except AttributeError:  # Unassigned slot
            continue
        yield name, value


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return names
