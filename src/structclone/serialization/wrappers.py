"""
Primitive-wrapping kinds.

A primitive-wrapping type boxes a single primitive value and may add extra fields, e.g.::

    class Label(str):
        def __init__(self, text):
            self.checked = True

The resolver decides whether a class derives from one of the wrapping kinds, extracts the
canonical boxed primitive from an instance and rebuilds instances from that primitive.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any, Callable

from structclone._typing import Primitive
from structclone.fields import field_descriptors

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


@dataclass(frozen=True)
class WrapperKind:
    """One primitive-wrapping kind and the rules to box and unbox its primitive."""

    name: str
    """Short kind name (``numeric``, ``text``, ``timestamp`` or ``boolean``)."""

    bases: tuple[type, ...]
    """Built-in types implementing the kind; the first one a class derives from is its base."""

    extract: Callable[[type, Any], Primitive]
    """Extracts the canonical primitive from an instance, given the instance's base type."""

    construct: Callable[[type, type, Any], Any]
    """Builds an instance of a (sub)type from a primitive, given that type's base type."""

    excludes: tuple[type, ...] = ()
    """Subclasses of a base that belong to another kind."""

    def base_of(self, cls: type) -> type | None:
        """The built-in base ``cls`` derives from, or None if ``cls`` is not of this kind."""
        if self.excludes and issubclass(cls, self.excludes):
            return None
        for base in self.bases:
            if issubclass(cls, base):
                return base
        return None


@dataclass(frozen=True)
class WrappedPrimitive:
    """Result of resolving a wrapping-kind instance."""

    kind: WrapperKind
    base: type
    value: Primitive


# region Kind rules


def _extract_number(base: type, value: Any) -> int | float:
    return base.__int__(value) if base is int else base.__float__(value)


def _construct_number(cls: type, base: type, primitive: Any) -> Any:
    return base.__new__(cls, primitive)


def _extract_text(base: type, value: Any) -> str:
    return str.__str__(value)


def _construct_text(cls: type, base: type, primitive: Any) -> Any:
    return str.__new__(cls, primitive)


def _extract_timestamp(base: type, value: Any) -> int:
    # Rebuild a plain datetime so subclass overrides of arithmetic are never involved.
    offset = datetime.utcoffset(value) or timedelta(0)
    plain = datetime(
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
        value.microsecond,
        tzinfo=timezone.utc,
    )
    return (plain - offset - EPOCH) // _MILLISECOND


def _construct_timestamp(cls: type, base: type, primitive: Any) -> Any:
    moment = EPOCH + timedelta(milliseconds=primitive)
    return datetime.__new__(
        cls,
        moment.year,
        moment.month,
        moment.day,
        moment.hour,
        moment.minute,
        moment.second,
        moment.microsecond,
        tzinfo=timezone.utc,
    )


def _extract_boolean(base: type, value: Any) -> bool:
    return bool(value)


def _construct_boolean(cls: type, base: type, primitive: Any) -> Any:
    # bool cannot be subclassed, so there is never a subtype to rebind to.
    return bool(primitive)


NUMERIC = WrapperKind("numeric", (int, float), _extract_number, _construct_number, excludes=(bool,))
TEXT = WrapperKind("text", (str,), _extract_text, _construct_text)
TIMESTAMP = WrapperKind("timestamp", (datetime,), _extract_timestamp, _construct_timestamp)
BOOLEAN = WrapperKind("boolean", (bool,), _extract_boolean, _construct_boolean)

DEFAULT_WRAPPER_KINDS: tuple[WrapperKind, ...] = (NUMERIC, TEXT, TIMESTAMP, BOOLEAN)
"""Wrapping kinds in resolution order."""


class PrimitiveWrapperResolver:
    """
    Resolves classes against an ordered list of primitive-wrapping kinds.

    Examples:
        >>> class Label(str):
        ...     pass
        >>> resolver = PrimitiveWrapperResolver()
        >>> resolver.find_kind(Label).name
        'text'
        >>> resolver.resolve(Label, Label("hi")).value
        'hi'
        >>> resolver.find_kind(dict) is None
        True
    """

    def __init__(self, kinds: Sequence[WrapperKind] = DEFAULT_WRAPPER_KINDS) -> None:
        self._kinds = tuple(kinds)

    @property
    def kinds(self) -> tuple[WrapperKind, ...]:
        """Wrapping kinds in resolution order."""
        return self._kinds

    def find_kind(self, cls: type) -> WrapperKind | None:
        """Return the first wrapping kind ``cls`` derives from, or None."""
        for kind in self._kinds:
            if kind.base_of(cls) is not None:
                return kind
        return None

    def resolve(self, cls: type, value: Any) -> WrappedPrimitive | None:
        """
        Extract the boxed primitive of an instance of ``cls``.

        Args:
            cls: Runtime type of ``value``.
            value: Instance to unbox.

        Returns:
            The matching kind, the nearest built-in base and the canonical primitive (number, text,
            milliseconds since the Unix epoch or boolean), or None when ``cls`` does not derive from
            any wrapping kind.
        """
        for kind in self._kinds:
            base = kind.base_of(cls)
            if base is not None:
                return WrappedPrimitive(kind, base, kind.extract(base, value))
        return None

    def construct(self, cls: type, primitive: Any) -> Any:
        """
        Build an instance of ``cls`` from a boxed primitive.

        The instance is allocated through the built-in base, so neither ``cls.__new__`` nor
        ``cls.__init__`` runs; the result is nevertheless an instance of ``cls`` and keeps all of
        its methods.

        Raises:
            TypeError: If ``cls`` does not derive from any wrapping kind.
        """
        for kind in self._kinds:
            base = kind.base_of(cls)
            if base is not None:
                return kind.construct(cls, base, primitive)
        raise TypeError(f"{cls.__name__} does not derive from a primitive-wrapping type")

    def reference_field_names(self, wrapped: WrappedPrimitive) -> set[str]:
        """
        Names of the fields a bare instance of the nearest wrapping ancestor already carries.

        These fields belong to the wrapping ancestor itself and are not enumerated again.
        """
        reference = wrapped.kind.construct(wrapped.base, wrapped.base, wrapped.value)
        return set(field_descriptors(reference))
