"""Serializer: runtime values to the JSON-safe intermediate representation."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from structclone._typing import IRNode
from structclone._typing import SerializedField
from structclone._typing import SerializedObject
from structclone.exceptions import CyclicGraphError
from structclone.exceptions import DepthLimitError
from structclone.exceptions import MissingTypeNameError
from structclone.exceptions import UnserializableValueError
from structclone.fields import field_descriptors
from structclone.fields import native_base
from structclone.serialization.registry import OBJECT_TYPE_NAME
from structclone.serialization.registry import UNDEFINED_TYPE_NAME
from structclone.serialization.registry import TypeRegistry
from structclone.serialization.registry import default_registry
from structclone.serialization.wrappers import PrimitiveWrapperResolver
from structclone.settings import StructcloneSettings
from structclone.settings import get_global_settings
from structclone.utils import type_label
from structclone.values import classify_value


def serialize_undefined() -> SerializedObject:
    """IR node standing in for the undefined value."""
    return {"cName": UNDEFINED_TYPE_NAME, "data": {}}


class Serializer:
    """
    Recursively converts values into IR.

    The IR is a tree of JSON primitives, lists and object nodes of the form
    ``{"cName": <type name>, "value": <boxed primitive>, "data": {<field>: {"v", "w", "e", "c"}}}``
    where ``value`` is present only for instances of primitive-wrapping types.

    Examples:
        >>> Serializer().serialize({"a": [1, None]})
        {'cName': 'Object', 'data': {'a': {'v': [1, None], 'w': True, 'e': True, 'c': True}}}
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        resolver: PrimitiveWrapperResolver | None = None,
        settings: StructcloneSettings | None = None,
    ) -> None:
        """
        Initialize the serializer.

        Args:
            registry: Registry used to name types. Defaults to the process-wide registry.
            resolver: Resolver for primitive-wrapping types. Defaults to the four standard kinds.
            settings: Settings overriding the global settings.
        """
        self._registry = registry if registry is not None else default_registry
        self._resolver = resolver if resolver is not None else PrimitiveWrapperResolver()
        self._settings = settings

    def serialize(self, value: Any) -> IRNode:
        """
        Serialize a value into IR.

        Raises:
            UnserializableValueError: If the value contains a function or an unsupported built-in.
            MissingTypeNameError: If an object's type has an empty name.
            CyclicGraphError: If the value refers back to one of its own ancestors.
            DepthLimitError: If the value nests deeper than the configured maximum depth.
        """
        settings = self._settings if self._settings is not None else get_global_settings()
        return _SerializationPass(self, settings).visit(value, 0)


class _SerializationPass:
    """State of a single serialize call: the containers on the current recursion path."""

    def __init__(self, serializer: Serializer, settings: StructcloneSettings) -> None:
        self._registry = serializer._registry
        self._resolver = serializer._resolver
        self._max_depth = settings.max_depth
        self._path: set[int] | None = set() if settings.detect_cycles else None

    def visit(self, value: Any, depth: int) -> IRNode:
        kind = classify_value(value)
        if kind in ("null", "boolean", "number", "string"):
            return value
        if kind == "undefined":
            return serialize_undefined()
        if kind == "function":
            raise UnserializableValueError(f"Cannot serialize a function: {value!r}")

        if self._max_depth is not None and depth >= self._max_depth:
            raise DepthLimitError(f"Value nests deeper than max_depth={self._max_depth}")

        self._enter(value)
        try:
            if kind == "array":
                return [self.visit(item, depth + 1) for item in value]
            return self._visit_object(value, depth)
        finally:
            self._leave(value)

    def _visit_object(self, value: Any, depth: int) -> SerializedObject:
        cls = type(value)
        if cls is dict:
            return {"cName": OBJECT_TYPE_NAME, "data": self._visit_fields(value, depth)}

        wrapped = self._resolver.resolve(cls, value)
        if wrapped is None:
            # Only wrapping kinds may keep state in a native base; everything else must be fields.
            base = native_base(cls)
            if cls is object or base is not object:
                raise UnserializableValueError(
                    f"Cannot serialize an instance of {type_label(cls)}: state held by "
                    f"{type_label(base)} has no enumerable fields"
                )

        type_name = self._registry.name_of(cls)
        if not type_name:
            raise MissingTypeNameError(f"Cannot serialize {value!r}: its type has no name")

        node: SerializedObject
        if wrapped is None:
            node = {"cName": type_name, "data": self._visit_fields(value, depth)}
        else:
            exclude = self._resolver.reference_field_names(wrapped)
            node = {
                "cName": type_name,
                "value": wrapped.value,
                "data": self._visit_fields(value, depth, exclude),
            }
        return node

    def _visit_fields(
        self, value: Any, depth: int, exclude: Collection[str] = ()
    ) -> dict[str, SerializedField]:
        if type(value) is dict and (bad_keys := [k for k in value if type(k) is not str]):
            raise UnserializableValueError(f"Record keys must be strings, got {bad_keys!r}")

        serialized: dict[str, SerializedField] = {}
        for name, field in field_descriptors(value).items():
            if name in exclude:
                continue
            serialized[name] = {
                "v": self.visit(field.value, depth + 1),
                "w": field.mutable,
                "e": field.visible,
                "c": field.redefinable,
            }
        return serialized

    def _enter(self, value: Any) -> None:
        if self._path is None:
            return
        if id(value) in self._path:
            raise CyclicGraphError(
                f"Cannot serialize a cyclic structure: {type_label(type(value))} instance "
                f"refers back to itself"
            )
        self._path.add(id(value))

    def _leave(self, value: Any) -> None:
        if self._path is not None:
            self._path.discard(id(value))


def serialize(value: Any, *, registry: TypeRegistry | None = None) -> IRNode:
    """
    Serialize a value into JSON-safe IR.

    Args:
        value: Value to serialize.
        registry: Registry used to name types. Defaults to the process-wide registry.

    Examples:
        >>> from structclone.values import UNDEFINED
        >>> serialize([1, "a", UNDEFINED])
        [1, 'a', {'cName': '__undefined__', 'data': {}}]
    """
    return Serializer(registry).serialize(value)
