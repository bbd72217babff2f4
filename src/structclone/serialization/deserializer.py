"""Deserializer: intermediate representation back to runtime values."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar, cast, overload

from structclone.exceptions import CyclicGraphError
from structclone.exceptions import DepthLimitError
from structclone.exceptions import IRFormatError
from structclone.exceptions import RawObjectWithoutTagError
from structclone.exceptions import UnserializableValueError
from structclone.fields import DEFAULT_FLAGS
from structclone.fields import FieldAttributes
from structclone.fields import Record
from structclone.fields import apply_field
from structclone.fields import native_base
from structclone.serialization.registry import UNDEFINED_TYPE_NAME
from structclone.serialization.registry import TypeRegistry
from structclone.serialization.registry import default_registry
from structclone.serialization.wrappers import PrimitiveWrapperResolver
from structclone.settings import StructcloneSettings
from structclone.settings import get_global_settings
from structclone.utils import type_label
from structclone.values import UNDEFINED

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PRIMITIVE_TYPES = (bool, int, float, str)
_FIELD_KEYS = ("v", "w", "e", "c")


class Deserializer:
    """
    Recursively rebuilds values from IR.

    Type names are resolved through the registry; an unknown name aborts the whole call. Instances
    are allocated without running their type's ``__init__``: the serialized fields already capture
    everything initialization produced.
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        resolver: PrimitiveWrapperResolver | None = None,
        settings: StructcloneSettings | None = None,
    ) -> None:
        """
        Initialize the deserializer.

        Args:
            registry: Registry used to resolve type names. Defaults to the process-wide registry.
            resolver: Resolver for primitive-wrapping types. Defaults to the four standard kinds.
            settings: Settings overriding the global settings.
        """
        self._registry = registry if registry is not None else default_registry
        self._resolver = resolver if resolver is not None else PrimitiveWrapperResolver()
        self._settings = settings

    def deserialize(self, ir: Any) -> Any:
        """
        Rebuild a value from IR.

        Raises:
            UnknownTypeError: If a node references an unregistered type name.
            RawObjectWithoutTagError: If an object-shaped node lacks the ``cName`` tag.
            IRFormatError: If the IR is otherwise malformed.
            FieldMetadataError: If a field's flags cannot be carried by the rebuilt instance.
            UnserializableValueError: If a registered type keeps its state in a native base.
            CyclicGraphError: If the IR refers back to one of its own ancestors.
            DepthLimitError: If the IR nests deeper than the configured maximum depth.
        """
        settings = self._settings if self._settings is not None else get_global_settings()
        return _DeserializationPass(self, settings).visit(ir, 0)


class _DeserializationPass:
    """State of a single deserialize call: the IR nodes on the current recursion path."""

    def __init__(self, deserializer: Deserializer, settings: StructcloneSettings) -> None:
        self._registry = deserializer._registry
        self._resolver = deserializer._resolver
        self._max_depth = settings.max_depth
        self._path: set[int] | None = set() if settings.detect_cycles else None

    def visit(self, node: Any, depth: int) -> Any:
        if node is None or type(node) in _PRIMITIVE_TYPES:
            return node

        if isinstance(node, (list, tuple)):
            return self._visit_nested(node, depth, self._visit_array)
        if isinstance(node, Mapping):
            type_name = node.get("cName")
            if not type_name:
                logger.debug(f"Rejecting IR node without type tag: {node!r}")
                raise RawObjectWithoutTagError(
                    "Got a raw object without a 'cName' type tag; only structclone IR can be "
                    "deserialized"
                )
            if not isinstance(type_name, str):
                raise IRFormatError(f"Type tag must be a string, got {type_name!r}")
            if type_name == UNDEFINED_TYPE_NAME:
                return UNDEFINED
            return self._visit_nested(node, depth, self._visit_object)

        raise IRFormatError(f"Not an IR node: {node!r}")

    def _visit_nested(self, node: Any, depth: int, visit: Any) -> Any:
        if self._max_depth is not None and depth >= self._max_depth:
            raise DepthLimitError(f"IR nests deeper than max_depth={self._max_depth}")
        if self._path is not None:
            if id(node) in self._path:
                raise CyclicGraphError("Cannot deserialize IR that refers back to itself")
            self._path.add(id(node))
        try:
            return visit(node, depth)
        finally:
            if self._path is not None:
                self._path.discard(id(node))

    def _visit_array(self, node: list[Any] | tuple[Any, ...], depth: int) -> list[Any]:
        return [self.visit(item, depth + 1) for item in node]

    def _visit_object(self, node: Mapping[str, Any], depth: int) -> Any:
        type_name = node["cName"]
        cls = self._registry.lookup(type_name)
        fields = self._read_fields(node, depth)

        kind = self._resolver.find_kind(cls)
        if "value" in node:
            if kind is None:
                raise IRFormatError(
                    f"Node of type {type_name!r} carries a boxed primitive but {cls.__name__} "
                    f"does not derive from a primitive-wrapping type"
                )
            instance = self._resolver.construct(cls, node["value"])
        elif kind is not None:
            raise IRFormatError(f"Node of type {type_name!r} is missing its boxed primitive")
        elif cls is dict:
            # Plain records cannot carry field metadata; fall back to the attribute container.
            if all(field.flags == DEFAULT_FLAGS for field in fields.values()):
                instance = {}
            else:
                instance = Record()
        else:
            base = native_base(cls)
            if cls is object or base is not object:
                raise UnserializableValueError(
                    f"Cannot rebuild {type_name!r} from fields: state of {type_label(cls)} is "
                    f"held by {type_label(base)}"
                )
            instance = object.__new__(cls)

        for name, field in fields.items():
            apply_field(instance, name, field)
        return instance

    def _read_fields(self, node: Mapping[str, Any], depth: int) -> dict[str, FieldAttributes]:
        data = node.get("data", {})
        if not isinstance(data, Mapping):
            raise IRFormatError(f"Field map of {node['cName']!r} node must be an object")

        fields: dict[str, FieldAttributes] = {}
        for name, entry in data.items():
            if not isinstance(entry, Mapping) or any(key not in entry for key in _FIELD_KEYS):
                raise IRFormatError(
                    f"Field {name!r} of {node['cName']!r} node must carry the keys {_FIELD_KEYS}"
                )
            fields[name] = FieldAttributes(
                self.visit(entry["v"], depth + 1),
                mutable=bool(entry["w"]),
                visible=bool(entry["e"]),
                redefinable=bool(entry["c"]),
            )
        return fields


@overload
def deserialize(ir: Any, as_type: None = None, *, registry: TypeRegistry | None = None) -> Any: ...


@overload
def deserialize(ir: Any, as_type: type[T], *, registry: TypeRegistry | None = None) -> T: ...


def deserialize(ir, as_type=None, *, registry=None):
    """
    Rebuild a value from IR.

    Args:
        ir: IR produced by `serialize` (possibly after a JSON round trip).
        as_type: Type the caller expects back. Only narrows the static type; the result is not
            checked against it at runtime.
        registry: Registry used to resolve type names. Defaults to the process-wide registry.

    Examples:
        >>> deserialize({"cName": "Object", "data": {"a": {"v": 1, "w": True, "e": True, "c": True}}})
        {'a': 1}
    """
    result = Deserializer(registry).deserialize(ir)
    if as_type is None:
        return result
    return cast(as_type, result)
