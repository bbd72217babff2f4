"""
Structural serialization engine.

Key components:
- TypeRegistry: name -> class mapping used to resolve type identity in both directions
- PrimitiveWrapperResolver: detects and boxes/unboxes primitive-wrapping types
- Serializer: values -> JSON-safe IR
- Deserializer: IR -> values, reapplying field metadata
- default_registry: Global registry instance

Example:
    >>> from structclone.serialization import TypeRegistry, serialize, deserialize
    >>>
    >>> registry = TypeRegistry()
    >>> @registry.serializable
    ... class Point:
    ...     def __init__(self, x, y):
    ...         self.x, self.y = x, y
    >>>
    >>> ir = serialize(Point(1, 2), registry=registry)
    >>> ir["cName"], ir["data"]["x"]["v"]
    ('Point', 1)
    >>> deserialize(ir, registry=registry).y
    2
"""

from .deserializer import Deserializer
from .deserializer import deserialize
from .registry import OBJECT_TYPE_NAME
from .registry import UNDEFINED_TYPE_NAME
from .registry import TypeRegistry
from .registry import default_registry
from .registry import lookup
from .registry import register
from .registry import serializable
from .serializer import Serializer
from .serializer import serialize
from .wrappers import DEFAULT_WRAPPER_KINDS
from .wrappers import PrimitiveWrapperResolver
from .wrappers import WrappedPrimitive
from .wrappers import WrapperKind

__all__ = [
    "DEFAULT_WRAPPER_KINDS",
    "Deserializer",
    "OBJECT_TYPE_NAME",
    "PrimitiveWrapperResolver",
    "Serializer",
    "TypeRegistry",
    "UNDEFINED_TYPE_NAME",
    "WrappedPrimitive",
    "WrapperKind",
    "default_registry",
    "deserialize",
    "lookup",
    "register",
    "serializable",
    "serialize",
]
