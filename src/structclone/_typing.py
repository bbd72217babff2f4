from typing import Any

from typing_extensions import Literal, NotRequired, TypeAlias, TypedDict

ValueKind = Literal["null", "undefined", "boolean", "number", "string", "function", "array", "object"]
"""Kind of a runtime value, as decided by the value classifier."""

Primitive: TypeAlias = bool | int | float | str | None
"""JSON primitive carried as-is through the IR."""


class SerializedField(TypedDict):
    """Wire form of one field: its value plus the mutable/visible/redefinable flags."""

    v: Any
    w: bool
    e: bool
    c: bool


class SerializedObject(TypedDict):
    """Wire form of an object node; ``value`` is present only for boxed primitives."""

    cName: str
    value: NotRequired[Primitive]
    data: dict[str, SerializedField]


IRNode: TypeAlias = Primitive | list[Any] | SerializedObject
"""Any node of the JSON-safe intermediate representation."""
