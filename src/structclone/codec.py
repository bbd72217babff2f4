"""JSON text transit for structclone IR."""

from __future__ import annotations

import json
from typing import Any

from structclone.exceptions import IRFormatError
from structclone.exceptions import UnserializableValueError
from structclone.serialization import TypeRegistry
from structclone.serialization import deserialize
from structclone.serialization import serialize


def to_json(value: Any, *, registry: TypeRegistry | None = None, indent: int | None = None) -> str:
    """
    Serialize a value and encode the IR as JSON text.

    Field order is kept, so encoding the same value twice yields identical text.

    Args:
        value: Value to serialize.
        registry: Registry used to name types. Defaults to the process-wide registry.
        indent: Indentation passed to `json.dumps`.

    Raises:
        UnserializableValueError: If the value cannot be serialized or contains non-finite floats.

    Examples:
        >>> to_json({"a": 1})
        '{"cName": "Object", "data": {"a": {"v": 1, "w": true, "e": true, "c": true}}}'
    """
    ir = serialize(value, registry=registry)
    try:
        return json.dumps(ir, allow_nan=False, indent=indent)
    except ValueError as e:
        raise UnserializableValueError(f"IR is not JSON-safe: {e}") from e


def from_json(text: str | bytes, *, registry: TypeRegistry | None = None) -> Any:
    """
    Decode JSON text produced by `to_json` and rebuild the value.

    Raises:
        IRFormatError: If ``text`` is not valid JSON.
        UnknownTypeError: If the IR references an unregistered type name.
    """
    try:
        ir = json.loads(text)
    except json.JSONDecodeError as e:
        raise IRFormatError(f"Invalid JSON: {e}") from e
    return deserialize(ir, registry=registry)
