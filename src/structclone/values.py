"""Runtime value model: the undefined sentinel and the value classifier."""

from __future__ import annotations

import functools
import inspect
from typing import Any

from structclone._typing import ValueKind


class Undefined:
    """
    Marker for a value that is absent rather than null.

    There is exactly one instance, ``UNDEFINED``; copying or pickling it yields that same
    instance, so identity checks (``value is UNDEFINED``) stay valid.

    Examples:
        >>> from structclone.values import UNDEFINED, Undefined
        >>> Undefined() is UNDEFINED
        True
        >>> bool(UNDEFINED)
        False
    """

    _instance: Undefined | None = None

    def __new__(cls) -> Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> Undefined:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Undefined:
        return self


UNDEFINED = Undefined()


def classify_value(value: Any) -> ValueKind:
    """
    Classify a runtime value into one of the kinds the serializer understands.

    Checks run in a fixed order: null, undefined, boolean, number, string, function, array and
    finally object. Primitive checks use the exact type, so instances of ``int``, ``float`` or
    ``str`` subclasses are classified as objects and serialized with their extra fields.

    Args:
        value: Any runtime value.

    Returns:
        The kind of the value.

    Examples:
        >>> classify_value(None), classify_value(True), classify_value(1.5)
        ('null', 'boolean', 'number')
        >>> classify_value([1, 2]), classify_value({"a": 1}), classify_value(len)
        ('array', 'object', 'function')
    """
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"

    value_type = type(value)
    if value_type is bool:
        return "boolean"
    if value_type is int or value_type is float:
        return "number"
    if value_type is str:
        return "string"
    if is_function(value):
        return "function"
    if value_type is list:
        return "array"
    return "object"


def is_function(value: Any) -> bool:
    """Whether a value is executable code (functions, methods, classes or partials)."""
    return (
        inspect.isroutine(value)
        or inspect.isclass(value)
        or isinstance(value, functools.partial)
    )
