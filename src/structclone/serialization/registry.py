"""Process-wide registry mapping type names to the classes used to rebuild them."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from datetime import datetime
from typing import Callable, TypeVar, overload

from structclone.exceptions import DuplicateRegistrationError
from structclone.exceptions import UnknownTypeError
from structclone.fields import Record
from structclone.utils import type_label

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

OBJECT_TYPE_NAME = "Object"
"""Type name of plain key/value records (``dict``)."""

UNDEFINED_TYPE_NAME = "__undefined__"
"""Reserved type tag used to represent the undefined value."""

BUILTIN_TYPES: dict[str, type] = {
    OBJECT_TYPE_NAME: dict,
    "int": int,
    "float": float,
    "str": str,
    "datetime": datetime,
    "bool": bool,
    "Record": Record,
}
"""Pseudo-types every registry starts with: records, Record and the primitive-wrapping kinds."""


class TypeRegistry:
    """
    Write-once mapping from a type name to the class used to rebuild its instances.

    Each name can be registered exactly once; a second registration is rejected and the first one
    stays active. Registration is expected to happen at startup, before any value of the type is
    serialized or deserialized. All methods are thread-safe.

    Examples:
        >>> registry = TypeRegistry()
        >>> class Point:
        ...     pass
        >>> registry.register("Point", Point)
        >>> registry.lookup("Point") is Point
        True
        >>> registry.register("Point", Point)
        Traceback (most recent call last):
        ...
        structclone.exceptions.DuplicateRegistrationError: There is already a type registered as 'Point'
    """

    def __init__(self, *, builtins: bool = True) -> None:
        """
        Initialize the registry.

        Args:
            builtins: Whether to pre-register the built-in pseudo-types (``Object``, ``Record`` and
                the primitive-wrapping kinds).
        """
        self._lock = threading.RLock()
        self._types: dict[str, type] = {}
        self._names: dict[type, str] = {}
        if builtins:
            for name, cls in BUILTIN_TYPES.items():
                self._store(name, cls)

    def register(self, type_name: str, constructor: type) -> None:
        """
        Register a class under a type name.

        Args:
            type_name: Unique, non-empty name written to the IR for instances of the class.
            constructor: The class whose behaviour reconstructed instances receive.

        Raises:
            DuplicateRegistrationError: If ``type_name`` is already registered.
            ValueError: If ``type_name`` is empty or reserved.
            TypeError: If ``constructor`` is not a class.
        """
        if not isinstance(type_name, str) or not type_name:
            raise ValueError(f"Type names must be non-empty strings, got {type_name!r}")
        if type_name == UNDEFINED_TYPE_NAME:
            raise ValueError(f"Type name {UNDEFINED_TYPE_NAME!r} is reserved")
        if not isinstance(constructor, type):
            raise TypeError(f"Only classes can be registered, got {constructor!r}")

        with self._lock:
            if type_name in self._types:
                raise DuplicateRegistrationError(
                    f"There is already a type registered as {type_name!r}"
                )
            self._store(type_name, constructor)

        logger.debug(f"Registered type '{type_name}' -> {type_label(constructor)}")

    def lookup(self, type_name: str) -> type:
        """
        Resolve a type name to its class.

        Raises:
            UnknownTypeError: If nothing is registered under ``type_name``.
        """
        with self._lock:
            cls = self._types.get(type_name)
        if cls is None:
            raise UnknownTypeError(f"Unknown type encountered while deserializing: {type_name!r}")
        return cls

    def name_of(self, cls: type) -> str:
        """
        Type name written to the IR for instances of ``cls``.

        The name ``cls`` was first registered under, falling back to ``cls.__name__`` for classes
        that were never registered (their instances serialize but cannot be deserialized).
        """
        with self._lock:
            name = self._names.get(cls)
        if name is not None:
            return name
        return getattr(cls, "__name__", "")

    def names(self) -> list[str]:
        """Registered type names, in registration order."""
        with self._lock:
            return list(self._types)

    @overload
    def serializable(self, cls: T, *, name: str | None = None) -> T: ...

    @overload
    def serializable(self, cls: None = None, *, name: str | None = None) -> Callable[[T], T]: ...

    def serializable(self, cls=None, *, name=None):
        """
        Class decorator registering the class under ``name`` (default: the class name).

        Examples:
            >>> registry = TypeRegistry()
            >>> @registry.serializable
            ... class Account:
            ...     pass
            >>> "Account" in registry
            True
        """

        def decorator(klass: T) -> T:
            self.register(name if name is not None else klass.__name__, klass)
            return klass

        if cls is None:
            return decorator
        return decorator(cls)

    def __contains__(self, type_name: object) -> bool:
        with self._lock:
            return type_name in self._types

    def __len__(self) -> int:
        with self._lock:
            return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def _store(self, type_name: str, cls: type) -> None:
        self._types[type_name] = cls
        self._names.setdefault(cls, type_name)


default_registry = TypeRegistry()
"""The process-wide registry used when no registry is passed explicitly."""


def register(type_name: str, constructor: type) -> None:
    """Register a class under a type name in the process-wide registry."""
    default_registry.register(type_name, constructor)


def lookup(type_name: str) -> type:
    """Resolve a type name through the process-wide registry."""
    return default_registry.lookup(type_name)


@overload
def serializable(cls: T, *, name: str | None = None) -> T: ...


@overload
def serializable(cls: None = None, *, name: str | None = None) -> Callable[[T], T]: ...


def serializable(cls=None, *, name=None):
    """Class decorator registering a class in the process-wide registry."""
    return default_registry.serializable(cls, name=name)
