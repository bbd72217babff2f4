from __future__ import annotations

import threading
from dataclasses import dataclass

_GLOBAL_STRUCTCLONE_SETTINGS: StructcloneSettings | None = None
_SETTINGS_LOCK = threading.RLock()


@dataclass(frozen=True)
class StructcloneSettings:
    """Configuration settings for structclone."""

    detect_cycles: bool = True
    """
    Whether to track the values on the current recursion path and raise `CyclicGraphError` when a
    value refers back to one of its ancestors.

    If False, a self-referential structure recurses until Python's recursion limit is hit.
    """

    max_depth: int | None = None
    """
    Maximum nesting depth accepted by serialize and deserialize.

    If None, nesting is only bounded by Python's recursion limit.
    """


def get_global_settings() -> StructcloneSettings:
    """
    Get the global structclone settings instance (thread-safe).

    If no global settings have been set, returns a default instance.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_STRUCTCLONE_SETTINGS
        if _GLOBAL_STRUCTCLONE_SETTINGS is None:
            _GLOBAL_STRUCTCLONE_SETTINGS = StructcloneSettings()
        return _GLOBAL_STRUCTCLONE_SETTINGS


def set_global_settings(settings: StructcloneSettings) -> None:
    """
    Set the global structclone settings instance (thread-safe).

    Serializers and deserializers created without explicit settings read the global instance
    at call time, so a change applies to the next serialize/deserialize call.

    Args:
        settings (StructcloneSettings): Settings to set as global.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_STRUCTCLONE_SETTINGS
        _GLOBAL_STRUCTCLONE_SETTINGS = settings
