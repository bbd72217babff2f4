"""Pluggy markers for structclone hook specifications and implementations."""

import pluggy

HOOK_NAMESPACE = "structclone"

hook_spec = pluggy.HookspecMarker(HOOK_NAMESPACE)
"""Marker for structclone hook specifications."""

hook_impl = pluggy.HookimplMarker(HOOK_NAMESPACE)
"""Marker for structclone hook implementations."""
