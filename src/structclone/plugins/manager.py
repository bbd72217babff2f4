"""Utility functions to manage the project-wide type plugin configuration."""

import logging
from inspect import isclass
from typing import Any

from pluggy import PluginManager

from structclone.serialization.registry import TypeRegistry
from structclone.serialization.registry import default_registry

from .markers import HOOK_NAMESPACE
from .specs import TypeSpec

logger = logging.getLogger(__name__)

_PLUGIN_ENTRY_POINT = "structclone.types"  # entry-point to load type plugins from
_PLUGIN_MANAGER: PluginManager | None = None


# region API


def register_plugins(*plugins: Any) -> None:
    """
    Register type plugins with the process-wide plugin manager.

    Each plugin's ``register_types`` hook runs immediately against the process-wide registry.
    Registering the same plugin instance again is a no-op.
    """
    plugin_manager = _get_global_plugin_manager()
    _register_all(plugin_manager, plugins)


def load_plugins_entry_points(_plugin_manager: PluginManager | None = None) -> int:
    """
    Register type plugins from Python package entrypoints.

    Returns:
        Number of plugins loaded.
    """
    _plugin_manager = _plugin_manager if _plugin_manager else _get_global_plugin_manager()
    count = _plugin_manager.load_setuptools_entrypoints(_PLUGIN_ENTRY_POINT)  # Doesn't use setuptools
    logger.debug(f"Loaded {count} type plugin(s) from entry point '{_PLUGIN_ENTRY_POINT}'")
    return count


def create_plugin_manager(registry: TypeRegistry, plugins: list[Any] | None = None) -> PluginManager:
    """
    Create an isolated plugin manager whose plugins register their types in ``registry``.

    Args:
        registry: Registry handed to every plugin's ``register_types`` hook.
        plugins: Plugin instances to register right away.

    Returns:
        A new PluginManager, independent of the process-wide one.
    """
    manager = _create_plugin_manager(registry)
    _register_all(manager, plugins or [])
    return manager


# region Helpers


def _initialize_plugin_system() -> PluginManager:
    """Initializes the type plugin system for the structclone library."""
    manager = _create_plugin_manager(default_registry)
    global _PLUGIN_MANAGER
    _PLUGIN_MANAGER = manager
    return manager


def _get_global_plugin_manager() -> PluginManager:
    """Returns initialized global plugin manager, creating it on first use."""
    plugin_manager = _PLUGIN_MANAGER
    if plugin_manager is None:
        plugin_manager = _initialize_plugin_system()
    return plugin_manager


def _create_plugin_manager(registry: TypeRegistry) -> PluginManager:
    """Create a new PluginManager bound to ``registry`` and register structclone's hook specs."""
    manager = PluginManager(HOOK_NAMESPACE)
    manager.trace.root.setwriter(
        logger.debug if logger.getEffectiveLevel() == logging.DEBUG else None
    )
    manager.enable_tracing()
    manager.add_hookspecs(TypeSpec)

    # Historic call: replayed for every plugin registered from now on.
    manager.hook.register_types.call_historic(kwargs={"registry": registry})
    return manager


def _register_all(manager: PluginManager, plugins: Any) -> None:
    for plugin in plugins:
        if manager.is_registered(plugin):
            continue
        if isclass(plugin):
            raise TypeError(
                "structclone expects plugins to be registered as instances. "
                "Have you forgotten the `()` when registering a plugin class?"
            )
        manager.register(plugin)
        logger.debug(f"Registered type plugin {plugin!r}")
