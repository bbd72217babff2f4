from .manager import create_plugin_manager
from .manager import load_plugins_entry_points
from .manager import register_plugins
from .markers import hook_impl

__all__ = [
    "create_plugin_manager",
    "hook_impl",
    "load_plugins_entry_points",
    "register_plugins",
]
