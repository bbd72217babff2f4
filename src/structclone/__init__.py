"""structclone: structural serialization of Python values into a JSON-safe, self-describing IR."""

__version__ = "0.1.0"

from . import settings
from .codec import from_json
from .codec import to_json
from .fields import FieldAttributes
from .fields import Record
from .fields import field_descriptors
from .plugins.manager import _initialize_plugin_system
from .serialization import TypeRegistry
from .serialization import default_registry
from .serialization import deserialize
from .serialization import register
from .serialization import serializable
from .serialization import serialize
from .values import UNDEFINED
from .values import Undefined

# Initialize type plugin system on module import
_initialize_plugin_system()

__all__ = [
    "FieldAttributes",
    "Record",
    "TypeRegistry",
    "UNDEFINED",
    "Undefined",
    "default_registry",
    "deserialize",
    "field_descriptors",
    "from_json",
    "register",
    "serializable",
    "serialize",
    "settings",
    "to_json",
]
