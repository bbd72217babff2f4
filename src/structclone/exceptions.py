"""
Centralized exception classes for the structclone library.

All structclone-specific exceptions inherit from StructcloneError for easy catching.
"""


class StructcloneError(Exception):
    """Base exception for all structclone errors."""


class DuplicateRegistrationError(StructcloneError):
    """Raised when a type name is registered more than once."""


class UnserializableValueError(StructcloneError):
    """Raised when a value (e.g. a function) cannot be represented in the IR."""


class MissingTypeNameError(StructcloneError):
    """Raised when an object's runtime type exposes no usable name."""


class UnknownTypeError(StructcloneError):
    """Raised when the IR references a type name that is not registered."""


class IRFormatError(StructcloneError):
    """Raised when a value handed to the deserializer is not valid IR."""


class RawObjectWithoutTagError(IRFormatError):
    """Raised when an object-shaped IR node lacks the ``cName`` type tag."""


class CyclicGraphError(StructcloneError):
    """Raised when a value refers back to one of its own ancestors."""


class DepthLimitError(StructcloneError):
    """Raised when a structure nests deeper than the configured maximum depth."""


class FieldError(StructcloneError, AttributeError):
    """Raised when a field operation violates the field's recorded metadata."""


class ReadOnlyFieldError(FieldError):
    """Raised when assigning to a field that is not mutable."""


class FrozenFieldError(FieldError):
    """Raised when deleting or redefining a field that is not redefinable."""


class FieldMetadataError(FieldError):
    """Raised when an instance cannot carry the field metadata recorded in the IR."""
