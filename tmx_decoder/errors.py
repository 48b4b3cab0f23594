"""
Exceptions raised while decoding TMX layer data.

Every error is a deterministic function of the input document, so none of
them are worth retrying: the caller either fixes the map or gives up on the
layer. All of them derive from TmxError so callers can catch the family in
one place.

    TmxError
    ├── UnsupportedEncodingError
    ├── UnsupportedCompressionError
    ├── NoSuitableTileSetError
    ├── PayloadError (also ValueError)
    │   ├── PayloadLengthError
    │   ├── PayloadParseError
    │   └── PayloadCorruptError
    ├── TerrainDescriptorError (also ValueError)
    └── PropertyError
        ├── PropertyNotFoundError
        ├── PropertyTypeError
        └── PropertyConversionError
"""

from typing import Optional


class TmxError(Exception):
    """Base class for all tmx_decoder errors."""


class UnsupportedEncodingError(TmxError):
    """Layer data uses an encoding other than base64 or csv."""

    def __init__(self, encoding: Optional[str]):
        self.encoding = encoding
        super().__init__(f"invalid encoding: {encoding!r}")


class UnsupportedCompressionError(TmxError):
    """Base64 layer data uses an unknown compression."""

    def __init__(self, compression: Optional[str]):
        self.compression = compression
        super().__init__(f"unsupported compression type: {compression!r}")


class NoSuitableTileSetError(TmxError):
    """A non-empty GID does not fall inside any tileset's range."""

    def __init__(self, gid: int, reason: str = ""):
        self.gid = gid
        message = (
            f"no suitable tileset found for tile with global ID {gid}; "
            f"the file is invalid"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


# =============================================================================
# PAYLOAD SHAPE ERRORS
# =============================================================================

class PayloadError(TmxError, ValueError):
    """Layer payload could not be turned into a list of GIDs."""


class PayloadLengthError(PayloadError):
    """Decoded byte stream is not made of whole 4-byte cells."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"expected byte array to be divisible by 4, length was {length}"
        )


class PayloadParseError(PayloadError):
    """A CSV field is not an unsigned 32-bit integer."""

    def __init__(self, field: str, index: int):
        self.field = field
        self.index = index
        super().__init__(
            f"invalid CSV field {field!r} at index {index}: "
            f"expected an unsigned 32-bit integer"
        )


class PayloadCorruptError(PayloadError):
    """Base64 text or compressed stream is malformed."""


class TerrainDescriptorError(TmxError, ValueError):
    """A tile's terrain attribute is not four comma separated tile IDs."""

    def __init__(self, descriptor: str, message: str):
        self.descriptor = descriptor
        super().__init__(message)


# =============================================================================
# PROPERTY LOOKUP ERRORS
# =============================================================================

class PropertyError(TmxError):
    """Base class for typed property lookup failures."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)


class PropertyNotFoundError(PropertyError):
    def __init__(self, name: str):
        super().__init__(name, f"no property with name {name!r} was found")


class PropertyTypeError(PropertyError):
    def __init__(self, name: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            name,
            f"property {name!r} has type {actual!r}, expected {expected!r}",
        )


class PropertyConversionError(PropertyError):
    def __init__(self, name: str, value: str, expected: str):
        self.value = value
        super().__init__(
            name,
            f"property {name!r} value {value!r} failed to convert to {expected}",
        )
