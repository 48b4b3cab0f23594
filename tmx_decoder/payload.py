"""
Layer payload decoding (encoding + compression → list of GIDs)

=============================================================================
DATA ENCODINGS
=============================================================================

A <data> element without <tile> children carries its cells as text:

1. CSV:
   <data encoding="csv">
       1,2,3,4,
       5,6,7,8
   </data>
   Split on commas, strip each field, parse as base-10 uint32.

2. Base64:
   <data encoding="base64" compression="zlib">
       eJxjZGBg...AAJ
   </data>
   Decode, decompress, then read little-endian uint32 groups.

=============================================================================
COMPRESSION (with Base64 only)
=============================================================================

- none: raw bytes after base64 decoding
- zlib: zlib stream (RFC 1950)
- gzip: gzip member (RFC 1952)
- zstd: Zstandard frame, via the zstandard library

After decompression the stream must hold whole cells, 4 bytes each, in
row-major order with no padding:

    bytes:  01 00 00 00 | 02 00 00 00 | 03 00 00 00 | 04 00 00 00
    cells:       1      |      2      |      3      |      4

=============================================================================
"""

import base64
import binascii
import gzip
import logging
import zlib
from typing import List, Optional, Union

import numpy as np
import zstandard

from .errors import (
    PayloadCorruptError,
    PayloadLengthError,
    PayloadParseError,
    UnsupportedCompressionError,
    UnsupportedEncodingError,
)

logger = logging.getLogger(__name__)

ENCODING_BASE64 = 'base64'
ENCODING_CSV = 'csv'

COMPRESSION_ZLIB = 'zlib'
COMPRESSION_GZIP = 'gzip'
COMPRESSION_ZSTD = 'zstd'

MAX_UINT32 = 0xFFFFFFFF

Payload = Union[bytes, str]


def _as_bytes(raw: Payload) -> bytes:
    if isinstance(raw, str):
        try:
            return raw.encode('ascii')
        except UnicodeEncodeError as exc:
            raise PayloadCorruptError(
                f"base64 payload contains non-ASCII characters: {exc}"
            ) from exc
    return bytes(raw)


def _as_text(raw: Payload) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return bytes(raw).decode('utf-8')
    except UnicodeDecodeError as exc:
        raise PayloadCorruptError(f"CSV payload is not valid text: {exc}") from exc


# =============================================================================
# DECOMPRESSION
# =============================================================================

def decompress(data: bytes, compression: Optional[str]) -> bytes:
    """
    Decompress base64-decoded layer bytes.

    Parameters:
    -----------
    data : bytes
        Bytes after base64 decoding
    compression : str or None
        '', None, 'zlib', 'gzip' or 'zstd'

    Raises:
    -------
    UnsupportedCompressionError : Unknown compression tag
    PayloadCorruptError : The compressed stream is malformed
    """
    if not compression:
        return data

    try:
        if compression == COMPRESSION_ZLIB:
            return zlib.decompress(data)
        elif compression == COMPRESSION_GZIP:
            return gzip.decompress(data)
        elif compression == COMPRESSION_ZSTD:
            # decompressobj copes with frames that omit the content size
            dobj = zstandard.ZstdDecompressor().decompressobj()
            result = dobj.decompress(data)
            if not dobj.eof:
                raise PayloadCorruptError(
                    f"malformed {compression} stream: truncated frame"
                )
            return result
    except (zlib.error, OSError, EOFError, zstandard.ZstdError) as exc:
        raise PayloadCorruptError(
            f"malformed {compression} stream: {exc}"
        ) from exc

    raise UnsupportedCompressionError(compression)


# =============================================================================
# BYTE / TEXT → UINT32
# =============================================================================

def decode_uint32_le(data: bytes) -> List[int]:
    """Read consecutive little-endian uint32 values from a byte string."""
    if len(data) % 4 != 0:
        raise PayloadLengthError(len(data))
    if not data:
        return []
    return np.frombuffer(data, dtype='<u4').tolist()


def decode_base64(raw: Payload, compression: Optional[str] = None) -> List[int]:
    """
    Decode a base64 (optionally compressed) payload into GIDs.

    Surrounding whitespace is trimmed and line breaks inside the text are
    ignored, since Tiled wraps long base64 blocks.
    """
    text = _as_bytes(raw).strip().replace(b'\r', b'').replace(b'\n', b'')
    try:
        data = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise PayloadCorruptError(f"malformed base64 payload: {exc}") from exc

    data = decompress(data, compression)
    gids = decode_uint32_le(data)
    logger.debug("Decoded %d cells from base64 payload (compression=%r)",
                 len(gids), compression or None)
    return gids


def decode_csv(raw: Payload) -> List[int]:
    """
    Decode a CSV payload into GIDs.

    Raises PayloadParseError naming the first field that is not a base-10
    unsigned 32-bit integer.
    """
    gids = []
    for index, field in enumerate(_as_text(raw).split(',')):
        value = field.strip()
        # int() alone would also take signs, underscores and non-ASCII digits
        if not (value.isascii() and value.isdigit()):
            raise PayloadParseError(value, index)
        gid = int(value)
        if gid > MAX_UINT32:
            raise PayloadParseError(value, index)
        gids.append(gid)

    logger.debug("Decoded %d cells from CSV payload", len(gids))
    return gids


def decode_layer_data(encoding: Optional[str], compression: Optional[str],
                      raw: Payload) -> List[int]:
    """
    Turn an encoded layer payload into a flat, row-major list of GIDs.

    Parameters:
    -----------
    encoding : str or None
        'base64' or 'csv'. Anything else (including no encoding) fails:
        unencoded data is only valid as <tile> children, handled by the
        layer itself.
    compression : str or None
        Only consulted for base64
    raw : bytes or str
        Text content of the <data> element

    Returns:
    --------
    List[int] : Raw GIDs, flags included

    Raises:
    -------
    UnsupportedEncodingError, UnsupportedCompressionError,
    PayloadLengthError, PayloadParseError, PayloadCorruptError
    """
    if encoding == ENCODING_BASE64:
        return decode_base64(raw, compression)
    elif encoding == ENCODING_CSV:
        return decode_csv(raw)
    raise UnsupportedEncodingError(encoding)
