"""
Global tile ID (GID) codec

=============================================================================
GID BIT LAYOUT
=============================================================================

Every cell of a tile layer stores one unsigned 32-bit GID. The top three
bits are orientation flags, the remaining 29 bits are the "bare" ID:

    bit 31  30  29  28 ........................................ 0
        H   V   D   |<------------- bare id (29 bits) --------->|

    H = flipped horizontally  (0x80000000)
    V = flipped vertically    (0x40000000)
    D = flipped diagonally    (0x20000000, swap x/y axes)

The bare ID is the tileset's firstgid plus the local tile index:

    Tileset A (firstgid=1):   bare ids 1..100
    Tileset B (firstgid=101): bare ids 101..

    GID 0x80000096 → H flip, bare id 150 → tileset B, local id 49

A bare ID of 0 always means "no tile", whatever the flag bits say.

=============================================================================
"""

from typing import NamedTuple


FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000

GID_FLAG_MASK = (FLIPPED_HORIZONTALLY_FLAG
                 | FLIPPED_VERTICALLY_FLAG
                 | FLIPPED_DIAGONALLY_FLAG)

# Largest bare id that fits under the flag bits
MAX_BARE_ID = ~GID_FLAG_MASK & 0xFFFFFFFF

EMPTY_GID = 0


class DecodedGid(NamedTuple):
    """A GID split into its orientation flags and bare ID."""
    flipped_horizontally: bool
    flipped_vertically: bool
    flipped_diagonally: bool
    bare_id: int


def bare_id(raw: int) -> int:
    """Return the GID without its flip flags."""
    return raw & ~GID_FLAG_MASK & 0xFFFFFFFF


def decode_gid(raw: int) -> DecodedGid:
    """
    Split a raw 32-bit GID into flags and bare ID.

    Every 32-bit pattern is valid input; there is no error path.
    """
    return DecodedGid(
        raw & FLIPPED_HORIZONTALLY_FLAG != 0,
        raw & FLIPPED_VERTICALLY_FLAG != 0,
        raw & FLIPPED_DIAGONALLY_FLAG != 0,
        bare_id(raw),
    )


def encode_gid(bare: int, flipped_horizontally: bool = False,
               flipped_vertically: bool = False,
               flipped_diagonally: bool = False) -> int:
    """
    Pack a bare ID and flip flags into a raw GID.

    Raises:
    -------
    ValueError : If the bare ID does not fit in 29 bits
    """
    if not 0 <= bare <= MAX_BARE_ID:
        raise ValueError(f"bare id {bare} out of range [0, {MAX_BARE_ID}]")

    raw = bare
    if flipped_horizontally:
        raw |= FLIPPED_HORIZONTALLY_FLAG
    if flipped_vertically:
        raw |= FLIPPED_VERTICALLY_FLAG
    if flipped_diagonally:
        raw |= FLIPPED_DIAGONALLY_FLAG
    return raw


def local_tile_id(raw: int, firstgid: int) -> int:
    """
    Return the tileset-relative tile ID for a GID.

    The caller must already have picked the tileset that owns the GID, so
    bare_id(raw) >= firstgid holds.
    """
    return bare_id(raw) - firstgid
