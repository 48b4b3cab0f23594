"""
Terrain corner descriptors

Older Tiled versions mark each tile with the terrain type at its four
corners, stored as a tile attribute:

    <tile id="12" terrain="0,0,1,1"/>

    top-left, top-right, bottom-left, bottom-right

Each entry is a terrain index local to the tileset.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import TerrainDescriptorError

TERRAIN_CORNER_COUNT = 4
INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class TerrainCorners:
    """Terrain indices at the four corners of a tile."""
    top_left: int = 0
    top_right: int = 0
    bottom_left: int = 0
    bottom_right: int = 0


def decode_terrain_corners(descriptor: Optional[str]) -> TerrainCorners:
    """
    Parse a "tl,tr,bl,br" terrain descriptor.

    An absent or empty descriptor yields all-zero corners, not an error.

    Raises:
    -------
    TerrainDescriptorError : Not exactly 4 fields, or a field is not a
        base-10 signed 32-bit integer
    """
    if not descriptor:
        return TerrainCorners()

    fields = descriptor.split(',')
    if len(fields) != TERRAIN_CORNER_COUNT:
        raise TerrainDescriptorError(
            descriptor,
            f"unexpected terrain type specifier {descriptor!r}; "
            f"expected {TERRAIN_CORNER_COUNT} values, got {len(fields)}",
        )

    corners = []
    for index, field in enumerate(fields):
        value = field.strip()
        # int() alone would also take underscores and non-ASCII digits
        digits = value[1:] if value[:1] in ('+', '-') else value
        corner = int(value) if digits.isascii() and digits.isdigit() else None
        if corner is None or not INT32_MIN <= corner <= INT32_MAX:
            raise TerrainDescriptorError(
                descriptor,
                f"invalid terrain corner {value!r} at index {index} "
                f"in {descriptor!r}",
            )
        corners.append(corner)

    return TerrainCorners(*corners)
