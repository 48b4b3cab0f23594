"""
Tileset range resolution (bare GID → owning tileset)

=============================================================================
ALGORITHM
=============================================================================

Tilesets share one GID space. Sorted by firstgid, each tileset owns the
span from its own firstgid up to (not including) the next one:

    Tileset A: firstgid=1     → owns 1..99
    Tileset B: firstgid=100   → owns 100..249
    Tileset C: firstgid=250   → owns 250.. (unbounded)

    bare id 99     → A
    bare id 100    → B
    bare id 100000 → C
    bare id 0      → never asked; it is the empty cell

A GID belongs to the tileset with the largest firstgid <= bare id. The
index keeps the firstgids in a sorted list and finds that tileset with a
binary search. Tilesets with equal firstgids keep their input order, and
the last of them wins.

The index sorts its OWN copy of the tileset list. The caller's list is
never reordered.

=============================================================================
"""

import bisect
import logging
from operator import attrgetter
from typing import Generic, Iterable, List, Optional, TypeVar

from .errors import NoSuitableTileSetError
from .settings import DEFAULT_SETTINGS, DecodeSettings

logger = logging.getLogger(__name__)

T = TypeVar('T')


class TileSetIndex(Generic[T]):
    """
    Sorted view over a collection of tilesets.

    Any object with an integer ``firstgid`` attribute (and optionally
    ``tilecount``) can be indexed.
    """

    def __init__(self, tilesets: Iterable[T],
                 settings: Optional[DecodeSettings] = None):
        self.settings = settings or DEFAULT_SETTINGS
        # sorted() is stable, so equal firstgids keep their input order
        self.tilesets: List[T] = sorted(tilesets, key=attrgetter('firstgid'))
        self._firstgids = [ts.firstgid for ts in self.tilesets]

    def __len__(self) -> int:
        return len(self.tilesets)

    def resolve(self, bare: int) -> T:
        """
        Find the tileset owning a bare GID.

        Raises:
        -------
        NoSuitableTileSetError : No tileset has firstgid <= bare, or (strict
            mode) the GID runs past the owning tileset's tilecount
        """
        pos = bisect.bisect_right(self._firstgids, bare)
        if pos == 0:
            raise NoSuitableTileSetError(bare)

        tileset = self.tilesets[pos - 1]

        if self.settings.strict_tile_ranges:
            tilecount = getattr(tileset, 'tilecount', 0) or 0
            if tilecount > 0 and bare >= tileset.firstgid + tilecount:
                raise NoSuitableTileSetError(
                    bare,
                    f"past the {tilecount} tiles of the tileset at "
                    f"firstgid {tileset.firstgid}",
                )

        return tileset


def resolve_tileset(tilesets: Iterable[T], bare: int,
                    settings: Optional[DecodeSettings] = None) -> T:
    """One-off lookup; build a TileSetIndex when resolving many GIDs."""
    return TileSetIndex(tilesets, settings).resolve(bare)
