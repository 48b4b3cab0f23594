"""
Tilesets and per-tile metadata

=============================================================================
TILE IDs
=============================================================================

A tile's 'id' is LOCAL to its tileset (0-based index). The Global ID used
by layers is:

    gid = tileset.firstgid + tile.id

Not every tile has a <tile> element: only tiles with properties,
animations, terrain, collision shapes or their own image are listed. A
lookup for an unlisted local ID returns None, which is not an error.

=============================================================================
EMBEDDED vs EXTERNAL TILESETS
=============================================================================

EMBEDDED: Tileset data is inside the TMX file
    <tileset firstgid="1" name="terrain" tilewidth="32" ...>
        <image source="terrain.png"/>
    </tileset>

EXTERNAL (TSX): Tileset data is in a separate .tsx file
    <tileset firstgid="1" source="terrain.tsx"/>

The firstgid always comes from the TMX file, never from the TSX.

=============================================================================
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .image import Image
from .objects import ObjectGroup
from .properties import Properties
from .terrain import TerrainCorners, decode_terrain_corners


@dataclass
class TileOffset:
    """Pixel offset applied when drawing tiles of a tileset."""
    x: int = 0
    y: int = 0


@dataclass
class Terrain:
    """Terrain type declared by a tileset; 'tile' is the representative local tile ID."""
    name: str = ""
    tile: int = -1
    properties: Properties = field(default_factory=Properties)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Terrain':
        return cls(
            name=elem.get('name', ''),
            tile=int(elem.get('tile', -1)),
            properties=Properties.from_xml(elem),
        )


@dataclass
class Frame:
    """One frame of a tile animation."""
    tileid: int
    duration: int                    # Milliseconds


@dataclass
class Tile:
    """Metadata for a specific tile within a tileset."""
    id: int                                          # Local tile ID (within tileset)
    type: str = ""                                   # Tile type/class
    probability: float = 1.0
    terrain: str = ""                                # Raw terrain descriptor
    properties: Properties = field(default_factory=Properties)
    image: Optional[Image] = None                    # Image (for collection tilesets)
    animation: List[Frame] = field(default_factory=list)
    objectgroup: Optional[ObjectGroup] = None        # Collision shapes

    _terrain_corners: Optional[TerrainCorners] = field(
        default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Tile':
        """Parse tile from XML element."""
        tile = cls(
            id=int(elem.get('id', 0)),
            type=elem.get('type', elem.get('class', '')),
            probability=float(elem.get('probability', 1.0)),
            terrain=elem.get('terrain', ''),
            properties=Properties.from_xml(elem),
            image=Image.from_parent(elem),
        )

        anim_elem = elem.find('animation')
        if anim_elem is not None:
            tile.animation = [
                Frame(tileid=int(f.get('tileid', 0)), duration=int(f.get('duration', 0)))
                for f in anim_elem.findall('frame')
            ]

        og_elem = elem.find('objectgroup')
        if og_elem is not None:
            tile.objectgroup = ObjectGroup.from_xml(og_elem)

        return tile

    def terrain_corners(self) -> TerrainCorners:
        """
        Terrain indices at the tile's corners, parsed once and cached.

        Raises TerrainDescriptorError for a malformed descriptor; failures
        are not cached.
        """
        if self._terrain_corners is None:
            self._terrain_corners = decode_terrain_corners(self.terrain)
        return self._terrain_corners


@dataclass
class TileSet:
    """
    Tileset collection - a set of tile graphics plus per-tile metadata.

    Only firstgid, tilecount and the tiles table take part in decoding;
    everything else is carried for callers.
    """
    firstgid: int                                    # First Global ID
    name: str = ""                                   # Tileset name
    tilewidth: int = 0                               # Tile width in pixels
    tileheight: int = 0                              # Tile height in pixels
    tilecount: int = 0                               # Total number of tiles
    columns: int = 0                                 # Tiles per row (for spritesheet)
    spacing: int = 0                                 # Pixels between tiles
    margin: int = 0                                  # Pixels around edge
    objectalignment: str = "unspecified"
    tileoffset: TileOffset = field(default_factory=TileOffset)
    image: Optional[Image] = None                    # Spritesheet image
    terrain_types: List[Terrain] = field(default_factory=list)
    tiles: Dict[int, Tile] = field(default_factory=dict)  # Tile metadata by local ID
    properties: Properties = field(default_factory=Properties)
    source: Optional[str] = None                     # TSX file path (if external)

    @classmethod
    def from_xml(cls, elem: ET.Element, firstgid: int) -> 'TileSet':
        """
        Parse tileset from XML element.

        Parameters:
        -----------
        elem : ET.Element
            The <tileset> XML element (from the TMX or the TSX root)
        firstgid : int
            First Global ID (from parent TMX, not the TSX itself)
        """
        tileset = cls(
            firstgid=firstgid,
            name=elem.get('name', ''),
            tilewidth=int(elem.get('tilewidth', 0)),
            tileheight=int(elem.get('tileheight', 0)),
            tilecount=int(elem.get('tilecount', 0)),
            columns=int(elem.get('columns', 0)),
            spacing=int(elem.get('spacing', 0)),
            margin=int(elem.get('margin', 0)),
            objectalignment=elem.get('objectalignment', 'unspecified'),
            image=Image.from_parent(elem),
            properties=Properties.from_xml(elem),
            source=elem.get('source'),
        )

        offset_elem = elem.find('tileoffset')
        if offset_elem is not None:
            tileset.tileoffset = TileOffset(
                x=int(offset_elem.get('x', 0)),
                y=int(offset_elem.get('y', 0)),
            )

        tileset.terrain_types = [
            Terrain.from_xml(t) for t in elem.findall('terraintypes/terrain')
        ]

        for tile_elem in elem.findall('tile'):
            tile = Tile.from_xml(tile_elem)
            tileset.tiles[tile.id] = tile

        return tileset

    def tile_with_id(self, tile_id: int) -> Optional[Tile]:
        """Metadata for a local tile ID, or None if the tileset declares none."""
        return self.tiles.get(tile_id)
