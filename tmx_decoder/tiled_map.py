"""
TMX map document loading

TiledMap maps the <map> element and its children (tilesets, tile layers,
object groups, image layers) to records, keeping their document order as z.
External tilesets (<tileset source="x.tsx"/>) are read relative to the map
file. Tile data stays encoded until a layer's tile_global_refs() or
tile_defs() is called.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .layer import Layer
from .objects import ImageLayer, ObjectGroup
from .properties import Properties
from .tileset import TileSet

logger = logging.getLogger(__name__)


def load_tileset(filepath: Union[str, Path], firstgid: int = 1) -> TileSet:
    """
    Load an external tileset (TSX file).

    Parameters:
    -----------
    filepath : str or Path
        Path to the .tsx file
    firstgid : int
        First Global ID, as declared by the map that uses the tileset

    Raises:
    -------
    FileNotFoundError : If the TSX file doesn't exist
    xml.etree.ElementTree.ParseError : If XML is malformed
    """
    filepath = Path(filepath)
    root = ET.parse(filepath).getroot()
    tileset = TileSet.from_xml(root, firstgid)
    tileset.source = str(filepath)
    return tileset


@dataclass
class TiledMap:
    """
    Complete Tiled map - the root object for TMX files.

    Layers are split by kind, and each records its position in the document
    as 'z' so the original stacking order can be rebuilt:

        <layer name="ground"/>        → layers[0].z == 0
        <objectgroup name="spawn"/>   → object_groups[0].z == 1
        <layer name="walls"/>         → layers[1].z == 2

    Usage:
        tmx_map = TiledMap.load("level1.tmx")
        walls = tmx_map.layer_with_name("walls")
        defs = walls.tile_defs(tmx_map.tilesets)
    """
    version: str = "1.0"                             # TMX format version
    tiledversion: str = ""                           # Tiled editor version
    orientation: str = "orthogonal"                  # Map orientation
    renderorder: str = "right-down"                  # Render order
    width: int = 0                                   # Map width in tiles
    height: int = 0                                  # Map height in tiles
    tilewidth: int = 0                               # Tile width in pixels
    tileheight: int = 0                              # Tile height in pixels
    hexsidelength: int = 0
    staggeraxis: str = ""
    staggerindex: str = ""
    backgroundcolor: str = ""
    nextobjectid: int = 0
    infinite: bool = False
    properties: Properties = field(default_factory=Properties)
    tilesets: List[TileSet] = field(default_factory=list)
    layers: List[Layer] = field(default_factory=list)
    object_groups: List[ObjectGroup] = field(default_factory=list)
    image_layers: List[ImageLayer] = field(default_factory=list)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'TiledMap':
        """
        Load a TMX file from disk.

        External tilesets are resolved relative to the TMX file.

        Raises:
        -------
        FileNotFoundError : If TMX file doesn't exist
        xml.etree.ElementTree.ParseError : If XML is malformed
        """
        filepath = Path(filepath)
        logger.info(f"Loading map from: {filepath}")
        root = ET.parse(filepath).getroot()
        return cls.from_xml(root, base_path=filepath.parent)

    @classmethod
    def from_string(cls, text: Union[str, bytes],
                    base_path: Optional[Union[str, Path]] = None) -> 'TiledMap':
        """Parse a TMX document held in memory."""
        root = ET.fromstring(text)
        return cls.from_xml(root, base_path=Path(base_path) if base_path else None)

    @classmethod
    def from_xml(cls, root: ET.Element, base_path: Optional[Path] = None) -> 'TiledMap':
        """Build the map from the <map> root element."""
        map_obj = cls(
            version=root.get('version', '1.0'),
            tiledversion=root.get('tiledversion', ''),
            orientation=root.get('orientation', 'orthogonal'),
            renderorder=root.get('renderorder', 'right-down'),
            width=int(root.get('width', 0)),
            height=int(root.get('height', 0)),
            tilewidth=int(root.get('tilewidth', 0)),
            tileheight=int(root.get('tileheight', 0)),
            hexsidelength=int(root.get('hexsidelength', 0)),
            staggeraxis=root.get('staggeraxis', ''),
            staggerindex=root.get('staggerindex', ''),
            backgroundcolor=root.get('backgroundcolor', ''),
            nextobjectid=int(root.get('nextobjectid', 0)),
            infinite=root.get('infinite', '0') == '1',
            properties=Properties.from_xml(root),
        )

        for tileset_elem in root.findall('tileset'):
            map_obj.tilesets.append(map_obj._parse_tileset(tileset_elem, base_path))

        # Direct children of <map>, in document order
        z = 0
        for elem in root:
            if elem.tag == 'layer':
                layer = Layer.from_xml(elem)
                layer.z = z
                map_obj.layers.append(layer)
            elif elem.tag == 'objectgroup':
                group = ObjectGroup.from_xml(elem)
                group.z = z
                map_obj.object_groups.append(group)
            elif elem.tag == 'imagelayer':
                image_layer = ImageLayer.from_xml(elem)
                image_layer.z = z
                map_obj.image_layers.append(image_layer)
            else:
                continue
            z += 1

        logger.debug(
            f"Map {map_obj.width}x{map_obj.height}: {len(map_obj.tilesets)} tilesets, "
            f"{len(map_obj.layers)} tile layers, {len(map_obj.object_groups)} object groups"
        )
        return map_obj

    def _parse_tileset(self, elem: ET.Element, base_path: Optional[Path]) -> TileSet:
        firstgid = int(elem.get('firstgid', 1))
        source = elem.get('source')

        if not source:
            return TileSet.from_xml(elem, firstgid)

        # External tileset: the TMX only contains a reference
        tsx_path = (base_path or Path('.')) / source
        try:
            tileset = load_tileset(tsx_path, firstgid)
        except FileNotFoundError:
            # TSX file missing - keep a placeholder so GIDs still resolve
            logger.warning(f"External tileset not found: {tsx_path}")
            tileset = TileSet(
                firstgid=firstgid,
                name=Path(source).stem,
                tilewidth=self.tilewidth,
                tileheight=self.tileheight,
            )
        tileset.source = source
        return tileset

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def layer_with_name(self, name: str) -> Optional[Layer]:
        """First tile layer with the given name, or None."""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def object_group_with_name(self, name: str) -> Optional[ObjectGroup]:
        for group in self.object_groups:
            if group.name == name:
                return group
        return None

    def tileset_with_name(self, name: str) -> Optional[TileSet]:
        for tileset in self.tilesets:
            if tileset.name == name:
                return tileset
        return None
