"""
Tile layers and the layer decode pipeline

=============================================================================
LAYER DATA REPRESENTATIONS
=============================================================================

A layer's <data> element takes one of two shapes:

1. STRUCTURED REFERENCES (XML tile elements, deprecated):
   <data>
       <tile gid="1"/><tile gid="2"/><tile/>...
   </data>

2. ENCODED BLOB:
   <data encoding="csv">1,2,3,...</data>
   <data encoding="base64" compression="zlib">eJxj...</data>

Structured references win when there are any; the text is then ignored.
LayerData.payload() makes that choice explicit by returning either a
StructuredRefs or an EncodedBlob.

=============================================================================
DECODE PIPELINE
=============================================================================

Two stages, each computed at most once per layer and cached on it:

    Stage A  tile_global_refs()        Stage B  tile_defs(tilesets)
    ---------------------------        ----------------------------
    <data>                             refs from stage A
      │                                  │
      ├─ structured refs → as-is         ├─ decode flags + bare id
      └─ blob → payload decoder          ├─ bare id 0 → nil TileDef
                 │                       ├─ resolve owning tileset
                 ▼                       ├─ local id + tile metadata
          [TileGlobalRef, ...]           ▼
                                      [TileDef, ...]

Any error aborts the stage: there are no partial results, and nothing is
cached for a failed call.

The caches are plain attributes without locking. Share a layer between
threads only after its stages have been computed once.

=============================================================================
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

import numpy as np

from .errors import TmxError
from .gid import bare_id, decode_gid, local_tile_id
from .payload import decode_layer_data
from .properties import Properties
from .resolver import TileSetIndex
from .settings import DecodeSettings
from .tileset import Tile, TileSet

logger = logging.getLogger(__name__)


@dataclass
class TileGlobalRef:
    """Reference to a tile by its raw GID (flags included)."""
    gid: int = 0


@dataclass
class TileDef:
    """
    A decoded, resolved cell.

    id is local to tileset; tile is the tileset's metadata for that id, if
    it declares any. Empty cells are TileDef.nil(): no tileset, no tile,
    and the flip flags are left unset.
    """
    nil: bool = False
    id: int = 0
    gid: int = 0
    tileset: Optional[TileSet] = None
    tile: Optional[Tile] = None
    flipped_horizontally: bool = False
    flipped_vertically: bool = False
    flipped_diagonally: bool = False

    @classmethod
    def nil_def(cls) -> 'TileDef':
        return cls(nil=True)


# =============================================================================
# PAYLOAD VARIANTS
# =============================================================================

@dataclass
class StructuredRefs:
    """Cells given as <tile gid="..."/> elements."""
    refs: List[TileGlobalRef]


@dataclass
class EncodedBlob:
    """Cells given as encoded text inside <data>."""
    encoding: str
    compression: str
    raw: Union[bytes, str]


LayerPayload = Union[StructuredRefs, EncodedBlob]


@dataclass
class LayerData:
    """
    Raw <data> element content, as found in the document.

    Not intended to be decoded directly; use the Layer methods.
    """
    encoding: str = ""                  # 'csv', 'base64' or '' (XML)
    compression: str = ""               # 'zlib', 'gzip', 'zstd' or ''
    tile_refs: List[TileGlobalRef] = field(default_factory=list)
    raw: Union[bytes, str] = ""

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'LayerData':
        """Parse the <data> element without decoding it."""
        return cls(
            encoding=elem.get('encoding', ''),
            compression=elem.get('compression', ''),
            # <tile/> without a gid is an empty cell
            tile_refs=[TileGlobalRef(int(t.get('gid', 0))) for t in elem.findall('tile')],
            raw=elem.text or '',
        )

    def payload(self) -> LayerPayload:
        """Pick the representation to decode; structured refs take precedence."""
        if self.tile_refs:
            return StructuredRefs(self.tile_refs)
        return EncodedBlob(self.encoding, self.compression, self.raw)


# =============================================================================
# TILE LAYER
# =============================================================================

@dataclass
class Layer:
    """
    Tile layer - a grid of tile references, row-major.

    Index calculation: cells[y * width + x]

    Usage:
        refs = layer.tile_global_refs()         # raw GIDs
        defs = layer.tile_defs(tmx_map.tilesets)  # resolved tiles
        cell = defs[y * layer.width + x]
        if not cell.nil:
            print(cell.tileset.name, cell.id, cell.flipped_horizontally)
    """
    name: str = ""
    width: int = 0                                   # Width in tiles
    height: int = 0                                  # Height in tiles
    id: int = 0                                      # Unique layer ID
    x: int = 0
    y: int = 0
    z: int = 0                                       # Document order among map layers
    visible: bool = True
    opacity: float = 1.0
    offsetx: float = 0
    offsety: float = 0
    properties: Properties = field(default_factory=Properties)
    data: LayerData = field(default_factory=LayerData)

    # Decode caches, filled on first access
    _tile_global_refs: Optional[List[TileGlobalRef]] = field(
        default=None, init=False, repr=False, compare=False)
    _tile_defs: Optional[List[TileDef]] = field(
        default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Layer':
        """Parse tile layer from XML element. Tile data is decoded lazily."""
        layer = cls(
            name=elem.get('name', ''),
            width=int(elem.get('width', 0)),
            height=int(elem.get('height', 0)),
            id=int(elem.get('id', 0)),
            x=int(elem.get('x', 0)),
            y=int(elem.get('y', 0)),
            # '1' is default for visible (absent means visible)
            visible=elem.get('visible', '1') == '1',
            opacity=float(elem.get('opacity', 1.0)),
            offsetx=float(elem.get('offsetx', 0)),
            offsety=float(elem.get('offsety', 0)),
            properties=Properties.from_xml(elem),
        )

        data_elem = elem.find('data')
        if data_elem is not None:
            layer.data = LayerData.from_xml(data_elem)

        return layer

    # -------------------------------------------------------------------------
    # STAGE A: RAW REFERENCES
    # -------------------------------------------------------------------------

    def tile_global_refs(self) -> List[TileGlobalRef]:
        """
        Tile references of the layer, in row-major order.

        Raises:
        -------
        UnsupportedEncodingError, UnsupportedCompressionError, PayloadError
        """
        payload = self.data.payload()
        if isinstance(payload, StructuredRefs):
            return payload.refs

        if self._tile_global_refs is not None:
            return self._tile_global_refs

        logger.debug(f"Decoding layer {self.name!r}: encoding={payload.encoding!r} "
                     f"compression={payload.compression!r}")
        gids = decode_layer_data(payload.encoding, payload.compression, payload.raw)

        self._tile_global_refs = [TileGlobalRef(gid) for gid in gids]
        return self._tile_global_refs

    # -------------------------------------------------------------------------
    # STAGE B: RESOLVED DEFINITIONS
    # -------------------------------------------------------------------------

    def tile_defs(self, tilesets: Iterable[TileSet],
                  settings: Optional[DecodeSettings] = None) -> List[TileDef]:
        """
        Resolve every cell against the map's tilesets.

        The first successful result is cached and returned on later calls,
        whatever tilesets are passed then. The tileset list itself is not
        reordered.

        Raises:
        -------
        NoSuitableTileSetError : A non-empty cell matches no tileset; the
            whole layer is rejected
        Any Stage A error from tile_global_refs()
        """
        if self._tile_defs is not None:
            return self._tile_defs

        refs = self.tile_global_refs()
        index = TileSetIndex(tilesets, settings)

        tile_defs = []
        for ref in refs:
            decoded = decode_gid(ref.gid)

            if decoded.bare_id == 0:
                tile_defs.append(TileDef.nil_def())
                continue

            tileset = index.resolve(decoded.bare_id)
            tile_id = local_tile_id(ref.gid, tileset.firstgid)
            tile_defs.append(TileDef(
                id=tile_id,
                gid=ref.gid,
                tileset=tileset,
                tile=tileset.tile_with_id(tile_id),
                flipped_horizontally=decoded.flipped_horizontally,
                flipped_vertically=decoded.flipped_vertically,
                flipped_diagonally=decoded.flipped_diagonally,
            ))

        logger.debug(f"Layer {self.name!r}: resolved {len(tile_defs)} cells "
                     f"against {len(index)} tilesets")

        self._tile_defs = tile_defs
        return tile_defs

    # -------------------------------------------------------------------------
    # GRID ACCESS
    # -------------------------------------------------------------------------

    def gid_grid(self) -> np.ndarray:
        """
        Bare GIDs as a (height, width) uint32 array; 0 marks empty cells.

        Raises:
        -------
        TmxError : The cell count does not match width x height
        """
        gids = np.fromiter((bare_id(ref.gid) for ref in self.tile_global_refs()),
                           dtype=np.uint32)
        if gids.size != self.width * self.height:
            raise TmxError(
                f"layer {self.name!r} has {gids.size} cells, "
                f"expected {self.width}x{self.height}"
            )
        return gids.reshape((self.height, self.width))

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Get the raw GID of the tile at position (x, y).

        Returns:
        --------
        int : Global tile ID, flags included (0 = empty or out of bounds)
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            # Convert 2D coords to 1D index: row-major order
            refs = self.tile_global_refs()
            index = y * self.width + x
            if index < len(refs):
                return refs[index].gid
        return 0  # Out of bounds = empty
