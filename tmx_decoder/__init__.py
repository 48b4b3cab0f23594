"""
TMX layer decoder - decode Tiled map layer data into resolved tiles

    from tmx_decoder import TiledMap

    tmx_map = TiledMap.load("level1.tmx")
    for cell in tmx_map.layer_with_name("walls").tile_defs(tmx_map.tilesets):
        ...

Requirements:
    pip install numpy zstandard
"""

from .errors import (
    TmxError,
    UnsupportedEncodingError,
    UnsupportedCompressionError,
    NoSuitableTileSetError,
    PayloadError,
    PayloadLengthError,
    PayloadParseError,
    PayloadCorruptError,
    TerrainDescriptorError,
    PropertyError,
    PropertyNotFoundError,
    PropertyTypeError,
    PropertyConversionError,
)
from .gid import (
    FLIPPED_HORIZONTALLY_FLAG,
    FLIPPED_VERTICALLY_FLAG,
    FLIPPED_DIAGONALLY_FLAG,
    GID_FLAG_MASK,
    DecodedGid,
    bare_id,
    decode_gid,
    encode_gid,
    local_tile_id,
)
from .payload import decode_layer_data
from .resolver import TileSetIndex, resolve_tileset
from .terrain import TerrainCorners, decode_terrain_corners
from .settings import DecodeSettings
from .properties import Property, Properties
from .image import Image
from .objects import ImageLayer, MapObject, ObjectGroup, Objects, Point, Poly
from .tileset import Frame, Terrain, Tile, TileOffset, TileSet
from .layer import EncodedBlob, Layer, LayerData, StructuredRefs, TileDef, TileGlobalRef
from .tiled_map import TiledMap, load_tileset

__version__ = "1.0.0"
__all__ = [
    "TmxError",
    "UnsupportedEncodingError",
    "UnsupportedCompressionError",
    "NoSuitableTileSetError",
    "PayloadError",
    "PayloadLengthError",
    "PayloadParseError",
    "PayloadCorruptError",
    "TerrainDescriptorError",
    "PropertyError",
    "PropertyNotFoundError",
    "PropertyTypeError",
    "PropertyConversionError",
    "FLIPPED_HORIZONTALLY_FLAG",
    "FLIPPED_VERTICALLY_FLAG",
    "FLIPPED_DIAGONALLY_FLAG",
    "GID_FLAG_MASK",
    "DecodedGid",
    "bare_id",
    "decode_gid",
    "encode_gid",
    "local_tile_id",
    "decode_layer_data",
    "TileSetIndex",
    "resolve_tileset",
    "TerrainCorners",
    "decode_terrain_corners",
    "DecodeSettings",
    "Property",
    "Properties",
    "Image",
    "ImageLayer",
    "MapObject",
    "ObjectGroup",
    "Objects",
    "Point",
    "Poly",
    "Frame",
    "Terrain",
    "Tile",
    "TileOffset",
    "TileSet",
    "EncodedBlob",
    "Layer",
    "LayerData",
    "StructuredRefs",
    "TileDef",
    "TileGlobalRef",
    "TiledMap",
    "load_tileset",
]
