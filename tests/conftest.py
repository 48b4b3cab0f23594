"""Shared fixtures for tmx_decoder tests."""

import base64
import gzip
import struct
import zlib
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from tmx_decoder import Layer, LayerData, TileSet

FIXTURES = Path(__file__).parent / "fixtures"


def pack_gids(gids: List[int]) -> bytes:
    """Little-endian uint32 bytes for a list of GIDs."""
    return struct.pack("<%dI" % len(gids), *gids)


def encode_payload(gids: List[int], compression: Optional[str] = None) -> str:
    """Base64 text for GIDs, compressed the way Tiled writes it."""
    data = pack_gids(gids)
    if compression == "zlib":
        data = zlib.compress(data)
    elif compression == "gzip":
        data = gzip.compress(data)
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def sample_map_path() -> Path:
    return FIXTURES / "sample.tmx"


@pytest.fixture
def tilesets() -> List[TileSet]:
    """Three tilesets, deliberately out of firstgid order: A@1, B@100, C@250."""
    return [
        TileSet(firstgid=250, name="C", tilecount=10),
        TileSet(firstgid=1, name="A", tilecount=99),
        TileSet(firstgid=100, name="B", tilecount=150),
    ]


@pytest.fixture
def make_layer() -> Callable[..., Layer]:
    """Build a layer from GIDs, encoded as requested."""

    def _make(gids: List[int], encoding: str = "base64",
              compression: Optional[str] = None, width: int = 0,
              height: int = 1) -> Layer:
        if encoding == "base64":
            raw = encode_payload(gids, compression)
        elif encoding == "csv":
            raw = ",".join(str(g) for g in gids)
        else:
            raw = ""
        return Layer(
            name="test",
            width=width or len(gids),
            height=height,
            data=LayerData(encoding=encoding, compression=compression or "", raw=raw),
        )

    return _make
