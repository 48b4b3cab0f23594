"""Tests for the layer decode pipeline."""

from typing import Callable, List

import numpy as np
import pytest

import tmx_decoder.layer as layer_module
from tmx_decoder import (
    DecodeSettings,
    EncodedBlob,
    Layer,
    LayerData,
    NoSuitableTileSetError,
    PayloadLengthError,
    StructuredRefs,
    Tile,
    TileDef,
    TileGlobalRef,
    TileSet,
    TmxError,
    UnsupportedEncodingError,
    encode_gid,
)


@pytest.fixture
def count_decodes(monkeypatch: pytest.MonkeyPatch) -> List[tuple]:
    """Record every call into the payload decoder."""
    calls = []
    original = layer_module.decode_layer_data

    def counting(encoding, compression, raw):
        calls.append((encoding, compression))
        return original(encoding, compression, raw)

    monkeypatch.setattr(layer_module, "decode_layer_data", counting)
    return calls


class TestLayerDataPayload:
    """Choice between structured refs and the encoded blob."""

    def test_structured_refs_take_precedence(self) -> None:
        data = LayerData(encoding="csv", raw="9,9,9",
                         tile_refs=[TileGlobalRef(1), TileGlobalRef(0)])
        payload = data.payload()
        assert isinstance(payload, StructuredRefs)
        assert [r.gid for r in payload.refs] == [1, 0]

    def test_blob_without_refs(self) -> None:
        payload = LayerData(encoding="base64", compression="zlib", raw="abc").payload()
        assert payload == EncodedBlob("base64", "zlib", "abc")


class TestTileGlobalRefs:
    """Stage A: raw references."""

    @pytest.mark.parametrize("encoding, compression", [
        ("csv", None),
        ("base64", None),
        ("base64", "zlib"),
        ("base64", "gzip"),
    ])
    def test_decodes_each_encoding(self, make_layer: Callable[..., Layer],
                                   encoding: str, compression: str) -> None:
        layer = make_layer([1, 0, 0x80000002], encoding, compression)
        assert [r.gid for r in layer.tile_global_refs()] == [1, 0, 0x80000002]

    def test_structured_refs_returned_verbatim(self, count_decodes: List[tuple]) -> None:
        refs = [TileGlobalRef(3), TileGlobalRef(4)]
        layer = Layer(name="xml", width=2, height=1,
                      data=LayerData(encoding="csv", raw="garbage", tile_refs=refs))
        assert layer.tile_global_refs() is refs
        assert count_decodes == []

    def test_cached(self, make_layer: Callable[..., Layer], count_decodes: List[tuple]) -> None:
        layer = make_layer([1, 2, 3, 4], "base64", "zlib")
        first = layer.tile_global_refs()
        second = layer.tile_global_refs()
        assert second is first
        assert count_decodes == [("base64", "zlib")]

    def test_missing_encoding(self) -> None:
        layer = Layer(name="empty", data=LayerData(raw="1,2"))
        with pytest.raises(UnsupportedEncodingError):
            layer.tile_global_refs()

    def test_failure_not_cached(self, count_decodes: List[tuple]) -> None:
        layer = Layer(name="bad", data=LayerData(encoding="base64", raw="AQID"))
        for _ in range(2):
            with pytest.raises(PayloadLengthError):
                layer.tile_global_refs()
        assert len(count_decodes) == 2


class TestTileDefs:
    """Stage B: resolution against tilesets A@1, B@100, C@250."""

    def test_resolves_cells(self, make_layer: Callable[..., Layer],
                            tilesets: List[TileSet]) -> None:
        gids = [1, 99, 100, encode_gid(249, flipped_horizontally=True), 250, 100000]
        defs = make_layer(gids, "csv").tile_defs(tilesets)

        assert [d.tileset.name for d in defs] == ["A", "A", "B", "B", "C", "C"]
        assert [d.id for d in defs] == [0, 98, 0, 149, 0, 99750]
        assert [d.gid for d in defs] == gids
        assert defs[3].flipped_horizontally
        assert not defs[3].flipped_vertically
        assert not defs[3].flipped_diagonally

    def test_empty_cells_are_nil(self, make_layer: Callable[..., Layer],
                                 tilesets: List[TileSet]) -> None:
        gids = [0, encode_gid(0, True, True, True), 1]
        defs = make_layer(gids).tile_defs(tilesets)

        assert defs[0] == TileDef.nil_def()
        assert defs[1].nil
        assert defs[1].tileset is None
        assert not defs[1].flipped_horizontally
        assert not defs[2].nil

    def test_flags_decoded(self, make_layer: Callable[..., Layer],
                           tilesets: List[TileSet]) -> None:
        gids = [encode_gid(5, True, False, True),
                encode_gid(5, True, True, False),
                encode_gid(5, False, True, True)]
        defs = make_layer(gids).tile_defs(tilesets)

        assert [(d.flipped_horizontally, d.flipped_vertically, d.flipped_diagonally)
                for d in defs] == [(True, False, True), (True, True, False), (False, True, True)]
        assert {d.id for d in defs} == {4}

    def test_tile_metadata_attached(self, make_layer: Callable[..., Layer]) -> None:
        wall = Tile(id=4, type="wall")
        tileset = TileSet(firstgid=1, name="A", tiles={4: wall})
        defs = make_layer([5, 6]).tile_defs([tileset])

        assert defs[0].tile is wall
        assert defs[1].tile is None

    def test_unresolvable_cell_aborts(self, make_layer: Callable[..., Layer]) -> None:
        layer = make_layer([150, 0, 20])
        with pytest.raises(NoSuitableTileSetError) as excinfo:
            layer.tile_defs([TileSet(firstgid=100, name="B")])
        assert excinfo.value.gid == 20

        # nothing cached for a failed call
        defs = layer.tile_defs([TileSet(firstgid=1, name="A")])
        assert [d.id for d in defs] == [149, 0, 19]

    def test_tileset_order_untouched(self, make_layer: Callable[..., Layer],
                                     tilesets: List[TileSet]) -> None:
        make_layer([1, 260]).tile_defs(tilesets)
        assert [ts.name for ts in tilesets] == ["C", "A", "B"]

    def test_cached(self, make_layer: Callable[..., Layer], tilesets: List[TileSet],
                    count_decodes: List[tuple]) -> None:
        layer = make_layer([1, 2, 3, 4], "base64", "zlib", width=2, height=2)
        first = layer.tile_defs(tilesets)
        second = layer.tile_defs(tilesets)

        assert second is first
        assert second == first
        assert len(count_decodes) == 1

    def test_strict_settings(self, make_layer: Callable[..., Layer],
                             tilesets: List[TileSet]) -> None:
        layer = make_layer([260])
        with pytest.raises(NoSuitableTileSetError):
            layer.tile_defs(tilesets, DecodeSettings(strict_tile_ranges=True))
        assert layer.tile_defs(tilesets)[0].id == 10


class TestGrid:
    def test_gid_grid(self, make_layer: Callable[..., Layer]) -> None:
        layer = make_layer([1, 2, encode_gid(3, True), 0, 5, 6], width=3, height=2)
        grid = layer.gid_grid()

        assert grid.shape == (2, 3)
        assert grid.dtype == np.uint32
        assert grid.tolist() == [[1, 2, 3], [0, 5, 6]]

    def test_gid_grid_size_mismatch(self, make_layer: Callable[..., Layer]) -> None:
        layer = make_layer([1, 2, 3], width=2, height=2)
        with pytest.raises(TmxError) as excinfo:
            layer.gid_grid()
        assert "expected 2x2" in str(excinfo.value)

    def test_get_tile_gid(self, make_layer: Callable[..., Layer]) -> None:
        layer = make_layer([1, 2, 3, 4], width=2, height=2)
        assert layer.get_tile_gid(1, 1) == 4
        assert layer.get_tile_gid(0, 1) == 3
        assert layer.get_tile_gid(2, 0) == 0
        assert layer.get_tile_gid(-1, 0) == 0
