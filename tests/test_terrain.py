"""Tests for terrain corner descriptors."""

import pytest

from tmx_decoder import TerrainCorners, TerrainDescriptorError, Tile, decode_terrain_corners


class TestDecodeTerrainCorners:
    def test_four_fields(self) -> None:
        assert decode_terrain_corners("1,2,3,4") == TerrainCorners(
            top_left=1, top_right=2, bottom_left=3, bottom_right=4)

    def test_whitespace(self) -> None:
        assert decode_terrain_corners(" 0, 0 ,1,1 ") == TerrainCorners(0, 0, 1, 1)

    @pytest.mark.parametrize("descriptor", ["", None])
    def test_empty_is_zero(self, descriptor) -> None:
        assert decode_terrain_corners(descriptor) == TerrainCorners(0, 0, 0, 0)

    def test_wrong_field_count(self) -> None:
        with pytest.raises(TerrainDescriptorError) as excinfo:
            decode_terrain_corners("1,2,3")
        assert "expected 4 values, got 3" in str(excinfo.value)

    def test_non_integer_field(self) -> None:
        with pytest.raises(TerrainDescriptorError) as excinfo:
            decode_terrain_corners("1,a,3,4")
        assert "'a'" in str(excinfo.value)

    @pytest.mark.parametrize("descriptor", [
        "1_0,2,3,4",
        "99999999999,0,0,0",
        "0,0,0,-2147483649",
        "0,+,1,1",
        "0,\u0661,1,1",
        "0,0x1,1,1",
    ])
    def test_rejects_loose_integers(self, descriptor: str) -> None:
        with pytest.raises(TerrainDescriptorError):
            decode_terrain_corners(descriptor)

    def test_int32_bounds_and_signs(self) -> None:
        assert decode_terrain_corners("-2147483648,2147483647,+1,-1") == TerrainCorners(
            -2147483648, 2147483647, 1, -1)


class TestTileTerrainCorners:
    def test_memoized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import tmx_decoder.tileset as tileset_module

        calls = []
        original = tileset_module.decode_terrain_corners

        def counting(descriptor):
            calls.append(descriptor)
            return original(descriptor)

        monkeypatch.setattr(tileset_module, "decode_terrain_corners", counting)

        tile = Tile(id=3, terrain="0,0,1,1")
        first = tile.terrain_corners()
        second = tile.terrain_corners()

        assert first == TerrainCorners(0, 0, 1, 1)
        assert second is first
        assert calls == ["0,0,1,1"]

    def test_errors_not_cached(self) -> None:
        tile = Tile(id=3, terrain="0,0")
        for _ in range(2):
            with pytest.raises(TerrainDescriptorError):
                tile.terrain_corners()

    def test_no_descriptor(self) -> None:
        assert Tile(id=0).terrain_corners() == TerrainCorners()
