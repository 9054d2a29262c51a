"""Test: map save/load round-trip, disposal and failure reporting."""

import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import numpy as np
import pytest

from config_io.schema import BiomeType, RegionState
from mapgen.errors import (
    InvariantViolation,
    MapIOError,
    MapNotFoundError,
    SerializationError,
    TilesNotLoadedError,
)
from mapgen.map import Map
from mapgen.storage import list_maps


def _snapshot(m: Map) -> dict:
    return {
        (x, y): (r.id, r.biome, r.shape, r.solid_grid.copy(), r.type_grid.copy())
        for x, y, r in m.iter_regions()
    }


def test_save_writes_layout(tmp_path):
    m = Map(2, 2, 4)
    m.generate_regions()
    path = m.save(tmp_path)

    directory = tmp_path / str(m.id)
    assert path == directory / f"{m.id}.map"
    assert path.is_file()
    for _, _, region in m.iter_regions():
        assert (directory / f"{region.id}.region").is_file()
    assert len(list(directory.iterdir())) == 5
    assert not list(directory.glob("*.tmp"))


def test_save_disposes_tiles(tmp_path):
    m = Map(2, 2, 4)
    m.generate_regions()
    m.save(tmp_path)
    assert m.populated_region_count() == 0
    for _, _, region in m.iter_regions():
        assert region.state == RegionState.EMPTY
        with pytest.raises(TilesNotLoadedError):
            region.tile_at(0, 0, 0)
    # metadata stays resident
    assert m.get_biome_at_offset(1, 1) == BiomeType.ARID


def test_round_trip(tmp_path):
    m = Map(2, 2, 4)
    m.set_seed(42)
    m.generate_regions()
    m.regions[0][1].biome = BiomeType.GRASSLAND
    before = _snapshot(m)

    m.save(tmp_path)
    loaded = Map.load(m.id, tmp_path)

    assert loaded.id == m.id
    assert (loaded.width, loaded.height, loaded.region_size, loaded.depth) == (2, 2, 4, 16)
    assert loaded.seed == 42
    assert loaded.get_biome_at_offset(0, 1) == BiomeType.GRASSLAND
    after = _snapshot(loaded)
    assert before.keys() == after.keys()
    for key, (rid, biome, shape, solid, types) in before.items():
        lrid, lbiome, lshape, lsolid, ltypes = after[key]
        assert (rid, biome, shape) == (lrid, lbiome, lshape)
        np.testing.assert_array_equal(solid, lsolid)
        np.testing.assert_array_equal(types, ltypes)


def test_load_accepts_string_id(tmp_path):
    m = Map(1, 2, 2)
    m.generate_regions()
    m.save(tmp_path)
    loaded = Map.load(str(m.id), tmp_path)
    assert loaded.id == m.id
    assert loaded.populated_region_count() == 2


def test_reload_tiles_after_save(tmp_path):
    m = Map(2, 1, 3)
    m.generate_regions()
    m.save(tmp_path)
    m.reload_tiles(tmp_path)
    assert m.populated_region_count() == 2
    assert m.region_at(1, 0).tile_at(0, 0, 0).solid


def test_loaded_map_equals_regenerated_state(tmp_path):
    m = Map(2, 2, 2)
    m.generate_regions()
    m.save(tmp_path)
    m.reload_tiles(tmp_path)
    assert Map.load(m.id, tmp_path) == m


def test_save_is_deterministic(tmp_path):
    m = Map(2, 2, 2)
    m.set_seed(7)
    m.generate_regions()
    path = m.save(tmp_path)
    first = path.read_bytes()
    m.reload_tiles(tmp_path)
    m.save(tmp_path)
    assert path.read_bytes() == first


def test_save_ungenerated_map(tmp_path):
    m = Map(3, 3, 2)
    m.save(tmp_path)
    loaded = Map.load(m.id, tmp_path)
    assert loaded.regions == []
    assert loaded.width == 3


def test_load_missing_map(tmp_path):
    with pytest.raises(MapNotFoundError):
        Map.load(uuid.uuid4(), tmp_path)
    with pytest.raises(MapNotFoundError):
        Map.load("not-a-uuid", tmp_path)


def test_load_missing_region_file(tmp_path):
    m = Map(2, 1, 2)
    m.generate_regions()
    m.save(tmp_path)
    victim = m.region_at(1, 0)
    (tmp_path / str(m.id) / f"{victim.id}.region").unlink()
    with pytest.raises(MapIOError) as exc:
        Map.load(m.id, tmp_path)
    assert not isinstance(exc.value, MapNotFoundError)
    assert exc.value.unit == f"region {victim.id}"


def test_load_corrupt_map_file(tmp_path):
    m = Map(1, 1, 2)
    m.generate_regions()
    path = m.save(tmp_path)
    path.write_bytes(path.read_bytes()[:-3])
    with pytest.raises(SerializationError) as exc:
        Map.load(m.id, tmp_path)
    assert exc.value.unit == f"map {m.id}"


def test_load_map_file_with_foreign_id(tmp_path):
    a = Map(1, 1, 1)
    a.save(tmp_path)
    b_id = uuid.uuid4()
    (tmp_path / str(b_id)).mkdir()
    (tmp_path / str(a.id) / f"{a.id}.map").rename(tmp_path / str(b_id) / f"{b_id}.map")
    with pytest.raises(InvariantViolation):
        Map.load(b_id, tmp_path)


def test_failed_save_keeps_written_regions(tmp_path):
    m = Map(2, 1, 2)
    m.generate_regions()
    first, second = m.region_at(0, 0), m.region_at(1, 0)
    directory = tmp_path / str(m.id)
    # a directory where the second region file should go blocks the write
    (directory / f"{second.id}.region.tmp").mkdir(parents=True)

    with pytest.raises(MapIOError) as exc:
        m.save(tmp_path)
    assert exc.value.unit == f"region {second.id}"
    assert (directory / f"{first.id}.region").is_file()
    assert not first.is_populated
    assert second.is_populated
    assert not (directory / f"{m.id}.map").exists()


def test_directory_creation_failure(tmp_path):
    blocker = tmp_path / "root"
    blocker.write_text("not a directory")
    m = Map(1, 1, 1)
    with pytest.raises(MapIOError) as exc:
        m.save(blocker)
    assert exc.value.unit == f"map {m.id}"


def test_list_maps(tmp_path):
    assert list_maps(tmp_path / "missing") == []
    a, b = Map(1, 1, 1), Map(1, 1, 1)
    a.save(tmp_path)
    b.save(tmp_path)
    (tmp_path / "stray").mkdir()
    assert list_maps(tmp_path) == sorted([str(a.id), str(b.id)])
