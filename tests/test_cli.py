"""Test: generate and inspect commands against a temporary storage root."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from cli import generate, inspect_map
from mapgen.map import Map
from mapgen.storage import list_maps


def test_generate_then_inspect(tmp_path, capsys):
    root = tmp_path / "maps"
    rc = generate.main([
        "--width", "2", "--height", "3", "--region-size", "2",
        "--seed", "42", "--root", str(root), "--quiet",
    ])
    assert rc == 0

    ids = list_maps(root)
    assert len(ids) == 1
    world = Map.load(ids[0], root)
    assert (world.width, world.height, world.region_size, world.seed) == (2, 3, 2, 42)

    capsys.readouterr()
    assert inspect_map.main([ids[0], "--root", str(root)]) == 0
    out = capsys.readouterr().out
    assert ids[0] in out
    assert "Seed: 42" in out
    assert "Populated regions: 6" in out
    assert out.count("Arid") == 6


def test_inspect_lists_maps(tmp_path, capsys):
    m = Map(1, 1, 1)
    m.save(tmp_path)
    assert inspect_map.main(["--root", str(tmp_path)]) == 0
    assert str(m.id) in capsys.readouterr().out


def test_inspect_missing_map(tmp_path):
    assert inspect_map.main(["00000000-0000-0000-0000-000000000000", "--root", str(tmp_path)]) == 1


def test_inspect_json(tmp_path, capsys):
    m = Map(2, 1, 3)
    m.set_seed(5)
    m.generate_regions()
    m.save(tmp_path)
    capsys.readouterr()
    assert inspect_map.main([str(m.id), "--root", str(tmp_path), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["id"] == str(m.id)
    assert data["seed"] == 5
    assert len(data["regions"]) == 2
    assert data["regions"][1][0]["biome"] == "ARID"
    assert data["regions"][1][0]["state"] == "POPULATED"
    assert data["regions"][0][0]["depth"] == 16
