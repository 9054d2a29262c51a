"""CLI command: load a saved map and print its layout."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config_io.config import load_config
from config_io.schema import biome_display_name
from mapgen.errors import MapStoreError
from mapgen.map import Map
from mapgen.storage import list_maps


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect a saved region map")
    parser.add_argument("map_id", nargs="?", default=None, help="Map id (omit to list maps)")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--root", type=str, default=None, help="Storage root directory")
    parser.add_argument("--json", action="store_true", help="Print map metadata as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    config = load_config(args.config, {"storage": {"root": args.root}} if args.root else None)
    root = config.storage.root

    if args.map_id is None:
        ids = list_maps(root)
        print(f"=== Maps under {root} ===")
        for map_id in ids:
            print(f"  {map_id}")
        if not ids:
            print("  (none)")
        return 0

    try:
        world = Map.load(args.map_id, root)
    except MapStoreError as e:
        logging.error(f"Load failed: {e}")
        return 1

    if args.json:
        print(json.dumps(world.to_dict(), indent=2))
        return 0

    print("\n=== Map ===")
    print(f"  Id: {world.id}")
    print(f"  Size: {world.width}x{world.height} regions of "
          f"{world.region_size}x{world.region_size}x{world.depth} tiles")
    print(f"  Seed: {world.seed}")
    print(f"  Populated regions: {world.populated_region_count()}")
    print("  Biomes:")
    for y in range(world.height):
        row = [biome_display_name(world.get_biome_at_offset(x, y)) for x in range(world.width)]
        print("    " + " ".join(f"{name:<9}" for name in row))
    return 0


if __name__ == "__main__":
    sys.exit(main())
