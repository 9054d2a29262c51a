"""CLI command: generate a map and save it to disk."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config_io.config import load_config
from mapgen.errors import MapStoreError
from mapgen.map import Map


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a region map and save it")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--width", type=int, default=None, help="Map width in regions")
    parser.add_argument("--height", type=int, default=None, help="Map height in regions")
    parser.add_argument("--region-size", type=int, default=None, help="Tiles per region side")
    parser.add_argument("--seed", type=int, default=None, help="Generation seed")
    parser.add_argument("--root", type=str, default=None, help="Storage root directory")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    overrides: dict = {}
    map_overrides = {k: v for k, v in (
        ("width", args.width), ("height", args.height),
        ("region_size", args.region_size), ("seed", args.seed),
    ) if v is not None}
    if map_overrides:
        overrides["map"] = map_overrides
    if args.root is not None:
        overrides["storage"] = {"root": args.root}

    config = load_config(args.config, overrides)
    world = Map.from_config(config)

    logging.info(f"Generating map {world.id}: {world.width}x{world.height} regions, "
                 f"region_size={world.region_size}, seed={world.seed}")

    last = [-1]

    def report(percent: int) -> None:
        if not args.quiet and percent != last[0]:
            print(f"\r  Progress: {percent:3d}%", end="", flush=True)
            last[0] = percent

    try:
        world.generate_regions(report, mode=config.generation.progress_mode)
        if not args.quiet:
            print()
        path = world.save(config.storage.root)
    except MapStoreError as e:
        logging.error(f"Generation failed: {e}")
        return 1

    print("\n=== Map Saved ===")
    print(f"  Id: {world.id}")
    print(f"  Regions: {world.width * world.height}")
    print(f"  Map file: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
