"""On-disk layout: one directory per map, one file per region plus the map file.

    <root>/<map-id>/<map-id>.map
    <root>/<map-id>/<region-id>.region
"""

from __future__ import annotations

import logging
from pathlib import Path

from config_io.utils import ensure_dir, read_bytes, write_bytes_atomic
from mapgen.errors import MapIOError, MapNotFoundError

logger = logging.getLogger(__name__)

MAP_SUFFIX = ".map"
REGION_SUFFIX = ".region"
DEFAULT_ROOT = "maps"


def map_dir(root: str | Path, map_id) -> Path:
    return Path(root) / str(map_id)


def map_file(root: str | Path, map_id) -> Path:
    return map_dir(root, map_id) / f"{map_id}{MAP_SUFFIX}"


def region_file(directory: str | Path, region_id) -> Path:
    return Path(directory) / f"{region_id}{REGION_SUFFIX}"


def make_dir(path: str | Path, unit: str | None = None) -> Path:
    try:
        return ensure_dir(path)
    except OSError as e:
        raise MapIOError(f"cannot create directory: {e.strerror or e}", unit, str(path)) from e


def write_file(path: str | Path, data: bytes, unit: str | None = None) -> None:
    try:
        write_bytes_atomic(data, path)
    except OSError as e:
        raise MapIOError(f"cannot write file: {e.strerror or e}", unit, str(path)) from e
    logger.debug(f"Wrote {len(data)} bytes to {path}")


def read_file(path: str | Path, unit: str | None = None, missing_is_not_found: bool = False) -> bytes:
    try:
        return read_bytes(path)
    except FileNotFoundError as e:
        if missing_is_not_found:
            raise MapNotFoundError("no such map", unit, str(path)) from e
        raise MapIOError("file missing", unit, str(path)) from e
    except OSError as e:
        raise MapIOError(f"cannot read file: {e.strerror or e}", unit, str(path)) from e


def list_maps(root: str | Path = DEFAULT_ROOT) -> list[str]:
    """Ids of every map directory under root that holds a map file."""
    base = Path(root)
    if not base.is_dir():
        return []
    return sorted(
        d.name for d in base.iterdir()
        if d.is_dir() and (d / f"{d.name}{MAP_SUFFIX}").is_file()
    )
