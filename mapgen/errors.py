"""Error types raised by map generation and persistence."""

from __future__ import annotations


class MapStoreError(Exception):
    """Base class. ``unit`` names the map or region the failure belongs to."""

    def __init__(self, message: str, unit: str | None = None):
        self.unit = unit
        if unit:
            message = f"{unit}: {message}"
        super().__init__(message)


class MapIOError(MapStoreError):
    """Directory creation, open, read or write failed."""

    def __init__(self, message: str, unit: str | None = None, path: str | None = None):
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message, unit)


class MapNotFoundError(MapIOError):
    """No metadata file exists for the requested map id."""


class SerializationError(MapStoreError):
    """Bytes on disk are malformed or truncated, or encoding failed."""


class InvariantViolation(MapStoreError):
    """Declared dimensions disagree with the actual payload or state."""


class TilesNotLoadedError(InvariantViolation):
    """Tile data was read while the region is disposed."""


class RegionOutOfBoundsError(MapStoreError, IndexError):
    """Region grid lookup outside [0, width) x [0, height)."""


def map_unit(map_id) -> str:
    return f"map {map_id}"


def region_unit(region_id) -> str:
    return f"region {region_id}"
