"""Enumerations shared by the map store and its on-disk format."""

from __future__ import annotations

import enum


# ── Enums ──────────────────────────────────────────────────────────────────
# Declaration order is the on-disk discriminant. Append only.

class BiomeType(str, enum.Enum):
    ARID = "ARID"
    GRASSLAND = "GRASSLAND"
    OCEAN = "OCEAN"
    ROCKY = "ROCKY"


class TileType(str, enum.Enum):
    AIR = "AIR"
    GRASS = "GRASS"
    SAND = "SAND"
    SOIL = "SOIL"
    STONE = "STONE"
    WATER = "WATER"


class RegionState(str, enum.Enum):
    EMPTY = "EMPTY"
    POPULATED = "POPULATED"


class ProgressMode(str, enum.Enum):
    PERCENT = "PERCENT"  # completed * 100 // total
    LEGACY = "LEGACY"    # (completed // total) * 100


# ── Display names ──────────────────────────────────────────────────────────

BIOME_DISPLAY_NAMES: dict[BiomeType, str] = {
    BiomeType.ARID: "Arid",
    BiomeType.GRASSLAND: "Grassland",
    BiomeType.OCEAN: "Ocean",
    BiomeType.ROCKY: "Rocky",
}


def biome_display_name(biome: BiomeType) -> str:
    """Human-readable name for a biome."""
    try:
        return BIOME_DISPLAY_NAMES[BiomeType(biome)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown biome: {biome!r}") from None


# ── Discriminant helpers ───────────────────────────────────────────────────

_BIOMES: list[BiomeType] = list(BiomeType)
_TILE_TYPES: list[TileType] = list(TileType)


def biome_index(biome: BiomeType) -> int:
    return _BIOMES.index(biome)


def biome_from_index(idx: int) -> BiomeType:
    if not 0 <= idx < len(_BIOMES):
        raise ValueError(f"Unknown biome discriminant: {idx}")
    return _BIOMES[idx]


def tile_type_index(tile_type: TileType) -> int:
    return _TILE_TYPES.index(tile_type)


def tile_type_from_index(idx: int) -> TileType:
    if not 0 <= idx < len(_TILE_TYPES):
        raise ValueError(f"Unknown tile type discriminant: {idx}")
    return _TILE_TYPES[idx]


TILE_TYPE_COUNT = len(_TILE_TYPES)
