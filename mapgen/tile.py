"""Tile: the atomic occupiable unit of a region."""

from __future__ import annotations

from dataclasses import dataclass

from config_io.schema import TileType


@dataclass(frozen=True)
class Tile:
    solid: bool
    tile_type: TileType


AIR = Tile(solid=False, tile_type=TileType.AIR)
STONE = Tile(solid=True, tile_type=TileType.STONE)
