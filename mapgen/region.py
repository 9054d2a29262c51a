"""Region: a width x height x depth cube of tiles with its own region file."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

import numpy as np

from config_io.schema import (
    BiomeType,
    RegionState,
    TileType,
    tile_type_from_index,
    tile_type_index,
)
from mapgen import codec, storage
from mapgen.errors import SerializationError, TilesNotLoadedError, region_unit
from mapgen.tile import Tile

logger = logging.getLogger(__name__)

REGION_DEPTH = 16

_AIR_IDX = tile_type_index(TileType.AIR)
_STONE_IDX = tile_type_index(TileType.STONE)


class Region:
    """Owns a biome and a tile grid that is either fully populated or empty."""

    def __init__(
        self,
        size: int,
        biome: BiomeType,
        depth: int = REGION_DEPTH,
        region_id: uuid.UUID | None = None,
    ):
        if size <= 0:
            raise ValueError(f"Region size must be positive, got {size}")
        if depth <= 0:
            raise ValueError(f"Region depth must be positive, got {depth}")
        self._id = region_id or uuid.uuid4()
        self.width = size
        self.height = size
        self.depth = depth
        self.biome = BiomeType(biome)
        self._solid: np.ndarray | None = None
        self._types: np.ndarray | None = None

    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.width, self.height, self.depth)

    @property
    def state(self) -> RegionState:
        return RegionState.POPULATED if self._solid is not None else RegionState.EMPTY

    @property
    def is_populated(self) -> bool:
        return self._solid is not None

    @property
    def unit(self) -> str:
        return region_unit(self._id)

    # ── Generation ─────────────────────────────────────────────────────

    def generate_tiles(self) -> None:
        """Placeholder terrain: lower half of the depth is stone, upper half air."""
        mid = self.depth // 2
        solid = np.zeros(self.shape, dtype=bool)
        types = np.full(self.shape, _AIR_IDX, dtype=np.uint8)
        solid[:, :, :mid] = True
        types[:, :, :mid] = _STONE_IDX
        self._set_tiles(solid, types)

    def dispose_tiles(self) -> None:
        self._solid = None
        self._types = None

    def _set_tiles(self, solid: np.ndarray, types: np.ndarray) -> None:
        if solid.shape != self.shape or types.shape != self.shape:
            raise ValueError(f"Tile arrays {solid.shape}/{types.shape} do not match region {self.shape}")
        self._solid = solid
        self._types = types

    # ── Tile access ────────────────────────────────────────────────────

    def _require_tiles(self) -> tuple[np.ndarray, np.ndarray]:
        if self._solid is None or self._types is None:
            raise TilesNotLoadedError("tiles are disposed; load the region first", self.unit)
        return self._solid, self._types

    def _check_coords(self, x: int, y: int, z: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth):
            raise IndexError(f"Tile ({x}, {y}, {z}) outside region {self.shape}")

    def tile_at(self, x: int, y: int, z: int) -> Tile:
        solid, types = self._require_tiles()
        self._check_coords(x, y, z)
        return Tile(bool(solid[x, y, z]), tile_type_from_index(int(types[x, y, z])))

    @property
    def solid_grid(self) -> np.ndarray:
        """Read-only view of the solid flags, indexed [x, y, z]."""
        solid, _ = self._require_tiles()
        view = solid.view()
        view.flags.writeable = False
        return view

    @property
    def type_grid(self) -> np.ndarray:
        """Read-only view of tile type discriminants, indexed [x, y, z]."""
        _, types = self._require_tiles()
        view = types.view()
        view.flags.writeable = False
        return view

    def tile_grid(self) -> list[list[list[Tile]]]:
        solid, types = self._require_tiles()
        kinds = list(TileType)
        return [
            [
                [Tile(bool(solid[x, y, z]), kinds[types[x, y, z]]) for z in range(self.depth)]
                for y in range(self.height)
            ]
            for x in range(self.width)
        ]

    # ── Persistence ────────────────────────────────────────────────────

    def region_path(self, directory: str | Path) -> Path:
        return storage.region_file(directory, self._id)

    def save_tiles(self, directory: str | Path) -> Path:
        solid, types = self._require_tiles()
        path = self.region_path(directory)
        data = codec.encode_tiles(solid, types, self.unit)
        storage.write_file(path, data, self.unit)
        logger.debug(f"Saved region {self._id} to {path}")
        return path

    def load_tiles(self, directory: str | Path) -> None:
        path = self.region_path(directory)
        data = storage.read_file(path, self.unit)
        solid, types = codec.decode_tiles(data, self.shape, self.unit)
        self._set_tiles(solid, types)
        logger.debug(f"Loaded region {self._id} from {path}")

    # ── Metadata ───────────────────────────────────────────────────────

    def to_record(self) -> codec.RegionRecord:
        return codec.RegionRecord(self._id, self.width, self.height, self.depth, self.biome)

    @classmethod
    def from_record(cls, record: codec.RegionRecord) -> "Region":
        if record.width != record.height:
            raise SerializationError(
                f"region footprint {record.width}x{record.height} is not square",
                region_unit(record.id),
            )
        return cls(record.width, record.biome, depth=record.depth, region_id=record.id)

    def to_dict(self) -> dict:
        return {
            "id": str(self._id),
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "biome": self.biome.value,
            "state": self.state.value,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        if self.to_record() != other.to_record() or self.state != other.state:
            return False
        if not self.is_populated:
            return True
        return (np.array_equal(self._solid, other._solid)
                and np.array_equal(self._types, other._types))

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Region(id={self._id}, {self.width}x{self.height}x{self.depth}, "
                f"biome={self.biome.value}, state={self.state.value})")
