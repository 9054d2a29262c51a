"""Map: a width x height grid of regions with whole-map persistence."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Iterator

from config_io.config import Config
from config_io.schema import BiomeType, ProgressMode
from config_io.utils import to_int32
from mapgen import codec, storage
from mapgen.errors import (
    InvariantViolation,
    MapNotFoundError,
    RegionOutOfBoundsError,
    map_unit,
)
from mapgen.progress import ProgressCallback, ProgressEvent, progress_percent
from mapgen.region import REGION_DEPTH, Region

logger = logging.getLogger(__name__)

UNSET_SEED = -1
DEFAULT_BIOME = BiomeType.ARID


class Map:
    """Top-level world map.

    ``regions`` is indexed ``[x][y]`` and is either empty or holds exactly
    ``width`` columns of ``height`` regions each.
    """

    def __init__(
        self,
        width: int,
        height: int,
        region_size: int,
        depth: int = REGION_DEPTH,
        map_id: uuid.UUID | None = None,
    ):
        for name, value in (("width", width), ("height", height),
                            ("region_size", region_size), ("depth", depth)):
            if value <= 0:
                raise ValueError(f"Map {name} must be positive, got {value}")
        self._id = map_id or uuid.uuid4()
        self._width = width
        self._height = height
        self._region_size = region_size
        self._depth = depth
        self._seed = UNSET_SEED
        self.regions: list[list[Region]] = []

    @classmethod
    def from_config(cls, config: Config) -> "Map":
        m = cls(config.map.width, config.map.height, config.map.region_size,
                depth=config.storage.region_depth)
        m.set_seed(config.map.seed)
        return m

    # ── Read API ───────────────────────────────────────────────────────

    @property
    def id(self) -> uuid.UUID:
        return self._id

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def region_size(self) -> int:
        return self._region_size

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def unit(self) -> str:
        return map_unit(self._id)

    @property
    def is_generated(self) -> bool:
        return bool(self.regions)

    def set_seed(self, seed: int) -> None:
        self._seed = to_int32(seed)

    def region_at(self, x: int, y: int) -> Region:
        if not self.regions:
            raise RegionOutOfBoundsError(f"no regions generated or loaded; ({x}, {y}) unavailable", self.unit)
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise RegionOutOfBoundsError(
                f"({x}, {y}) outside region grid {self._width}x{self._height}", self.unit
            )
        return self.regions[x][y]

    def get_biome_at_offset(self, x: int, y: int) -> BiomeType:
        return self.region_at(x, y).biome

    def biome_grid(self) -> list[list[BiomeType]]:
        return [[r.biome for r in column] for column in self.regions]

    def iter_regions(self) -> Iterator[tuple[int, int, Region]]:
        """Row-major walk: x outer, y inner."""
        for x, column in enumerate(self.regions):
            for y, region in enumerate(column):
                yield x, y, region

    def populated_region_count(self) -> int:
        return sum(1 for _, _, r in self.iter_regions() if r.is_populated)

    # ── Generation ─────────────────────────────────────────────────────

    def iter_generate_regions(
        self, mode: ProgressMode = ProgressMode.PERCENT
    ) -> Iterator[ProgressEvent]:
        """Build a fresh region grid, yielding one event per region.

        The grid replaces ``regions`` only once the last region is built.
        """
        total = self._width * self._height
        completed = 0
        grid: list[list[Region]] = []
        for x in range(self._width):
            column: list[Region] = []
            for y in range(self._height):
                region = Region(self._region_size, DEFAULT_BIOME, depth=self._depth)
                region.generate_tiles()
                column.append(region)
                completed += 1
                yield ProgressEvent(completed, total, progress_percent(completed, total, mode), x, y)
            grid.append(column)
        self.regions = grid
        logger.info(f"Generated {total} regions for map {self._id} (seed={self._seed})")

    def generate_regions(
        self,
        progress_callback: ProgressCallback | None = None,
        mode: ProgressMode = ProgressMode.PERCENT,
    ) -> int:
        """Generate every region, calling progress_callback(percent) after each one."""
        count = 0
        for event in self.iter_generate_regions(mode):
            count += 1
            if progress_callback is not None:
                progress_callback(event.percent)
        return count

    # ── Persistence ────────────────────────────────────────────────────

    def directory(self, root: str | Path | None = None) -> Path:
        return storage.map_dir(root or storage.DEFAULT_ROOT, self._id)

    def save(self, root: str | Path | None = None) -> Path:
        """Persist every region, dispose its tiles, then write the map file.

        Region files written before a failure stay on disk.
        """
        root = root or storage.DEFAULT_ROOT
        directory = storage.make_dir(self.directory(root), self.unit)

        saved = 0
        for _, _, region in self.iter_regions():
            region.save_tiles(directory)
            region.dispose_tiles()
            saved += 1

        path = storage.map_file(root, self._id)
        storage.write_file(path, codec.encode_map(self.to_record(), self.unit), self.unit)
        logger.info(f"Saved map {self._id}: {saved} regions to {directory}")
        return path

    @classmethod
    def load(cls, map_id: str | uuid.UUID, root: str | Path | None = None) -> "Map":
        """Read a map's metadata, then page every region's tiles back in."""
        root = root or storage.DEFAULT_ROOT
        unit = map_unit(map_id)
        try:
            map_id = uuid.UUID(str(map_id))
        except ValueError as e:
            raise MapNotFoundError("not a valid map id", unit) from e
        path = storage.map_file(root, map_id)
        data = storage.read_file(path, unit, missing_is_not_found=True)
        record = codec.decode_map(data, unit)
        if record.id != map_id:
            raise InvariantViolation(f"map file declares id {record.id}", unit)
        m = cls.from_record(record)
        m.reload_tiles(root)
        logger.info(f"Loaded map {m.id}: {m.width}x{m.height} regions from {path.parent}")
        return m

    def reload_tiles(self, root: str | Path | None = None) -> None:
        """Read each region's tiles from its file, row-major."""
        directory = self.directory(root)
        for _, _, region in self.iter_regions():
            region.load_tiles(directory)

    def to_record(self) -> codec.MapRecord:
        return codec.MapRecord(
            id=self._id,
            width=self._width,
            height=self._height,
            region_size=self._region_size,
            depth=self._depth,
            seed=self._seed,
            regions=[[r.to_record() for r in column] for column in self.regions],
        )

    @classmethod
    def from_record(cls, record: codec.MapRecord) -> "Map":
        try:
            m = cls(record.width, record.height, record.region_size,
                    depth=record.depth, map_id=record.id)
            m.set_seed(record.seed)
        except ValueError as e:
            raise InvariantViolation(str(e), map_unit(record.id)) from e
        m.regions = [[Region.from_record(r) for r in column] for column in record.regions]
        return m

    def to_dict(self) -> dict:
        return {
            "id": str(self._id),
            "width": self._width,
            "height": self._height,
            "region_size": self._region_size,
            "depth": self._depth,
            "seed": self._seed,
            "regions": [[r.to_dict() for r in column] for column in self.regions],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Map):
            return NotImplemented
        return self.to_record() == other.to_record() and self.regions == other.regions

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Map(id={self._id}, {self._width}x{self._height} regions, "
                f"region_size={self._region_size}, seed={self._seed})")
