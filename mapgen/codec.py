"""Binary encoding for map metadata and region tile grids.

All integers are little-endian. Region files hold only the tile grid:

    b"RGN1" | u32 width | u32 height | u32 depth
    | width*height*depth solid bytes (0/1) | width*height*depth tile type bytes

Both byte planes are laid out in C order over ``[x][y][z]``.

Map files hold the map header and the region grid without tiles:

    b"MAP1" | uuid(16) | u32 width | u32 height | u32 region_size | u32 depth
    | i32 seed | u32 columns | columns * (u32 rows | rows * region record)

    region record = uuid(16) | u32 width | u32 height | u32 depth | u8 biome
"""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass

import numpy as np

from config_io.schema import (
    BiomeType,
    TILE_TYPE_COUNT,
    biome_from_index,
    biome_index,
)
from mapgen.errors import InvariantViolation, SerializationError

REGION_MAGIC = b"RGN1"
MAP_MAGIC = b"MAP1"

_U32 = struct.Struct("<I")
_DIMS = struct.Struct("<III")
_MAP_HEADER = struct.Struct("<IIIIi")
_REGION_RECORD = struct.Struct("<IIIB")


@dataclass(frozen=True)
class RegionRecord:
    """Region metadata as stored in the map file."""
    id: uuid.UUID
    width: int
    height: int
    depth: int
    biome: BiomeType


@dataclass(frozen=True)
class MapRecord:
    id: uuid.UUID
    width: int
    height: int
    region_size: int
    depth: int
    seed: int
    regions: list[list[RegionRecord]]


class _Reader:
    """Cursor over a bytes buffer that reports truncation as SerializationError."""

    def __init__(self, data: bytes, unit: str | None):
        self.data = data
        self.pos = 0
        self.unit = unit

    def take(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self.data):
            raise SerializationError(
                f"truncated data: needed {n} bytes at offset {self.pos}, "
                f"{len(self.data) - self.pos} available",
                self.unit,
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def unpack(self, st: struct.Struct) -> tuple:
        return st.unpack(self.take(st.size))

    def expect_magic(self, magic: bytes) -> None:
        got = self.take(len(magic))
        if got != magic:
            raise SerializationError(f"bad magic {got!r}, expected {magic!r}", self.unit)

    def finish(self) -> None:
        if self.pos != len(self.data):
            raise SerializationError(
                f"{len(self.data) - self.pos} trailing bytes after payload", self.unit
            )


def _u32(value: int, what: str, unit: str | None) -> int:
    if not 0 <= value < 2 ** 32:
        raise SerializationError(f"{what}={value} does not fit in u32", unit)
    return value


def _i32(value: int, what: str, unit: str | None) -> int:
    if not -(2 ** 31) <= value < 2 ** 31:
        raise SerializationError(f"{what}={value} does not fit in i32", unit)
    return value


# ── Region tiles ───────────────────────────────────────────────────────────

def encode_tiles(solid: np.ndarray, tile_types: np.ndarray, unit: str | None = None) -> bytes:
    """Encode a tile grid. Both arrays must share a 3D shape."""
    if solid.ndim != 3 or solid.shape != tile_types.shape:
        raise SerializationError(
            f"tile arrays must be 3D with equal shapes, got {solid.shape} and {tile_types.shape}",
            unit,
        )
    w, h, d = (_u32(int(n), "dimension", unit) for n in solid.shape)
    return b"".join((
        REGION_MAGIC,
        _DIMS.pack(w, h, d),
        np.ascontiguousarray(solid, dtype=np.uint8).tobytes(order="C"),
        np.ascontiguousarray(tile_types, dtype=np.uint8).tobytes(order="C"),
    ))


def decode_tiles(
    data: bytes,
    expected_shape: tuple[int, int, int] | None = None,
    unit: str | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Decode a region file into (solid, tile_types) arrays."""
    r = _Reader(data, unit)
    r.expect_magic(REGION_MAGIC)
    shape = r.unpack(_DIMS)
    if expected_shape is not None and tuple(shape) != tuple(expected_shape):
        raise InvariantViolation(
            f"tile grid is {shape[0]}x{shape[1]}x{shape[2]}, region declares "
            f"{expected_shape[0]}x{expected_shape[1]}x{expected_shape[2]}",
            unit,
        )
    count = shape[0] * shape[1] * shape[2]
    remaining = len(data) - r.pos
    if remaining != 2 * count:
        raise InvariantViolation(
            f"payload holds {remaining} bytes, dimensions require {2 * count}", unit
        )

    solid_raw = np.frombuffer(r.take(count), dtype=np.uint8)
    types = np.frombuffer(r.take(count), dtype=np.uint8)
    r.finish()

    if solid_raw.size and solid_raw.max() > 1:
        raise SerializationError("solid flag outside {0, 1}", unit)
    if types.size and types.max() >= TILE_TYPE_COUNT:
        raise SerializationError(f"unknown tile type discriminant {int(types.max())}", unit)

    return (
        solid_raw.astype(bool).reshape(shape),
        types.copy().reshape(shape),
    )


# ── Map metadata ───────────────────────────────────────────────────────────

def encode_map(record: MapRecord, unit: str | None = None) -> bytes:
    parts = [
        MAP_MAGIC,
        record.id.bytes,
        _MAP_HEADER.pack(
            _u32(record.width, "width", unit),
            _u32(record.height, "height", unit),
            _u32(record.region_size, "region_size", unit),
            _u32(record.depth, "depth", unit),
            _i32(record.seed, "seed", unit),
        ),
        _U32.pack(len(record.regions)),
    ]
    for column in record.regions:
        parts.append(_U32.pack(len(column)))
        for reg in column:
            parts.append(reg.id.bytes)
            parts.append(_REGION_RECORD.pack(
                _u32(reg.width, "width", unit),
                _u32(reg.height, "height", unit),
                _u32(reg.depth, "depth", unit),
                biome_index(reg.biome),
            ))
    return b"".join(parts)


def decode_map(data: bytes, unit: str | None = None) -> MapRecord:
    r = _Reader(data, unit)
    r.expect_magic(MAP_MAGIC)
    map_id = uuid.UUID(bytes=r.take(16))
    width, height, region_size, depth, seed = r.unpack(_MAP_HEADER)

    (n_cols,) = r.unpack(_U32)
    if n_cols not in (0, width):
        raise InvariantViolation(f"region grid has {n_cols} columns, map width is {width}", unit)

    columns: list[list[RegionRecord]] = []
    for x in range(n_cols):
        (n_rows,) = r.unpack(_U32)
        if n_rows != height:
            raise InvariantViolation(
                f"column {x} has {n_rows} regions, map height is {height}", unit
            )
        column: list[RegionRecord] = []
        for _ in range(n_rows):
            region_id = uuid.UUID(bytes=r.take(16))
            rw, rh, rd, biome_idx = r.unpack(_REGION_RECORD)
            try:
                biome = biome_from_index(biome_idx)
            except ValueError as e:
                raise SerializationError(f"region {region_id}: {e}", unit) from e
            if (rw, rh, rd) != (region_size, region_size, depth):
                raise InvariantViolation(
                    f"region {region_id} is {rw}x{rh}x{rd}, map declares "
                    f"{region_size}x{region_size}x{depth}",
                    unit,
                )
            column.append(RegionRecord(region_id, rw, rh, rd, biome))
        columns.append(column)
    r.finish()

    return MapRecord(map_id, width, height, region_size, depth, seed, columns)
