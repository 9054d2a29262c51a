"""Shared utilities."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_bytes_atomic(data: bytes, path: str | Path) -> None:
    """Write to a sibling .tmp file, then rename over the target."""
    p = Path(path)
    tmp = p.with_name(p.name + ".tmp")
    with open(tmp, "wb") as f:
        f.write(data)
    os.replace(tmp, p)


def read_bytes(path: str | Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def to_int32(value: int) -> int:
    """Validate that value fits a signed 32-bit integer."""
    value = int(value)
    if not -(2 ** 31) <= value < 2 ** 31:
        raise ValueError(f"Value {value} does not fit in a signed 32-bit integer")
    return value
