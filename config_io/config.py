"""Configuration loading and defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from config_io.schema import ProgressMode


# ── Sub-configs ────────────────────────────────────────────────────────────

class MapConfig(BaseModel):
    width: int = Field(default=8, gt=0)        # regions
    height: int = Field(default=8, gt=0)       # regions
    region_size: int = Field(default=16, gt=0)  # tiles per region side
    seed: int = Field(default=-1, ge=-(2 ** 31), lt=2 ** 31)  # -1 = unset


class StorageConfig(BaseModel):
    """Where maps live on disk and how deep each region is."""
    root: str = "maps"
    region_depth: int = Field(default=16, gt=0)


class GenerationConfig(BaseModel):
    progress_mode: ProgressMode = ProgressMode.PERCENT


# ── Top-level config ───────────────────────────────────────────────────

class Config(BaseModel):
    map: MapConfig = Field(default_factory=MapConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)


def load_config(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> Config:
    """Load config from YAML file, applying optional overrides."""
    data: dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}
    if overrides:
        _deep_merge(data, overrides)
    return Config(**data)


def _deep_merge(base: dict, overlay: dict) -> None:
    for k, v in overlay.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
