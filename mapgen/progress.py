"""Progress reporting for region generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from config_io.schema import ProgressMode

ProgressCallback = Callable[[int], None]


@dataclass(frozen=True)
class ProgressEvent:
    completed: int
    total: int
    percent: int
    x: int
    y: int

    @property
    def done(self) -> bool:
        return self.completed == self.total


def progress_percent(completed: int, total: int, mode: ProgressMode = ProgressMode.PERCENT) -> int:
    """Integer progress in [0, 100].

    PERCENT truncates (completed / total) * 100 toward zero, so grids with
    more than 100 regions report 0 for their first calls. LEGACY truncates
    the ratio before multiplying and reports 0 until the final region.
    """
    if total <= 0:
        raise ValueError(f"total must be positive, got {total}")
    if not 0 <= completed <= total:
        raise ValueError(f"completed={completed} outside [0, {total}]")
    if ProgressMode(mode) is ProgressMode.LEGACY:
        return (completed // total) * 100
    return completed * 100 // total
