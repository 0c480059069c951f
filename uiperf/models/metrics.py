"""Baseline, sample and comparison data structures."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MetricKind(str, Enum):
    RENDER_TIME = "render_time"
    LAYOUT_SHIFT = "layout_shift"
    MEMORY_MB = "memory_MB"
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"

    @property
    def unit(self) -> str:
        return _UNITS.get(self, "")

    @property
    def is_budget(self) -> bool:
        """True when higher values are worse (render time, CLS, memory)."""
        return self in (MetricKind.RENDER_TIME, MetricKind.LAYOUT_SHIFT, MetricKind.MEMORY_MB)


_UNITS = {
    MetricKind.RENDER_TIME: "ms",
    MetricKind.MEMORY_MB: "MB",
}


class BaselineEntry(BaseModel):
    """Thresholds for one component metric key or one page key.

    Component entries carry render_time / layout_shift / memory_MB,
    page entries carry expected Lighthouse category scores.
    """
    model_config = ConfigDict(frozen=True)

    render_time: Optional[float] = None  # milliseconds
    layout_shift: Optional[float] = None  # CLS score
    memory_MB: Optional[float] = None
    performance: Optional[int] = Field(default=None, ge=0, le=100)
    accessibility: Optional[int] = Field(default=None, ge=0, le=100)

    def threshold_for(self, kind: MetricKind) -> float | int | None:
        return getattr(self, kind.value)


class BaselineSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = ""
    entries: dict[str, BaselineEntry] = Field(default_factory=dict)
    # key format: "{plugin_name}_{test_id}" or "{page_key}"

    def get(self, key: str) -> BaselineEntry | None:
        return self.entries.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self.entries


class MetricSample(BaseModel):
    kind: MetricKind
    value: float


class ComparisonResult(BaseModel):
    key: str
    kind: MetricKind
    actual: float
    expected: float
    outcome: str  # pass, fail
    message: str = ""

    @property
    def passed(self) -> bool:
        return self.outcome == "pass"


class PerformanceLogEntry(BaseModel):
    metric: str
    value: str
    logged_at: str = ""
