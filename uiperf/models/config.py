"""Configuration models for the performance suite."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from uiperf.url_utils import join_url

PERFORMANCE_BASELINES_FILE = "performance_baselines.json"
LIGHTHOUSE_BASELINES_FILE = "lighthouse_baselines.json"
LIGHTHOUSE_METRICS_FILE = "lighthouse_metrics.json"


class ViewportConfig(BaseModel):
    width: int = 1280
    height: int = 720
    name: str = "desktop"


class ComponentTarget(BaseModel):
    """A UI component measured against performance_baselines.json."""
    plugin_name: str
    test_id: str  # value of the data-test-subj attribute

    @property
    def field_name(self) -> str:
        return f"{self.plugin_name}_{self.test_id}"


class ScenarioConfig(BaseModel):
    page_key: str
    path: str = "/"
    components: list[ComponentTarget] = Field(default_factory=list)
    run_audit: bool = True
    compare_report: bool = True


class LighthouseConfig(BaseModel):
    binary: str = "lighthouse"
    port: int = 9222  # Chromium remote-debugging port Lighthouse attaches to
    timeout_ms: int = 240000
    thresholds: dict[str, int] = Field(
        default_factory=lambda: {"performance": 30, "accessibility": 90}
    )
    categories: list[str] = Field(
        default_factory=lambda: ["performance", "accessibility"]
    )

    @field_validator("thresholds")
    @classmethod
    def check_threshold_range(cls, v: dict[str, int]) -> dict[str, int]:
        for category, value in v.items():
            if not 0 <= value <= 100:
                raise ValueError(
                    f"Threshold for '{category}' must be between 0 and 100, got {value}"
                )
        return v


class PerfConfig(BaseModel):
    # Target
    base_url: str

    # Browser
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    headless: bool = True

    # Timeouts
    visibility_timeout_ms: int = 180000
    navigation_timeout_ms: int = 180000
    layout_shift_window_ms: int = 2000

    # Files
    baselines_dir: str = "./perf-baselines"
    report_output_dir: str = "./perf-reports"

    # Audit
    lighthouse: LighthouseConfig = Field(default_factory=LighthouseConfig)

    # Scenarios
    scenarios: list[ScenarioConfig] = Field(default_factory=list)

    @property
    def performance_baselines_path(self) -> Path:
        return Path(self.baselines_dir) / PERFORMANCE_BASELINES_FILE

    @property
    def lighthouse_baselines_path(self) -> Path:
        return Path(self.baselines_dir) / LIGHTHOUSE_BASELINES_FILE

    @property
    def metrics_report_path(self) -> Path:
        return Path(self.report_output_dir) / LIGHTHOUSE_METRICS_FILE

    def audit_report_path(self, page_key: str) -> Path:
        """Path of the persisted Lighthouse report for a page."""
        return Path(self.report_output_dir) / f"lighthouse_report_{page_key}.json"

    def url_for(self, path: str) -> str:
        return join_url(self.base_url, path)

    @classmethod
    def load(cls, path: str | Path) -> "PerfConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
