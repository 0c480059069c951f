"""Result data structures produced by the suite runner."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from uiperf.models.metrics import ComparisonResult, PerformanceLogEntry


class ScenarioResult(BaseModel):
    page_key: str
    url: str = ""
    status: str = "pass"  # pass, error
    error_message: Optional[str] = None
    duration_seconds: float = 0.0
    component_results: list[ComparisonResult] = Field(default_factory=list)
    audit_report_path: Optional[str] = None
    audit_threshold_failures: list[str] = Field(default_factory=list)
    lighthouse_summary: dict[str, str] = Field(default_factory=dict)
    performance_log: list[PerformanceLogEntry] = Field(default_factory=list)


class SuiteResult(BaseModel):
    run_id: str
    started_at: str
    completed_at: str = ""
    base_url: str
    duration_seconds: float = 0.0
    scenarios: list[ScenarioResult] = Field(default_factory=list)

    @property
    def errors(self) -> int:
        return sum(1 for s in self.scenarios if s.status == "error")

    @property
    def budget_violations(self) -> int:
        return sum(len(s.performance_log) for s in self.scenarios)
