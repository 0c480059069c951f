"""Metrics report — flat key -> message JSON file with merge-on-write."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from uiperf.errors import ReportParseError

logger = logging.getLogger(__name__)


class MetricsReportManager:
    """Reads and merge-writes lighthouse_metrics.json.

    Same-key entries from the latest summary win; unrelated keys are kept.
    There is no locking, so only one writer may run at a time.
    """

    def __init__(self, report_path: Path):
        self.path = Path(report_path)

    def load(self) -> dict[str, str]:
        """Load the report, or an empty one if the file does not exist."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ReportParseError(f"Metrics report {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ReportParseError(f"Metrics report {self.path} must contain a JSON object")
        return data

    def save(self, report: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        logger.debug("Saved metrics report to %s", self.path)

    def merge(self, summary: dict[str, str]) -> dict[str, str]:
        """Merge summary over the stored report and write it back."""
        report = self.load()
        report.update(summary)
        self.save(report)
        logger.info("Merged %d entries into %s", len(summary), self.path)
        return report
