"""Budget violations collected during a run."""

from __future__ import annotations

import logging
import time

from uiperf.models.metrics import PerformanceLogEntry

perf_logger = logging.getLogger("uiperf.perf")


class PerformanceLog:
    def __init__(self) -> None:
        self.entries: list[PerformanceLogEntry] = []

    def log_performance(self, metric: str, value: str) -> PerformanceLogEntry:
        entry = PerformanceLogEntry(
            metric=metric,
            value=value,
            logged_at=time.strftime("%Y-%m-%dT%H:%M:%SZ"),
        )
        self.entries.append(entry)
        perf_logger.warning("%s: %s", metric, value)
        return entry

    def __len__(self) -> int:
        return len(self.entries)
