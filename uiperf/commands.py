"""Performance commands: load baseline, collect, compare and report.

Each command takes a PerfContext carrying the page, configuration, the
performance log and the audit runner. Missing baselines and exceeded
budgets are logged and never raise; malformed inputs and browser or
audit failures propagate to the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from playwright.async_api import Page
from pydantic import BaseModel, Field

from uiperf.baselines.loader import load_baseline
from uiperf.collector.lighthouse import AuditResult, LighthouseRunner
from uiperf.collector.metrics import (
    collect_layout_shift,
    collect_memory_mb,
    collect_render_time,
)
from uiperf.comparator.compare import compare, compare_category
from uiperf.errors import BaselineNotFoundError, ReportParseError
from uiperf.models.config import PerfConfig
from uiperf.models.metrics import (
    BaselineEntry,
    BaselineSet,
    ComparisonResult,
    MetricKind,
    MetricSample,
)
from uiperf.reporter.metrics_report import MetricsReportManager
from uiperf.reporter.performance_log import PerformanceLog

logger = logging.getLogger(__name__)

AUDIT_CATEGORIES = (MetricKind.PERFORMANCE, MetricKind.ACCESSIBILITY)


@dataclass
class PerfContext:
    config: PerfConfig
    page: Page | None = None
    perf_log: PerformanceLog = field(default_factory=PerformanceLog)
    audit_runner: LighthouseRunner | None = None

    def __post_init__(self) -> None:
        if self.audit_runner is None:
            self.audit_runner = LighthouseRunner(self.config)

    def require_page(self) -> Page:
        if self.page is None:
            raise RuntimeError("This command needs an open browser page")
        return self.page


class ComponentMeasurement(BaseModel):
    field_name: str
    samples: list[MetricSample] = Field(default_factory=list)
    results: list[ComparisonResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[ComparisonResult]:
        return [r for r in self.results if not r.passed]


def _record(
    ctx: PerfContext,
    measurement: ComponentMeasurement,
    sample: MetricSample,
    baseline: BaselineEntry,
) -> None:
    measurement.samples.append(sample)
    result = compare(measurement.field_name, sample, baseline)
    if result is None:
        logger.debug("No %s threshold for %s", sample.kind.value, measurement.field_name)
        return
    measurement.results.append(result)
    if not result.passed:
        ctx.perf_log.log_performance(result.key, result.message)


async def measure_component_performance(
    ctx: PerfContext, plugin_name: str, test_id: str,
) -> ComponentMeasurement | None:
    """Measure render time, layout shift and memory for a component.

    Example: measure_component_performance(ctx, "discover", "sidebarPanel")
    checks the "discover_sidebarPanel" entry of performance_baselines.json.
    """
    field_name = f"{plugin_name}_{test_id}"
    try:
        baselines = load_baseline(ctx.config.performance_baselines_path)
    except BaselineNotFoundError as e:
        logger.warning("%s; skipping performance measurement for %s", e, field_name)
        return None

    baseline = baselines.get(field_name)
    if baseline is None:
        logger.info("No baseline found for component: %s", field_name)
        return None

    page = ctx.require_page()
    measurement = ComponentMeasurement(field_name=field_name)

    render_time = await collect_render_time(page, test_id, ctx.config.visibility_timeout_ms)
    logger.debug("%s render time %.2fms (baseline %s)", field_name, render_time, baseline.render_time)
    _record(ctx, measurement, MetricSample(kind=MetricKind.RENDER_TIME, value=render_time), baseline)

    layout_shift = await collect_layout_shift(page, ctx.config.layout_shift_window_ms)
    _record(ctx, measurement, MetricSample(kind=MetricKind.LAYOUT_SHIFT, value=layout_shift), baseline)

    memory_mb = await collect_memory_mb(page)
    if memory_mb is None:
        logger.info("Memory usage unavailable for %s, skipping memory check", field_name)
    else:
        _record(ctx, measurement, MetricSample(kind=MetricKind.MEMORY_MB, value=memory_mb), baseline)

    logger.info("Measured %s: %d checks, %d exceeded",
                field_name, len(measurement.results), len(measurement.failures))
    return measurement


def _load_lighthouse_baselines(ctx: PerfContext) -> BaselineSet | None:
    try:
        return load_baseline(ctx.config.lighthouse_baselines_path)
    except BaselineNotFoundError as e:
        logger.warning("%s", e)
        return None


async def run_lighthouse(ctx: PerfContext, page_key: str) -> AuditResult | None:
    """Audit the current page if it has a Lighthouse baseline."""
    baselines = _load_lighthouse_baselines(ctx)
    if baselines is None or baselines.get(page_key) is None:
        logger.warning("⚠️ No Lighthouse baseline found for: %s", page_key)
        return None

    page = ctx.require_page()
    return await ctx.audit_runner.run(page.url, page_key)


def _read_categories(ctx: PerfContext, page_key: str) -> dict:
    report_path = ctx.config.audit_report_path(page_key)
    if not report_path.exists():
        raise FileNotFoundError(f"Lighthouse report not found: {report_path}")
    try:
        with open(report_path, encoding="utf-8") as f:
            report = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ReportParseError(f"Lighthouse report {report_path} is not valid JSON: {e}") from e

    lhr = report.get("lhr", report) if isinstance(report, dict) else None
    categories = lhr.get("categories") if isinstance(lhr, dict) else None
    if not isinstance(categories, dict):
        raise ReportParseError(f"Lighthouse report {report_path} is missing categories")
    return categories


async def compare_lighthouse_report(ctx: PerfContext, page_key: str) -> dict[str, str] | None:
    """Compare the persisted audit for page_key with its baseline.

    Every compared category is recorded, passing or failing, and merged
    into lighthouse_metrics.json. Returns this page's summary, or None
    when the page has no baseline (nothing is written then).
    """
    baselines = _load_lighthouse_baselines(ctx)
    baseline = baselines.get(page_key) if baselines is not None else None
    if baseline is None:
        logger.warning("⚠️ No Lighthouse baseline found for: %s", page_key)
        return None

    categories = _read_categories(ctx, page_key)

    summary: dict[str, str] = {}
    for kind in AUDIT_CATEGORIES:
        expected = baseline.threshold_for(kind)
        if expected is None:
            continue
        category = categories.get(kind.value)
        if category is None:
            logger.warning("Lighthouse report for %s has no %s category", page_key, kind.value)
            continue
        if not isinstance(category, dict):
            raise ReportParseError(
                f"Lighthouse report for {page_key} has a malformed {kind.value} category"
            )
        result = compare_category(page_key, kind.value, category.get("score"), expected)
        if result.passed:
            logger.info("%s: %s", result.key, result.message)
        else:
            logger.warning("%s: %s", result.key, result.message)
        summary[result.key] = result.message

    if summary:
        MetricsReportManager(ctx.config.metrics_report_path).merge(summary)
    return summary
