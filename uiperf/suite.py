"""Suite runner — visits each scenario page and runs the performance commands."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from pathlib import Path

from playwright.async_api import Browser, async_playwright

from uiperf.collector.lighthouse import LighthouseRunner
from uiperf.commands import (
    PerfContext,
    compare_lighthouse_report,
    measure_component_performance,
    run_lighthouse,
)
from uiperf.models.config import PerfConfig, ScenarioConfig
from uiperf.models.suite_result import ScenarioResult, SuiteResult
from uiperf.utils.browser import create_audit_context, launch_audit_browser

logger = logging.getLogger(__name__)


class PerfSuite:
    """Runs the configured scenarios one after another in a single browser."""

    def __init__(self, config: PerfConfig):
        self.config = config
        self.run_id = f"perf_run_{uuid.uuid4().hex[:8]}"
        self.audit_runner = LighthouseRunner(config)

    def run(self) -> SuiteResult:
        return asyncio.run(self.execute())

    async def execute(self) -> SuiteResult:
        started_at = time.strftime("%Y-%m-%dT%H:%M:%SZ")
        start = time.time()
        total = len(self.config.scenarios)
        logger.info("=== Starting performance suite for %s (%d scenarios) ===",
                    self.config.base_url, total)

        results: list[ScenarioResult] = []
        async with async_playwright() as p:
            logger.debug("Launching Chromium on debugging port %d...", self.config.lighthouse.port)
            browser = await launch_audit_browser(
                p, self.config.lighthouse.port, headless=self.config.headless,
            )
            try:
                for index, scenario in enumerate(self.config.scenarios):
                    logger.info("--- Scenario [%d/%d]: %s ---", index + 1, total, scenario.page_key)
                    results.append(await self._run_scenario(browser, scenario))
            finally:
                await browser.close()

        suite_result = SuiteResult(
            run_id=self.run_id,
            started_at=started_at,
            completed_at=time.strftime("%Y-%m-%dT%H:%M:%SZ"),
            base_url=self.config.base_url,
            duration_seconds=round(time.time() - start, 2),
            scenarios=results,
        )
        logger.info("=== Suite complete: %d scenarios, %d errors, %d budget violations (%.1fs) ===",
                    len(results), suite_result.errors, suite_result.budget_violations,
                    suite_result.duration_seconds)
        return suite_result

    async def _run_scenario(self, browser: Browser, scenario: ScenarioConfig) -> ScenarioResult:
        scenario_start = time.time()
        url = self.config.url_for(scenario.path)
        result = ScenarioResult(page_key=scenario.page_key, url=url)
        viewport = {"width": self.config.viewport.width, "height": self.config.viewport.height}

        context = await create_audit_context(browser, viewport)
        try:
            page = await context.new_page()
            ctx = PerfContext(config=self.config, page=page, audit_runner=self.audit_runner)
            try:
                await page.goto(url, timeout=self.config.navigation_timeout_ms)

                for component in scenario.components:
                    measurement = await measure_component_performance(
                        ctx, component.plugin_name, component.test_id,
                    )
                    if measurement is not None:
                        result.component_results.extend(measurement.results)

                if scenario.run_audit:
                    audit = await run_lighthouse(ctx, scenario.page_key)
                    if audit is not None:
                        result.audit_report_path = audit.report_path
                        result.audit_threshold_failures = audit.threshold_failures

                if scenario.compare_report:
                    summary = await compare_lighthouse_report(ctx, scenario.page_key)
                    result.lighthouse_summary = summary or {}
            except Exception as e:
                logger.error("Scenario %s failed: %s", scenario.page_key, e)
                result.status = "error"
                result.error_message = str(e)
            result.performance_log = list(ctx.perf_log.entries)
        finally:
            await context.close()

        result.duration_seconds = round(time.time() - scenario_start, 2)
        logger.info("[%s] %s (%.1fs)", result.status.upper(), scenario.page_key, result.duration_seconds)
        return result

    def save_result(self, suite_result: SuiteResult) -> Path:
        """Persist the suite result next to the audit reports."""
        path = Path(self.config.report_output_dir) / f"{suite_result.run_id}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(suite_result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        logger.debug("Saved suite result to %s", path)
        return path
