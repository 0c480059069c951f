"""Lighthouse runner — audits the current page through the browser's debugging port."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

from uiperf.comparator.compare import score_from_raw
from uiperf.errors import AuditError
from uiperf.models.config import PerfConfig

logger = logging.getLogger(__name__)


class AuditResult(BaseModel):
    page_key: str
    url: str
    report_path: str
    scores: dict[str, float | None] = Field(default_factory=dict)  # raw 0..1 scores
    threshold_failures: list[str] = Field(default_factory=list)


class LighthouseRunner:
    """Runs the Lighthouse CLI with a fixed desktop profile."""

    def __init__(self, config: PerfConfig):
        self.config = config

    def build_command(self, url: str, output_path: Path) -> list[str]:
        lh = self.config.lighthouse
        viewport = self.config.viewport
        return [
            lh.binary,
            url,
            f"--port={lh.port}",
            "--output=json",
            f"--output-path={output_path}",
            f"--only-categories={','.join(lh.categories)}",
            "--form-factor=desktop",
            "--screenEmulation.mobile=false",
            "--screenEmulation.disabled=false",
            f"--screenEmulation.width={viewport.width}",
            f"--screenEmulation.height={viewport.height}",
            "--screenEmulation.deviceScaleFactor=1",
            "--quiet",
        ]

    async def run(self, url: str, page_key: str) -> AuditResult:
        """Audit url and persist the report as lighthouse_report_<page_key>.json."""
        lh = self.config.lighthouse
        binary = shutil.which(lh.binary)
        if binary is None:
            raise AuditError(
                f"Lighthouse binary '{lh.binary}' not found (install: npm i -g lighthouse)"
            )

        with tempfile.TemporaryDirectory(prefix="uiperf-lh-") as tmp:
            raw_path = Path(tmp) / "lhr.json"
            cmd = self.build_command(url, raw_path)
            cmd[0] = binary
            logger.info("Running Lighthouse for %s (%s)", page_key, url)
            logger.debug("Lighthouse command: %s", " ".join(cmd))

            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            try:
                _, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=lh.timeout_ms / 1000,
                )
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()
                raise AuditError(
                    f"Lighthouse timed out after {lh.timeout_ms}ms for {page_key}"
                )

            if process.returncode != 0:
                tail = (stderr or b"").decode(errors="replace")[-500:]
                raise AuditError(
                    f"Lighthouse exited with code {process.returncode} for {page_key}: {tail}"
                )

            try:
                lhr = json.loads(raw_path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                raise AuditError(f"Lighthouse produced no usable report for {page_key}: {e}") from e

        categories = lhr.get("categories") if isinstance(lhr, dict) else None
        if not isinstance(categories, dict) or not all(
            isinstance(category, dict) for category in categories.values()
        ):
            raise AuditError(
                f"Lighthouse produced no usable report for {page_key}: malformed categories"
            )

        report_path = self.config.audit_report_path(page_key)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump({"lhr": lhr}, f, indent=2)
        logger.info("Lighthouse report: %s", report_path)

        scores = {name: category.get("score") for name, category in categories.items()}
        return AuditResult(
            page_key=page_key,
            url=url,
            report_path=str(report_path),
            scores=scores,
            threshold_failures=self._check_thresholds(page_key, scores),
        )

    def _check_thresholds(self, page_key: str, scores: dict[str, float | None]) -> list[str]:
        failures = []
        for category, minimum in self.config.lighthouse.thresholds.items():
            if category not in scores:
                continue
            actual = score_from_raw(scores[category])
            if actual < minimum:
                message = f"{category} record is {actual} and is under the {minimum} threshold"
                logger.warning("Lighthouse %s: %s", page_key, message)
                failures.append(message)
        return failures
