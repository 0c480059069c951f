"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from uiperf.models.config import (
    ComponentTarget,
    LighthouseConfig,
    PerfConfig,
    ScenarioConfig,
    ViewportConfig,
)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def viewport_config() -> ViewportConfig:
    """Create a test viewport configuration."""
    return ViewportConfig(width=1280, height=720, name="desktop")


@pytest.fixture
def perf_config(tmp_path: Path, viewport_config: ViewportConfig) -> PerfConfig:
    """Create a config whose baseline and report dirs live under tmp_path."""
    return PerfConfig(
        base_url="http://localhost:5601",
        viewport=viewport_config,
        visibility_timeout_ms=180000,
        layout_shift_window_ms=2000,
        baselines_dir=str(tmp_path / "baselines"),
        report_output_dir=str(tmp_path / "reports"),
        lighthouse=LighthouseConfig(port=9333),
        scenarios=[
            ScenarioConfig(
                page_key="discover",
                path="/app/discover",
                components=[ComponentTarget(plugin_name="discover", test_id="sidebarPanel")],
            ),
        ],
    )


@pytest.fixture
def temp_config_file(perf_config: PerfConfig, tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_file = tmp_path / "uiperf-config.json"
    perf_config.save(config_file)
    return config_file


# ============================================================================
# File Fixtures
# ============================================================================


def write_json(path: Path, data: Any) -> Path:
    """Write data as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def component_baselines(perf_config: PerfConfig) -> Path:
    """performance_baselines.json with one component entry."""
    return write_json(perf_config.performance_baselines_path, {
        "discover_sidebarPanel": {"render_time": 500, "layout_shift": 0.1, "memory_MB": 100},
    })


@pytest.fixture
def lighthouse_baselines(perf_config: PerfConfig) -> Path:
    """lighthouse_baselines.json with a discover page entry."""
    return write_json(perf_config.lighthouse_baselines_path, {
        "discover": {"performance": 30, "accessibility": 90},
    })


def lighthouse_report(performance: float | None, accessibility: float | None) -> dict:
    """A persisted audit artifact in the {lhr: {categories}} shape."""
    return {
        "lhr": {
            "categories": {
                "performance": {"score": performance},
                "accessibility": {"score": accessibility},
            },
        },
    }


# ============================================================================
# Mock Fixtures
# ============================================================================


def build_mock_page(
    now_values=(0.0, 0.0),
    layout_shift: float = 0.0,
    heap_bytes: int | None = 50 * 1024 * 1024,
    url: str = "http://localhost:5601/app/discover",
) -> AsyncMock:
    """Create a mock Playwright page answering the collector scripts.

    performance.now() calls return now_values in order, the layout-shift
    disconnect script returns layout_shift and the memory script returns
    heap_bytes.
    """
    now_iter = iter(now_values)
    page = AsyncMock()
    page.url = url
    page.evaluated = []

    async def evaluate(script, *args):
        page.evaluated.append(script)
        if "takeRecords" in script:
            return layout_shift
        if "usedJSHeapSize" in script:
            return heap_bytes
        if "performance.now" in script:
            return next(now_iter)
        return None

    page.evaluate = AsyncMock(side_effect=evaluate)
    locator = Mock()
    locator.first.wait_for = AsyncMock()
    page.locator = Mock(return_value=locator)
    page.wait_for_timeout = AsyncMock()
    page.goto = AsyncMock()
    return page


@pytest.fixture
def mock_page() -> AsyncMock:
    """A page where everything is within the sample budgets."""
    return build_mock_page(now_values=(100.0, 200.0))


@pytest.fixture
def mock_page_factory():
    """Fixture that provides the build_mock_page function."""
    return build_mock_page
