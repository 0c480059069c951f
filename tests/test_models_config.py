"""Tests for configuration models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from uiperf.models.config import (
    ComponentTarget,
    LighthouseConfig,
    PerfConfig,
    ScenarioConfig,
    ViewportConfig,
)


class TestViewportConfig:
    """Tests for ViewportConfig model."""

    def test_default_values(self):
        config = ViewportConfig()
        assert config.width == 1280
        assert config.height == 720
        assert config.name == "desktop"

    def test_serialization(self):
        config = ViewportConfig(width=1920, height=1080, name="wide")
        assert config.model_dump() == {"width": 1920, "height": 1080, "name": "wide"}


class TestComponentTarget:
    """Tests for ComponentTarget model."""

    def test_field_name_joins_plugin_and_test_id(self):
        target = ComponentTarget(plugin_name="discover", test_id="sidebarPanel")
        assert target.field_name == "discover_sidebarPanel"

    def test_required_fields(self):
        with pytest.raises(ValidationError):
            ComponentTarget(plugin_name="discover")


class TestScenarioConfig:
    """Tests for ScenarioConfig model."""

    def test_defaults(self):
        scenario = ScenarioConfig(page_key="home")
        assert scenario.path == "/"
        assert scenario.components == []
        assert scenario.run_audit is True
        assert scenario.compare_report is True


class TestLighthouseConfig:
    """Tests for LighthouseConfig model."""

    def test_default_thresholds(self):
        config = LighthouseConfig()
        assert config.thresholds == {"performance": 30, "accessibility": 90}
        assert config.categories == ["performance", "accessibility"]
        assert config.timeout_ms == 240000

    def test_threshold_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            LighthouseConfig(thresholds={"performance": 130})

    def test_threshold_bounds_accepted(self):
        config = LighthouseConfig(thresholds={"performance": 0, "accessibility": 100})
        assert config.thresholds["accessibility"] == 100


class TestPerfConfig:
    """Tests for PerfConfig model."""

    def test_required_base_url(self):
        with pytest.raises(ValidationError):
            PerfConfig()

    def test_defaults(self):
        config = PerfConfig(base_url="http://localhost:5601")
        assert config.visibility_timeout_ms == 180000
        assert config.layout_shift_window_ms == 2000
        assert config.headless is True
        assert config.scenarios == []

    def test_derived_paths(self):
        config = PerfConfig(
            base_url="http://localhost:5601",
            baselines_dir="/data/baselines",
            report_output_dir="/data/reports",
        )
        assert config.performance_baselines_path == Path("/data/baselines/performance_baselines.json")
        assert config.lighthouse_baselines_path == Path("/data/baselines/lighthouse_baselines.json")
        assert config.metrics_report_path == Path("/data/reports/lighthouse_metrics.json")
        assert config.audit_report_path("discover") == Path(
            "/data/reports/lighthouse_report_discover.json"
        )

    def test_url_for(self):
        config = PerfConfig(base_url="http://localhost:5601/")
        assert config.url_for("/app/discover") == "http://localhost:5601/app/discover"
        assert config.url_for("app/home") == "http://localhost:5601/app/home"
        assert config.url_for("/") == "http://localhost:5601/"

    def test_url_for_absolute_url_unchanged(self):
        config = PerfConfig(base_url="http://localhost:5601")
        assert config.url_for("https://other.test/x") == "https://other.test/x"


class TestPerfConfigPersistence:
    """Tests for load/save."""

    def test_save_and_load(self, perf_config, tmp_path):
        path = tmp_path / "nested" / "config.json"
        perf_config.save(path)

        loaded = PerfConfig.load(path)
        assert loaded == perf_config
        assert loaded.scenarios[0].components[0].test_id == "sidebarPanel"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            PerfConfig.load(tmp_path / "missing.json")

    def test_load_partial_config_uses_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "base_url": "http://localhost:5601",
            "scenarios": [{"page_key": "discover", "path": "/app/discover"}],
        }))

        config = PerfConfig.load(path)
        assert config.lighthouse.port == 9222
        assert config.scenarios[0].page_key == "discover"
