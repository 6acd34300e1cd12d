import pytest
from pydantic import ValidationError

from app.core.config import ChartSettings, Settings


def test_chart_defaults():
    chart = ChartSettings()
    assert chart.badge_column == "B"
    assert (chart.default_start_row, chart.default_end_row) == (2, 13)
    assert chart.row_domain_source == "labels"


def test_badge_column_is_uppercased_and_validated():
    assert ChartSettings(badge_column="c").badge_column == "C"
    with pytest.raises(ValidationError):
        ChartSettings(badge_column="C1")


def test_default_window_must_be_ordered():
    with pytest.raises(ValidationError):
        ChartSettings(default_start_row=10, default_end_row=2)


def test_nested_env_overrides(monkeypatch):
    monkeypatch.setenv("SCB_CHART__BADGE_COLUMN", "d")
    monkeypatch.setenv("SCB_CHART__ROW_DOMAIN_SOURCE", "first_overlay")
    monkeypatch.setenv("SCB_CACHE__BACKEND", "file")
    monkeypatch.setenv("SCB_GOOGLE__TIMEOUT_SECONDS", "30")
    s = Settings(_env_file=None)
    assert s.chart.badge_column == "D"
    assert s.chart.row_domain_source == "first_overlay"
    assert s.cache.backend == "file"
    assert s.google.timeout_seconds == 30
