from datetime import date, timedelta

import pytest
from django.core.cache import cache
from django.test import override_settings

from amp_blocks.config import get_amp_config
from amp_blocks.context import RenderSession, add_paired_endpoint
from amp_blocks.monitor import (
    DEFAULT_SAMPLING_RANGE,
    DEFAULT_THRESHOLD,
    DISABLED_KEY,
    TIME_SERIES_KEY,
    CssTransientMonitor,
    calculate_average,
)
from amp_blocks.tasks import monitor_css_transient_caching

START = date(2021, 5, 1)


def _days(count):
    return [START + timedelta(days=offset) for offset in range(count)]


def test_average_discards_single_highest_value():
    assert calculate_average({"20210501": 10, "20210502": 20, "20210503": 300}) == 15.0


def test_average_needs_two_samples():
    assert calculate_average({}) == 0.0
    assert calculate_average({"20210501": 500}) == 0.0


def test_below_threshold_keeps_caching_enabled():
    monitor = CssTransientMonitor()
    for day in _days(5):
        monitor.process(day, 10)
    assert not monitor.is_caching_disabled()
    assert len(monitor.get_time_series()) == 5


def test_exceeding_threshold_disables_caching():
    monitor = CssTransientMonitor()
    assert monitor.process(START, 100) == 0.0
    assert not monitor.is_caching_disabled()

    assert monitor.process(START + timedelta(days=1), 100) == 100.0
    assert monitor.is_caching_disabled()
    assert cache.get(DISABLED_KEY) is True


def test_single_outlier_does_not_disable_caching():
    monitor = CssTransientMonitor()
    for day, count in zip(_days(3), [10, 10, 1000]):
        monitor.process(day, count)
    assert not monitor.is_caching_disabled()


def test_disabled_caching_stops_sampling():
    monitor = CssTransientMonitor()
    monitor.disable_caching()
    assert monitor.process(START, 1000) is None
    assert cache.get(TIME_SERIES_KEY) is None


def test_time_series_is_limited_to_sampling_range():
    monitor = CssTransientMonitor(sampling_range=3)
    for day in _days(5):
        monitor.process(day, 1)
    assert sorted(monitor.get_time_series()) == ["20210503", "20210504", "20210505"]


def test_same_day_sample_is_overwritten():
    monitor = CssTransientMonitor()
    monitor.process(START, 1)
    monitor.process(START, 7)
    assert monitor.get_time_series() == {"20210501": 7}


def test_non_positive_settings_fall_back_to_defaults():
    monitor = CssTransientMonitor(threshold=0, sampling_range=-1)
    assert monitor.threshold == DEFAULT_THRESHOLD
    assert monitor.sampling_range == DEFAULT_SAMPLING_RANGE


def test_count_comes_from_collaborator():
    monitor = CssTransientMonitor(count_transients=lambda: 12)
    monitor.process(START)
    assert monitor.get_time_series() == {"20210501": 12}


def test_missing_count_raises():
    with pytest.raises(ValueError):
        CssTransientMonitor().process(START)


def test_task_reports_moving_average():
    result = monitor_css_transient_caching(25)
    assert result == {"success": True, "moving_average": 0.0, "caching_disabled": False}


def test_task_reports_failure():
    result = monitor_css_transient_caching("many")
    assert result["success"] is False
    assert "error" in result


def test_task_without_count_or_counter_reports_failure():
    result = monitor_css_transient_caching()
    assert result["success"] is False
    assert "count" in result["error"]


def test_task_without_count_uses_configured_counter():
    with override_settings(AMP_BLOCKS={"css_transient_counter": lambda: 7}):
        result = monitor_css_transient_caching()
    assert result == {"success": True, "moving_average": 0.0, "caching_disabled": False}
    assert list(cache.get(TIME_SERIES_KEY).values()) == [7]


def test_task_resolves_counter_from_dotted_path():
    with override_settings(AMP_BLOCKS={"css_transient_counter": "builtins.int"}):
        result = monitor_css_transient_caching()
    assert result["success"] is True
    assert list(cache.get(TIME_SERIES_KEY).values()) == [0]


def test_config_merges_django_settings():
    config = get_amp_config()
    assert config["home_url"] == "https://example.com/"
    assert config["css_transient_threshold"] == 50.0
    assert RenderSession.from_config().home_url == "https://example.com/"
    assert RenderSession.from_config(home_url="/blog/").home_url == "/blog/"


def test_paired_endpoint_replaces_existing_query_var():
    assert add_paired_endpoint("https://example.com/?amp=0&p=1") == "https://example.com/?p=1&amp=1"
