# amp_blocks/monitor.py
"""
Monitor the transient caching of parsed stylesheets.

Excessive cycling of cached stylesheets (for example when a page embeds a
timestamp in its CSS) fills the cache with entries that are never reused. A
daily sample of the number of cached stylesheets is kept, and when the moving
average over the sampling range exceeds the threshold, transient caching of
stylesheets is disabled.
"""

from __future__ import annotations

import logging
from datetime import date as date_cls
from typing import Callable, Optional

from django.core.cache import cache as default_cache

from .config import get_amp_config

logger = logging.getLogger(__name__)

TIME_SERIES_KEY = "amp_css_transient_monitor_time_series"
DISABLED_KEY = "amp_disable_css_transient_caching"

DEFAULT_THRESHOLD = 50.0
DEFAULT_SAMPLING_RANGE = 14


def calculate_average(time_series: dict) -> float:
    """
    Average of the time series with the single highest value discarded.

    Dropping the outlier keeps a single busy day from reaching the threshold.

    Example:
        >>> calculate_average({"20210501": 10, "20210502": 20, "20210503": 300})
        15.0
    """
    if not time_series:
        return 0.0
    values = list(time_series.values())
    count_without_outlier = len(values) - 1
    if count_without_outlier <= 0:
        return 0.0
    return (sum(values) - max(values)) / count_without_outlier


class CssTransientMonitor:
    """
    One monitor tick per day via ``process()``.

    Args:
        count_transients: Callable returning the current number of cached
            stylesheets; required unless a count is passed to ``process()``
        cache: Storage for the time series and the disabled flag (a Django
            cache, by default the ``default`` one)
        threshold: Maximum average number of cached stylesheets per day
        sampling_range: Number of days to average over
    """

    def __init__(
        self,
        count_transients: Optional[Callable[[], int]] = None,
        cache=None,
        threshold: Optional[float] = None,
        sampling_range: Optional[int] = None,
    ):
        config = get_amp_config()
        self.count_transients = count_transients
        self.cache = cache if cache is not None else default_cache
        self.threshold = _positive(
            threshold if threshold is not None else config["css_transient_threshold"],
            float,
            DEFAULT_THRESHOLD,
        )
        self.sampling_range = _positive(
            sampling_range if sampling_range is not None else config["css_transient_sampling_range"],
            int,
            DEFAULT_SAMPLING_RANGE,
        )

    def is_caching_disabled(self) -> bool:
        return bool(self.cache.get(DISABLED_KEY, False))

    def disable_caching(self) -> None:
        self.cache.set(DISABLED_KEY, True, None)

    def get_time_series(self) -> dict:
        return dict(self.cache.get(TIME_SERIES_KEY) or {})

    def persist_time_series(self, time_series: dict) -> None:
        self.cache.set(TIME_SERIES_KEY, time_series, None)

    def process(self, date: Optional[date_cls] = None, transient_count: Optional[int] = None):
        """
        Record today's sample and disable caching if the average is too high.

        Returns:
            The moving average, or None when caching was already disabled
        """
        if self.is_caching_disabled():
            logger.debug("CSS transient caching already disabled, skipping sample")
            return None

        if date is None:
            date = date_cls.today()

        if transient_count is None:
            if self.count_transients is None:
                raise ValueError("No transient count given and no count_transients callable set")
            transient_count = self.count_transients()

        time_series = self.get_time_series()
        time_series[date.strftime("%Y%m%d")] = int(transient_count)

        # Keep the most recent days only.
        keys = sorted(time_series)[-self.sampling_range:]
        time_series = {key: time_series[key] for key in keys}
        self.persist_time_series(time_series)

        moving_average = calculate_average(time_series)

        if moving_average > 0.0 and moving_average > self.threshold:
            logger.info(
                f"Disabling CSS transient caching: moving average {moving_average:.1f} "
                f"exceeds threshold {self.threshold:.1f}"
            )
            self.disable_caching()

        return moving_average


def _positive(value, cast, default):
    try:
        value = cast(value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default
