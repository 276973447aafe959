"""
Celery tasks for background maintenance.

The CSS transient monitor is meant to run once a day, for example from a
Celery beat schedule. Without ``args`` the count comes from the callable
named by the ``css_transient_counter`` setting:

    CELERY_BEAT_SCHEDULE = {
        "monitor-css-transient-caching": {
            "task": "amp_blocks.tasks.monitor_css_transient_caching",
            "schedule": 60 * 60 * 24,
        },
    }
"""

from celery import shared_task
from django.utils.module_loading import import_string

from .config import get_amp_config


def get_transient_counter():
    """Callable named by the ``css_transient_counter`` setting, or None."""
    counter = get_amp_config().get("css_transient_counter")
    if isinstance(counter, str):
        return import_string(counter)
    return counter


@shared_task
def monitor_css_transient_caching(transient_count=None):
    """
    Record one sample of the number of cached stylesheets.

    Args:
        transient_count: Current number of cached parsed stylesheets. When
            omitted, the configured ``css_transient_counter`` is called.

    Returns:
        Dict with the moving average and whether caching is now disabled
    """
    from .monitor import CssTransientMonitor

    try:
        monitor = CssTransientMonitor(
            count_transients=None if transient_count is not None else get_transient_counter()
        )
        moving_average = monitor.process(transient_count=transient_count)
    except Exception as e:
        return {"success": False, "error": str(e)}

    return {
        "success": True,
        "moving_average": moving_average,
        "caching_disabled": monitor.is_caching_disabled(),
    }
