# amp_blocks/config.py

from django.conf import settings

DEFAULT_CONFIG = {
    # Action URL for the categories dropdown form
    "home_url": "/",
    # Rewrite archive dropdown options to their paired AMP URLs
    "amp_to_amp_linking_enabled": False,
    # Query var appended by the default paired URL rewriter
    "paired_query_var": "amp",
    # Maximum average number of cached stylesheets per day
    "css_transient_threshold": 50.0,
    # Number of days the moving average is computed over
    "css_transient_sampling_range": 14,
    # Dotted path (or callable) returning the number of cached stylesheets,
    # used by the monitor task when no count is passed
    "css_transient_counter": None,
}


def get_amp_config():
    """
    Configuration for block and widget ampification.

    Values come from ``DEFAULT_CONFIG``, overridden by the optional
    ``AMP_BLOCKS`` dict in Django settings. Outside of a configured Django
    project the defaults are returned as-is.
    """
    config = dict(DEFAULT_CONFIG)
    if settings.configured:
        config.update(getattr(settings, "AMP_BLOCKS", {}) or {})
    return config
