"""App settings with defaults, overridable from the host project's Django settings."""

from django.conf import settings

DEFAULTS = {
    "SHOPIFY_API_VERSION": "2024-10",
    "SHOPIFY_SYNC_ENABLED": True,
    # Every 30 minutes.
    "SHOPIFY_SYNC_INTERVAL_SECONDS": 1800,
    # 400 pages of 250 records; None disables the ceiling.
    "SHOPIFY_SYNC_MAX_PAGES": 400,
    "SHOPIFY_RETRY_ATTEMPTS": 3,
    "SHOPIFY_RETRY_BACKOFF_SECONDS": 1.0,
    "SHOPIFY_SYNC_QUEUE": "shopify_sync",
}


def get_setting(name):
    """Return ``settings.<name>`` or the app default."""
    return getattr(settings, name, DEFAULTS[name])
