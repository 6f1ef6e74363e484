"""Scheduled resync sweep with shop-level circuit breaking."""

import logging

from datadog import statsd

from .exceptions import InvalidShopDomain, ShopifyAuthError, ShopifyNotFoundError
from .models import Shop
from .services.resource_sync import sync_shop_resources
from .services.verification import refresh_shop_domain

logger = logging.getLogger(__name__)

# Failures that will not fix themselves; the shop is paused until someone
# re-registers it. Everything else is retried on the next tick.
PAUSE_ON = (InvalidShopDomain, ShopifyAuthError, ShopifyNotFoundError)

SYNCED = "synced"
PAUSED = "paused"
FAILED = "failed"


def sync_shop(shop):
    """Verify one shop, sync all resources and stamp ``last_synced_at``."""
    refresh_shop_domain(shop)
    summary = sync_shop_resources(shop)
    shop.mark_synced()
    return summary


def run_sync_sweep():
    """Sync every active shop, one at a time.

    Each shop's failure is contained: fatal ones pause the shop, the rest
    are logged and the shop stays active for the next tick.

    Returns:
        dict: shop domain -> ``"synced"``, ``"paused"`` or ``"failed"``.
    """
    shops = list(Shop.objects.filter(status=Shop.Status.ACTIVE).order_by("pk"))
    logger.info("Scheduled sync triggered for %d shops", len(shops))

    outcomes = {}
    for shop in shops:
        domain = shop.shop_domain
        tags = [f"shop_domain:{domain}"]
        try:
            sync_shop(shop)
        except PAUSE_ON as exc:
            logger.error("Scheduled sync failed for %s: %s", domain, exc)
            shop.pause(exc, getattr(exc, "status", None))
            logger.error("Paused shop %s after a fatal sync error", shop.shop_domain)
            statsd.increment("shopify.scheduler.shop_paused", tags=tags)
            outcomes[domain] = PAUSED
        except Exception:
            logger.exception("Scheduled sync failed for %s", domain)
            statsd.increment("shopify.scheduler.shop_failed", tags=tags)
            outcomes[domain] = FAILED
        else:
            outcomes[domain] = SYNCED
    return outcomes
