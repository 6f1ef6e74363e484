"""Webhook intake: audit every delivery, then route it to a resource handler."""

import logging

from datadog import statsd
from django.db import IntegrityError, transaction

from ..models import Event
from ..router import get_handler, is_event_only

logger = logging.getLogger(__name__)


def record_event(shop, topic, payload, webhook_id=None):
    """Append an audit event. Returns ``None`` if ``webhook_id`` was already seen."""
    if webhook_id:
        try:
            with transaction.atomic():
                return Event.objects.create(
                    shop=shop, topic=topic, payload=payload, webhook_id=webhook_id
                )
        except IntegrityError:
            return None
    return Event.objects.create(shop=shop, topic=topic, payload=payload)


def record_custom_event(shop, topic, payload):
    """Store a user-submitted event. Custom events are never mapped."""
    return record_event(shop, topic.lower(), payload)


def handle_webhook(shop, topic, payload, webhook_id=None):
    """Persist a webhook delivery and apply it to the typed resource store.

    The audit event and the resource write commit together: if the handler
    raises, the event is rolled back too, so Shopify's redelivery of the same
    ``webhook_id`` is processed again rather than reported as a duplicate.

    Args:
        shop: Shop the delivery belongs to (already resolved by the caller).
        topic: Shopify topic, e.g. ``"orders/updated"``.
        payload: Decoded JSON body, a single resource for resource topics.
        webhook_id: ``X-Shopify-Webhook-Id``; redeliveries of an id that was
            already processed are acknowledged without writing anything.

    Returns:
        dict: ``{"handled": True, "type": "order"}``, ``{"handled": True,
        "type": "event-only"}``, ``{"handled": True, "type": "duplicate"}`` or
        ``{"handled": False}`` for topics nothing handles.
    """
    topic = topic.lower()
    tags = [f"topic:{topic}", f"shop_domain:{shop.shop_domain}"]
    statsd.increment("shopify.webhook.received", tags=tags)

    with transaction.atomic():
        event = record_event(shop, topic, payload, webhook_id=webhook_id)
        if event is None:
            logger.info(
                "Duplicate webhook %s (topic=%s, shop=%s)",
                webhook_id,
                topic,
                shop.shop_domain,
            )
            return {"handled": True, "type": "duplicate"}

        handler = get_handler(topic)
        if handler is not None:
            return {"handled": True, "type": handler(event, payload)}

    if is_event_only(topic):
        return {"handled": True, "type": "event-only"}

    logger.warning("No handler registered for topic: %s", topic)
    statsd.increment("shopify.webhook.unhandled", tags=tags)
    return {"handled": False}
