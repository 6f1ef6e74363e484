import logging

from ..exceptions import ResourceWriteError
from ..models import Customer, Order, Product
from ..router import register_handler
from ..services.mapping import map_customer, map_order, map_product
from ..services.storage import upsert_documents

logger = logging.getLogger(__name__)


def _upsert_single(event, payload, model, mapper):
    # Webhook deliveries carry one resource, not a page of them.
    doc = mapper(payload, event.shop_id)
    saved = upsert_documents(model, [doc])
    if doc["shopify_id"] and not saved:
        raise ResourceWriteError(
            f"Could not store {model.__name__} {doc['shopify_id']} from {event.topic}"
        )
    logger.info(
        "Upserted %s %s from %s (shop=%s, saved=%d)",
        model.__name__,
        doc["shopify_id"],
        event.topic,
        event.shop_id,
        saved,
    )
    return saved


def handle_customer_event(event, payload):
    """Handle customers/* webhooks: upsert the customer."""
    _upsert_single(event, payload, Customer, map_customer)
    return "customer"


def handle_order_event(event, payload):
    """Handle orders/* webhooks: upsert the order with its line items."""
    _upsert_single(event, payload, Order, map_order)
    return "order"


def handle_product_event(event, payload):
    """Handle products/* webhooks: upsert the product with its variants."""
    _upsert_single(event, payload, Product, map_product)
    return "product"


# ---------------------------------------------------------------------------
# Handler registration, run when this module is imported via apps.ready()
# ---------------------------------------------------------------------------
register_handler("customers/", handle_customer_event)
register_handler("orders/", handle_order_event)
register_handler("products/", handle_product_event)
