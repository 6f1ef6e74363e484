import logging

logger = logging.getLogger(__name__)

# Cart and checkout webhooks carry no stable id contract; they are kept
# as audit events only.
EVENT_ONLY_PREFIXES = ("carts/", "checkouts/")
EVENT_ONLY_KEYWORDS = ("abandon", "cart")

# Registry mapping a Shopify topic prefix (e.g. "orders/") to a handler.
# Handlers are registered by handlers/resources.py at import time, which
# happens from the app's ready().
_topic_handlers = {}


def register_handler(prefix, handler):
    """Register a handler callable for every topic starting with ``prefix``."""
    _topic_handlers[prefix] = handler
    logger.debug("Registered handler for topic prefix: %s", prefix)


def get_handler(topic):
    """Return the handler callable for ``topic``, or None."""
    for prefix, handler in _topic_handlers.items():
        if topic.startswith(prefix):
            return handler
    return None


def is_event_only(topic):
    """True for cart, checkout and abandonment topics."""
    return topic.startswith(EVENT_ONLY_PREFIXES) or any(
        keyword in topic for keyword in EVENT_ONLY_KEYWORDS
    )
