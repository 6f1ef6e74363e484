"""Idempotent bulk persistence of mapped Shopify documents."""

import logging

from django.db import DatabaseError, transaction

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ["shop", "shopify_id"]


def _update_fields(model, docs):
    """Every mapped field plus ``updated_at``; the key and ``created_at`` stay put."""
    fields = set()
    for doc in docs:
        fields.update(doc)
    fields -= {"shop_id", "shop", "shopify_id", "id", "created_at"}
    fields.add("updated_at")
    return sorted(fields)


def _dedupe(docs):
    """Keep the last document per (shop, shopify_id); a batch may repeat a key."""
    by_key = {}
    for doc in docs:
        if not doc.get("shopify_id"):
            logger.warning("Skipping document without a Shopify id: %r", doc)
            continue
        by_key[(doc["shop_id"], doc["shopify_id"])] = doc
    return list(by_key.values())


def _write(model, docs, update_fields):
    model.objects.bulk_create(
        [model(**doc) for doc in docs],
        update_conflicts=True,
        unique_fields=UNIQUE_FIELDS,
        update_fields=update_fields,
    )


def upsert_documents(model, docs):
    """Create-or-replace ``docs`` in ``model`` keyed by (shop, shopify_id).

    The whole batch goes out as one ``INSERT ... ON CONFLICT DO UPDATE``; no
    row is read first, so concurrent syncs and webhooks for the same shop
    converge on last-write-wins. If the batch statement fails, each document
    is retried in its own savepoint so one bad record does not block the rest.

    Args:
        model: Customer, Order or Product model class.
        docs: Mapped documents (dicts of model field values).

    Returns:
        int: number of records written.
    """
    docs = _dedupe(docs)
    if not docs:
        return 0

    update_fields = _update_fields(model, docs)
    try:
        with transaction.atomic():
            _write(model, docs, update_fields)
        return len(docs)
    except DatabaseError:
        logger.warning(
            "Bulk upsert of %d %s documents failed, writing one by one",
            len(docs),
            model.__name__,
        )

    saved = 0
    for doc in docs:
        try:
            with transaction.atomic():
                _write(model, [doc], update_fields)
            saved += 1
        except DatabaseError:
            logger.exception(
                "Failed to upsert %s %s (shop=%s)",
                model.__name__,
                doc.get("shopify_id"),
                doc.get("shop_id"),
            )
    return saved
