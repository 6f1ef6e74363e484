"""Resource mapping: converts Shopify REST payloads into local document fields.

Mapping never raises: a malformed field becomes ``None`` (or an empty list)
while the rest of the record is kept.
"""

import math

from django.utils.dateparse import parse_datetime


def to_number(value):
    """Coerce a Shopify money/quantity value to float.

    Missing, empty, boolean and non-numeric input maps to ``None`` rather
    than zero.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_id(value):
    """Canonical string form of a Shopify id, or None when missing."""
    if value is None or value == "":
        return None
    return str(value)


def to_datetime(value):
    """Parse an ISO 8601 timestamp; invalid input maps to None."""
    if not value or not isinstance(value, str):
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        return None


def normalize_tags(tags):
    """Turn ``"a, b,,c"`` or ``[" a", "b"]`` into ``["a", "b", "c"]``."""
    if not tags:
        return []
    if isinstance(tags, (list, tuple)):
        items = tags
    else:
        items = str(tags).split(",")
    return [str(tag).strip() for tag in items if tag is not None and str(tag).strip()]


def _as_dict(value):
    return value if isinstance(value, dict) else {}


def _as_list(value):
    return value if isinstance(value, list) else []


def _map_order_customer(customer):
    """Snapshot of the customer referenced by an order, or None."""
    if not isinstance(customer, dict):
        return None
    return {
        "id": to_id(customer.get("id")),
        "email": customer.get("email"),
        "first_name": customer.get("first_name"),
        "last_name": customer.get("last_name"),
    }


def _map_line_item(line_item):
    line_item = _as_dict(line_item)
    return {
        "shopify_id": to_id(line_item.get("id")),
        "product_id": to_id(line_item.get("product_id")),
        "variant_id": to_id(line_item.get("variant_id")),
        "name": line_item.get("name"),
        "quantity": to_number(line_item.get("quantity")),
        "price": to_number(line_item.get("price")),
    }


def _map_variant(variant):
    variant = _as_dict(variant)
    return {
        "shopify_id": to_id(variant.get("id")),
        "title": variant.get("title"),
        "sku": variant.get("sku"),
        "price": to_number(variant.get("price")),
        "inventory_quantity": to_number(variant.get("inventory_quantity")),
    }


def map_customer(record, shop_id):
    """Map a Shopify customer to :class:`~shopify_sync.models.Customer` fields."""
    record = _as_dict(record)
    return {
        "shop_id": shop_id,
        "shopify_id": to_id(record.get("id")),
        "email": record.get("email"),
        "phone": record.get("phone"),
        "first_name": record.get("first_name"),
        "last_name": record.get("last_name"),
        "tags": normalize_tags(record.get("tags")),
        "total_spent": to_number(record.get("total_spent")),
        "state": record.get("state"),
        "country": _as_dict(record.get("default_address")).get("country_code"),
        "marketing_opt_in_level": record.get("marketing_opt_in_level"),
        "shopify_created_at": to_datetime(record.get("created_at")),
        "shopify_updated_at": to_datetime(record.get("updated_at")),
    }


def map_order(record, shop_id):
    """Map a Shopify order to :class:`~shopify_sync.models.Order` fields.

    The customer and line items are embedded as they were at sync time.
    """
    record = _as_dict(record)
    return {
        "shop_id": shop_id,
        "shopify_id": to_id(record.get("id")),
        "name": record.get("name"),
        "email": record.get("email"),
        "currency": record.get("currency"),
        "total_price": to_number(record.get("total_price")),
        "subtotal_price": to_number(record.get("subtotal_price")),
        "total_discounts": to_number(record.get("total_discounts")),
        "financial_status": record.get("financial_status"),
        "fulfillment_status": record.get("fulfillment_status"),
        "processed_at": to_datetime(record.get("processed_at")),
        "tags": normalize_tags(record.get("tags")),
        "customer": _map_order_customer(record.get("customer")),
        "line_items": [
            _map_line_item(li) for li in _as_list(record.get("line_items"))
        ],
        "shopify_created_at": to_datetime(record.get("created_at")),
        "shopify_updated_at": to_datetime(record.get("updated_at")),
    }


def map_product(record, shop_id):
    """Map a Shopify product to :class:`~shopify_sync.models.Product` fields."""
    record = _as_dict(record)
    return {
        "shop_id": shop_id,
        "shopify_id": to_id(record.get("id")),
        "title": record.get("title"),
        "status": record.get("status"),
        "product_type": record.get("product_type"),
        "vendor": record.get("vendor"),
        "tags": normalize_tags(record.get("tags")),
        "variants": [_map_variant(v) for v in _as_list(record.get("variants"))],
        "shopify_created_at": to_datetime(record.get("created_at")),
        "shopify_updated_at": to_datetime(record.get("updated_at")),
    }


RESOURCE_MAPPERS = {
    "customers": map_customer,
    "orders": map_order,
    "products": map_product,
}
