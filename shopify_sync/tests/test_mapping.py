"""Tests for resource mapping, Shopify payloads to local document fields."""

import datetime

import pytest

from shopify_sync.services.mapping import (
    RESOURCE_MAPPERS,
    map_customer,
    map_order,
    map_product,
    normalize_tags,
    to_datetime,
    to_id,
    to_number,
)

# ---------------------------------------------------------------------------
# Fixtures: realistic Shopify REST payloads
# ---------------------------------------------------------------------------

CUSTOMER_PAYLOAD = {
    "id": 207119551,
    "email": "bob.norman@mail.example.com",
    "phone": "+16136120707",
    "first_name": "Bob",
    "last_name": "Norman",
    "state": "enabled",
    "tags": "VIP, newsletter ,",
    "total_spent": "199.65",
    "marketing_opt_in_level": "single_opt_in",
    "default_address": {"country_code": "CA", "city": "Ottawa"},
    "created_at": "2024-03-01T10:15:00-05:00",
    "updated_at": "2024-03-02T11:00:00-05:00",
}

ORDER_PAYLOAD = {
    "id": 450789469,
    "name": "#1001",
    "email": "bob.norman@mail.example.com",
    "currency": "USD",
    "total_price": "598.94",
    "subtotal_price": "597.00",
    "total_discounts": "10.00",
    "financial_status": "paid",
    "fulfillment_status": None,
    "processed_at": "2024-03-05T12:00:00Z",
    "tags": ["imported", " wholesale "],
    "customer": {
        "id": 207119551,
        "email": "bob.norman@mail.example.com",
        "first_name": "Bob",
        "last_name": "Norman",
        "orders_count": 3,
    },
    "line_items": [
        {
            "id": 466157049,
            "product_id": 632910392,
            "variant_id": 39072856,
            "name": "IPod Nano - 8gb - green",
            "quantity": 1,
            "price": "199.00",
        },
        {
            "id": 518995019,
            "product_id": None,
            "variant_id": None,
            "name": "Custom tip",
            "quantity": 2,
            "price": "not-a-price",
        },
    ],
    "created_at": "2024-03-05T11:59:00Z",
    "updated_at": "2024-03-06T08:00:00Z",
}

PRODUCT_PAYLOAD = {
    "id": 632910392,
    "title": "IPod Nano - 8GB",
    "status": "active",
    "product_type": "Cult Products",
    "vendor": "Apple",
    "tags": "Emotive, Flash Memory, MP3, Music",
    "variants": [
        {
            "id": 808950810,
            "title": "Pink",
            "sku": "IPOD2008PINK",
            "price": "199.00",
            "inventory_quantity": 10,
        },
        {
            "id": 49148385,
            "title": "Red",
            "sku": None,
            "price": "",
            "inventory_quantity": None,
        },
    ],
    "created_at": "2024-01-01T00:00:00Z",
    "updated_at": "not a date",
}


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


class TestToNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [("22.50", 22.5), (10, 10.0), ("0", 0.0), (0, 0.0), ("-3.5", -3.5)],
    )
    def test_numeric(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize(
        "value", [None, "", "abc", "NaN", "inf", True, False, [], {}]
    )
    def test_absent(self, value):
        assert to_number(value) is None


class TestToId:
    def test_int_becomes_string(self):
        assert to_id(632910392) == "632910392"

    def test_string_kept(self):
        assert to_id("abc") == "abc"

    def test_missing(self):
        assert to_id(None) is None
        assert to_id("") is None

    def test_zero_is_an_id(self):
        assert to_id(0) == "0"


class TestNormalizeTags:
    def test_comma_string(self):
        assert normalize_tags("a, b ,,c ") == ["a", "b", "c"]

    def test_list(self):
        assert normalize_tags([" a", "b ", "", None]) == ["a", "b"]

    def test_empty(self):
        assert normalize_tags(None) == []
        assert normalize_tags("") == []
        assert normalize_tags([]) == []


class TestToDatetime:
    def test_iso_with_offset(self):
        value = to_datetime("2024-03-01T10:15:00-05:00")
        assert value == datetime.datetime(
            2024, 3, 1, 15, 15, tzinfo=datetime.timezone.utc
        )

    @pytest.mark.parametrize("value", [None, "", "garbage", "2024-13-45T99:00:00Z", 123])
    def test_invalid(self, value):
        assert to_datetime(value) is None


# ---------------------------------------------------------------------------
# map_customer
# ---------------------------------------------------------------------------


class TestMapCustomer:
    def test_full_payload(self):
        doc = map_customer(CUSTOMER_PAYLOAD, 7)
        assert doc["shop_id"] == 7
        assert doc["shopify_id"] == "207119551"
        assert doc["email"] == "bob.norman@mail.example.com"
        assert doc["first_name"] == "Bob"
        assert doc["last_name"] == "Norman"
        assert doc["tags"] == ["VIP", "newsletter"]
        assert doc["total_spent"] == 199.65
        assert doc["state"] == "enabled"
        assert doc["country"] == "CA"
        assert doc["marketing_opt_in_level"] == "single_opt_in"
        assert doc["shopify_created_at"].year == 2024

    def test_missing_fields_degrade_to_absent(self):
        doc = map_customer({"id": 1, "total_spent": "n/a", "default_address": None}, 7)
        assert doc["shopify_id"] == "1"
        assert doc["total_spent"] is None
        assert doc["country"] is None
        assert doc["tags"] == []
        assert doc["email"] is None

    def test_non_dict_record(self):
        doc = map_customer(None, 7)
        assert doc["shop_id"] == 7
        assert doc["shopify_id"] is None


# ---------------------------------------------------------------------------
# map_order
# ---------------------------------------------------------------------------


class TestMapOrder:
    def test_full_payload(self):
        doc = map_order(ORDER_PAYLOAD, 3)
        assert doc["shopify_id"] == "450789469"
        assert doc["name"] == "#1001"
        assert doc["total_price"] == 598.94
        assert doc["subtotal_price"] == 597.0
        assert doc["total_discounts"] == 10.0
        assert doc["financial_status"] == "paid"
        assert doc["fulfillment_status"] is None
        assert doc["tags"] == ["imported", "wholesale"]
        assert doc["processed_at"] == datetime.datetime(
            2024, 3, 5, 12, 0, tzinfo=datetime.timezone.utc
        )

    def test_customer_snapshot(self):
        doc = map_order(ORDER_PAYLOAD, 3)
        assert doc["customer"] == {
            "id": "207119551",
            "email": "bob.norman@mail.example.com",
            "first_name": "Bob",
            "last_name": "Norman",
        }

    def test_line_items(self):
        first, second = map_order(ORDER_PAYLOAD, 3)["line_items"]
        assert first == {
            "shopify_id": "466157049",
            "product_id": "632910392",
            "variant_id": "39072856",
            "name": "IPod Nano - 8gb - green",
            "quantity": 1.0,
            "price": 199.0,
        }
        assert second["product_id"] is None
        assert second["variant_id"] is None
        assert second["price"] is None
        assert second["quantity"] == 2.0

    def test_no_customer_and_bad_line_items(self):
        doc = map_order({"id": 5, "customer": None, "line_items": "oops"}, 3)
        assert doc["customer"] is None
        assert doc["line_items"] == []

    def test_line_item_not_a_dict(self):
        doc = map_order({"id": 5, "line_items": [None]}, 3)
        assert doc["line_items"][0]["shopify_id"] is None


# ---------------------------------------------------------------------------
# map_product
# ---------------------------------------------------------------------------


class TestMapProduct:
    def test_full_payload(self):
        doc = map_product(PRODUCT_PAYLOAD, 9)
        assert doc["shopify_id"] == "632910392"
        assert doc["title"] == "IPod Nano - 8GB"
        assert doc["vendor"] == "Apple"
        assert doc["product_type"] == "Cult Products"
        assert doc["tags"] == ["Emotive", "Flash Memory", "MP3", "Music"]
        assert doc["shopify_updated_at"] is None

    def test_variants(self):
        pink, red = map_product(PRODUCT_PAYLOAD, 9)["variants"]
        assert pink == {
            "shopify_id": "808950810",
            "title": "Pink",
            "sku": "IPOD2008PINK",
            "price": 199.0,
            "inventory_quantity": 10.0,
        }
        assert red["price"] is None
        assert red["inventory_quantity"] is None


def test_resource_mappers_registry():
    assert RESOURCE_MAPPERS == {
        "customers": map_customer,
        "orders": map_order,
        "products": map_product,
    }
