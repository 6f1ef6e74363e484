"""Tests for webhook resource handlers."""

from unittest.mock import patch

import pytest

from shopify_sync.exceptions import ResourceWriteError
from shopify_sync.handlers.resources import (
    handle_customer_event,
    handle_order_event,
    handle_product_event,
)
from shopify_sync.models import Customer, Event, Order, Product

pytestmark = pytest.mark.django_db


def _make_event(shop, topic):
    return Event.objects.create(shop=shop, topic=topic, payload={})


class TestHandleCustomerEvent:
    def test_upserts_single_record(self, shop):
        event = _make_event(shop, "customers/update")
        assert handle_customer_event(event, {"id": 77, "first_name": "Ann"}) == "customer"
        assert Customer.objects.get(shop=shop, shopify_id="77").first_name == "Ann"

    @patch("shopify_sync.handlers.resources.upsert_documents")
    def test_passes_one_element_batch(self, mock_upsert, shop):
        mock_upsert.return_value = 1
        event = _make_event(shop, "customers/create")

        handle_customer_event(event, {"id": 77})

        model, docs = mock_upsert.call_args.args
        assert model is Customer
        assert len(docs) == 1
        assert docs[0]["shop_id"] == shop.pk
        assert docs[0]["shopify_id"] == "77"

    @patch("shopify_sync.handlers.resources.upsert_documents", return_value=0)
    def test_failed_write_raises(self, mock_upsert, shop):
        event = _make_event(shop, "customers/update")
        with pytest.raises(ResourceWriteError, match="Customer 77"):
            handle_customer_event(event, {"id": 77})

    @patch("shopify_sync.handlers.resources.upsert_documents", return_value=0)
    def test_payload_without_id_is_not_an_error(self, mock_upsert, shop):
        event = _make_event(shop, "customers/update")
        assert handle_customer_event(event, {"email": "a@b.c"}) == "customer"


class TestHandleOrderEvent:
    def test_upserts_order(self, shop):
        event = _make_event(shop, "orders/paid")
        payload = {"id": 1, "total_price": "12.5", "line_items": [{"id": 2}]}
        assert handle_order_event(event, payload) == "order"
        order = Order.objects.get(shop=shop, shopify_id="1")
        assert order.total_price == 12.5
        assert order.line_items[0]["shopify_id"] == "2"


class TestHandleProductEvent:
    def test_upserts_product(self, shop):
        event = _make_event(shop, "products/create")
        payload = {"id": 3, "title": "Mug", "variants": [{"id": 4, "sku": "MUG"}]}
        assert handle_product_event(event, payload) == "product"
        product = Product.objects.get(shop=shop, shopify_id="3")
        assert product.variants[0]["sku"] == "MUG"

    def test_delete_payload_keeps_record_keyed(self, shop):
        # products/delete only carries the id.
        event = _make_event(shop, "products/delete")
        handle_product_event(event, {"id": 3})
        assert Product.objects.filter(shop=shop, shopify_id="3").count() == 1
