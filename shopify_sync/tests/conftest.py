import pytest
from rest_framework.test import APIClient

from shopify_sync.models import Shop

from .helpers import ACCESS_TOKEN, SHOP_DOMAIN


@pytest.fixture
def shop(db):
    return Shop.objects.create(
        name="Test Shop",
        shop_domain=SHOP_DOMAIN,
        access_token=ACCESS_TOKEN,
        api_version="2024-10",
    )


@pytest.fixture
def other_shop(db):
    return Shop.objects.create(
        name="Other Shop",
        shop_domain="other-shop.myshopify.com",
        access_token=ACCESS_TOKEN,
        api_version="2024-10",
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def session_get(mocker):
    """Patch every outbound Admin API GET; set ``side_effect`` per test."""
    return mocker.patch("shopify_sync.client.requests.Session.get")
