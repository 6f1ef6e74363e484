"""Builders for fake Shopify Admin API responses."""

import json
from http import HTTPStatus

import requests

SHOP_DOMAIN = "test-shop.myshopify.com"
ACCESS_TOKEN = "shpat_0123456789abcdef0123456789"

BASE_URL = f"https://{SHOP_DOMAIN}/admin/api/2024-10"


def shopify_response(body=None, status_code=200, link=None, path="shop.json", raw=None):
    """Return a real ``requests.Response`` as the Admin API would send it.

    ``raw`` replaces the JSON body with literal text (e.g. an HTML error page).
    """
    response = requests.Response()
    response.status_code = status_code
    response.reason = HTTPStatus(status_code).phrase
    response.url = f"{BASE_URL}/{path}"
    response.encoding = "utf-8"
    if raw is not None:
        response._content = raw.encode("utf-8")
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    if link:
        response.headers["Link"] = link
    return response


def page_link(resource, next_cursor=None, previous_cursor=None):
    """Build a Link header with optional previous/next cursors."""
    parts = []
    if previous_cursor:
        parts.append(
            f'<{BASE_URL}/{resource}.json?limit=250&page_info={previous_cursor}>; '
            'rel="previous"'
        )
    if next_cursor:
        parts.append(
            f'<{BASE_URL}/{resource}.json?limit=250&page_info={next_cursor}>; rel="next"'
        )
    return ", ".join(parts) or None


def shop_payload(domain=SHOP_DOMAIN):
    return {"shop": {"id": 548380009, "name": "Test Shop", "myshopify_domain": domain}}
