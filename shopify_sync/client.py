"""Shopify Admin REST API client and cursor paginator."""

import logging
from urllib.parse import parse_qs, urlsplit

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .conf import get_setting
from .exceptions import (
    ShopifyAPIError,
    ShopifyAuthError,
    ShopifyNotFoundError,
    ShopifyTransientError,
)
from .utils import normalize_shop_domain

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15  # seconds
PAGE_LIMIT = 250

NOT_FOUND_HINT = (
    "Verify the shop domain is the Admin hostname "
    "(e.g. your-store.myshopify.com) and the token has access."
)
AUTH_HINT = "Check the Admin API token and scopes for customers/orders/products."
UNEXPECTED_BODY_HINT = "Shopify answered with a non-JSON page (maintenance or proxy error)."


class ShopifyClient:
    """HTTP client bound to one shop's versioned Admin API base path.

    The domain must already be normalized; it is used as-is.
    """

    def __init__(self, shop_domain, access_token, api_version=None):
        self.shop_domain = shop_domain
        self.api_version = api_version or get_setting("SHOPIFY_API_VERSION")
        self.base_url = f"https://{shop_domain}/admin/api/{self.api_version}/"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "X-Shopify-Access-Token": access_token,
                "Content-Type": "application/json",
            }
        )

    def url(self, path):
        return f"{self.base_url}{path}"

    def get(self, path, params=None):
        """GET ``path`` and return the response; raises for non-2xx statuses."""
        response = self.session.get(
            self.url(path), params=params, timeout=REQUEST_TIMEOUT
        )
        response.raise_for_status()
        return response


def client_for_shop(shop):
    """Build a :class:`ShopifyClient` from a Shop record.

    Raises:
        InvalidShopDomain: if the stored domain is not an Admin hostname.
    """
    domain = normalize_shop_domain(shop.shop_domain)
    return ShopifyClient(domain, shop.access_token, shop.api_version)


def parse_page_info(link_header):
    """Extract the ``page_info`` cursor from the ``rel="next"`` Link entry.

    Returns None when there is no next page.
    """
    if not link_header:
        return None
    for part in link_header.split(","):
        if 'rel="next"' not in part:
            continue
        url = part.split(";")[0].strip().strip("<>")
        values = parse_qs(urlsplit(url).query).get("page_info")
        return values[0] if values else None
    return None


def build_shopify_error(exc, shop_domain, resource_path):
    """Convert a ``requests`` failure into the matching ShopifyAPIError subclass."""
    response = getattr(exc, "response", None)
    status = response.status_code if response is not None else None
    status_text = response.reason if response is not None else ""

    detail = str(exc)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = response.text
        if isinstance(body, dict) and body.get("errors"):
            detail = body["errors"]
        elif body:
            detail = body

    if status == 404:
        error_class, hint = ShopifyNotFoundError, NOT_FOUND_HINT
    elif status in (401, 403):
        error_class, hint = ShopifyAuthError, AUTH_HINT
    elif status is None or status == 429 or status >= 500:
        error_class, hint = ShopifyTransientError, ""
    else:
        error_class, hint = ShopifyAPIError, ""

    return error_class(
        status=status,
        status_text=status_text,
        shop_domain=shop_domain,
        resource_path=resource_path,
        detail=detail,
        hint=hint,
    )


def parse_json_object(response, shop_domain, resource_path):
    """Decode a 2xx body that must be a JSON object.

    Raises:
        ShopifyTransientError: for HTML pages, empty bodies and JSON that is
            not an object.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return body
    raise ShopifyTransientError(
        shop_domain=shop_domain,
        resource_path=resource_path,
        detail=(
            f"expected a JSON object, got HTTP {response.status_code} "
            f"{response.text[:200]!r}"
        ),
        hint=UNEXPECTED_BODY_HINT,
    )


def request_with_retry(client, path, resource_path, params=None):
    """Issue one GET, retrying transient failures with exponential backoff.

    Returns:
        (response, body) tuple, ``body`` being the decoded JSON object.
    """
    retrying = Retrying(
        stop=stop_after_attempt(get_setting("SHOPIFY_RETRY_ATTEMPTS")),
        wait=wait_exponential(multiplier=get_setting("SHOPIFY_RETRY_BACKOFF_SECONDS")),
        retry=retry_if_exception_type(ShopifyTransientError),
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.warning(
                    "Retrying %s for %s (attempt %d)",
                    resource_path,
                    client.shop_domain,
                    attempt.retry_state.attempt_number,
                )
            try:
                response = client.get(path, params=params)
            except requests.RequestException as exc:
                raise build_shopify_error(
                    exc, client.shop_domain, resource_path
                ) from exc
            return response, parse_json_object(
                response, client.shop_domain, resource_path
            )


def fetch_paginated_resource(shop, resource_path, data_key, params=None):
    """Fetch every record of one resource collection, following page cursors.

    Args:
        shop: Shop record providing domain, token and API version.
        resource_path: Collection path without extension, e.g. ``"orders"``.
        data_key: Key holding the record array in each response body.
        params: Extra query parameters for the first page; later pages
            carry only the cursor and the page size.

    Returns:
        List of raw record dicts in arrival order.

    Raises:
        ShopifyAPIError: (or a subclass) on any page failure that survives
            the retry policy.
    """
    client = client_for_shop(shop)
    max_pages = get_setting("SHOPIFY_SYNC_MAX_PAGES")
    records = []
    page_info = None
    pages = 0

    while True:
        # Follow-up pages only accept ``limit`` next to the cursor.
        if page_info:
            query = {"limit": PAGE_LIMIT, "page_info": page_info}
        else:
            query = {"limit": PAGE_LIMIT, **(params or {})}
        response, body = request_with_retry(
            client, f"{resource_path}.json", resource_path, params=query
        )
        pages += 1
        page = body.get(data_key) or []
        if not isinstance(page, list):
            raise ShopifyAPIError(
                shop_domain=client.shop_domain,
                resource_path=resource_path,
                detail=f"expected a list under {data_key!r}",
            )
        records.extend(page)

        page_info = parse_page_info(response.headers.get("Link"))
        if not page_info:
            break
        if max_pages is not None and pages >= max_pages:
            logger.warning(
                "Stopped paginating %s for %s after %d pages (%d records)",
                resource_path,
                client.shop_domain,
                pages,
                len(records),
            )
            break

    return records
