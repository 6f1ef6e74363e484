"""Credential verification and shop registration."""

import logging
from collections import namedtuple
from urllib.parse import urlsplit

import requests

from ..client import ShopifyClient, build_shopify_error, parse_json_object
from ..conf import get_setting
from ..exceptions import InvalidAccessToken
from ..models import Shop
from ..utils import domain_aliases, normalize_shop_domain

logger = logging.getLogger(__name__)

MIN_ACCESS_TOKEN_LENGTH = 20

Verification = namedtuple("Verification", ["canonical_domain", "shop"])


def _looks_like_url(value):
    return "://" in value or bool(urlsplit(value).netloc)


def validate_access_token(token):
    """Reject obviously wrong Admin API tokens before calling Shopify.

    Raises:
        InvalidAccessToken: with a message suitable for the user.
    """
    trimmed = str(token or "").strip()
    if not trimmed:
        raise InvalidAccessToken("Admin API access token is required.")
    if _looks_like_url(trimmed):
        raise InvalidAccessToken(
            "Access token looks like a URL. Paste the Admin API access token from Shopify."
        )
    if len(trimmed) < MIN_ACCESS_TOKEN_LENGTH:
        raise InvalidAccessToken(
            "Access token looks too short. Paste the full Admin API access token."
        )
    return trimmed


def verify_shop_credentials(shop_domain, access_token, api_version=None):
    """Confirm a domain/token pair is live and resolve the canonical hostname.

    Shopify's ``shop.json`` reports ``myshopify_domain``, which can differ
    from what the caller supplied (e.g. after a rename). That value wins.

    Returns:
        Verification: ``(canonical_domain, shop)`` where ``shop`` is the
        upstream shop payload.

    Raises:
        InvalidShopDomain: if ``shop_domain`` is not an Admin hostname.
        ShopifyAPIError: (or a subclass) if the request fails.
    """
    normalized = normalize_shop_domain(shop_domain)
    client = ShopifyClient(
        normalized, access_token, api_version or get_setting("SHOPIFY_API_VERSION")
    )
    try:
        response = client.get("shop.json")
    except requests.RequestException as exc:
        raise build_shopify_error(exc, normalized, "shop") from exc

    shop_payload = parse_json_object(response, normalized, "shop").get("shop")
    if not isinstance(shop_payload, dict):
        shop_payload = {}
    canonical = str(shop_payload.get("myshopify_domain") or "").lower() or normalized
    return Verification(canonical_domain=canonical, shop=shop_payload)


def refresh_shop_domain(shop):
    """Normalize and verify a stored shop, persisting any domain correction.

    Returns:
        Verification for the shop.
    """
    normalized = normalize_shop_domain(shop.shop_domain)
    if normalized != shop.shop_domain:
        logger.info("Normalized shop domain %s -> %s", shop.shop_domain, normalized)
        shop.shop_domain = normalized
        shop.save(update_fields=["shop_domain", "updated_at"])

    verification = verify_shop_credentials(
        shop.shop_domain, shop.access_token, shop.api_version
    )
    if verification.canonical_domain != shop.shop_domain:
        logger.info(
            "Shopify reports canonical domain %s for %s",
            verification.canonical_domain,
            shop.shop_domain,
        )
        shop.shop_domain = verification.canonical_domain
        shop.save(update_fields=["shop_domain", "updated_at"])
    return verification


def register_shop(shop_domain, access_token, name="", api_version=None, scopes=None):
    """Verify credentials and create or update the shop record.

    The shop may already exist under the raw input, the bare subdomain or the
    canonical hostname; the existing record is reused and re-activated.

    Returns:
        (Shop, created) tuple.
    """
    token = validate_access_token(access_token)
    normalized = normalize_shop_domain(shop_domain)
    api_version = api_version or get_setting("SHOPIFY_API_VERSION")

    verification = verify_shop_credentials(normalized, token, api_version)
    canonical = verification.canonical_domain

    shop, created = Shop.objects.resolve_or_create(
        domain_aliases(shop_domain, normalized, canonical),
        shop_domain=canonical,
        access_token=token,
        name=name or "",
        api_version=api_version,
        scopes=scopes or [],
        status=Shop.Status.ACTIVE,
    )
    logger.info(
        "%s shop %s (id=%s)", "Registered" if created else "Updated", canonical, shop.pk
    )
    return shop, created
