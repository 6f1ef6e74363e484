"""Utility helpers for the Shopify sync app."""

import re
from urllib.parse import urlsplit

from .exceptions import InvalidShopDomain

MYSHOPIFY_SUFFIX = ".myshopify.com"

_HOSTNAME_RE = re.compile(
    r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]*[a-z0-9])?)*$"
)


def normalize_shop_domain(raw_domain):
    """Canonicalize a shop hostname to its ``*.myshopify.com`` Admin form.

    Accepts a bare hostname, a full URL, or just the shop subdomain. Custom
    storefront domains cannot reach the Admin API and are rejected.

    Args:
        raw_domain: User-supplied hostname-like string.

    Returns:
        str: lowercase Admin hostname, e.g. ``"my-store.myshopify.com"``.

    Raises:
        InvalidShopDomain: if the input is empty, unparsable or not an
            Admin hostname.

    Examples::

        >>> normalize_shop_domain("My-Store")
        'my-store.myshopify.com'
        >>> normalize_shop_domain("https://my-store.myshopify.com/admin")
        'my-store.myshopify.com'
    """
    if not raw_domain:
        raise InvalidShopDomain()
    trimmed = str(raw_domain).strip()
    url = trimmed if "://" in trimmed else f"https://{trimmed}"
    try:
        host = urlsplit(url).hostname
    except ValueError:
        raise InvalidShopDomain() from None
    if not host:
        raise InvalidShopDomain()

    host = host.lower()
    # Only the shop subdomain was entered, e.g. "my-store".
    if "." not in host:
        host = f"{host}{MYSHOPIFY_SUFFIX}"

    if not _HOSTNAME_RE.match(host) or not host.endswith(MYSHOPIFY_SUFFIX):
        raise InvalidShopDomain()
    return host


def bare_subdomain(domain):
    """Return ``"my-store"`` for ``"my-store.myshopify.com"``."""
    if domain.endswith(MYSHOPIFY_SUFFIX):
        return domain[: -len(MYSHOPIFY_SUFFIX)]
    return domain


def domain_aliases(raw_domain, normalized, canonical=None):
    """Every hostname a registration may already be stored under.

    Covers the raw input, the normalized form, the bare subdomain and, when
    verification reported a different hostname, the canonical form and its
    subdomain. Order is preserved and duplicates dropped.
    """
    candidates = [
        normalized,
        str(raw_domain).strip().lower(),
        bare_subdomain(normalized),
    ]
    if canonical and canonical != normalized:
        candidates.extend([canonical, bare_subdomain(canonical)])
    return list(dict.fromkeys(c for c in candidates if c))
