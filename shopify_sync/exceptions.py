"""Error taxonomy for the sync engine.

Upstream failures are enriched with the shop domain, the resource path and an
actionable hint before they leave the client layer, so callers can classify
them by type alone.
"""

import json


class ShopifySyncError(Exception):
    """Base class for every error raised by this app."""


class InvalidShopDomain(ShopifySyncError, ValueError):
    def __init__(self, message=None):
        super().__init__(
            message
            or 'Invalid shop domain. Provide the Admin hostname like '
            '"your-store.myshopify.com".'
        )


class InvalidAccessToken(ShopifySyncError, ValueError):
    pass


class ResourceWriteError(ShopifySyncError):
    """A webhook resource could not be written to the local store."""


class ShopifyAPIError(ShopifySyncError):
    """A failed Admin API call, with enough context to act on it."""

    def __init__(
        self,
        status=None,
        status_text="",
        shop_domain="",
        resource_path="",
        detail="",
        hint="",
    ):
        self.status = status
        self.status_text = status_text or ""
        self.shop_domain = shop_domain
        self.resource_path = resource_path
        self.detail = detail
        self.hint = hint
        super().__init__(self._build_message())

    def _build_message(self):
        head = " ".join(
            part
            for part in (
                "Shopify",
                str(self.status) if self.status else "",
                self.status_text,
                "for",
                self.shop_domain,
                self.resource_path,
            )
            if part
        )
        detail = self.detail
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        message = f"{head}: {detail}"
        if self.hint:
            message = f"{message} - {self.hint}"
        return message


class ShopifyAuthError(ShopifyAPIError):
    """HTTP 401/403: bad token or missing scopes."""


class ShopifyNotFoundError(ShopifyAPIError):
    """HTTP 404: wrong hostname or the app lost access."""


class ShopifyTransientError(ShopifyAPIError):
    """Timeouts, connection resets, HTTP 429 and 5xx. Safe to retry."""
