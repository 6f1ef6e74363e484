from django.db import models, transaction
from django.utils import timezone

from .conf import get_setting


def default_api_version():
    return get_setting("SHOPIFY_API_VERSION")


class ShopManager(models.Manager):
    def resolve_or_create(self, candidates, **fields):
        """Find the shop stored under any of ``candidates`` and update it, or create one.

        A registration can arrive under the raw input, the bare subdomain or
        the canonical hostname; all of them must land on the same record.

        Returns:
            (Shop, created) tuple.
        """
        with transaction.atomic():
            shop = (
                self.select_for_update()
                .filter(shop_domain__in=list(candidates))
                .order_by("created_at")
                .first()
            )
            if shop is None:
                return self.create(**fields), True
            for name, value in fields.items():
                setattr(shop, name, value)
            shop.save()
            return shop, False


class Shop(models.Model):
    """One onboarded Shopify storefront (tenant). One record per canonical hostname."""

    class Status(models.TextChoices):
        ACTIVE = "active"
        PAUSED = "paused"

    name = models.CharField(max_length=255, blank=True, default="")
    shop_domain = models.CharField(max_length=255, unique=True)
    access_token = models.TextField()
    api_version = models.CharField(max_length=10, default=default_api_version)
    scopes = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    last_synced_at = models.DateTimeField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ShopManager()

    class Meta:
        db_table = "shopify_sync_shop"

    def __str__(self):
        return f"{self.shop_domain} [{self.status}]"

    def pause(self, message, status=None):
        """Stop scheduled syncs for this shop and keep a diagnostic snapshot."""
        self.status = self.Status.PAUSED
        self.metadata = {
            **(self.metadata or {}),
            "last_error": str(message),
            "last_error_status": str(status or ""),
            "last_error_at": timezone.now().isoformat(),
        }
        self.save(update_fields=["status", "metadata", "updated_at"])

    def mark_synced(self):
        self.last_synced_at = timezone.now()
        self.save(update_fields=["last_synced_at", "updated_at"])


class ShopifyResource(models.Model):
    """Fields shared by every document keyed on (shop, Shopify id)."""

    shop = models.ForeignKey(Shop, on_delete=models.CASCADE)
    shopify_id = models.CharField(max_length=64)
    tags = models.JSONField(default=list, blank=True)
    shopify_created_at = models.DateTimeField(null=True, blank=True)
    shopify_updated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.__class__.__name__} {self.shopify_id} (shop={self.shop_id})"


class Customer(ShopifyResource):
    email = models.TextField(null=True, blank=True)
    phone = models.TextField(null=True, blank=True)
    first_name = models.TextField(null=True, blank=True)
    last_name = models.TextField(null=True, blank=True)
    total_spent = models.FloatField(null=True, blank=True)
    state = models.TextField(null=True, blank=True)
    country = models.TextField(null=True, blank=True)
    marketing_opt_in_level = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "shopify_sync_customer"
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "shopify_id"], name="unique_customer_per_shop"
            ),
        ]


class Order(ShopifyResource):
    """An order plus point-in-time copies of its customer and line items."""

    name = models.TextField(null=True, blank=True)
    email = models.TextField(null=True, blank=True)
    currency = models.TextField(null=True, blank=True)
    total_price = models.FloatField(null=True, blank=True)
    subtotal_price = models.FloatField(null=True, blank=True)
    total_discounts = models.FloatField(null=True, blank=True)
    financial_status = models.TextField(null=True, blank=True)
    fulfillment_status = models.TextField(null=True, blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    customer = models.JSONField(null=True, blank=True)
    line_items = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "shopify_sync_order"
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "shopify_id"], name="unique_order_per_shop"
            ),
        ]
        indexes = [
            models.Index(fields=["shop", "-processed_at"], name="order_shop_processed_idx"),
        ]


class Product(ShopifyResource):
    title = models.TextField(null=True, blank=True)
    status = models.TextField(null=True, blank=True)
    product_type = models.TextField(null=True, blank=True)
    vendor = models.TextField(null=True, blank=True)
    variants = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "shopify_sync_product"
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "shopify_id"], name="unique_product_per_shop"
            ),
        ]


class Event(models.Model):
    """Append-only audit log of every webhook delivery and custom event."""

    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name="events")
    topic = models.CharField(max_length=100)
    payload = models.JSONField(null=True, blank=True)
    webhook_id = models.CharField(max_length=255, null=True, blank=True)
    received_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "shopify_sync_event"
        indexes = [
            models.Index(
                fields=["shop", "topic", "-received_at"], name="event_shop_topic_recv_idx"
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "webhook_id"],
                condition=models.Q(webhook_id__isnull=False),
                name="unique_event_webhook_id",
            ),
        ]

    def __str__(self):
        return f"{self.topic} ({self.webhook_id or 'no id'})"
