# Generated manually for shopify_sync app

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import shopify_sync.models


def _resource_fields():
    return [
        (
            "id",
            models.AutoField(
                auto_created=True,
                primary_key=True,
                serialize=False,
                verbose_name="ID",
            ),
        ),
        ("shopify_id", models.CharField(max_length=64)),
        ("tags", models.JSONField(blank=True, default=list)),
        ("shopify_created_at", models.DateTimeField(blank=True, null=True)),
        ("shopify_updated_at", models.DateTimeField(blank=True, null=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "shop",
            models.ForeignKey(
                on_delete=django.db.models.deletion.CASCADE,
                to="shopify_sync.shop",
            ),
        ),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Shop",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("shop_domain", models.CharField(max_length=255, unique=True)),
                ("access_token", models.TextField()),
                (
                    "api_version",
                    models.CharField(
                        default=shopify_sync.models.default_api_version,
                        max_length=10,
                    ),
                ),
                ("scopes", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("paused", "Paused")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("last_synced_at", models.DateTimeField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "shopify_sync_shop",
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=_resource_fields()
            + [
                ("email", models.TextField(blank=True, null=True)),
                ("phone", models.TextField(blank=True, null=True)),
                ("first_name", models.TextField(blank=True, null=True)),
                ("last_name", models.TextField(blank=True, null=True)),
                ("total_spent", models.FloatField(blank=True, null=True)),
                ("state", models.TextField(blank=True, null=True)),
                ("country", models.TextField(blank=True, null=True)),
                (
                    "marketing_opt_in_level",
                    models.TextField(blank=True, null=True),
                ),
            ],
            options={
                "db_table": "shopify_sync_customer",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("shop", "shopify_id"),
                        name="unique_customer_per_shop",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=_resource_fields()
            + [
                ("name", models.TextField(blank=True, null=True)),
                ("email", models.TextField(blank=True, null=True)),
                ("currency", models.TextField(blank=True, null=True)),
                ("total_price", models.FloatField(blank=True, null=True)),
                ("subtotal_price", models.FloatField(blank=True, null=True)),
                ("total_discounts", models.FloatField(blank=True, null=True)),
                (
                    "financial_status",
                    models.TextField(blank=True, null=True),
                ),
                (
                    "fulfillment_status",
                    models.TextField(blank=True, null=True),
                ),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("customer", models.JSONField(blank=True, null=True)),
                ("line_items", models.JSONField(blank=True, default=list)),
            ],
            options={
                "db_table": "shopify_sync_order",
                "indexes": [
                    models.Index(
                        fields=["shop", "-processed_at"],
                        name="order_shop_processed_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("shop", "shopify_id"),
                        name="unique_order_per_shop",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=_resource_fields()
            + [
                ("title", models.TextField(blank=True, null=True)),
                ("status", models.TextField(blank=True, null=True)),
                (
                    "product_type",
                    models.TextField(blank=True, null=True),
                ),
                ("vendor", models.TextField(blank=True, null=True)),
                ("variants", models.JSONField(blank=True, default=list)),
            ],
            options={
                "db_table": "shopify_sync_product",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("shop", "shopify_id"),
                        name="unique_product_per_shop",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("topic", models.CharField(max_length=100)),
                ("payload", models.JSONField(blank=True, null=True)),
                (
                    "webhook_id",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "received_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "shop",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to="shopify_sync.shop",
                    ),
                ),
            ],
            options={
                "db_table": "shopify_sync_event",
                "indexes": [
                    models.Index(
                        fields=["shop", "topic", "-received_at"],
                        name="event_shop_topic_recv_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(webhook_id__isnull=False),
                        fields=("shop", "webhook_id"),
                        name="unique_event_webhook_id",
                    ),
                ],
            },
        ),
    ]
