from django.contrib import admin

from .models import Customer, Event, Order, Product, Shop


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = (
        "shop_domain",
        "name",
        "status",
        "api_version",
        "last_synced_at",
        "updated_at",
    )
    list_filter = ("status", "api_version")
    search_fields = ("shop_domain", "name")
    readonly_fields = ("metadata", "last_synced_at", "created_at", "updated_at")


class ShopifyResourceAdmin(admin.ModelAdmin):
    list_filter = ("shop",)
    search_fields = ("shopify_id",)
    raw_id_fields = ("shop",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Customer)
class CustomerAdmin(ShopifyResourceAdmin):
    list_display = ("shopify_id", "shop", "email", "total_spent", "updated_at")
    search_fields = ("shopify_id", "email")


@admin.register(Order)
class OrderAdmin(ShopifyResourceAdmin):
    list_display = (
        "shopify_id",
        "shop",
        "name",
        "total_price",
        "financial_status",
        "processed_at",
    )
    list_filter = ("shop", "financial_status", "fulfillment_status")
    search_fields = ("shopify_id", "name", "email")


@admin.register(Product)
class ProductAdmin(ShopifyResourceAdmin):
    list_display = ("shopify_id", "shop", "title", "status", "vendor")
    search_fields = ("shopify_id", "title")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("topic", "shop", "webhook_id", "received_at")
    list_filter = ("topic",)
    search_fields = ("webhook_id", "shop__shop_domain")
    raw_id_fields = ("shop",)
    readonly_fields = ("shop", "topic", "payload", "webhook_id", "received_at")
    date_hierarchy = "received_at"
    ordering = ("-received_at",)
