from rest_framework import serializers

from .models import Event, Order, Shop


class ShopSerializer(serializers.ModelSerializer):
    """Shop as exposed over the API. The access token never leaves the server."""

    class Meta:
        model = Shop
        fields = (
            "id",
            "name",
            "shop_domain",
            "api_version",
            "scopes",
            "status",
            "last_synced_at",
            "metadata",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = (
            "id",
            "shopify_id",
            "name",
            "email",
            "currency",
            "total_price",
            "financial_status",
            "fulfillment_status",
            "processed_at",
            "customer",
        )
        read_only_fields = fields


class ShopRegistrationSerializer(serializers.Serializer):
    shop_domain = serializers.CharField()
    access_token = serializers.CharField(trim_whitespace=False)
    name = serializers.CharField(required=False, allow_blank=True, default="")
    api_version = serializers.CharField(required=False, allow_blank=True, default="")
    scopes = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )


class SyncRequestSerializer(serializers.Serializer):
    # Unknown kinds pass through; the sync summary reports them.
    resources = serializers.ListField(
        child=serializers.CharField(), required=False, allow_empty=False
    )


class EventSerializer(serializers.ModelSerializer):
    class Meta:
        model = Event
        fields = ("id", "shop", "topic", "payload", "webhook_id", "received_at")
        read_only_fields = fields


class CustomEventSerializer(serializers.Serializer):
    topic = serializers.CharField(max_length=100)
    payload = serializers.JSONField(required=False, allow_null=True, default=None)
