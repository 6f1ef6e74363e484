import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import InvalidAccessToken, InvalidShopDomain, ShopifyAPIError
from .models import Event, Shop
from .serializers import (
    CustomEventSerializer,
    EventSerializer,
    OrderSerializer,
    ShopRegistrationSerializer,
    ShopSerializer,
    SyncRequestSerializer,
)
from .services.events import handle_webhook, record_custom_event
from .services.insights import (
    DEFAULT_TOP_CUSTOMERS,
    orders_by_date,
    parse_range_bound,
    shop_summary,
    top_customers,
)
from .services.resource_sync import sync_shop_resources
from .services.verification import (
    refresh_shop_domain,
    register_shop,
    validate_access_token,
)

logger = logging.getLogger(__name__)

DEFAULT_EVENT_LIMIT = 50
MAX_EVENT_LIMIT = 200


def _shop_not_found():
    return Response(
        {"message": "Shop not found"}, status=status.HTTP_404_NOT_FOUND
    )


class ShopListView(APIView):
    def get(self, request):
        shops = Shop.objects.order_by("-created_at")
        return Response(ShopSerializer(shops, many=True).data)


class ShopRegisterView(APIView):
    """Register a shop, or refresh the record it is already stored under."""

    def post(self, request):
        serializer = ShopRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            shop, created = register_shop(
                data["shop_domain"],
                data["access_token"],
                name=data["name"],
                api_version=data["api_version"] or None,
                scopes=data["scopes"],
            )
        except (InvalidAccessToken, InvalidShopDomain) as exc:
            return Response(
                {"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST
            )
        except ShopifyAPIError as exc:
            return Response(
                {"message": str(exc)},
                status=exc.status or status.HTTP_400_BAD_REQUEST,
            )

        return Response(
            ShopSerializer(shop).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ShopSyncView(APIView):
    """Run an on-demand sync and return the per-resource summary."""

    def post(self, request, pk):
        serializer = SyncRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resources = serializer.validated_data.get("resources")

        try:
            shop = Shop.objects.get(pk=pk)
        except Shop.DoesNotExist:
            return _shop_not_found()

        # 1. Check stored credentials and the domain before calling Shopify
        try:
            validate_access_token(shop.access_token)
            refresh_shop_domain(shop)
        except (InvalidAccessToken, InvalidShopDomain) as exc:
            return Response(
                {"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST
            )
        except ShopifyAPIError as exc:
            return Response(
                {"message": str(exc)},
                status=exc.status or status.HTTP_400_BAD_REQUEST,
            )

        # 2. Pull the requested resources
        try:
            summary = sync_shop_resources(shop, resources)
        except ShopifyAPIError as exc:
            logger.error("On-demand sync failed for %s: %s", shop.shop_domain, exc)
            return Response(
                {"message": "Sync failed", "error": str(exc), "details": exc.detail},
                status=exc.status or status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        shop.mark_synced()
        return Response({"shop_id": shop.pk, "summary": summary})


class ShopifyWebhookView(APIView):
    """Receives Shopify webhook deliveries for any registered shop.

    The shop is resolved from ``X-Shopify-Shop-Domain`` and the topic from
    ``X-Shopify-Topic``. ``X-Shopify-Webhook-Id`` is optional and used to
    acknowledge redeliveries without writing twice.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        topic = request.META.get("HTTP_X_SHOPIFY_TOPIC")
        shop_domain = request.META.get("HTTP_X_SHOPIFY_SHOP_DOMAIN")
        webhook_id = request.META.get("HTTP_X_SHOPIFY_WEBHOOK_ID") or None

        if not topic or not shop_domain:
            return Response(
                {"message": "Missing Shopify topic or shop domain headers"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            shop = Shop.objects.get(shop_domain=shop_domain.strip().lower())
        except Shop.DoesNotExist:
            logger.warning("Webhook for unregistered shop: %s", shop_domain)
            return Response(
                {"message": "Shop not registered", "shop_domain": shop_domain},
                status=status.HTTP_404_NOT_FOUND,
            )

        try:
            result = handle_webhook(shop, topic, request.data, webhook_id=webhook_id)
        except Exception as exc:
            logger.exception(
                "Failed to process webhook (topic=%s, shop=%s)", topic, shop_domain
            )
            return Response(
                {"ok": False, "error": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"ok": True, "result": result}, status=status.HTTP_200_OK)


class ShopEventsView(APIView):
    """List a shop's audit events (newest first) or push a custom one."""

    def get(self, request, shop_id):
        if not Shop.objects.filter(pk=shop_id).exists():
            return _shop_not_found()

        try:
            limit = int(request.query_params.get("limit") or DEFAULT_EVENT_LIMIT)
        except ValueError:
            limit = DEFAULT_EVENT_LIMIT
        if limit < 1:
            limit = DEFAULT_EVENT_LIMIT
        limit = min(limit, MAX_EVENT_LIMIT)

        events = Event.objects.filter(shop_id=shop_id).order_by("-received_at", "-id")[
            :limit
        ]
        return Response(EventSerializer(events, many=True).data)

    def post(self, request, shop_id):
        try:
            shop = Shop.objects.get(pk=shop_id)
        except Shop.DoesNotExist:
            return _shop_not_found()

        serializer = CustomEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = record_custom_event(
            shop,
            serializer.validated_data["topic"],
            serializer.validated_data["payload"],
        )
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class ShopInsightsSummaryView(APIView):
    """Totals, revenue, a 7-day trend and the latest orders for one shop."""

    def get(self, request, shop_id):
        shop = Shop.objects.filter(pk=shop_id).first()
        if shop is None:
            return _shop_not_found()

        summary = shop_summary(shop)
        summary["recent_orders"] = OrderSerializer(
            summary["recent_orders"], many=True
        ).data
        return Response(summary)


class ShopOrdersByDateView(APIView):
    def get(self, request, shop_id):
        shop = Shop.objects.filter(pk=shop_id).first()
        if shop is None:
            return _shop_not_found()

        try:
            start = parse_range_bound(request.query_params.get("start"))
            end = parse_range_bound(request.query_params.get("end"))
        except ValueError as exc:
            return Response({"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(orders_by_date(shop, start, end))


class ShopTopCustomersView(APIView):
    def get(self, request, shop_id):
        shop = Shop.objects.filter(pk=shop_id).first()
        if shop is None:
            return _shop_not_found()

        try:
            limit = int(request.query_params.get("limit") or DEFAULT_TOP_CUSTOMERS)
        except ValueError:
            limit = DEFAULT_TOP_CUSTOMERS
        if limit < 1:
            limit = DEFAULT_TOP_CUSTOMERS

        return Response(top_customers(shop, limit))
