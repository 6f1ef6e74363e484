from django.urls import path

from .views import (
    ShopEventsView,
    ShopInsightsSummaryView,
    ShopifyWebhookView,
    ShopListView,
    ShopOrdersByDateView,
    ShopRegisterView,
    ShopSyncView,
    ShopTopCustomersView,
)

urlpatterns = [
    path("shops/", ShopListView.as_view(), name="shopify_shop_list"),
    path(
        "shops/register/",
        ShopRegisterView.as_view(),
        name="shopify_shop_register",
    ),
    path(
        "shops/<int:pk>/sync/",
        ShopSyncView.as_view(),
        name="shopify_shop_sync",
    ),
    path(
        "webhooks/shopify/",
        ShopifyWebhookView.as_view(),
        name="shopify_webhook",
    ),
    path(
        "events/<int:shop_id>/",
        ShopEventsView.as_view(),
        name="shopify_shop_events",
    ),
    path(
        "insights/<int:shop_id>/summary/",
        ShopInsightsSummaryView.as_view(),
        name="shopify_shop_insights_summary",
    ),
    path(
        "insights/<int:shop_id>/orders-by-date/",
        ShopOrdersByDateView.as_view(),
        name="shopify_shop_orders_by_date",
    ),
    path(
        "insights/<int:shop_id>/top-customers/",
        ShopTopCustomersView.as_view(),
        name="shopify_shop_top_customers",
    ),
]
