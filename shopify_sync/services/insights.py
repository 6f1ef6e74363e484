"""Reporting queries over the synced orders, customers, products and events."""

import datetime
from datetime import timedelta

from django.db.models import Avg, Count, F, Max, Sum, Value
from django.db.models.fields.json import KeyTextTransform
from django.db.models.functions import Coalesce, TruncDate
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ..models import Customer, Event, Order, Product

TREND_WINDOW = timedelta(days=7)
DEFAULT_RANGE = timedelta(days=30)
RECENT_ORDER_COUNT = 5
DEFAULT_TOP_CUSTOMERS = 5
MAX_TOP_CUSTOMERS = 20

TREND_METRICS = ("revenue", "orders", "avg_order_value")


def parse_range_bound(value):
    """Parse a ``start``/``end`` query value into an aware UTC datetime.

    Accepts ISO datetimes and plain dates (midnight UTC). Empty input
    returns None.

    Raises:
        ValueError: if the value is neither.
    """
    if not value:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        day = parse_date(value)
        if day is None:
            raise ValueError(f"Invalid date: {value!r}")
        parsed = datetime.datetime.combine(day, datetime.time.min)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, datetime.timezone.utc)
    return parsed


def delta_pct(current, previous):
    """Percentage change rounded to two places; None without a baseline."""
    if not previous:
        return None
    return round(((current or 0) - previous) / previous * 100, 2)


def _order_metrics(shop, start, end):
    return Order.objects.filter(
        shop=shop, processed_at__gte=start, processed_at__lt=end
    ).aggregate(
        revenue=Coalesce(Sum("total_price"), Value(0.0)),
        orders=Count("id"),
        avg_order_value=Coalesce(
            Avg(Coalesce("total_price", Value(0.0))), Value(0.0)
        ),
    )


def order_trend(shop, now=None):
    """Compare the last 7 days of orders against the 7 days before."""
    now = now or timezone.now()
    current = _order_metrics(shop, now - TREND_WINDOW, now)
    previous = _order_metrics(shop, now - 2 * TREND_WINDOW, now - TREND_WINDOW)
    return {
        metric: {
            "current": current[metric],
            "previous": previous[metric],
            "delta_pct": delta_pct(current[metric], previous[metric]),
        }
        for metric in TREND_METRICS
    }


def shop_summary(shop, now=None):
    """Totals, revenue, 7-day trend and the most recent orders for one shop.

    ``recent_orders`` holds Order instances; the caller serializes them.
    """
    orders = Order.objects.filter(shop=shop)
    revenue = orders.aggregate(revenue=Coalesce(Sum("total_price"), Value(0.0)))[
        "revenue"
    ]
    recent = orders.order_by(F("processed_at").desc(nulls_last=True), "-id")[
        :RECENT_ORDER_COUNT
    ]
    return {
        "shop_id": shop.pk,
        "totals": {
            "customers": Customer.objects.filter(shop=shop).count(),
            "orders": orders.count(),
            "products": Product.objects.filter(shop=shop).count(),
            "events": Event.objects.filter(shop=shop).count(),
            "revenue": revenue,
        },
        "trend": order_trend(shop, now),
        "recent_orders": list(recent),
    }


def orders_by_date(shop, start=None, end=None):
    """Daily order count and revenue (UTC days) over ``[start, end]``.

    Defaults to the 30 days ending now.
    """
    end = end or timezone.now()
    start = start or end - DEFAULT_RANGE
    rows = (
        Order.objects.filter(shop=shop, processed_at__gte=start, processed_at__lte=end)
        .annotate(day=TruncDate("processed_at", tzinfo=datetime.timezone.utc))
        .values("day")
        .annotate(
            orders=Count("id"), revenue=Coalesce(Sum("total_price"), Value(0.0))
        )
        .order_by("day")
    )
    return [
        {"date": row["day"].isoformat(), "orders": row["orders"], "revenue": row["revenue"]}
        for row in rows
    ]


def top_customers(shop, limit=DEFAULT_TOP_CUSTOMERS):
    """Customers ranked by spend, grouped by the email on their orders."""
    limit = min(limit, MAX_TOP_CUSTOMERS)
    rows = (
        Order.objects.filter(shop=shop, total_price__gt=0)
        .annotate(customer_email=KeyTextTransform("email", "customer"))
        .filter(customer_email__isnull=False)
        .exclude(customer_email="")
        .values("customer_email")
        .annotate(
            total_spend=Sum("total_price"),
            orders=Count("id"),
            name=Max(KeyTextTransform("first_name", "customer")),
        )
        .order_by("-total_spend", "customer_email")[:limit]
    )
    return [
        {
            "email": row["customer_email"],
            "name": row["name"],
            "total_spend": row["total_spend"],
            "orders": row["orders"],
        }
        for row in rows
    ]
