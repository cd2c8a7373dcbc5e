# distribution_dashboard/core/metrics.py
"""Aggregations over fetched collections.

Every function here is pure: it reads the records it is given and returns
new values without touching them.
"""
import math
from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Union

from distribution_dashboard.models import OrderStatus, PaymentStatus, StockStatus
from distribution_dashboard.core.order_status import OPEN_STATUSES
from distribution_dashboard.utils.date_utils import WEEKDAY_LABELS, is_same_day, parse_date
from distribution_dashboard.utils.math_utils import percentage, sum_values

UNKNOWN_LABEL = 'Unknown'
WELL_STOCKED_MESSAGE = 'All products are well stocked'

MIN_PRODUCTION_QUANTITY = 500
PRODUCTION_THRESHOLD_MULTIPLIER = 3

HIGH_UTILIZATION = 80.0
MEDIUM_UTILIZATION = 60.0

PAYMENT_HISTORY_LIMIT = 10


def _value(enum_or_str):
    return getattr(enum_or_str, 'value', enum_or_str)


# Inventory

def total_stock(inventory: Iterable) -> int:
    """Sum of quantity across inventory records."""
    return sum_values(item.quantity for item in inventory)


def stock_by_warehouse(warehouses: Sequence, inventory: Sequence) -> List[Dict]:
    """Stock per warehouse, labelled by warehouse location.

    One entry per listed warehouse, in list order. Inventory that references
    a warehouse outside the list is grouped under its joined warehouse
    location (or 'Unknown') so the entries always add up to total stock.

    Args:
        warehouses: Warehouse records
        inventory: Inventory records

    Returns:
        List of {'warehouse_id', 'label', 'value'} dictionaries
    """
    listed = OrderedDict((warehouse.id, warehouse) for warehouse in warehouses)
    totals = OrderedDict((warehouse_id, 0) for warehouse_id in listed)
    extra = OrderedDict()

    for item in inventory:
        quantity = item.quantity or 0
        if item.warehouse_id in totals:
            totals[item.warehouse_id] += quantity
        else:
            label = item.warehouse.location if item.warehouse is not None else UNKNOWN_LABEL
            extra[label] = extra.get(label, 0) + quantity

    breakdown = [
        {
            'warehouse_id': warehouse_id,
            'label': listed[warehouse_id].location or listed[warehouse_id].name,
            'value': value
        }
        for warehouse_id, value in totals.items()
    ]
    breakdown.extend(
        {'warehouse_id': None, 'label': label, 'value': value}
        for label, value in extra.items()
    )

    return breakdown


def category_name(item) -> str:
    """Category name of an inventory record's product, or 'Unknown'."""
    product = item.product
    if product is None or product.category is None or not product.category.name:
        return UNKNOWN_LABEL
    return product.category.name


def stock_by_category(inventory: Iterable) -> List[Dict]:
    """Stock per product category, in order of first appearance.

    Returns:
        List of {'label', 'value'} dictionaries
    """
    totals = OrderedDict()
    for item in inventory:
        name = category_name(item)
        totals[name] = totals.get(name, 0) + (item.quantity or 0)

    return [{'label': label, 'value': value} for label, value in totals.items()]


def is_low_stock(item) -> bool:
    """Check whether an inventory record is below its threshold."""
    return (item.quantity or 0) < (item.low_stock_threshold or 0)


def low_stock_items(inventory: Iterable, sort: bool = False) -> List:
    """Inventory records with quantity below the low-stock threshold.

    Args:
        inventory: Inventory records
        sort: Whether to order the result by ascending quantity

    Returns:
        List of inventory records
    """
    items = [item for item in inventory if is_low_stock(item)]
    if sort:
        items.sort(key=lambda item: item.quantity or 0)
    return items


def low_stock_message(low_stock: Sequence) -> Optional[str]:
    """Message shown when no item is low on stock, otherwise None."""
    if not low_stock:
        return WELL_STOCKED_MESSAGE
    return None


def stock_status(item) -> StockStatus:
    """Classify an inventory record.

    quantity < threshold is Low, threshold <= quantity < 2 * threshold is
    Medium, anything else is Good.
    """
    quantity = item.quantity or 0
    threshold = item.low_stock_threshold or 0

    if quantity < threshold:
        return StockStatus.LOW
    if quantity < threshold * 2:
        return StockStatus.MEDIUM
    return StockStatus.GOOD


def filter_inventory(inventory: Iterable, status_filter: str = 'all', search: str = '') -> List:
    """Filter inventory records by stock status and product name.

    Args:
        inventory: Inventory records
        status_filter: 'all', 'low' (below threshold) or 'good' (at least
            twice the threshold)
        search: Case-insensitive substring of the product name

    Returns:
        List of matching inventory records
    """
    if status_filter not in ('all', 'low', 'good'):
        raise ValueError(f"Invalid inventory filter: {status_filter}")

    needle = (search or '').lower()
    result = []

    for item in inventory:
        name = item.product.name if item.product is not None else ''
        if needle and needle not in (name or '').lower():
            continue

        if status_filter == 'low' and not is_low_stock(item):
            continue
        if status_filter == 'good' and stock_status(item) != StockStatus.GOOD:
            continue

        result.append(item)

    return result


def inventory_value(inventory: Iterable) -> float:
    """Stock value: sum of quantity * product price."""
    return sum_values(
        (item.quantity or 0) * ((item.product.price or 0) if item.product is not None else 0)
        for item in inventory
    )


def production_suggestion(threshold: int) -> int:
    """Heuristic restock quantity for a low-stock item."""
    return max(MIN_PRODUCTION_QUANTITY, (threshold or 0) * PRODUCTION_THRESHOLD_MULTIPLIER)


# Orders

def total_amount(
    orders: Iterable,
    status: Union[OrderStatus, str, None] = None,
    payment_status: Union[PaymentStatus, str, None] = None
) -> float:
    """Sum of total_amount over orders, optionally filtered.

    Args:
        orders: Order records
        status: Optional order status filter
        payment_status: Optional payment status filter

    Returns:
        Total amount
    """
    status = _value(status)
    payment_status = _value(payment_status)

    return sum_values(
        order.total_amount
        for order in orders
        if (status is None or _value(order.status) == status)
        and (payment_status is None or _value(order.payment_status) == payment_status)
    )


def filter_orders(orders: Iterable, statuses) -> List:
    """Orders whose status is one of the given statuses."""
    wanted = {_value(status) for status in statuses}
    return [order for order in orders if _value(order.status) in wanted]


def count_by_status(orders: Iterable) -> Dict[str, int]:
    """Number of orders per status, every status present."""
    counts = OrderedDict((status.value, 0) for status in OrderStatus)
    for order in orders:
        key = _value(order.status)
        if key in counts:
            counts[key] += 1
    return counts


def open_orders(orders: Iterable) -> List:
    """Orders not yet delivered or cancelled."""
    return filter_orders(orders, OPEN_STATUSES)


def pending_orders(orders: Iterable) -> List:
    """Orders waiting on the warehouse (pending or processing)."""
    return filter_orders(orders, [OrderStatus.PENDING, OrderStatus.PROCESSING])


def active_deliveries(orders: Iterable) -> List:
    """Orders out for delivery."""
    return filter_orders(orders, [OrderStatus.OUT_FOR_DELIVERY])


def awaiting_dispatch(orders: Iterable) -> List:
    """Orders picked or packed, not yet dispatched."""
    return filter_orders(orders, [OrderStatus.PICKED, OrderStatus.PACKED])


def delivered_orders(orders: Iterable) -> List:
    """Delivered orders."""
    return filter_orders(orders, [OrderStatus.DELIVERED])


def completed_on(orders: Iterable, day: date) -> List:
    """Orders delivered on the given day.

    The delivery timestamp is used when present, otherwise the order date.
    """
    return [
        order for order in delivered_orders(orders)
        if is_same_day(order.delivered_at or order.order_date, day)
    ]


# Payments and credit

def pending_payments(orders: Iterable) -> List:
    """Orders whose payment is pending."""
    return [order for order in orders if _value(order.payment_status) == PaymentStatus.PENDING.value]


def payment_history(orders: Iterable, limit: int = PAYMENT_HISTORY_LIMIT) -> List:
    """Paid orders, newest first."""
    paid = [order for order in orders if _value(order.payment_status) == PaymentStatus.PAID.value]
    paid.sort(key=lambda order: (order.order_date is not None, order.order_date), reverse=True)
    return paid[:limit]


def available_credit(retailer) -> float:
    """Credit limit minus credit used."""
    return (retailer.credit_limit or 0) - (retailer.credit_used or 0)


def credit_utilization(retailer) -> float:
    """Percentage of the credit limit in use.

    Not clamped. A zero credit limit yields 0.0.
    """
    return percentage(retailer.credit_used or 0, retailer.credit_limit or 0)


def utilization_level(utilization: float) -> str:
    """Classify a utilisation percentage: high above 80, medium above 60."""
    if utilization > HIGH_UTILIZATION:
        return 'high'
    if utilization > MEDIUM_UTILIZATION:
        return 'medium'
    return 'low'


def credit_score_label(score: int) -> str:
    """Payment-history message for a credit score."""
    score = score or 0
    if score >= 90:
        return 'Excellent payment history'
    if score >= 75:
        return 'Good payment history'
    return 'Maintain timely payments to improve score'


def credit_score_bars(score: int, bars: int = 5) -> int:
    """Number of filled bars out of ``bars`` for a 0-100 credit score."""
    filled = math.floor((score or 0) / (100 / bars))
    return max(0, min(bars, filled))


# Demand

def weekly_demand(forecasts: Iterable) -> List[Dict]:
    """Predicted quantity per weekday (Mon..Sun), all days present."""
    totals = OrderedDict((label, 0) for label in WEEKDAY_LABELS)
    for forecast in forecasts:
        day = parse_date(forecast.forecast_date)
        if day is None:
            continue
        totals[WEEKDAY_LABELS[day.weekday()]] += forecast.predicted_quantity or 0

    return [{'label': label, 'value': value} for label, value in totals.items()]
