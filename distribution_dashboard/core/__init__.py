from .geo import haversine_distance, estimate_eta_minutes, delivery_info, within_coverage
from .metrics import (
    total_stock, stock_by_warehouse, stock_by_category, low_stock_items,
    stock_status, filter_inventory, inventory_value, production_suggestion,
    total_amount, count_by_status, credit_utilization, utilization_level,
    available_credit, weekly_demand
)
from .charts import bar_chart, donut_chart, line_chart, project_location, map_marker
from .order_status import validate_transition, next_status, tracking_steps, STATUS_FLOW
from .cart import ShoppingCart

__all__ = [
    'haversine_distance',
    'estimate_eta_minutes',
    'delivery_info',
    'within_coverage',
    'total_stock',
    'stock_by_warehouse',
    'stock_by_category',
    'low_stock_items',
    'stock_status',
    'filter_inventory',
    'inventory_value',
    'production_suggestion',
    'total_amount',
    'count_by_status',
    'credit_utilization',
    'utilization_level',
    'available_credit',
    'weekly_demand',
    'bar_chart',
    'donut_chart',
    'line_chart',
    'project_location',
    'map_marker',
    'validate_transition',
    'next_status',
    'tracking_steps',
    'STATUS_FLOW',
    'ShoppingCart'
]
