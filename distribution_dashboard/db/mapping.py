# distribution_dashboard/db/mapping.py
"""Build typed records from provider rows.

Each mapper checks the row against its field table and raises
ValidationError listing every bad field. Embedded rows (PostgREST joins)
are mapped recursively.
"""
from typing import Any, Callable, Dict, List, Optional, Type

from distribution_dashboard.models import (
    Base, UserRole, Warehouse, Retailer, ProductCategory, Product,
    WarehouseInventory, Order, OrderItem, StockMovement, Payment,
    DemandForecast, UserRoleType, OrderStatus, PaymentMethod, PaymentStatus,
    MovementType, PaymentRecordStatus
)
from distribution_dashboard.exceptions import ValidationError
from distribution_dashboard.utils.date_utils import parse_timestamp, parse_date
from distribution_dashboard.utils.math_utils import is_number


def _text(value):
    if isinstance(value, (dict, list)):
        raise TypeError("expected a scalar")
    return str(value)


def _float(value):
    if isinstance(value, bool):
        raise TypeError("expected a number")
    if is_number(value):
        return float(value)
    # Postgres numeric columns can arrive as strings
    return float(str(value))


def _int(value):
    number = _float(value)
    if number != int(number):
        raise ValueError(f"expected a whole number, got {value}")
    return int(number)


def _non_negative_int(value):
    number = _int(value)
    if number < 0:
        raise ValueError(f"must not be negative, got {value}")
    return number


def _enum(enum_class):
    def convert(value):
        return enum_class(value)
    return convert


def _json(value):
    if not isinstance(value, (dict, list)):
        raise TypeError("expected a JSON object")
    return value


USER_ROLE_FIELDS = {
    'id': (_text, True),
    'email': (_text, True),
    'role': (_enum(UserRoleType), False),
    'full_name': (_text, False),
    'phone': (_text, False),
    'created_at': (parse_timestamp, False),
}

WAREHOUSE_FIELDS = {
    'id': (_text, True),
    'name': (_text, True),
    'location': (_text, False),
    'latitude': (_float, False),
    'longitude': (_float, False),
    'capacity': (_int, False),
    'coverage_radius_km': (_float, False),
    'manager_id': (_text, False),
    'created_at': (parse_timestamp, False),
}

RETAILER_FIELDS = {
    'id': (_text, True),
    'user_id': (_text, False),
    'shop_name': (_text, True),
    'address': (_text, False),
    'latitude': (_float, False),
    'longitude': (_float, False),
    'assigned_warehouse_id': (_text, False),
    'credit_limit': (_float, True),
    'credit_used': (_float, True),
    'credit_score': (_int, False),
    'created_at': (parse_timestamp, False),
}

CATEGORY_FIELDS = {
    'id': (_text, True),
    'name': (_text, True),
    'description': (_text, False),
    'created_at': (parse_timestamp, False),
}

PRODUCT_FIELDS = {
    'id': (_text, True),
    'category_id': (_text, False),
    'name': (_text, True),
    'description': (_text, False),
    'specifications': (_json, False),
    'price': (_float, True),
    'moq': (_int, False),
    'image_url': (_text, False),
    'created_at': (parse_timestamp, False),
}

INVENTORY_FIELDS = {
    'id': (_text, True),
    'warehouse_id': (_text, True),
    'product_id': (_text, True),
    'quantity': (_non_negative_int, True),
    'low_stock_threshold': (_non_negative_int, True),
    'last_updated': (parse_timestamp, False),
}

ORDER_FIELDS = {
    'id': (_text, True),
    'order_number': (_text, True),
    'retailer_id': (_text, False),
    'warehouse_id': (_text, False),
    'status': (_enum(OrderStatus), True),
    'total_amount': (_float, True),
    'payment_method': (_enum(PaymentMethod), False),
    'payment_status': (_enum(PaymentStatus), False),
    'delivery_agent_id': (_text, False),
    'order_date': (parse_timestamp, False),
    'expected_delivery': (parse_timestamp, False),
    'delivered_at': (parse_timestamp, False),
    'created_at': (parse_timestamp, False),
}

ORDER_ITEM_FIELDS = {
    'id': (_text, False),
    'order_id': (_text, False),
    'product_id': (_text, True),
    'quantity': (_non_negative_int, True),
    'unit_price': (_float, True),
    'subtotal': (_float, False),
}

STOCK_MOVEMENT_FIELDS = {
    'id': (_text, True),
    'warehouse_id': (_text, True),
    'product_id': (_text, True),
    'movement_type': (_enum(MovementType), True),
    'quantity': (_int, True),
    'reference_type': (_text, False),
    'reference_id': (_text, False),
    'notes': (_text, False),
    'created_at': (parse_timestamp, False),
}

PAYMENT_FIELDS = {
    'id': (_text, True),
    'retailer_id': (_text, True),
    'order_id': (_text, False),
    'amount': (_float, True),
    'payment_method': (_text, False),
    'transaction_id': (_text, False),
    'status': (_enum(PaymentRecordStatus), False),
    'payment_date': (parse_timestamp, False),
    'created_at': (parse_timestamp, False),
}

DEMAND_FORECAST_FIELDS = {
    'id': (_text, True),
    'product_id': (_text, True),
    'warehouse_id': (_text, True),
    'forecast_date': (parse_date, True),
    'predicted_quantity': (_non_negative_int, True),
    'confidence_level': (_float, False),
    'created_at': (parse_timestamp, False),
}


def _convert_row(entity: str, row: Any, fields: Dict[str, tuple]) -> Dict[str, Any]:
    """Convert a row's fields, collecting every error.

    Returns:
        Dictionary of converted column values

    Raises:
        ValidationError: If the row is not a mapping or any field is missing
            or malformed
    """
    if not isinstance(row, dict):
        raise ValidationError(
            f"{entity} row must be an object, got {type(row).__name__}",
            code='SHAPE_MISMATCH',
            details={'entity': entity}
        )

    values = {}
    errors = {}

    for name, (convert, required) in fields.items():
        raw = row.get(name)
        if raw is None:
            if required:
                errors[name] = 'is required'
            values[name] = None
            continue

        try:
            values[name] = convert(raw)
        except (TypeError, ValueError, OverflowError) as e:
            errors[name] = f"invalid value {raw!r}: {e}"

    if errors:
        raise ValidationError(
            f"Invalid {entity} row {row.get('id')!r}: "
            + '; '.join(f"{name} {message}" for name, message in errors.items()),
            code='SHAPE_MISMATCH',
            details={'entity': entity, 'id': row.get('id'), 'errors': errors}
        )

    return values


def _build(model_class: Type[Base], entity: str, row: Any, fields: Dict[str, tuple]) -> Base:
    return model_class(**_convert_row(entity, row, fields))


def _embedded(row: Dict[str, Any], key: str, mapper: Callable) -> Optional[Base]:
    nested = row.get(key)
    if nested is None:
        return None
    return mapper(nested)


def map_user_role(row: Dict[str, Any]) -> UserRole:
    return _build(UserRole, 'user_role', row, USER_ROLE_FIELDS)


def map_warehouse(row: Dict[str, Any]) -> Warehouse:
    return _build(Warehouse, 'warehouse', row, WAREHOUSE_FIELDS)


def map_category(row: Dict[str, Any]) -> ProductCategory:
    return _build(ProductCategory, 'product_category', row, CATEGORY_FIELDS)


def map_retailer(row: Dict[str, Any]) -> Retailer:
    retailer = _build(Retailer, 'retailer', row, RETAILER_FIELDS)
    retailer.credit_score = retailer.credit_score or 0
    retailer.user = _embedded(row, 'user', map_user_role)
    retailer.warehouse = _embedded(row, 'warehouse', map_warehouse)
    return retailer


def map_product(row: Dict[str, Any]) -> Product:
    product = _build(Product, 'product', row, PRODUCT_FIELDS)
    product.category = _embedded(row, 'category', map_category)
    return product


def map_inventory(row: Dict[str, Any]) -> WarehouseInventory:
    item = _build(WarehouseInventory, 'warehouse_inventory', row, INVENTORY_FIELDS)
    item.product = _embedded(row, 'product', map_product)
    item.warehouse = _embedded(row, 'warehouse', map_warehouse)
    return item


def map_order_item(row: Dict[str, Any]) -> OrderItem:
    item = _build(OrderItem, 'order_item', row, ORDER_ITEM_FIELDS)
    if item.subtotal is None:
        item.subtotal = item.quantity * item.unit_price
    item.product = _embedded(row, 'product', map_product)
    return item


def map_order(row: Dict[str, Any]) -> Order:
    order = _build(Order, 'order', row, ORDER_FIELDS)
    order.retailer = _embedded(row, 'retailer', map_retailer)
    order.warehouse = _embedded(row, 'warehouse', map_warehouse)

    items = row.get('items') or []
    if not isinstance(items, list):
        raise ValidationError(
            f"order row {row.get('id')!r}: items must be a list",
            code='SHAPE_MISMATCH',
            details={'entity': 'order', 'id': row.get('id')}
        )
    order.items = [map_order_item(item) for item in items]
    return order


def map_stock_movement(row: Dict[str, Any]) -> StockMovement:
    movement = _build(StockMovement, 'stock_movement', row, STOCK_MOVEMENT_FIELDS)
    movement.product = _embedded(row, 'product', map_product)
    movement.warehouse = _embedded(row, 'warehouse', map_warehouse)
    return movement


def map_payment(row: Dict[str, Any]) -> Payment:
    return _build(Payment, 'payment', row, PAYMENT_FIELDS)


def map_demand_forecast(row: Dict[str, Any]) -> DemandForecast:
    forecast = _build(DemandForecast, 'demand_forecast', row, DEMAND_FORECAST_FIELDS)
    forecast.product = _embedded(row, 'product', map_product)
    forecast.warehouse = _embedded(row, 'warehouse', map_warehouse)
    return forecast


def map_rows(rows: List[Dict[str, Any]], mapper: Callable) -> List[Base]:
    """Map a list of rows, failing on the first invalid one."""
    if rows is None:
        return []
    return [mapper(row) for row in rows]
