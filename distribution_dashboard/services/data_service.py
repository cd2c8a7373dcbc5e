# distribution_dashboard/services/data_service.py
from datetime import date
from typing import List, Dict, Optional, Any
import logging

from distribution_dashboard.db.interface import DatabaseInterface
from distribution_dashboard.db import mapping
from distribution_dashboard.models import (
    Warehouse, Retailer, Product, ProductCategory, WarehouseInventory,
    Order, OrderStatus, StockMovement, Payment, DemandForecast
)
from distribution_dashboard.core.metrics import low_stock_items

logger = logging.getLogger(__name__)

# PostgREST select expressions with embedded joins
PRODUCT_SELECT = '*, category:product_categories(*)'
INVENTORY_SELECT = (
    '*, product:products(*, category:product_categories(*)), '
    'warehouse:warehouses(*)'
)
RETAILER_SELECT = '*, user:user_roles(*), warehouse:warehouses(*)'
# Stock movements and forecasts embed the same product and warehouse
PRODUCT_WAREHOUSE_SELECT = INVENTORY_SELECT
ORDER_SELECT = (
    '*, retailer:retailers(*, user:user_roles(*)), warehouse:warehouses(*), '
    'items:order_items(*, product:products(*, category:product_categories(*)))'
)

STOCK_MOVEMENT_LIMIT = 100


class DataService:
    """Typed read access to the provider tables.

    Every method issues one query and maps the rows to records. The two
    mutating actions only acknowledge: nothing is written to the provider.
    """

    def __init__(self, interface: DatabaseInterface):
        """Initialize the data service.

        Args:
            interface: Query interface over the data provider
        """
        self.interface = interface

    # Warehouses

    def list_warehouses(self) -> List[Warehouse]:
        rows = self.interface.query('warehouses', order_by='name')
        return mapping.map_rows(rows, mapping.map_warehouse)

    def get_warehouse(self, warehouse_id: str) -> Optional[Warehouse]:
        row = self.interface.get_one('warehouses', filters={'id': warehouse_id})
        return mapping.map_warehouse(row) if row else None

    # Products

    def list_products(self) -> List[Product]:
        rows = self.interface.query('products', columns=PRODUCT_SELECT, order_by='name')
        return mapping.map_rows(rows, mapping.map_product)

    def products_by_category(self, category_id: str) -> List[Product]:
        rows = self.interface.query(
            'products',
            columns=PRODUCT_SELECT,
            filters={'category_id': category_id},
            order_by='name'
        )
        return mapping.map_rows(rows, mapping.map_product)

    def list_categories(self) -> List[ProductCategory]:
        rows = self.interface.query('product_categories', order_by='name')
        return mapping.map_rows(rows, mapping.map_category)

    # Inventory

    def inventory_by_warehouse(self, warehouse_id: str) -> List[WarehouseInventory]:
        rows = self.interface.query(
            'warehouse_inventory',
            columns=INVENTORY_SELECT,
            filters={'warehouse_id': warehouse_id},
            order_by='last_updated',
            descending=True
        )
        return mapping.map_rows(rows, mapping.map_inventory)

    def list_inventory(self) -> List[WarehouseInventory]:
        rows = self.interface.query(
            'warehouse_inventory',
            columns=INVENTORY_SELECT,
            order_by='last_updated',
            descending=True
        )
        return mapping.map_rows(rows, mapping.map_inventory)

    def low_stock_inventory(self) -> List[WarehouseInventory]:
        """Inventory below its threshold, lowest quantity first.

        The provider cannot compare two columns, so the filter runs here.
        """
        rows = self.interface.query(
            'warehouse_inventory',
            columns=INVENTORY_SELECT,
            order_by='quantity'
        )
        return low_stock_items(mapping.map_rows(rows, mapping.map_inventory))

    # Retailers

    def list_retailers(self) -> List[Retailer]:
        rows = self.interface.query('retailers', columns=RETAILER_SELECT, order_by='shop_name')
        return mapping.map_rows(rows, mapping.map_retailer)

    def get_retailer(self, retailer_id: str) -> Optional[Retailer]:
        row = self.interface.get_one('retailers', columns=RETAILER_SELECT, filters={'id': retailer_id})
        return mapping.map_retailer(row) if row else None

    def get_retailer_by_user(self, user_id: str) -> Optional[Retailer]:
        row = self.interface.get_one('retailers', columns=RETAILER_SELECT, filters={'user_id': user_id})
        return mapping.map_retailer(row) if row else None

    # Orders

    def _orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        rows = self.interface.query(
            'orders',
            columns=ORDER_SELECT,
            filters=filters,
            order_by='order_date',
            descending=True
        )
        return mapping.map_rows(rows, mapping.map_order)

    def list_orders(self) -> List[Order]:
        return self._orders()

    def orders_by_retailer(self, retailer_id: str) -> List[Order]:
        return self._orders({'retailer_id': retailer_id})

    def orders_by_warehouse(self, warehouse_id: str) -> List[Order]:
        return self._orders({'warehouse_id': warehouse_id})

    def get_order(self, order_id: str) -> Optional[Order]:
        row = self.interface.get_one('orders', columns=ORDER_SELECT, filters={'id': order_id})
        return mapping.map_order(row) if row else None

    # Stock movements, payments, forecasts

    def stock_movements(self, warehouse_id: Optional[str] = None) -> List[StockMovement]:
        """Most recent stock movements, optionally for one warehouse."""
        rows = self.interface.query(
            'stock_movements',
            columns=PRODUCT_WAREHOUSE_SELECT,
            filters={'warehouse_id': warehouse_id} if warehouse_id else None,
            order_by='created_at',
            descending=True,
            limit=STOCK_MOVEMENT_LIMIT
        )
        return mapping.map_rows(rows, mapping.map_stock_movement)

    def payments_by_retailer(self, retailer_id: str) -> List[Payment]:
        rows = self.interface.query(
            'payments',
            filters={'retailer_id': retailer_id},
            order_by='created_at',
            descending=True
        )
        return mapping.map_rows(rows, mapping.map_payment)

    def upcoming_demand_forecasts(self, today: Optional[date] = None) -> List[DemandForecast]:
        """Demand forecasts from today onward, earliest first."""
        today = today or date.today()
        rows = self.interface.query(
            'demand_forecasts',
            columns=PRODUCT_WAREHOUSE_SELECT,
            gte={'forecast_date': today.isoformat()},
            order_by='forecast_date'
        )
        return mapping.map_rows(rows, mapping.map_demand_forecast)

    # Acknowledgement-only actions

    def place_order(self, retailer: Retailer, lines: List[Dict], total: float) -> Dict:
        """Acknowledge an order without persisting it.

        Args:
            retailer: Ordering retailer
            lines: Cart lines
            total: Order total

        Returns:
            Acknowledgement dictionary
        """
        logger.info(
            "Order acknowledged for retailer %s: %d lines, total %.2f (not persisted)",
            retailer.id, len(lines), total
        )
        return {
            'acknowledged': True,
            'persisted': False,
            'retailer_id': retailer.id,
            'lines': lines,
            'total': total
        }

    def update_order_status(self, order: Order, new_status: OrderStatus) -> Dict:
        """Acknowledge an order status change without persisting it."""
        logger.info(
            "Status change acknowledged for order %s: %s -> %s (not persisted)",
            order.order_number, order.status.value, new_status.value
        )
        return {
            'acknowledged': True,
            'persisted': False,
            'order_id': order.id,
            'order_number': order.order_number,
            'from_status': order.status.value,
            'to_status': new_status.value
        }
