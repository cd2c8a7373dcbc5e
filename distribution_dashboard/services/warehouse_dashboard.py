# distribution_dashboard/services/warehouse_dashboard.py
from datetime import date
from typing import Dict, List, Optional
import enum
import logging

from distribution_dashboard.config import Config
from distribution_dashboard.core import charts, geo, metrics
from distribution_dashboard.core.order_status import next_status, to_status, validate_transition
from distribution_dashboard.exceptions import ConfigError, NotFoundError, OrderError
from distribution_dashboard.services.base_dashboard import BaseDashboardService, order_row
from distribution_dashboard.services.data_service import DataService
from distribution_dashboard.utils.format_utils import format_lakhs

logger = logging.getLogger(__name__)

ALL_ORDERS = 'all'
INVENTORY_FILTERS = ('all', 'low', 'good')
RECENT_ORDERS = 6


class WarehouseTab(enum.Enum):
    OVERVIEW = 'overview'
    ORDERS = 'orders'
    INVENTORY = 'inventory'
    DELIVERY = 'delivery'


class WarehouseDashboardService(BaseDashboardService):
    """Warehouse view: order processing, stock levels and deliveries."""

    name = 'warehouse'
    tabs = WarehouseTab
    default_tab = WarehouseTab.OVERVIEW

    def __init__(
        self,
        data_service: DataService,
        warehouse_id: Optional[str] = None,
        config: Optional[Config] = None,
        today: Optional[date] = None
    ):
        """Initialize the warehouse dashboard.

        Args:
            data_service: Data access service
            warehouse_id: Warehouse to show; DASHBOARD.warehouse_id when omitted
            config: Configuration
            today: Day used for "completed today"; the current date when omitted

        Raises:
            ConfigError: If no warehouse id is given or configured
        """
        super().__init__(data_service, config)
        self.warehouse_id = warehouse_id or self.settings['warehouse_id']
        if not self.warehouse_id:
            raise ConfigError("A warehouse id is required for the warehouse dashboard")

        self.today = today
        self.warehouse = None
        self.retailers = []
        self.orders = []
        self.inventory = []
        self.order_filter = ALL_ORDERS
        self.inventory_filter = 'all'
        self.search = ''

    def _load_context(self) -> Dict:
        return {'warehouse_id': self.warehouse_id}

    def _load(self):
        results = self.fetch_all({
            'warehouse': lambda: self.data.get_warehouse(self.warehouse_id),
            'retailers': self.data.list_retailers,
        })

        warehouse = results['warehouse']
        if warehouse is None:
            raise NotFoundError(
                "No warehouse data found",
                code='WAREHOUSE_NOT_FOUND',
                details={'warehouse_id': self.warehouse_id}
            )

        details = self.fetch_all({
            'orders': lambda: self.data.orders_by_warehouse(warehouse.id),
            'inventory': lambda: self.data.inventory_by_warehouse(warehouse.id),
        })

        self.warehouse = warehouse
        self.retailers = [
            retailer for retailer in results['retailers']
            if retailer.assigned_warehouse_id == warehouse.id
        ]
        self.orders = details['orders']
        self.inventory = details['inventory']

    def _load_summary(self) -> Dict:
        return {
            'retailers': len(self.retailers),
            'orders': len(self.orders),
            'inventory': len(self.inventory),
        }

    # State changes

    def set_order_filter(self, status: str) -> Dict:
        """Show all orders or only those with the given status."""
        self.order_filter = ALL_ORDERS if status == ALL_ORDERS else to_status(status).value
        return self.snapshot()

    def set_inventory_filter(self, status_filter: str) -> Dict:
        if status_filter not in INVENTORY_FILTERS:
            raise ValueError(f"Invalid inventory filter: {status_filter}")
        self.inventory_filter = status_filter
        return self.snapshot()

    def set_search(self, text: str) -> Dict:
        self.search = text or ''
        return self.snapshot()

    def advance_order_status(self, order_id: str, new_status=None) -> Dict:
        """Move an order to a new status.

        The change is checked by the transition guard and acknowledged, not
        persisted. The dashboard is reloaded afterwards; a failed reload is
        reported in the acknowledgement.

        Args:
            order_id: Order to update
            new_status: Target status; the next step in the flow when omitted

        Returns:
            Acknowledgement dictionary

        Raises:
            NotFoundError: If the order is not in this warehouse
            OrderError: If the order has no next status
            StatusTransitionError: If the transition is not allowed
        """
        order = next((order for order in self.orders if order.id == order_id), None)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found", details={'order_id': order_id})

        if new_status is None:
            new_status = next_status(order.status)
            if new_status is None:
                raise OrderError(
                    f"Order {order.order_number} has no next status",
                    code='NO_NEXT_STATUS',
                    details={'order_id': order.id, 'status': order.status.value}
                )

        new_status = validate_transition(order.status, new_status)
        acknowledgement = self.data.update_order_status(order, new_status)
        return self._reload_after(acknowledgement)

    # Snapshot

    def _matches_search(self, order) -> bool:
        if not self.search:
            return True
        needle = self.search.lower()
        shop_name = order.retailer.shop_name if order.retailer is not None else ''
        return needle in (order.order_number or '').lower() or needle in (shop_name or '').lower()

    def filtered_orders(self) -> List:
        orders = self.orders
        if self.order_filter != ALL_ORDERS:
            orders = metrics.filter_orders(orders, [self.order_filter])
        return [order for order in orders if self._matches_search(order)]

    def _build(self) -> Dict:
        builders = {
            WarehouseTab.OVERVIEW: self._overview,
            WarehouseTab.ORDERS: self._order_management,
            WarehouseTab.INVENTORY: self._inventory,
            WarehouseTab.DELIVERY: self._delivery,
        }
        return {
            'warehouse': {
                'id': self.warehouse.id,
                'name': self.warehouse.name,
                'location': self.warehouse.location,
            },
            self.active_tab.value: builders[self.active_tab](),
        }

    def _overview(self) -> Dict:
        today = self.today or date.today()
        return {
            'pending_orders': len(metrics.pending_orders(self.orders)),
            'active_deliveries': len(metrics.active_deliveries(self.orders)),
            'completed_today': len(metrics.completed_on(self.orders, today)),
            'total_stock': metrics.total_stock(self.inventory),
            'recent_orders': [order_row(order) for order in self.orders[:RECENT_ORDERS]],
        }

    def _order_management(self) -> Dict:
        rows = []
        for order in self.filtered_orders():
            row = order_row(order, include_items=True)
            upcoming = next_status(order.status)
            row['next_status'] = upcoming.value if upcoming is not None else None
            rows.append(row)

        return {
            'filter': self.order_filter,
            'search': self.search,
            'status_counts': metrics.count_by_status(self.orders),
            'orders': rows,
        }

    def _inventory(self) -> Dict:
        value = metrics.inventory_value(self.inventory)
        rows = metrics.filter_inventory(self.inventory, self.inventory_filter, self.search)
        return {
            'filter': self.inventory_filter,
            'search': self.search,
            'total_products': len(self.inventory),
            'total_stock': metrics.total_stock(self.inventory),
            'low_stock_count': len(metrics.low_stock_items(self.inventory)),
            'stock_value': value,
            'stock_value_display': format_lakhs(value),
            'items': [
                {
                    'product': item.product.name if item.product is not None else None,
                    'category': metrics.category_name(item),
                    'quantity': item.quantity,
                    'threshold': item.low_stock_threshold,
                    'status': metrics.stock_status(item).value,
                }
                for item in rows
            ],
        }

    def _delivery_row(self, order, speed_kmh: float) -> Dict:
        row = order_row(order)
        retailer = order.retailer or next(
            (retailer for retailer in self.retailers if retailer.id == order.retailer_id), None
        )
        row['delivery'] = geo.delivery_info(self.warehouse, retailer, speed_kmh) if retailer is not None else None
        return row

    def _delivery(self) -> Dict:
        speed_kmh = self.settings['average_speed_kmh']
        return {
            'map_markers': (
                charts.warehouse_markers([self.warehouse], label_attr='name')
                + charts.retailer_markers(self.retailers)
            ),
            'active_deliveries': [
                self._delivery_row(order, speed_kmh)
                for order in metrics.active_deliveries(self.orders)
            ],
            'awaiting_dispatch': [
                self._delivery_row(order, speed_kmh)
                for order in metrics.awaiting_dispatch(self.orders)
            ],
        }

