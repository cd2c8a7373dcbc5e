# distribution_dashboard/services/retailer_dashboard.py
from typing import Dict, List, Optional
import enum
import logging

from distribution_dashboard.config import Config
from distribution_dashboard.core import charts, metrics
from distribution_dashboard.core.cart import ShoppingCart
from distribution_dashboard.core.order_status import tracking_steps
from distribution_dashboard.exceptions import ConfigError, CreditLimitError, NotFoundError, OrderError
from distribution_dashboard.models import OrderStatus
from distribution_dashboard.services.base_dashboard import BaseDashboardService, order_row
from distribution_dashboard.services.data_service import DataService
from distribution_dashboard.utils.format_utils import format_thousands

logger = logging.getLogger(__name__)

ALL_CATEGORIES = 'all'


class RetailerTab(enum.Enum):
    OVERVIEW = 'overview'
    CATALOG = 'catalog'
    ORDERS = 'orders'
    CREDIT = 'credit'


class RetailerDashboardService(BaseDashboardService):
    """Retailer view: credit, catalogue with cart, order tracking and payments."""

    name = 'retailer'
    tabs = RetailerTab
    default_tab = RetailerTab.OVERVIEW

    def __init__(
        self,
        data_service: DataService,
        retailer_id: Optional[str] = None,
        config: Optional[Config] = None
    ):
        """Initialize the retailer dashboard.

        Args:
            data_service: Data access service
            retailer_id: Retailer to show; DASHBOARD.retailer_id when omitted
            config: Configuration

        Raises:
            ConfigError: If no retailer id is given or configured
        """
        super().__init__(data_service, config)
        self.retailer_id = retailer_id or self.settings['retailer_id']
        if not self.retailer_id:
            raise ConfigError("A retailer id is required for the retailer dashboard")

        self.retailer = None
        self.products = []
        self.orders = []
        self.search = ''
        self.category = ALL_CATEGORIES
        self.cart = ShoppingCart()

    def _load_context(self) -> Dict:
        return {'retailer_id': self.retailer_id}

    def _load(self):
        results = self.fetch_all({
            'retailer': lambda: self.data.get_retailer(self.retailer_id),
            'products': self.data.list_products,
        })

        retailer = results['retailer']
        if retailer is None:
            raise NotFoundError(
                "No retailer data found",
                code='RETAILER_NOT_FOUND',
                details={'retailer_id': self.retailer_id}
            )

        orders = self.fetch_all({
            'orders': lambda: self.data.orders_by_retailer(retailer.id),
        })['orders']

        self.retailer = retailer
        self.products = results['products']
        self.orders = orders

    def _load_summary(self) -> Dict:
        return {'products': len(self.products), 'orders': len(self.orders)}

    # State changes

    def set_search(self, text: str) -> Dict:
        self.search = text or ''
        return self.snapshot()

    def set_category(self, category: str) -> Dict:
        if category not in self.categories():
            raise ValueError(f"Unknown category: {category}")
        self.category = category
        return self.snapshot()

    def add_to_cart(self, product_id: str, quantity: int = 1) -> Dict:
        if not any(product.id == product_id for product in self.products):
            raise NotFoundError(f"Product {product_id} not found", details={'product_id': product_id})
        self.cart.add(product_id, quantity)
        return self.snapshot()

    def remove_from_cart(self, product_id: str) -> Dict:
        self.cart.remove(product_id)
        return self.snapshot()

    def place_order(self) -> Dict:
        """Check out the cart.

        The order is acknowledged, not persisted. The cart is cleared and the
        dashboard reloaded; a failed reload is reported in the acknowledgement.

        Returns:
            Acknowledgement dictionary

        Raises:
            OrderError: If the cart is empty
            CreditLimitError: If the cart total exceeds the available credit
        """
        if self.cart.is_empty():
            raise OrderError("Cart is empty", code='EMPTY_CART')

        total = self.cart.total(self.products)
        available = metrics.available_credit(self.retailer)
        if total > available:
            raise CreditLimitError(
                details={'total': total, 'available_credit': available}
            )

        acknowledgement = self.data.place_order(self.retailer, self.cart.lines(self.products), total)
        self.cart.clear()
        return self._reload_after(acknowledgement)

    # Snapshot

    def categories(self) -> List[str]:
        """'all' followed by the distinct category names of the catalogue."""
        names = []
        for product in self.products:
            name = product.category.name if product.category is not None else None
            if name and name not in names:
                names.append(name)
        return [ALL_CATEGORIES] + names

    def filtered_products(self) -> List:
        needle = self.search.lower()
        result = []
        for product in self.products:
            if needle not in (product.name or '').lower():
                continue
            if self.category != ALL_CATEGORIES:
                name = product.category.name if product.category is not None else None
                if name != self.category:
                    continue
            result.append(product)
        return result

    def _build(self) -> Dict:
        builders = {
            RetailerTab.OVERVIEW: self._overview,
            RetailerTab.CATALOG: self._catalog,
            RetailerTab.ORDERS: self._order_tracking,
            RetailerTab.CREDIT: self._credit,
        }
        return {
            'retailer': {
                'id': self.retailer.id,
                'shop_name': self.retailer.shop_name,
                'address': self.retailer.address,
            },
            'cart_count': self.cart.count,
            self.active_tab.value: builders[self.active_tab](),
        }

    def _credit_summary(self) -> Dict:
        utilization = metrics.credit_utilization(self.retailer)
        available = metrics.available_credit(self.retailer)
        return {
            'credit_limit': self.retailer.credit_limit,
            'credit_used': self.retailer.credit_used,
            'available_credit': available,
            'available_credit_display': format_thousands(available),
            'utilization': round(utilization, 1),
            'utilization_level': metrics.utilization_level(utilization),
            'credit_score': self.retailer.credit_score,
        }

    def _overview(self) -> Dict:
        total_spent = metrics.total_amount(self.orders)
        overview = self._credit_summary()
        overview.update({
            'credit_score_bars': metrics.credit_score_bars(self.retailer.credit_score, 5),
            'open_orders': len(metrics.open_orders(self.orders)),
            'completed_orders': len(metrics.delivered_orders(self.orders)),
            'total_spent': total_spent,
            'total_spent_display': format_thousands(total_spent),
            'recent_orders': [order_row(order) for order in self.orders[:self.settings['recent_orders']]],
        })
        return overview

    def _catalog(self) -> Dict:
        total = self.cart.total(self.products)
        can_checkout = self.cart.can_checkout(self.products, self.retailer)
        return {
            'search': self.search,
            'category': self.category,
            'categories': self.categories(),
            'products': [
                {
                    'id': product.id,
                    'name': product.name,
                    'category': product.category.name if product.category is not None else None,
                    'price': product.price,
                    'moq': product.moq,
                    'in_cart': self.cart.quantity(product.id),
                }
                for product in self.filtered_products()
            ],
            'cart': {
                'lines': self.cart.lines(self.products),
                'total': total,
                'count': self.cart.count,
                'available_credit': metrics.available_credit(self.retailer),
                'can_checkout': can_checkout and not self.cart.is_empty(),
                'message': None if can_checkout else 'Order total exceeds available credit',
            },
        }

    def _order_tracking(self) -> List[Dict]:
        tracking = []
        for order in self.orders:
            row = order_row(order, include_items=True)
            row['cancelled'] = order.status == OrderStatus.CANCELLED
            row['steps'] = tracking_steps(order.status)

            locations = []
            if order.warehouse is not None:
                locations.extend(charts.warehouse_markers([order.warehouse], label_attr='name'))
            locations.extend(charts.retailer_markers([self.retailer]))
            row['map_markers'] = locations

            tracking.append(row)
        return tracking

    def _credit(self) -> Dict:
        pending = metrics.pending_payments(self.orders)
        credit = self._credit_summary()
        credit.update({
            'credit_score_bars': metrics.credit_score_bars(self.retailer.credit_score, 10),
            'credit_score_label': metrics.credit_score_label(self.retailer.credit_score),
            'pending_payments': [order_row(order) for order in pending],
            'pending_total': metrics.total_amount(pending),
            'payment_history': [order_row(order) for order in metrics.payment_history(self.orders)],
        })
        return credit
