# distribution_dashboard/services/company_dashboard.py
from datetime import date
from typing import Dict, Optional
import logging

from distribution_dashboard.config import Config
from distribution_dashboard.core import charts, metrics
from distribution_dashboard.services.base_dashboard import BaseDashboardService
from distribution_dashboard.services.data_service import DataService
from distribution_dashboard.utils.format_utils import format_lakhs

logger = logging.getLogger(__name__)

INVENTORY_PREVIEW = 10


class CompanyDashboardService(BaseDashboardService):
    """Company-wide view: stock, orders, revenue and demand across warehouses."""

    name = 'company'

    def __init__(
        self,
        data_service: DataService,
        config: Optional[Config] = None,
        today: Optional[date] = None
    ):
        super().__init__(data_service, config)
        self.today = today
        self.warehouses = []
        self.inventory = []
        self.orders = []
        self.low_stock = []
        self.forecasts = []

    def _load(self):
        today = self.today or date.today()
        results = self.fetch_all({
            'warehouses': self.data.list_warehouses,
            'inventory': self.data.list_inventory,
            'orders': self.data.list_orders,
            'low_stock': self.data.low_stock_inventory,
            'forecasts': lambda: self.data.upcoming_demand_forecasts(today),
        })

        self.warehouses = results['warehouses']
        self.inventory = results['inventory']
        self.orders = results['orders']
        self.low_stock = results['low_stock']
        self.forecasts = results['forecasts']

    def _load_summary(self) -> Dict:
        return {
            'warehouses': len(self.warehouses),
            'inventory': len(self.inventory),
            'orders': len(self.orders),
            'low_stock': len(self.low_stock),
        }

    def _build(self) -> Dict:
        total_revenue = metrics.total_amount(self.orders)
        stock_by_category = charts.with_category_colors(metrics.stock_by_category(self.inventory))
        preview = self.settings['low_stock_preview']

        return {
            'stats': {
                'total_stock': metrics.total_stock(self.inventory),
                'total_orders': len(self.orders),
                'low_stock_count': len(self.low_stock),
                'total_revenue': total_revenue,
                'total_revenue_display': format_lakhs(total_revenue),
            },
            'stock_by_warehouse': charts.bar_chart(
                metrics.stock_by_warehouse(self.warehouses, self.inventory)
            ),
            'stock_by_category': charts.donut_chart(stock_by_category),
            'weekly_demand': charts.line_chart(metrics.weekly_demand(self.forecasts)),
            'map_markers': charts.warehouse_markers(self.warehouses),
            'low_stock': {
                'message': metrics.low_stock_message(self.low_stock),
                'items': [
                    self._low_stock_row(item)
                    for item in self.low_stock[:preview]
                ],
            },
            'inventory': [
                self._inventory_row(item)
                for item in self.inventory[:INVENTORY_PREVIEW]
            ],
        }

    @staticmethod
    def _low_stock_row(item) -> Dict:
        return {
            'product': item.product.name if item.product is not None else None,
            'warehouse': item.warehouse.location if item.warehouse is not None else None,
            'quantity': item.quantity,
            'threshold': item.low_stock_threshold,
            'production_suggestion': metrics.production_suggestion(item.low_stock_threshold),
        }

    @staticmethod
    def _inventory_row(item) -> Dict:
        return {
            'product': item.product.name if item.product is not None else None,
            'category': metrics.category_name(item),
            'warehouse': item.warehouse.location if item.warehouse is not None else None,
            'quantity': item.quantity,
            'threshold': item.low_stock_threshold,
            'status': metrics.stock_status(item).value,
        }
