"""
Tests for the company, retailer and warehouse dashboards.
"""
import unittest
from datetime import date, datetime
from unittest.mock import MagicMock

from distribution_dashboard.config import Config
from distribution_dashboard.exceptions import (
    ConfigError, CreditLimitError, DashboardError, DatabaseError, DataLoadError,
    NotFoundError, OrderError, StatusTransitionError
)
from distribution_dashboard.models import OrderStatus, PaymentStatus
from distribution_dashboard.services import (
    DataService, CompanyDashboardService, RetailerDashboardService, WarehouseDashboardService
)
from distribution_dashboard.tests.factories import (
    make_warehouse, make_retailer, make_category, make_product, make_inventory,
    make_order, make_order_item, make_forecast
)


def default_config():
    """Configuration with built-in defaults only."""
    return Config('/nonexistent/distribution_dashboard/settings.ini')


class TestCompanyDashboard(unittest.TestCase):
    def setUp(self):
        """Set up test fixtures."""
        self.kochi = make_warehouse(id='w1', location='Kochi')
        self.trivandrum = make_warehouse(id='w2', name='South Hub', location='Trivandrum',
                                         latitude=8.5, longitude=76.9)
        bulbs = make_category(id='c1', name='LED Bulbs')
        tubes = make_category(id='c2', name='LED Tube Lights')
        bulb = make_product(id='p1', name='9W LED Bulb', category=bulbs)
        tube = make_product(id='p2', name='20W Tube Light', category=tubes)

        self.inventory = [
            make_inventory(id='i1', quantity=600, threshold=100, product=bulb, warehouse=self.kochi),
            make_inventory(id='i2', quantity=50, threshold=100, product=tube, warehouse=self.kochi),
            make_inventory(id='i3', quantity=350, threshold=100, product=bulb, warehouse=self.trivandrum),
        ]

        self.data = MagicMock(spec=DataService)
        self.data.list_warehouses.return_value = [self.kochi, self.trivandrum]
        self.data.list_inventory.return_value = self.inventory
        self.data.list_orders.return_value = [
            make_order(id='o1', total=150000.0),
            make_order(id='o2', total=100000.0, status=OrderStatus.DELIVERED),
        ]
        self.data.low_stock_inventory.return_value = [self.inventory[1]]
        self.data.upcoming_demand_forecasts.return_value = [
            make_forecast('f1', date(2024, 1, 15), 150),
            make_forecast('f2', date(2024, 1, 16), 220),
        ]

        self.dashboard = CompanyDashboardService(self.data, default_config(), today=date(2024, 1, 15))

    def test_snapshot(self):
        """Test company statistics and charts."""
        snapshot = self.dashboard.load()

        self.assertEqual(snapshot['dashboard'], 'company')
        self.assertEqual(snapshot['stats'], {
            'total_stock': 1000,
            'total_orders': 2,
            'low_stock_count': 1,
            'total_revenue': 250000.0,
            'total_revenue_display': '₹2.5L',
        })
        bars = snapshot['stock_by_warehouse']
        self.assertEqual([(bar['label'], bar['value']) for bar in bars], [('Kochi', 650), ('Trivandrum', 350)])
        self.assertEqual(bars[0]['height'], 100.0)
        self.assertAlmostEqual(bars[1]['height'], 350 / 650 * 100)
        self.assertAlmostEqual(sum(s['span'] for s in snapshot['stock_by_category']), 360.0)
        self.assertEqual(len(snapshot['weekly_demand']['points']), 7)
        self.assertEqual(len(snapshot['map_markers']), 2)
        self.data.upcoming_demand_forecasts.assert_called_once_with(date(2024, 1, 15))

    def test_low_stock_section(self):
        """Test low-stock preview and inventory rows."""
        snapshot = self.dashboard.load()

        self.assertIsNone(snapshot['low_stock']['message'])
        self.assertEqual(snapshot['low_stock']['items'][0]['product'], '20W Tube Light')
        self.assertEqual(snapshot['low_stock']['items'][0]['production_suggestion'], 500)
        self.assertEqual([row['status'] for row in snapshot['inventory']], ['Good', 'Low', 'Good'])

    def test_well_stocked(self):
        """Test the message when nothing is low on stock."""
        self.data.low_stock_inventory.return_value = []
        snapshot = self.dashboard.load()

        self.assertEqual(snapshot['low_stock']['message'], 'All products are well stocked')
        self.assertEqual(snapshot['low_stock']['items'], [])

    def test_failed_read_aborts_load(self):
        """Test that one failed read fails the whole load."""
        self.data.list_orders.side_effect = DatabaseError('timeout')

        with self.assertRaises(DataLoadError) as context:
            self.dashboard.load()

        self.assertEqual(context.exception.message, 'Could not load dashboard data')
        self.assertEqual(context.exception.details['collection'], 'orders')
        self.assertFalse(self.dashboard.loaded)

        with self.assertRaises(DashboardError) as context:
            self.dashboard.snapshot()
        self.assertEqual(context.exception.code, 'NOT_LOADED')

    def test_no_tabs(self):
        """Test that the company dashboard has no tabs."""
        self.dashboard.load()
        with self.assertRaises(ValueError):
            self.dashboard.set_tab('overview')


class TestRetailerDashboard(unittest.TestCase):
    def setUp(self):
        """Set up test fixtures."""
        self.warehouse = make_warehouse()
        self.retailer = make_retailer(credit_limit=10000.0, credit_used=8000.0, credit_score=85)
        bulbs = make_category(id='c1', name='LED Bulbs')
        tubes = make_category(id='c2', name='LED Tube Lights')
        self.bulb = make_product(id='A', name='9W LED Bulb', price=100.0, category=bulbs)
        self.tube = make_product(id='B', name='20W Tube Light', price=50.0, category=tubes)

        self.orders = [
            make_order(id=f"o{index}", status=OrderStatus.PENDING, total=500.0,
                       order_date=datetime(2024, 1, 20 - index), retailer=self.retailer,
                       warehouse=self.warehouse)
            for index in range(6)
        ]
        self.orders[1].status = OrderStatus.DELIVERED
        self.orders[1].payment_status = PaymentStatus.PAID
        self.orders[2].status = OrderStatus.CANCELLED
        self.orders[0].items = [make_order_item(self.bulb, 2)]

        self.data = MagicMock(spec=DataService)
        self.data.get_retailer.return_value = self.retailer
        self.data.list_products.return_value = [self.bulb, self.tube]
        self.data.orders_by_retailer.return_value = self.orders
        self.data.place_order.return_value = {'acknowledged': True, 'persisted': False}

        self.dashboard = RetailerDashboardService(self.data, 'r1', default_config())

    def test_requires_retailer_id(self):
        """Test that a retailer id must be given or configured."""
        with self.assertRaises(ConfigError):
            RetailerDashboardService(self.data, None, default_config())

    def test_missing_retailer(self):
        """Test the placeholder error for an unknown retailer."""
        self.data.get_retailer.return_value = None

        with self.assertRaises(NotFoundError) as context:
            self.dashboard.load()

        self.assertEqual(context.exception.message, 'No retailer data found')
        self.data.orders_by_retailer.assert_not_called()

    def test_overview(self):
        """Test overview credit metrics and recent orders."""
        snapshot = self.dashboard.load()
        overview = snapshot['overview']

        self.data.orders_by_retailer.assert_called_once_with('r1')
        self.assertEqual(snapshot['active_tab'], 'overview')
        self.assertEqual(overview['utilization'], 80.0)
        self.assertEqual(overview['utilization_level'], 'medium')
        self.assertEqual(overview['available_credit'], 2000.0)
        self.assertEqual(overview['available_credit_display'], '₹2K')
        self.assertEqual(overview['credit_score_bars'], 4)
        self.assertEqual(overview['open_orders'], 4)
        self.assertEqual(overview['completed_orders'], 1)
        self.assertEqual(overview['total_spent'], 3000.0)
        self.assertEqual(len(overview['recent_orders']), 5)

    def test_catalog_filters(self):
        """Test category and search filtering of the catalogue."""
        self.dashboard.load()
        snapshot = self.dashboard.set_tab('catalog')

        self.assertEqual(snapshot['catalog']['categories'], ['all', 'LED Bulbs', 'LED Tube Lights'])
        self.assertEqual(len(snapshot['catalog']['products']), 2)

        snapshot = self.dashboard.set_category('LED Tube Lights')
        self.assertEqual([p['id'] for p in snapshot['catalog']['products']], ['B'])

        self.dashboard.set_category('all')
        snapshot = self.dashboard.set_search('bulb')
        self.assertEqual([p['id'] for p in snapshot['catalog']['products']], ['A'])

        with self.assertRaises(ValueError):
            self.dashboard.set_category('Chandeliers')

    def test_cart(self):
        """Test cart state in the catalogue snapshot."""
        self.dashboard.load()
        self.dashboard.set_tab('catalog')
        self.dashboard.add_to_cart('A', 2)
        snapshot = self.dashboard.add_to_cart('B')

        cart = snapshot['catalog']['cart']
        self.assertEqual(cart['total'], 250.0)
        self.assertEqual(cart['count'], 3)
        self.assertTrue(cart['can_checkout'])
        self.assertEqual(snapshot['cart_count'], 3)

        snapshot = self.dashboard.remove_from_cart('A')
        self.assertEqual(snapshot['catalog']['cart']['count'], 2)

        with self.assertRaises(NotFoundError):
            self.dashboard.add_to_cart('Z')

    def test_place_order(self):
        """Test checkout acknowledges, clears the cart and reloads."""
        self.dashboard.load()
        self.dashboard.add_to_cart('A', 2)

        acknowledgement = self.dashboard.place_order()

        self.assertFalse(acknowledgement['persisted'])
        retailer, lines, total = self.data.place_order.call_args.args
        self.assertIs(retailer, self.retailer)
        self.assertEqual(total, 200.0)
        self.assertEqual(lines[0]['product_id'], 'A')
        self.assertTrue(self.dashboard.cart.is_empty())
        self.assertEqual(self.data.get_retailer.call_count, 2)

    def test_place_order_reload_failure(self):
        """Test checkout keeps the acknowledgement when the reload fails."""
        self.dashboard.load()
        self.dashboard.add_to_cart('A', 2)
        self.data.list_products.side_effect = RuntimeError('timeout')

        acknowledgement = self.dashboard.place_order()

        self.assertTrue(acknowledgement['acknowledged'])
        self.assertIn('reload_error', acknowledgement)
        self.assertTrue(self.dashboard.cart.is_empty())

    def test_place_order_guards(self):
        """Test empty-cart and credit-limit checks."""
        self.dashboard.load()

        with self.assertRaises(OrderError):
            self.dashboard.place_order()

        self.dashboard.add_to_cart('A', 21)
        with self.assertRaises(CreditLimitError):
            self.dashboard.place_order()

        self.data.place_order.assert_not_called()
        self.assertEqual(self.dashboard.cart.count, 21)

    def test_order_tracking(self):
        """Test tracking steps and items per order."""
        self.dashboard.load()
        tracking = self.dashboard.set_tab('orders')['orders']

        self.assertEqual(len(tracking), 6)
        self.assertEqual(tracking[0]['items'][0]['subtotal'], 200.0)
        self.assertTrue(tracking[0]['steps'][0]['current'])
        self.assertTrue(tracking[2]['cancelled'])
        self.assertEqual(len(tracking[0]['map_markers']), 2)

    def test_credit_tab(self):
        """Test payments and credit score on the credit tab."""
        self.dashboard.load()
        credit = self.dashboard.set_tab('credit')['credit']

        self.assertEqual(credit['credit_score_label'], 'Good payment history')
        self.assertEqual(credit['credit_score_bars'], 8)
        self.assertEqual(len(credit['pending_payments']), 5)
        self.assertEqual(credit['pending_total'], 2500.0)
        self.assertEqual([row['id'] for row in credit['payment_history']], ['o1'])


class TestWarehouseDashboard(unittest.TestCase):
    def setUp(self):
        """Set up test fixtures."""
        self.warehouse = make_warehouse(id='w1', latitude=0.0, longitude=0.0)
        self.near = make_retailer(id='r1', shop_name='Near Shop', latitude=0.0, longitude=1.0)
        self.other = make_retailer(id='r2', shop_name='Other Shop', assigned_warehouse_id='w2')

        bulb = make_product(id='p1', name='9W LED Bulb', price=100.0, category=make_category())
        tube = make_product(id='p2', name='20W Tube Light', price=250.0, category=make_category())

        self.orders = [
            make_order(id='o1', status=OrderStatus.PENDING, retailer=self.near, warehouse=self.warehouse),
            make_order(id='o2', status=OrderStatus.PACKED, retailer=self.near, warehouse=self.warehouse),
            make_order(id='o3', status=OrderStatus.OUT_FOR_DELIVERY, retailer=self.near,
                       warehouse=self.warehouse),
            make_order(id='o4', status=OrderStatus.DELIVERED, retailer=self.near, warehouse=self.warehouse,
                       delivered_at=datetime(2024, 1, 15, 14, 0)),
        ]
        self.inventory = [
            make_inventory(id='i1', quantity=5, threshold=10, product=bulb, warehouse=self.warehouse),
            make_inventory(id='i2', quantity=100, threshold=10, product=tube, warehouse=self.warehouse),
        ]

        self.data = MagicMock(spec=DataService)
        self.data.get_warehouse.return_value = self.warehouse
        self.data.list_retailers.return_value = [self.near, self.other]
        self.data.orders_by_warehouse.return_value = self.orders
        self.data.inventory_by_warehouse.return_value = self.inventory
        self.data.update_order_status.return_value = {'acknowledged': True, 'persisted': False}

        self.dashboard = WarehouseDashboardService(self.data, 'w1', default_config(), today=date(2024, 1, 15))

    def test_missing_warehouse(self):
        """Test the placeholder error for an unknown warehouse."""
        self.data.get_warehouse.return_value = None

        with self.assertRaises(NotFoundError) as context:
            self.dashboard.load()

        self.assertEqual(context.exception.message, 'No warehouse data found')

    def test_overview(self):
        """Test warehouse overview counts."""
        overview = self.dashboard.load()['overview']

        self.assertEqual(overview['pending_orders'], 1)
        self.assertEqual(overview['active_deliveries'], 1)
        self.assertEqual(overview['completed_today'], 1)
        self.assertEqual(overview['total_stock'], 105)
        self.assertEqual([self.dashboard.retailers[0].id], ['r1'])
        self.assertEqual(len(self.dashboard.retailers), 1)

    def test_order_filter(self):
        """Test order status filter, search and next status."""
        self.dashboard.load()
        self.dashboard.set_tab('orders')
        orders = self.dashboard.set_order_filter('packed')['orders']

        self.assertEqual(orders['status_counts']['packed'], 1)
        self.assertEqual([row['id'] for row in orders['orders']], ['o2'])
        self.assertEqual(orders['orders'][0]['next_status'], 'out_for_delivery')

        self.dashboard.set_order_filter('all')
        orders = self.dashboard.set_search('ORD-o4')['orders']
        self.assertEqual([row['id'] for row in orders['orders']], ['o4'])
        self.assertIsNone(orders['orders'][0]['next_status'])

    def test_inventory_tab(self):
        """Test inventory totals and status filter."""
        self.dashboard.load()
        self.dashboard.set_tab('inventory')
        inventory = self.dashboard.set_inventory_filter('low')['inventory']

        self.assertEqual(inventory['total_products'], 2)
        self.assertEqual(inventory['low_stock_count'], 1)
        self.assertEqual(inventory['stock_value'], 25500.0)
        self.assertEqual([row['status'] for row in inventory['items']], ['Low'])

    def test_delivery_tab(self):
        """Test delivery distances and markers."""
        self.dashboard.load()
        delivery = self.dashboard.set_tab('delivery')['delivery']

        self.assertEqual([row['id'] for row in delivery['active_deliveries']], ['o3'])
        self.assertEqual([row['id'] for row in delivery['awaiting_dispatch']], ['o2'])
        self.assertEqual(delivery['active_deliveries'][0]['delivery']['distance_km'], 111.2)
        self.assertEqual(delivery['active_deliveries'][0]['delivery']['estimated_minutes'], 223)
        self.assertEqual(len(delivery['map_markers']), 2)

    def test_delivery_tab_with_nan_coordinate(self):
        """Test that a NaN warehouse coordinate leaves distance and ETA empty."""
        self.warehouse.latitude = float('nan')
        self.dashboard.load()
        delivery = self.dashboard.set_tab('delivery')['delivery']

        info = delivery['active_deliveries'][0]['delivery']
        self.assertIsNone(info['distance_km'])
        self.assertIsNone(info['estimated_minutes'])

    def test_advance_order_status(self):
        """Test advancing an order to its next status."""
        self.dashboard.load()
        acknowledgement = self.dashboard.advance_order_status('o2')

        self.assertTrue(acknowledgement['acknowledged'])
        self.data.update_order_status.assert_called_once_with(self.orders[1], OrderStatus.OUT_FOR_DELIVERY)
        self.assertEqual(self.data.get_warehouse.call_count, 2)

    def test_advance_order_status_rejected(self):
        """Test rejected transitions are not acknowledged."""
        self.dashboard.load()

        with self.assertRaises(StatusTransitionError):
            self.dashboard.advance_order_status('o2', 'processing')

        with self.assertRaises(OrderError):
            self.dashboard.advance_order_status('o4')

        with self.assertRaises(NotFoundError):
            self.dashboard.advance_order_status('o99')

        self.data.update_order_status.assert_not_called()

    def test_advance_order_status_reload_failure(self):
        """Test the acknowledgement survives a failed reload."""
        self.dashboard.load()
        self.data.orders_by_warehouse.side_effect = RuntimeError('timeout')

        acknowledgement = self.dashboard.advance_order_status('o2')

        self.assertTrue(acknowledgement['acknowledged'])
        self.assertEqual(acknowledgement['reload_error']['error'], 'DataLoadError')
        self.assertFalse(self.dashboard.loaded)

    def test_cancel_order(self):
        """Test cancelling an open order."""
        self.dashboard.load()
        self.dashboard.advance_order_status('o1', OrderStatus.CANCELLED)

        self.data.update_order_status.assert_called_once_with(self.orders[0], OrderStatus.CANCELLED)


if __name__ == '__main__':
    unittest.main()
