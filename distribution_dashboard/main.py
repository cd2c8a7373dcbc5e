import argparse
import json
import sys

from distribution_dashboard.config import Config, config as default_config
from distribution_dashboard.db import create_interface
from distribution_dashboard.exceptions import DashboardError
from distribution_dashboard.logging_setup import get_logger, log_exception, setup_logging
from distribution_dashboard.services import (
    DataService, CompanyDashboardService, RetailerDashboardService, WarehouseDashboardService,
    RetailerTab, WarehouseTab
)


def build_dashboard(args, data_service, settings):
    """Create the dashboard selected on the command line."""
    if args.command == 'company':
        return CompanyDashboardService(data_service, settings)

    if args.command == 'retailer':
        return RetailerDashboardService(data_service, args.retailer_id, settings)

    if args.command == 'warehouse':
        return WarehouseDashboardService(data_service, args.warehouse_id, settings)

    raise ValueError(f"Unknown dashboard: {args.command}")


def apply_view_state(dashboard, args):
    """Apply tab, filter and search options and return the resulting snapshot."""
    snapshot = dashboard.load()

    if getattr(args, 'tab', None):
        snapshot = dashboard.set_tab(args.tab)

    if args.command == 'retailer':
        if args.category:
            snapshot = dashboard.set_category(args.category)
        if args.search:
            snapshot = dashboard.set_search(args.search)

    if args.command == 'warehouse':
        if args.status:
            snapshot = dashboard.set_order_filter(args.status)
        if args.inventory_filter:
            snapshot = dashboard.set_inventory_filter(args.inventory_filter)
        if args.search:
            snapshot = dashboard.set_search(args.search)

    return snapshot


def show_dashboard(args):
    """Load a dashboard and print its snapshot as JSON.

    Returns:
        Process exit code
    """
    settings = Config(args.config) if args.config else default_config
    setup_logging(settings)
    log = get_logger('dashboard')

    try:
        interface = create_interface(settings, test_connection=args.test_connection)
        dashboard = build_dashboard(args, DataService(interface), settings)
        snapshot = apply_view_state(dashboard, args)
    except DashboardError as e:
        log_exception('dashboard', e, f"{args.command} dashboard failed")
        print(json.dumps(e.to_dict(), indent=2, default=str))
        return 1
    except ValueError as e:
        log.error(str(e))
        print(json.dumps({'error': 'ValueError', 'message': str(e)}, indent=2))
        return 2

    print(json.dumps(snapshot, indent=2, default=str, ensure_ascii=False))
    return 0


def main(argv=None):
    """Main application entry point."""
    parser = argparse.ArgumentParser(description='Distribution Dashboard')

    parser.add_argument('--config', type=str,
                        help='Path to a settings file (defaults to DASHBOARD_CONFIG or config/settings.ini)')
    parser.add_argument('--test-connection', action='store_true',
                        help='Issue a test query before loading')

    subparsers = parser.add_subparsers(dest='command', help='Dashboards')

    subparsers.add_parser('company', help='Company-wide dashboard')

    retailer_parser = subparsers.add_parser('retailer', help='Retailer dashboard')
    retailer_parser.add_argument('--retailer-id', type=str,
                                 help='Retailer to show (defaults to DASHBOARD.retailer_id)')
    retailer_parser.add_argument('--tab', choices=[tab.value for tab in RetailerTab],
                                 help='Tab to show')
    retailer_parser.add_argument('--category', type=str, help='Catalogue category filter')
    retailer_parser.add_argument('--search', type=str, help='Catalogue search text')

    warehouse_parser = subparsers.add_parser('warehouse', help='Warehouse dashboard')
    warehouse_parser.add_argument('--warehouse-id', type=str,
                                  help='Warehouse to show (defaults to DASHBOARD.warehouse_id)')
    warehouse_parser.add_argument('--tab', choices=[tab.value for tab in WarehouseTab],
                                  help='Tab to show')
    warehouse_parser.add_argument('--status', type=str, help="Order status filter ('all' or a status)")
    warehouse_parser.add_argument('--inventory-filter', choices=['all', 'low', 'good'],
                                  help='Inventory status filter')
    warehouse_parser.add_argument('--search', type=str, help='Order and inventory search text')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    return show_dashboard(args)


if __name__ == "__main__":
    sys.exit(main())
