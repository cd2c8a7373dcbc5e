from .data_service import DataService
from .base_dashboard import BaseDashboardService
from .company_dashboard import CompanyDashboardService
from .retailer_dashboard import RetailerDashboardService, RetailerTab
from .warehouse_dashboard import WarehouseDashboardService, WarehouseTab

__all__ = [
    'DataService',
    'BaseDashboardService',
    'CompanyDashboardService',
    'RetailerDashboardService',
    'RetailerTab',
    'WarehouseDashboardService',
    'WarehouseTab'
]
