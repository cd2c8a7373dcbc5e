# distribution_dashboard/services/base_dashboard.py
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, Optional
import enum
import logging

from distribution_dashboard.config import Config, config as default_config
from distribution_dashboard.exceptions import DashboardError, DataLoadError
from distribution_dashboard.logging_setup import load_start_log, load_end_log, log_exception
from distribution_dashboard.services.data_service import DataService

logger = logging.getLogger(__name__)


def _isoformat(value):
    return value.isoformat() if value is not None else None


def order_row(order, include_items: bool = False) -> Dict:
    """Display dictionary for an order record."""
    row = {
        'id': order.id,
        'order_number': order.order_number,
        'status': order.status.value,
        'status_label': order.status.label,
        'total_amount': order.total_amount,
        'payment_method': order.payment_method.value if order.payment_method else None,
        'payment_status': order.payment_status.value if order.payment_status else None,
        'order_date': _isoformat(order.order_date),
        'delivered_at': _isoformat(order.delivered_at),
        'retailer': order.retailer.shop_name if order.retailer is not None else None,
        'warehouse': order.warehouse.name if order.warehouse is not None else None,
    }

    if include_items:
        row['items'] = [
            {
                'product': item.product.name if item.product is not None else item.product_id,
                'quantity': item.quantity,
                'unit_price': item.unit_price,
                'subtotal': item.subtotal,
            }
            for item in order.items
        ]

    return row


class BaseDashboardService:
    """Shared load and tab handling for the dashboard views.

    Subclasses implement _load() to fill their collections and _build() to
    turn them into a snapshot. State is only replaced once a whole load has
    succeeded.
    """

    name = 'dashboard'
    tabs: Optional[type] = None
    default_tab = None

    def __init__(self, data_service: DataService, config: Optional[Config] = None):
        """Initialize the dashboard.

        Args:
            data_service: Data access service
            config: Configuration; the global configuration when omitted
        """
        self.data = data_service
        self.config = config or default_config
        self.settings = self.config.dashboard_config
        self.active_tab = self.default_tab
        self.loaded = False

    def fetch_all(self, calls: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        """Run reads in parallel and wait for all of them.

        All-or-nothing: the first failure cancels the reads not yet started
        and raises DataLoadError.

        Args:
            calls: Mapping of collection name to a zero-argument read

        Returns:
            Mapping of collection name to result
        """
        if not calls:
            return {}

        workers = max(1, min(len(calls), self.settings['max_workers'] or 1))
        results = {}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(call): name for name, call in calls.items()}
            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                except Exception as e:
                    for pending in futures:
                        pending.cancel()
                    log_exception('load', e, f"Loading {name} for {self.name} failed")
                    raise DataLoadError(
                        details={'dashboard': self.name, 'collection': name, 'cause': str(e)}
                    ) from e

        return results

    def load(self) -> Dict:
        """Load the dashboard data and return a fresh snapshot.

        Raises:
            DataLoadError: If any read fails
            NotFoundError: If the configured retailer or warehouse does not exist
        """
        log_info = load_start_log(self.name, self._load_context())

        try:
            self._load()
        except DashboardError as e:
            self.loaded = False
            load_end_log(log_info, success=False, result_info=e.to_dict())
            raise

        self.loaded = True
        load_end_log(log_info, result_info=self._load_summary())
        return self.snapshot()

    def reload(self) -> Dict:
        return self.load()

    def _reload_after(self, acknowledgement: Dict) -> Dict:
        """Reload after an acknowledged action.

        A failed reload does not lose the acknowledgement: the error is
        attached under 'reload_error' and the dashboard stays unloaded.
        """
        try:
            self.reload()
        except DashboardError as e:
            logger.warning(f"{self.name} dashboard reload failed after acknowledged action: {e.message}")
            acknowledgement = dict(acknowledgement, reload_error=e.to_dict())
        return acknowledgement

    def set_tab(self, tab) -> Dict:
        """Switch the active tab and return the recomputed snapshot."""
        if self.tabs is None:
            raise ValueError(f"{self.name} dashboard has no tabs")

        self.active_tab = self.tabs(getattr(tab, 'value', tab))
        return self.snapshot()

    def snapshot(self) -> Dict:
        """Recompute the snapshot for the current state."""
        if not self.loaded:
            raise DashboardError(f"{self.name} dashboard has not been loaded", code='NOT_LOADED')

        snapshot = {
            'dashboard': self.name,
            'active_tab': self.active_tab.value if isinstance(self.active_tab, enum.Enum) else self.active_tab,
        }
        snapshot.update(self._build())
        return snapshot

    def _load_context(self) -> Optional[Dict]:
        return None

    def _load_summary(self) -> Optional[Dict]:
        return None

    def _load(self):
        raise NotImplementedError

    def _build(self) -> Dict:
        raise NotImplementedError
