# distribution_dashboard/db/interface.py
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List

from distribution_dashboard.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseInterface(ABC):
    """Abstract query interface over the data provider."""

    @abstractmethod
    def query(
        self,
        table_name: str,
        columns: str = '*',
        filters: Dict[str, Any] = None,
        gte: Dict[str, Any] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Query rows from a table."""
        pass

    def get_one(
        self,
        table_name: str,
        columns: str = '*',
        filters: Dict[str, Any] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a single row, or None when nothing matches."""
        rows = self.query(table_name, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None


class SupabaseInterface(DatabaseInterface):
    """Supabase (PostgREST) interface implementation."""

    def __init__(self, client):
        """Initialize with Supabase client."""
        self.client = client

    def _execute(self, query, action: str, table_name: str):
        try:
            result = query.execute()
        except Exception as e:
            logger.error("Supabase %s on %s failed: %s", action, table_name, e)
            raise DatabaseError(
                f"Supabase {action} error on {table_name}: {str(e)}",
                details={'table': table_name, 'action': action}
            )

        if getattr(result, 'error', None):
            raise DatabaseError(
                f"Supabase {action} error on {table_name}: {result.error}",
                details={'table': table_name, 'action': action}
            )

        return result

    def query(
        self,
        table_name: str,
        columns: str = '*',
        filters: Dict[str, Any] = None,
        gte: Dict[str, Any] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Query rows from a table using Supabase.

        Args:
            table_name: Table to read
            columns: PostgREST select expression, including embedded joins
            filters: Equality filters; list values become IN filters
            gte: Greater-than-or-equal filters
            order_by: Column to order by
            descending: Whether to order descending
            limit: Maximum number of rows

        Returns:
            List of row dictionaries
        """
        query = self.client.table(table_name).select(columns)

        if filters:
            for key, value in filters.items():
                if isinstance(value, list):
                    query = query.in_(key, value)
                else:
                    query = query.eq(key, value)

        if gte:
            for key, value in gte.items():
                query = query.gte(key, value)

        if order_by:
            query = query.order(order_by, desc=descending)

        if limit:
            query = query.limit(limit)

        result = self._execute(query, 'query', table_name)

        return result.data if result.data else []
