# distribution_dashboard/db/__init__.py
from typing import Optional

from .connection import DatabaseConnection
from .interface import DatabaseInterface, SupabaseInterface

from distribution_dashboard.config import Config


def create_interface(config: Optional[Config] = None, test_connection: bool = False) -> SupabaseInterface:
    """Build a Supabase query interface from configuration.

    Args:
        config: Configuration to read the Supabase settings from
        test_connection: Whether to issue a test query first

    Returns:
        SupabaseInterface bound to a new client
    """
    connection = DatabaseConnection(config)
    if test_connection:
        connection.test_connection()
    return SupabaseInterface(connection.get_supabase())


__all__ = [
    'DatabaseConnection',
    'DatabaseInterface',
    'SupabaseInterface',
    'create_interface'
]
