# distribution_dashboard/db/connection.py
import logging
from typing import Optional

from supabase import create_client, Client

from distribution_dashboard.config import Config, config as default_config
from distribution_dashboard.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Supabase connection handler.

    Constructed explicitly and passed to the services that need it; there is
    no module-level connection.
    """

    def __init__(self, config: Optional[Config] = None, client: Optional[Client] = None):
        """Initialize the connection.

        Args:
            config: Configuration to read the Supabase URL and key from
            client: Pre-built Supabase client (skips client creation)
        """
        self._config = config or default_config
        self._supabase = client

    def _initialize_supabase(self):
        """Create the Supabase client."""
        supabase_config = self._config.supabase_config

        try:
            self._supabase = create_client(
                supabase_config['url'],
                supabase_config['key']
            )
        except Exception as e:
            raise DatabaseError(f"Failed to initialize Supabase connection: {str(e)}")

        logger.info("Supabase client created for %s", supabase_config['url'])

    def test_connection(self):
        """Test the connection by reading a single warehouse row.

        Raises:
            DatabaseError: If the test query fails
        """
        try:
            result = self.get_supabase().table('warehouses').select('id').limit(1).execute()
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(f"Supabase connection test failed: {str(e)}")

        if result.data is None and getattr(result, 'error', None):
            raise DatabaseError(f"Supabase test query failed: {result.error}")

        return True

    def get_supabase(self) -> Client:
        """Get the Supabase client, creating it on first use."""
        if self._supabase is None:
            self._initialize_supabase()

        return self._supabase
