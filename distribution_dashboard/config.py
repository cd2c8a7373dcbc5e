# distribution_dashboard/config.py
import os
import configparser
from pathlib import Path

from distribution_dashboard.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path('config') / 'settings.ini'


class Config:
    """Configuration manager for the Distribution Dashboard."""

    def __init__(self, config_path=None):
        """Initialize the configuration.

        Args:
            config_path: Optional path to a settings file. Falls back to the
                DASHBOARD_CONFIG environment variable, then config/settings.ini.
        """
        self._config_path = Path(
            config_path or os.getenv('DASHBOARD_CONFIG') or DEFAULT_CONFIG_PATH
        )
        self._config = configparser.ConfigParser(interpolation=None)

        self._load_defaults()

        # Settings on disk override the built-in defaults
        if self._config_path.exists():
            self._config.read(self._config_path)

    def _load_defaults(self):
        """Populate the built-in default configuration."""
        self._config['SUPABASE'] = {
            'url': '',
            'key': ''
        }

        self._config['LOGGING'] = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'directory': 'logs',
            'max_size_mb': '10',
            'backup_count': '5',
            'console_output': 'True',
            'file_output': 'False'
        }

        self._config['DASHBOARD'] = {
            'retailer_id': '',
            'warehouse_id': '',
            'average_speed_kmh': '30',
            'max_workers': '5',
            'low_stock_preview': '5',
            'recent_orders': '5'
        }

    @property
    def config_path(self):
        """Path of the settings file."""
        return self._config_path

    def save(self):
        """Save configuration to file."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def set(self, section, key, value):
        """Set configuration value in memory. Call save() to persist it."""
        if not self._config.has_section(section):
            self._config.add_section(section)

        self._config.set(section, key, str(value))

    @property
    def supabase_config(self):
        """Get Supabase connection settings.

        Environment variables take precedence over the settings file.

        Raises:
            ConfigError: If the URL or key is missing
        """
        url = os.getenv('SUPABASE_URL') or self.get('SUPABASE', 'url', '')
        key = os.getenv('SUPABASE_KEY') or self.get('SUPABASE', 'key', '')

        if not url or not key:
            raise ConfigError(
                "Supabase URL and key must be provided",
                details={'env': ['SUPABASE_URL', 'SUPABASE_KEY']}
            )

        return {'url': url, 'key': key}

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True),
            'file_output': self.get_boolean('LOGGING', 'file_output', False)
        }

    @property
    def dashboard_config(self):
        """Get dashboard configuration."""
        return {
            'retailer_id': self.get('DASHBOARD', 'retailer_id', '') or None,
            'warehouse_id': self.get('DASHBOARD', 'warehouse_id', '') or None,
            'average_speed_kmh': self.get_float('DASHBOARD', 'average_speed_kmh', 30.0),
            'max_workers': self.get_int('DASHBOARD', 'max_workers', 5),
            'low_stock_preview': self.get_int('DASHBOARD', 'low_stock_preview', 5),
            'recent_orders': self.get_int('DASHBOARD', 'recent_orders', 5)
        }

# Global config instance
config = Config()
