# distribution_dashboard/logging_setup.py
import logging
import logging.handlers
import traceback
from datetime import datetime
from pathlib import Path

from distribution_dashboard.config import config


class Logger:
    """Logging manager for the Distribution Dashboard."""

    _instance = None
    _loggers = {}

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger from the global config if not already initialized."""
        if self._initialized:
            return

        self.configure(config)
        self._initialized = True

    def configure(self, settings):
        """Apply the LOGGING section of a configuration.

        Loggers handed out earlier keep their identity but get their level
        and file handler replaced.

        Args:
            settings: Config instance to read the LOGGING section from
        """
        self._log_config = settings.log_config
        self._log_dir = Path(self._log_config['directory'])

        if self._log_config['file_output'] and not self._log_dir.exists():
            self._log_dir.mkdir(parents=True)

        self._configure_root_logger()

        names = list(self._loggers) or ['app']
        self._loggers.clear()
        for name in names:
            self.get_logger(name)

        self._app_logger = self.get_logger('app')

    def _level(self):
        level_name = self._log_config['level'].upper()
        return getattr(logging, level_name, logging.INFO)

    def _configure_root_logger(self):
        """Configure the root logger."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self._level())

        # Remove existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        if self._log_config['console_output']:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(self._log_config['format']))
            root_logger.addHandler(console_handler)

    def get_logger(self, name):
        """Get a logger with the specified name.

        Args:
            name: Name of the logger

        Returns:
            Configured logger instance
        """
        if name in self._loggers:
            return self._loggers[name]

        logger = logging.getLogger(name)
        logger.setLevel(self._level())

        # Remove existing handlers to prevent duplicates
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

        if self._log_config['file_output']:
            log_file = self._log_dir / f"{name}.log"
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=self._log_config['max_size_mb'] * 1024 * 1024,
                backupCount=self._log_config['backup_count']
            )
            file_handler.setFormatter(logging.Formatter(self._log_config['format']))
            logger.addHandler(file_handler)

        # Console output goes through the root logger
        logger.propagate = True

        self._loggers[name] = logger
        return logger

    def log_exception(self, logger_name, exception, message=None):
        """Log an exception with stack trace.

        Args:
            logger_name: Logger name
            exception: Exception object
            message: Optional message to include
        """
        logger = self.get_logger(logger_name)

        if message:
            logger.error(f"{message}: {str(exception)}")
        else:
            logger.error(str(exception))

        logger.error(traceback.format_exc())

    @property
    def app_logger(self):
        """Get the application logger."""
        return self._app_logger

    def load_start_log(self, dashboard_name, additional_info=None):
        """Log the start of a dashboard load.

        Args:
            dashboard_name: Name of the dashboard being loaded
            additional_info: Optional additional information

        Returns:
            Dictionary with load logging information
        """
        load_logger = self.get_logger('load')
        start_time = datetime.now()

        log_info = {
            'dashboard_name': dashboard_name,
            'start_time': start_time,
            'additional_info': additional_info
        }

        load_logger.info(f"Loading dashboard: {dashboard_name}")
        if additional_info:
            load_logger.info(f"Load info: {additional_info}")

        return log_info

    def load_end_log(self, log_info, success=True, result_info=None):
        """Log the end of a dashboard load.

        Args:
            log_info: Dictionary returned by load_start_log
            success: Whether the load succeeded
            result_info: Optional result information
        """
        load_logger = self.get_logger('load')
        end_time = datetime.now()

        dashboard_name = log_info.get('dashboard_name', 'Unknown')
        start_time = log_info.get('start_time', end_time)
        duration = end_time - start_time

        if success:
            load_logger.info(f"Loaded dashboard: {dashboard_name}")
        else:
            load_logger.error(f"Failed to load dashboard: {dashboard_name}")

        load_logger.info(f"Load duration: {duration}")

        if result_info:
            load_logger.info(f"Load results: {result_info}")


def _manager():
    return Logger()


def setup_logging(settings):
    """Configure logging from a loaded Config."""
    _manager().configure(settings)


def get_logger(name):
    """Get a logger with the specified name."""
    return _manager().get_logger(name)


def log_exception(logger_name, exception, message=None):
    """Log an exception with stack trace."""
    _manager().log_exception(logger_name, exception, message)


def load_start_log(dashboard_name, additional_info=None):
    """Log the start of a dashboard load."""
    return _manager().load_start_log(dashboard_name, additional_info)


def load_end_log(log_info, success=True, result_info=None):
    """Log the end of a dashboard load."""
    _manager().load_end_log(log_info, success, result_info)
