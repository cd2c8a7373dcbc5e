from .config import config
from .logging_setup import get_logger, setup_logging
from .exceptions import (
    DashboardError, ConfigError, DatabaseError, DataLoadError, ValidationError,
    NotFoundError, OrderError, StatusTransitionError, CreditLimitError
)

__version__ = '0.1.0'

__all__ = [
    'config',
    'get_logger',
    'setup_logging',
    'DashboardError',
    'ConfigError',
    'DatabaseError',
    'DataLoadError',
    'ValidationError',
    'NotFoundError',
    'OrderError',
    'StatusTransitionError',
    'CreditLimitError'
]
