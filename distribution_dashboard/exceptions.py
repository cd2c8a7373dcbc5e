# distribution_dashboard/exceptions.py

class DashboardError(Exception):
    """Base exception for Distribution Dashboard errors."""

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the Distribution Dashboard"
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }

        if self.code:
            error_dict['code'] = self.code

        if self.details:
            error_dict['details'] = self.details

        return error_dict


class ConfigError(DashboardError):
    """Exception raised for configuration errors."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Configuration error"
        super().__init__(message, code, details)


class DatabaseError(DashboardError):
    """Exception raised when a data provider call fails."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Database error"
        super().__init__(message, code, details)


class DataLoadError(DashboardError):
    """Exception raised when a dashboard load batch fails.

    Loads are all-or-nothing: one failed read aborts the whole batch.
    """

    def __init__(self, message=None, code=None, details=None):
        message = message or "Could not load dashboard data"
        super().__init__(message, code, details)


class ValidationError(DashboardError):
    """Exception raised when a provider row does not match its record shape."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Validation error"
        super().__init__(message, code, details)


class NotFoundError(DashboardError):
    """Exception raised when a requested resource is not found."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Resource not found"
        super().__init__(message, code, details)


class OrderError(DashboardError):
    """Exception raised for order-related errors."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Order error"
        super().__init__(message, code, details)


class StatusTransitionError(OrderError):
    """Exception raised for a rejected order status transition."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Invalid order status transition"
        super().__init__(message, code, details)


class CreditLimitError(OrderError):
    """Exception raised when an order exceeds the retailer's available credit."""

    def __init__(self, message=None, code=None, details=None):
        message = message or "Order total exceeds available credit"
        super().__init__(message, code, details)
