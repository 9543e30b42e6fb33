"""Custom exception hierarchy."""


class AppError(Exception):
    """Base exception for application errors."""

    error_type = "app_error"

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class NotFoundError(AppError):
    """Raised when a requested record does not exist."""

    error_type = "not_found"


class DriverNotFoundError(NotFoundError):
    """Raised when no driver matches the requested identifier."""

    def __init__(self, driver_id: str):
        super().__init__(f"Driver {driver_id} not found")
        self.driver_id = driver_id


class ValidationError(AppError):
    """Raised when input validation fails."""

    error_type = "validation_error"


class DatabaseError(AppError):
    """Raised when a database operation fails."""

    error_type = "storage_error"


class AggregationError(DatabaseError):
    """Raised when a driver profile aggregation query fails."""

    def __init__(self, original_error: Exception = None):
        super().__init__("Failed to aggregate driver profiles", original_error)
