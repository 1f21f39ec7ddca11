"""
Error Types

Every failure in the catalog and order workflows is raised as one of these
exceptions and travels unchanged up to the HTTP layer, where a single
exception handler renders it as ``{"error": message}`` with ``status_code``.

    ValidationError  -> 400  missing or malformed request data
    NotFoundError    -> 404  referenced restaurant, order or menu item absent
    DependencyError  -> 500  datastore unreachable or operation failed
"""


class OrderingError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to the JSON error payload."""
        return {"error": self.message}


class ValidationError(OrderingError):
    """Missing or malformed request fields."""

    status_code = 400


class NotFoundError(OrderingError):
    """A referenced record does not exist."""

    status_code = 404


class DependencyError(OrderingError):
    """The datastore failed to complete an operation."""

    status_code = 500
