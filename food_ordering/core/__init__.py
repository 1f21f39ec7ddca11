"""
Core module initialization.
Exports configuration, logging utilities and error types.
"""

from food_ordering.core.config import (
    EnvironmentMode,
    Settings,
    StorageBackend,
    get_settings,
    setup_logging,
)
from food_ordering.core.errors import (
    DependencyError,
    NotFoundError,
    OrderingError,
    ValidationError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "StorageBackend",
    "OrderingError",
    "ValidationError",
    "NotFoundError",
    "DependencyError",
]
