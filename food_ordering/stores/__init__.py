"""
Store Factory

Provides a single entry point for obtaining the catalog store and order
repository. Selects the SQL or in-memory implementation based on the
STORAGE_BACKEND setting.

Usage:
    from food_ordering.stores import build_stores

    catalog, orders = build_stores(settings, session=session)
    item = await catalog.get_menu_item("item-1")
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from food_ordering.core.config import Settings
from food_ordering.stores.base import (
    BaseCatalogStore,
    BaseOrderRepository,
    LineItemRecord,
    MenuItemRecord,
    OrderRecord,
    RestaurantRecord,
    SearchFilters,
)
from food_ordering.stores.memory import (
    InMemoryCatalogStore,
    InMemoryDataset,
    InMemoryOrderRepository,
)
from food_ordering.stores.sql import SqlCatalogStore, SqlOrderRepository


def build_stores(
    settings: Settings,
    session: Optional[AsyncSession] = None,
    dataset: Optional[InMemoryDataset] = None,
) -> tuple[BaseCatalogStore, BaseOrderRepository]:
    """
    Build the catalog store and order repository for one unit of work.

    Args:
        settings: Application settings (selects the backend)
        session: Database session, required for the SQL backend
        dataset: Shared tables, required for the memory backend

    Returns:
        (catalog store, order repository) sharing the same session/dataset

    Raises:
        ValueError: If the resource the backend needs was not supplied
    """
    if settings.uses_memory_storage:
        if dataset is None:
            raise ValueError("Memory storage requires an InMemoryDataset")
        return InMemoryCatalogStore(dataset), InMemoryOrderRepository(dataset)

    if session is None:
        raise ValueError("SQL storage requires a database session")
    return SqlCatalogStore(session), SqlOrderRepository(session)


__all__ = [
    "build_stores",
    "BaseCatalogStore",
    "BaseOrderRepository",
    "RestaurantRecord",
    "MenuItemRecord",
    "OrderRecord",
    "LineItemRecord",
    "SearchFilters",
    "InMemoryDataset",
    "InMemoryCatalogStore",
    "InMemoryOrderRepository",
    "SqlCatalogStore",
    "SqlOrderRepository",
]
