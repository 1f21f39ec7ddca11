"""
Catalog Service

Read-only restaurant and menu queries used by the catalog endpoints.
"""

import logging
from typing import Iterable, Optional

from food_ordering.core.errors import NotFoundError
from food_ordering.stores.base import (
    BaseCatalogStore,
    MenuItemRecord,
    RestaurantRecord,
    SearchFilters,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


def group_menu_by_category(items: Iterable[MenuItemRecord]) -> dict[str, list[MenuItemRecord]]:
    """
    Group menu items by category.

    Categories appear in alphabetical order and each category's items are
    sorted by name, whatever order ``items`` arrives in.
    """
    menu: dict[str, list[MenuItemRecord]] = {}
    for item in sorted(items, key=lambda i: (i.category or UNCATEGORIZED, i.name)):
        menu.setdefault(item.category or UNCATEGORIZED, []).append(item)
    return menu


class CatalogService:
    def __init__(self, catalog: BaseCatalogStore):
        self.catalog = catalog

    async def list_restaurants(self) -> list[RestaurantRecord]:
        restaurants = await self.catalog.list_restaurants()
        logger.debug(f"Fetched {len(restaurants)} restaurants")
        return restaurants

    async def get_restaurant(self, restaurant_id: str) -> RestaurantRecord:
        restaurant = await self.catalog.get_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get_menu(self, restaurant_id: str) -> dict[str, list[MenuItemRecord]]:
        """Available items of a restaurant grouped by category (empty if unknown)."""
        items = await self.catalog.list_menu_items(restaurant_id, available_only=True)
        return group_menu_by_category(items)

    async def search(
        self,
        q: Optional[str] = None,
        show: Optional[str] = None,
        platform: Optional[str] = None,
    ) -> list[RestaurantRecord]:
        filters = SearchFilters(
            q=q.strip() if q else None,
            show=show or None,
            platform=platform or None,
        )
        logger.debug(f"Restaurant search: {filters}")
        return await self.catalog.search_restaurants(filters)
