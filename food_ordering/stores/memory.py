"""
In-Memory Store Implementation

Keeps the catalog and orders in plain dictionaries owned by an
``InMemoryDataset``. Used when STORAGE_BACKEND=memory: no database is
needed, data lives as long as the process.

Behavior:
    - Same ordering and filtering rules as the SQL stores
    - Records are copied in and out, so callers never share mutable state
      with the dataset
    - Order transactions journal their inserts and undo them on failure
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import AsyncIterator, Iterable, Optional

from food_ordering.core.errors import DependencyError
from food_ordering.stores.base import (
    BaseCatalogStore,
    BaseOrderRepository,
    LineItemRecord,
    MenuItemRecord,
    OrderRecord,
    RestaurantRecord,
    SearchFilters,
)

logger = logging.getLogger(__name__)


@dataclass
class InMemoryDataset:
    """Tables shared by every in-memory store built on the same dataset."""
    restaurants: dict[str, RestaurantRecord] = field(default_factory=dict)
    menu_items: dict[str, MenuItemRecord] = field(default_factory=dict)
    orders: dict[str, OrderRecord] = field(default_factory=dict)
    # order_id -> line items in insertion order
    line_items: dict[str, list[LineItemRecord]] = field(default_factory=dict)


def _by_rating(restaurants: Iterable[RestaurantRecord]) -> list[RestaurantRecord]:
    return sorted(restaurants, key=lambda r: (-r.rating, r.name))


class InMemoryCatalogStore(BaseCatalogStore):
    """Catalog reads over an InMemoryDataset."""

    def __init__(self, dataset: InMemoryDataset):
        self.dataset = dataset

    async def get_restaurant(self, restaurant_id: str) -> Optional[RestaurantRecord]:
        restaurant = self.dataset.restaurants.get(restaurant_id)
        return replace(restaurant) if restaurant else None

    async def list_restaurants(self) -> list[RestaurantRecord]:
        return [replace(r) for r in _by_rating(self.dataset.restaurants.values())]

    async def list_menu_items(
        self,
        restaurant_id: str,
        available_only: bool = True,
    ) -> list[MenuItemRecord]:
        items = [
            item for item in self.dataset.menu_items.values()
            if item.restaurant_id == restaurant_id
            and (item.available or not available_only)
        ]
        items.sort(key=lambda i: (i.category or "", i.name))
        return [replace(i) for i in items]

    async def get_menu_item(self, menu_item_id: str) -> Optional[MenuItemRecord]:
        item = self.dataset.menu_items.get(menu_item_id)
        return replace(item) if item else None

    async def get_menu_items(self, menu_item_ids: Iterable[str]) -> dict[str, MenuItemRecord]:
        return {
            item_id: replace(self.dataset.menu_items[item_id])
            for item_id in set(menu_item_ids)
            if item_id in self.dataset.menu_items
        }

    async def search_restaurants(self, filters: SearchFilters) -> list[RestaurantRecord]:
        def matches(r: RestaurantRecord) -> bool:
            if filters.q:
                needle = filters.q.lower()
                if needle not in r.name.lower() and needle not in (r.show_type or "").lower():
                    return False
            if filters.show and r.show_type != filters.show:
                return False
            if filters.platform and r.delivery_platform != filters.platform:
                return False
            return True

        return [replace(r) for r in _by_rating(filter(matches, self.dataset.restaurants.values()))]

    async def seed(
        self,
        restaurants: Iterable[RestaurantRecord],
        menu_items: Iterable[MenuItemRecord],
    ) -> int:
        """Insert catalog records whose ids are not present yet; returns the count."""
        inserted = 0
        for record in restaurants:
            if record.id not in self.dataset.restaurants:
                self.dataset.restaurants[record.id] = replace(record)
                inserted += 1
        for record in menu_items:
            if record.id not in self.dataset.menu_items:
                self.dataset.menu_items[record.id] = replace(record)
                inserted += 1
        return inserted


class InMemoryOrderRepository(BaseOrderRepository):
    """Order persistence over an InMemoryDataset."""

    def __init__(self, dataset: InMemoryDataset):
        self.dataset = dataset
        self._journal: Optional[list[tuple[str, str]]] = None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Undo every insert made in the block if the block raises."""
        self._journal = []
        try:
            yield
        except Exception:
            self._undo(self._journal)
            raise
        finally:
            self._journal = None

    def _undo(self, journal: list[tuple[str, str]]) -> None:
        for kind, key in reversed(journal):
            if kind == "order":
                self.dataset.orders.pop(key, None)
                self.dataset.line_items.pop(key, None)
            else:
                order_id, _, item_id = key.partition("/")
                lines = self.dataset.line_items.get(order_id, [])
                self.dataset.line_items[order_id] = [li for li in lines if li.id != item_id]
        logger.debug(f"Rolled back {len(journal)} in-memory writes")

    def _record(self, kind: str, key: str) -> None:
        if self._journal is not None:
            self._journal.append((kind, key))

    async def add_order(self, order: OrderRecord) -> OrderRecord:
        if order.id in self.dataset.orders:
            raise DependencyError(f"Order {order.id} already exists")

        stored = replace(order, created_at=order.created_at or datetime.now(timezone.utc))
        self.dataset.orders[stored.id] = stored
        self.dataset.line_items.setdefault(stored.id, [])
        self._record("order", stored.id)
        return replace(stored)

    async def add_line_item(self, line_item: LineItemRecord) -> LineItemRecord:
        if line_item.order_id not in self.dataset.orders:
            raise DependencyError(f"Order {line_item.order_id} does not exist")

        self.dataset.line_items[line_item.order_id].append(replace(line_item))
        self._record("line_item", f"{line_item.order_id}/{line_item.id}")
        return replace(line_item)

    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        order = self.dataset.orders.get(order_id)
        return replace(order) if order else None

    async def list_line_items(self, order_id: str) -> list[LineItemRecord]:
        return [replace(li) for li in self.dataset.line_items.get(order_id, [])]
