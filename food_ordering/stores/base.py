"""
Store Abstract Base Classes

Defines the interface contract for the catalog and order stores.
Both the SQL and in-memory implementations must implement these methods
and exchange the plain records below, so the services never see ORM rows.

Design Pattern: Strategy Pattern
    - SQL stores for real deployments
    - In-memory stores for demos and tests
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Iterable, Optional


# =============================================================================
# RECORDS
# =============================================================================

@dataclass
class RestaurantRecord:
    id: str
    name: str
    show_type: Optional[str] = None
    delivery_platform: Optional[str] = None
    rating: float = 0.0
    delivery_time: Optional[str] = None
    delivery_fee: float = 0.0
    image_url: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class MenuItemRecord:
    id: str
    restaurant_id: str
    name: str
    price: float
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    available: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class OrderRecord:
    """
    A persisted order.

    Attributes:
        id: uuid4 string generated at creation
        customer_*: customer snapshot copied from the request
        total_amount: sum of quantity x captured price over the line items
        delivery_fee: fixed fee applied at creation
        delivery_platform: platform tag supplied by the client
        status: order status value ("pending")
        created_at: set by the store when the order is written
    """
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: str
    total_amount: float
    delivery_fee: float
    delivery_platform: str
    status: str = "pending"
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class LineItemRecord:
    id: str
    order_id: str
    menu_item_id: str
    quantity: int
    price: float

    @property
    def line_total(self) -> float:
        return round(self.quantity * self.price, 2)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class SearchFilters:
    """Restaurant search criteria; unset fields do not filter."""
    q: Optional[str] = None
    show: Optional[str] = None
    platform: Optional[str] = None


# =============================================================================
# INTERFACES
# =============================================================================

class BaseCatalogStore(ABC):
    """
    Read access to restaurants and menu items, plus sample-data seeding.

    The order workflow only ever reads from the catalog.
    """

    @abstractmethod
    async def get_restaurant(self, restaurant_id: str) -> Optional[RestaurantRecord]:
        """Return the restaurant with this id, or None."""
        pass

    @abstractmethod
    async def list_restaurants(self) -> list[RestaurantRecord]:
        """Return all restaurants, highest rating first."""
        pass

    @abstractmethod
    async def list_menu_items(
        self,
        restaurant_id: str,
        available_only: bool = True,
    ) -> list[MenuItemRecord]:
        """
        Return a restaurant's menu items ordered by category, then name.

        Args:
            restaurant_id: Owning restaurant
            available_only: Skip items flagged unavailable
        """
        pass

    @abstractmethod
    async def get_menu_item(self, menu_item_id: str) -> Optional[MenuItemRecord]:
        """Return the menu item with this id, or None."""
        pass

    @abstractmethod
    async def get_menu_items(self, menu_item_ids: Iterable[str]) -> dict[str, MenuItemRecord]:
        """
        Batch lookup of menu items.

        Returns:
            Mapping of id -> item for the ids that exist; missing ids are
            simply absent from the mapping.
        """
        pass

    @abstractmethod
    async def search_restaurants(self, filters: SearchFilters) -> list[RestaurantRecord]:
        """
        Filter restaurants, highest rating first.

        ``q`` matches name or show_type as a case-insensitive substring;
        ``show`` and ``platform`` are exact matches. Filters are ANDed.
        """
        pass

    @abstractmethod
    async def seed(
        self,
        restaurants: Iterable[RestaurantRecord],
        menu_items: Iterable[MenuItemRecord],
    ) -> int:
        """
        Insert catalog records whose ids are not present yet.

        Existing rows are left untouched.

        Returns:
            Number of records inserted
        """
        pass


class BaseOrderRepository(ABC):
    """
    Persistence for orders and their line items.

    Writes made inside ``transaction()`` are applied together or not at all.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """
        Unit of work for a group of writes.

        Example:
            >>> async with repository.transaction():
            ...     await repository.add_order(order)
            ...     await repository.add_line_item(line)
        """
        pass

    @abstractmethod
    async def add_order(self, order: OrderRecord) -> OrderRecord:
        """Insert an order; returns it with store-assigned fields filled in."""
        pass

    @abstractmethod
    async def add_line_item(self, line_item: LineItemRecord) -> LineItemRecord:
        """Insert one line item of an existing order."""
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        """Return the order with this id, or None."""
        pass

    @abstractmethod
    async def list_line_items(self, order_id: str) -> list[LineItemRecord]:
        """Return an order's line items in the order they were added."""
        pass
