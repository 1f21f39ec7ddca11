"""
SQL Store Implementation

Catalog and order stores backed by SQLAlchemy 2.0 async sessions.
One pair of stores is built per request around that request's session.

SQLAlchemy failures are logged and re-raised as DependencyError so the
HTTP layer can report them uniformly.
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterable, Iterator, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from food_ordering.core.errors import DependencyError
from food_ordering.models import MenuItem, Order, OrderItem, OrderStatus, Restaurant
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


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy errors raised by ``operation`` into DependencyError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database error during {operation}: {e}")
        raise DependencyError(f"Database error during {operation}") from e


# =============================================================================
# ROW CONVERSION
# =============================================================================

def restaurant_to_record(row: Restaurant) -> RestaurantRecord:
    return RestaurantRecord(
        id=row.id,
        name=row.name,
        show_type=row.show_type,
        delivery_platform=row.delivery_platform,
        rating=row.rating,
        delivery_time=row.delivery_time,
        delivery_fee=row.delivery_fee,
        image_url=row.image_url,
        address=row.address,
        phone=row.phone,
    )


def menu_item_to_record(row: MenuItem) -> MenuItemRecord:
    return MenuItemRecord(
        id=row.id,
        restaurant_id=row.restaurant_id,
        name=row.name,
        description=row.description,
        price=row.price,
        category=row.category,
        image_url=row.image_url,
        available=row.available,
    )


def order_to_record(row: Order) -> OrderRecord:
    return OrderRecord(
        id=row.id,
        customer_name=row.customer_name,
        customer_email=row.customer_email,
        customer_phone=row.customer_phone,
        customer_address=row.customer_address,
        total_amount=row.total_amount,
        delivery_fee=row.delivery_fee,
        delivery_platform=row.delivery_platform,
        status=row.status.value,
        created_at=row.created_at,
    )


def line_item_to_record(row: OrderItem) -> LineItemRecord:
    return LineItemRecord(
        id=row.id,
        order_id=row.order_id,
        menu_item_id=row.menu_item_id,
        quantity=row.quantity,
        price=row.price,
    )


# =============================================================================
# CATALOG
# =============================================================================

class SqlCatalogStore(BaseCatalogStore):
    """Catalog reads over the restaurants and menu_items tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_restaurant(self, restaurant_id: str) -> Optional[RestaurantRecord]:
        with store_errors("restaurant lookup"):
            row = await self.session.get(Restaurant, restaurant_id)
        return restaurant_to_record(row) if row else None

    async def list_restaurants(self) -> list[RestaurantRecord]:
        query = select(Restaurant).order_by(Restaurant.rating.desc(), Restaurant.name)
        with store_errors("restaurant listing"):
            result = await self.session.execute(query)
        return [restaurant_to_record(r) for r in result.scalars().all()]

    async def list_menu_items(
        self,
        restaurant_id: str,
        available_only: bool = True,
    ) -> list[MenuItemRecord]:
        query = (
            select(MenuItem)
            .where(MenuItem.restaurant_id == restaurant_id)
            .order_by(MenuItem.category, MenuItem.name)
        )
        if available_only:
            query = query.where(MenuItem.available.is_(True))

        with store_errors("menu listing"):
            result = await self.session.execute(query)
        return [menu_item_to_record(i) for i in result.scalars().all()]

    async def get_menu_item(self, menu_item_id: str) -> Optional[MenuItemRecord]:
        with store_errors("menu item lookup"):
            row = await self.session.get(MenuItem, menu_item_id)
        return menu_item_to_record(row) if row else None

    async def get_menu_items(self, menu_item_ids: Iterable[str]) -> dict[str, MenuItemRecord]:
        ids = set(menu_item_ids)
        if not ids:
            return {}

        with store_errors("menu item lookup"):
            result = await self.session.execute(select(MenuItem).where(MenuItem.id.in_(ids)))
        return {row.id: menu_item_to_record(row) for row in result.scalars().all()}

    async def search_restaurants(self, filters: SearchFilters) -> list[RestaurantRecord]:
        query = select(Restaurant)

        if filters.q:
            query = query.where(or_(
                Restaurant.name.icontains(filters.q, autoescape=True),
                Restaurant.show_type.icontains(filters.q, autoescape=True),
            ))
        if filters.show:
            query = query.where(Restaurant.show_type == filters.show)
        if filters.platform:
            query = query.where(Restaurant.delivery_platform == filters.platform)

        query = query.order_by(Restaurant.rating.desc(), Restaurant.name)

        with store_errors("restaurant search"):
            result = await self.session.execute(query)
        return [restaurant_to_record(r) for r in result.scalars().all()]

    async def seed(
        self,
        restaurants: Iterable[RestaurantRecord],
        menu_items: Iterable[MenuItemRecord],
    ) -> int:
        """
        Insert the given catalog rows whose ids are not present yet.

        Existing rows are never overwritten. Commits once at the end.

        Returns:
            Number of rows inserted
        """
        inserted = 0
        with store_errors("catalog seeding"):
            for record in restaurants:
                if await self.session.get(Restaurant, record.id) is None:
                    self.session.add(Restaurant(**record.to_dict()))
                    inserted += 1
            # Restaurants must exist before their menu items reference them
            await self.session.flush()

            for record in menu_items:
                if await self.session.get(MenuItem, record.id) is None:
                    self.session.add(MenuItem(**record.to_dict()))
                    inserted += 1
            await self.session.commit()
        return inserted


# =============================================================================
# ORDERS
# =============================================================================

class SqlOrderRepository(BaseOrderRepository):
    """Order writes and reads over the orders and order_items tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """
        Commit everything written in the block, or roll all of it back.

        Inserts are flushed as they happen, so constraint violations surface
        inside the block; nothing is visible to other sessions until commit.
        """
        try:
            yield
            with store_errors("order commit"):
                await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def add_order(self, order: OrderRecord) -> OrderRecord:
        row = Order(
            id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            customer_address=order.customer_address,
            total_amount=order.total_amount,
            delivery_fee=order.delivery_fee,
            delivery_platform=order.delivery_platform,
            status=OrderStatus(order.status),
        )
        with store_errors("order insert"):
            self.session.add(row)
            await self.session.flush()
            await self.session.refresh(row, ["created_at"])
        return order_to_record(row)

    async def add_line_item(self, line_item: LineItemRecord) -> LineItemRecord:
        row = OrderItem(
            id=line_item.id,
            order_id=line_item.order_id,
            menu_item_id=line_item.menu_item_id,
            quantity=line_item.quantity,
            price=line_item.price,
        )
        with store_errors("order item insert"):
            self.session.add(row)
            await self.session.flush()
        return line_item_to_record(row)

    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        with store_errors("order lookup"):
            result = await self.session.execute(select(Order).where(Order.id == order_id))
            row = result.scalar_one_or_none()
        return order_to_record(row) if row else None

    async def list_line_items(self, order_id: str) -> list[LineItemRecord]:
        query = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.position)
        )
        with store_errors("order item listing"):
            result = await self.session.execute(query)
        return [line_item_to_record(r) for r in result.scalars().all()]
