"""
Order Workflow

Creates orders priced against the catalog and reads them back joined with
the catalog's current display fields.

Creation:
    1. Validate the request (customer, items, delivery platform)
    2. Look up every referenced menu item; any unknown id aborts the order
    3. total_amount = sum(price x quantity), delivery fee is a fixed setting
    4. Write the order and all its line items in one transaction

Retrieval:
    Order + line items (captured prices) + current menu item
    name/description/image.
"""

import logging
import uuid
from typing import Optional, Sequence

from food_ordering.core.errors import NotFoundError, ValidationError
from food_ordering.models import OrderStatus
from food_ordering.schemas import (
    MAX_QUANTITY,
    CustomerInfo,
    OrderDetail,
    OrderItemDetail,
    OrderItemRequest,
)
from food_ordering.stores.base import (
    BaseCatalogStore,
    BaseOrderRepository,
    LineItemRecord,
    MenuItemRecord,
    OrderRecord,
)

logger = logging.getLogger(__name__)


def calculate_total(lines: Sequence[LineItemRecord]) -> float:
    """Sum of the line totals, in cents precision."""
    return round(sum(line.line_total for line in lines), 2)


class OrderService:
    """
    The order workflow over a catalog store and an order repository.

    Attributes:
        catalog: Source of menu item prices and display fields
        orders: Where orders and line items are persisted
        delivery_fee: Fixed fee applied to every order
    """

    def __init__(
        self,
        catalog: BaseCatalogStore,
        orders: BaseOrderRepository,
        delivery_fee: float,
    ):
        self.catalog = catalog
        self.orders = orders
        self.delivery_fee = delivery_fee

    async def create_order(
        self,
        customer: Optional[CustomerInfo],
        items: Optional[Sequence[OrderItemRequest]],
        delivery_platform: Optional[str],
    ) -> OrderRecord:
        """
        Price and persist a new order.

        Args:
            customer: Customer snapshot (name, email, phone, address)
            items: Requested lines, at least one
            delivery_platform: Platform tag, e.g. "UberEats"

        Returns:
            OrderRecord: The stored order (id, total_amount, delivery_fee, status)

        Raises:
            ValidationError: Missing customer, items or platform
            NotFoundError: A requested menu item does not exist
            DependencyError: The store failed; nothing was written
        """
        if customer is None or not items or not delivery_platform:
            raise ValidationError("Missing required fields")
        for item in items:
            if not 1 <= item.quantity <= MAX_QUANTITY:
                raise ValidationError(
                    f"Quantity for {item.menu_item_id} must be between 1 and {MAX_QUANTITY}"
                )

        prices = await self._capture_prices(items)
        order_id = str(uuid.uuid4())
        line_items = [
            LineItemRecord(
                id=str(uuid.uuid4()),
                order_id=order_id,
                menu_item_id=item.menu_item_id,
                quantity=item.quantity,
                price=prices[item.menu_item_id].price,
            )
            for item in items
        ]

        order = OrderRecord(
            id=order_id,
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            customer_address=customer.address,
            total_amount=calculate_total(line_items),
            delivery_fee=self.delivery_fee,
            delivery_platform=delivery_platform,
            status=OrderStatus.PENDING.value,
        )

        async with self.orders.transaction():
            order = await self.orders.add_order(order)
            for line in line_items:
                await self.orders.add_line_item(line)

        logger.info(
            f"Order {order.id} created: {len(items)} item(s), "
            f"total ${order.total_amount:.2f} via {order.delivery_platform}"
        )
        return order

    async def _capture_prices(self, items: Sequence[OrderItemRequest]) -> dict[str, MenuItemRecord]:
        """Look up every requested menu item; fail on the first unknown id."""
        requested = [item.menu_item_id for item in items]
        found = await self.catalog.get_menu_items(requested)

        missing = [item_id for item_id in dict.fromkeys(requested) if item_id not in found]
        if missing:
            logger.warning(f"Order rejected, unknown menu item(s): {missing}")
            raise NotFoundError(f"Menu item not found: {', '.join(missing)}")

        return found

    async def get_order(self, order_id: str) -> OrderDetail:
        """
        Fetch an order with its line items joined to the catalog.

        Raises:
            NotFoundError: No order with this id
        """
        order = await self.orders.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        line_items = await self.orders.list_line_items(order_id)
        menu_items = await self.catalog.get_menu_items(li.menu_item_id for li in line_items)
        logger.debug(f"Order {order_id}: {len(line_items)} line item(s)")

        items = []
        for line in line_items:
            menu_item = menu_items.get(line.menu_item_id)
            items.append(OrderItemDetail(
                **line.to_dict(),
                name=menu_item.name if menu_item else None,
                description=menu_item.description if menu_item else None,
                image_url=menu_item.image_url if menu_item else None,
            ))

        return OrderDetail(**order.to_dict(), items=items)
