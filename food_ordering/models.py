"""
SQLAlchemy Database Models

Catalog tables (restaurants, menu_items) are reference data. Order tables
(orders, order_items) are written once, at order creation.
"""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from food_ordering.database import Base


class OrderStatus(str, enum.Enum):
    """Order status. Orders are created as PENDING; no transitions exist yet."""
    PENDING = "pending"


# =============================================================================
# CATALOG
# =============================================================================

class Restaurant(Base):
    """A restaurant listed on one delivery platform."""
    __tablename__ = "restaurants"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    show_type = Column(String(100), nullable=True, index=True)
    delivery_platform = Column(String(50), nullable=True, index=True)
    rating = Column(Float, nullable=False, default=0.0)
    delivery_time = Column(String(50), nullable=True)
    delivery_fee = Column(Float, nullable=False, default=0.0)
    image_url = Column(String(500), nullable=True)
    address = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)

    def __repr__(self):
        return f"<Restaurant {self.id} - {self.name}>"


class MenuItem(Base):
    """A dish offered by a restaurant."""
    __tablename__ = "menu_items"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(
        String(64),
        ForeignKey("restaurants.id"),
        nullable=False,
        index=True
    )
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    category = Column(String(100), nullable=True)
    image_url = Column(String(500), nullable=True)
    available = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<MenuItem {self.id} - {self.name} ${self.price:.2f}>"


# =============================================================================
# ORDERS
# =============================================================================

class Order(Base):
    """
    A submitted order.

    The customer fields are a snapshot taken at order time, not a reference
    to a customer record.
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)

    # Customer snapshot
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(30), nullable=False)
    customer_address = Column(String(255), nullable=False)

    # Pricing
    total_amount = Column(Float, nullable=False)
    delivery_fee = Column(Float, nullable=False)

    delivery_platform = Column(String(50), nullable=False)
    status = Column(
        Enum(OrderStatus, values_callable=lambda e: [s.value for s in e]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Order {self.id} - {self.customer_name} - {self.status.value}>"


class OrderItem(Base):
    """
    One line of an order.

    ``price`` is the menu item's price captured when the order was placed;
    later catalog price changes never touch it.
    """
    __tablename__ = "order_items"

    # Autoincrement position keeps line items in submission order
    position = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, unique=True)
    order_id = Column(
        String(36),
        ForeignKey("orders.id"),
        nullable=False,
        index=True
    )
    # Not a foreign key: historical lines outlive catalog rows
    menu_item_id = Column(String(64), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    def __repr__(self):
        return f"<OrderItem {self.id} - {self.menu_item_id} x{self.quantity}>"
