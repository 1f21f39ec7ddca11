"""
Pydantic Schemas for Request/Response Validation

Request bodies are validated here before they reach the services;
response models describe the JSON each endpoint returns.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Largest quantity accepted on a single order line
MAX_QUANTITY = 1000


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CustomerInfo(BaseModel):
    """Customer snapshot copied onto the order."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Jane Doe"])
    email: str = Field(..., min_length=1, max_length=255, examples=["jane@example.com"])
    phone: str = Field(..., min_length=1, max_length=30, examples=["(555) 123-4567"])
    address: str = Field(..., min_length=1, max_length=255, examples=["350 Fifth Avenue"])

    @field_validator("name", "phone", "address")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not re.match(r'^[\w\.\+-]+@[\w\.-]+\.\w+$', v):
            raise ValueError("Invalid email format")
        return v


class OrderItemRequest(BaseModel):
    """One requested line: which menu item and how many."""
    menu_item_id: str = Field(..., min_length=1, max_length=64, examples=["item-1"])
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY, examples=[2])


class OrderCreate(BaseModel):
    """Request schema for creating a new order."""
    customer: CustomerInfo
    items: List[OrderItemRequest] = Field(..., min_length=1)
    delivery_platform: str = Field(..., min_length=1, max_length=50, examples=["UberEats"])

    @field_validator("delivery_platform")
    @classmethod
    def validate_platform(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank")
        return v


# =============================================================================
# CATALOG RESPONSE SCHEMAS
# =============================================================================

class RestaurantResponse(BaseModel):
    """A restaurant as returned by the catalog endpoints."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    show_type: Optional[str]
    delivery_platform: Optional[str]
    rating: float
    delivery_time: Optional[str]
    delivery_fee: float
    image_url: Optional[str]
    address: Optional[str]
    phone: Optional[str]


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: str
    name: str
    description: Optional[str]
    price: float
    category: Optional[str]
    image_url: Optional[str]
    available: bool


class RestaurantListResponse(BaseModel):
    restaurants: List[RestaurantResponse]


class RestaurantDetailResponse(BaseModel):
    restaurant: RestaurantResponse


class MenuResponse(BaseModel):
    """Available menu items keyed by category, each list sorted by name."""
    menu: dict[str, List[MenuItemResponse]]


# =============================================================================
# ORDER RESPONSE SCHEMAS
# =============================================================================

class OrderCreateResponse(BaseModel):
    """Response after successfully creating an order."""
    order_id: str
    total_amount: float
    delivery_fee: float
    status: str
    message: str = "Order created successfully"


class OrderItemDetail(BaseModel):
    """
    A line item joined with its menu item.

    ``price`` is the captured unit price; ``name``, ``description`` and
    ``image_url`` reflect the catalog as it is now, and are null when the
    menu item no longer exists.
    """
    id: str
    order_id: str
    menu_item_id: str
    quantity: int
    price: float
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class OrderDetail(BaseModel):
    """An order together with its resolved line items."""
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: str
    total_amount: float
    delivery_fee: float
    delivery_platform: str
    status: str
    created_at: Optional[datetime]
    items: List[OrderItemDetail]


class OrderDetailResponse(BaseModel):
    order: OrderDetail


# =============================================================================
# MISC
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    message: str


class ApiIndexResponse(BaseModel):
    """Service name, version and the available endpoints."""
    message: str
    version: str
    endpoints: dict[str, str]
