"""
API Routes

All endpoints live under /api:
    - GET  /api                          service index
    - GET  /api/health                   liveness
    - GET  /api/restaurants              restaurants, highest rating first
    - GET  /api/restaurants/{id}         one restaurant
    - GET  /api/restaurants/{id}/menu    available items grouped by category
    - POST /api/orders                   place an order
    - GET  /api/orders/{id}              order with its items
    - GET  /api/search                   filter restaurants by q/show/platform

Errors raised by the services are rendered by the handlers in main.py.
"""

import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from food_ordering.core.config import Settings
from food_ordering.schemas import (
    ApiIndexResponse,
    ErrorResponse,
    HealthResponse,
    MenuResponse,
    OrderCreate,
    OrderCreateResponse,
    OrderDetailResponse,
    RestaurantDetailResponse,
    RestaurantListResponse,
)
from food_ordering.services import CatalogService, OrderService
from food_ordering.stores import BaseCatalogStore, BaseOrderRepository, build_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db(request: Request) -> AsyncIterator[Optional[AsyncSession]]:
    """
    Dependency injection for FastAPI routes.
    Yields a request-scoped database session (None with memory storage).
    """
    database = request.app.state.database
    if database is None:
        yield None
        return

    async with database.session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


def get_stores(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    session: Optional[AsyncSession] = Depends(get_db),
) -> tuple[BaseCatalogStore, BaseOrderRepository]:
    return build_stores(settings, session=session, dataset=request.app.state.dataset)


def get_catalog_service(
    stores: tuple[BaseCatalogStore, BaseOrderRepository] = Depends(get_stores),
) -> CatalogService:
    catalog, _ = stores
    return CatalogService(catalog)


def get_order_service(
    stores: tuple[BaseCatalogStore, BaseOrderRepository] = Depends(get_stores),
    settings: Settings = Depends(get_app_settings),
) -> OrderService:
    catalog, orders = stores
    return OrderService(catalog, orders, delivery_fee=settings.delivery_fee)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("", response_model=ApiIndexResponse, tags=["Root"])
async def api_index(settings: Settings = Depends(get_app_settings)) -> ApiIndexResponse:
    """API root with navigation links."""
    return ApiIndexResponse(
        message=settings.app_name,
        version=settings.app_version,
        endpoints={
            "health": "/api/health",
            "restaurants": "/api/restaurants",
            "restaurant": "/api/restaurants/:id",
            "menu": "/api/restaurants/:id/menu",
            "orders": "/api/orders",
            "search": "/api/search",
        },
    )


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="OK", message=f"{settings.app_name} is running")


# =============================================================================
# CATALOG ENDPOINTS
# =============================================================================

@router.get(
    "/restaurants",
    response_model=RestaurantListResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def list_restaurants(
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict:
    """All restaurants, highest rating first."""
    restaurants = await catalog.list_restaurants()
    return {"restaurants": [r.to_dict() for r in restaurants]}


@router.get(
    "/restaurants/{restaurant_id}",
    response_model=RestaurantDetailResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def get_restaurant(
    restaurant_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict:
    restaurant = await catalog.get_restaurant(restaurant_id)
    return {"restaurant": restaurant.to_dict()}


@router.get(
    "/restaurants/{restaurant_id}/menu",
    response_model=MenuResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def get_menu(
    restaurant_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict:
    """Available menu items grouped by category, each group sorted by name."""
    menu = await catalog.get_menu(restaurant_id)
    return {
        "menu": {
            category: [item.to_dict() for item in items]
            for category, items in menu.items()
        }
    }


@router.get(
    "/search",
    response_model=RestaurantListResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["Restaurants"],
)
async def search_restaurants(
    q: Optional[str] = Query(None, description="Text matched against name and show"),
    show: Optional[str] = Query(None, description="Exact show_type"),
    platform: Optional[str] = Query(None, description="Exact delivery platform"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict:
    restaurants = await catalog.search(q=q, show=show, platform=platform)
    return {"restaurants": [r.to_dict() for r in restaurants]}


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@router.post(
    "/orders",
    response_model=OrderCreateResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    order_data: OrderCreate,
    orders: OrderService = Depends(get_order_service),
) -> OrderCreateResponse:
    """
    Price the requested items against the catalog and store the order.

    Every referenced menu item must exist; the order and its items are
    written together or not at all.
    """
    logger.info(f"Creating order for: {order_data.customer.name}")

    order = await orders.create_order(
        customer=order_data.customer,
        items=order_data.items,
        delivery_platform=order_data.delivery_platform,
    )

    return OrderCreateResponse(
        order_id=order.id,
        total_amount=order.total_amount,
        delivery_fee=order.delivery_fee,
        status=order.status,
    )


@router.get(
    "/orders/{order_id}",
    response_model=OrderDetailResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
) -> OrderDetailResponse:
    """Get a specific order with its items."""
    return OrderDetailResponse(order=await orders.get_order(order_id))
