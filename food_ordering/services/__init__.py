"""
                        Services Module

Business logic on top of the stores.

Services:
    - ordering: order creation and retrieval
    - catalog: restaurant listing, menus and search
"""

from food_ordering.services.catalog import CatalogService, group_menu_by_category
from food_ordering.services.ordering import OrderService, calculate_total

__all__ = ["CatalogService", "OrderService", "group_menu_by_category", "calculate_total"]
