"""
Sample Catalog Data

Three restaurants and nine menu items used for local development and demos.
Seeding only inserts rows that are missing, so it is safe to run repeatedly
and never overwrites catalog edits.

Run from project root:
    python -m food_ordering.seed
    python -m food_ordering.seed --database-url sqlite+aiosqlite:///./food.db
"""

import argparse
import asyncio
import logging
from typing import Optional

from food_ordering.core.config import Settings, get_settings, setup_logging
from food_ordering.database import Database
from food_ordering.stores.base import BaseCatalogStore, MenuItemRecord, RestaurantRecord
from food_ordering.stores.sql import SqlCatalogStore

logger = logging.getLogger(__name__)


SAMPLE_RESTAURANTS = [
    RestaurantRecord(
        id="rest-1",
        name="Mario's Pizza Palace",
        show_type="Squid Game",
        delivery_platform="UberEats",
        rating=4.5,
        delivery_time="25-35 min",
        delivery_fee=2.99,
        image_url="https://images.unsplash.com/photo-1565299624946-b28f40a0ca4b?w=300",
        address="123 Main St, City, State",
        phone="(555) 123-4567",
    ),
    RestaurantRecord(
        id="rest-2",
        name="Sakura Sushi",
        show_type="Alien",
        delivery_platform="DoorDash",
        rating=4.8,
        delivery_time="30-40 min",
        delivery_fee=3.49,
        image_url="https://images.unsplash.com/photo-1579871494447-9811cf80d66c?w=300",
        address="456 Oak Ave, City, State",
        phone="(555) 234-5678",
    ),
    RestaurantRecord(
        id="rest-3",
        name="Burger Barn",
        show_type="The Matrix",
        delivery_platform="Grubhub",
        rating=4.2,
        delivery_time="20-30 min",
        delivery_fee=1.99,
        image_url="https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=300",
        address="789 Elm St, City, State",
        phone="(555) 345-6789",
    ),
]


def _item(item_id: str, restaurant_id: str, name: str, description: str,
          price: float, category: str, image: str) -> MenuItemRecord:
    return MenuItemRecord(
        id=item_id,
        restaurant_id=restaurant_id,
        name=name,
        description=description,
        price=price,
        category=category,
        image_url=f"https://images.unsplash.com/{image}?w=300",
        available=True,
    )


SAMPLE_MENU_ITEMS = [
    # Mario's Pizza Palace
    _item("item-1", "rest-1", "Margherita Pizza", "Fresh tomatoes, mozzarella, basil",
          16.99, "Pizza", "photo-1604382354936-07c5d9983bd3"),
    _item("item-2", "rest-1", "Pepperoni Pizza", "Classic pepperoni with mozzarella cheese",
          18.99, "Pizza", "photo-1628840042765-356cda07504e"),
    _item("item-3", "rest-1", "Caesar Salad", "Romaine lettuce, parmesan, croutons",
          12.99, "Salad", "photo-1546793665-c74683f339c1"),

    # Sakura Sushi
    _item("item-4", "rest-2", "California Roll", "Crab, avocado, cucumber",
          8.99, "Sushi", "photo-1579584425555-c3ce17fd4351"),
    _item("item-5", "rest-2", "Salmon Teriyaki", "Grilled salmon with teriyaki sauce",
          22.99, "Entree", "photo-1467003909585-2f8a72700288"),
    _item("item-6", "rest-2", "Miso Soup", "Traditional Japanese soup",
          4.99, "Soup", "photo-1606491956689-2ea866880c84"),

    # Burger Barn
    _item("item-7", "rest-3", "Classic Cheeseburger", "Beef patty, cheese, lettuce, tomato",
          13.99, "Burger", "photo-1568901346375-23c9450c58cd"),
    _item("item-8", "rest-3", "BBQ Bacon Burger", "Beef patty, bacon, BBQ sauce, onion rings",
          16.99, "Burger", "photo-1550547660-d9450f859349"),
    _item("item-9", "rest-3", "French Fries", "Crispy golden fries",
          5.99, "Sides", "photo-1576107232684-1279f390859f"),
]


async def seed_catalog(store: BaseCatalogStore) -> int:
    """
    Insert the sample restaurants and menu items that are not present yet.

    Returns:
        Number of rows inserted (0 when everything already exists)
    """
    inserted = await store.seed(SAMPLE_RESTAURANTS, SAMPLE_MENU_ITEMS)
    if inserted:
        logger.info(f"Seeded {inserted} sample catalog rows")
    else:
        logger.debug("Sample catalog already present")
    return inserted


async def seed_database(settings: Settings) -> int:
    """Create the tables if needed and seed the configured database."""
    database = Database(settings)
    try:
        await database.init()
        async with database.session_maker() as session:
            return await seed_catalog(SqlCatalogStore(session))
    finally:
        await database.dispose()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the sample restaurant catalog")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})
    setup_logging(settings)

    inserted = asyncio.run(seed_database(settings))
    print(f"✅ Seeding complete: {inserted} row(s) inserted")


if __name__ == "__main__":
    main()
