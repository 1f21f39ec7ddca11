import asyncio
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, func, select, update

from food_ordering.core.config import Settings
from food_ordering.database import Database
from food_ordering.main import create_app
from food_ordering.models import MenuItem, Order, OrderItem
from food_ordering.seed import seed_catalog
from food_ordering.stores import (
    InMemoryCatalogStore,
    InMemoryDataset,
    InMemoryOrderRepository,
    SqlCatalogStore,
    SqlOrderRepository,
)

BACKENDS = ["sql", "memory"]


def make_settings(tmp_path, backend: str = "sql", **overrides) -> Settings:
    values = {
        "env_mode": "testing",
        "storage_backend": backend,
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "seed_sample_data": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def run(coro):
    """Drive a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


# =============================================================================
# STORE HARNESSES
# =============================================================================

class SqlHarness:
    """Seeded SQLite database with one open session."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def __aenter__(self):
        self.database = Database(self.settings)
        await self.database.init()
        self.session = self.database.session_maker()
        await seed_catalog(SqlCatalogStore(self.session))
        return self

    async def __aexit__(self, *exc_info):
        await self.session.close()
        await self.database.dispose()

    def stores(self):
        return SqlCatalogStore(self.session), SqlOrderRepository(self.session)

    async def set_price(self, menu_item_id: str, price: float) -> None:
        await self.session.execute(
            update(MenuItem).where(MenuItem.id == menu_item_id).values(price=price)
        )
        await self.session.commit()

    async def rename_item(self, menu_item_id: str, name: str) -> None:
        await self.session.execute(
            update(MenuItem).where(MenuItem.id == menu_item_id).values(name=name)
        )
        await self.session.commit()

    async def set_available(self, menu_item_id: str, available: bool) -> None:
        await self.session.execute(
            update(MenuItem).where(MenuItem.id == menu_item_id).values(available=available)
        )
        await self.session.commit()

    async def delete_menu_item(self, menu_item_id: str) -> None:
        await self.session.execute(delete(MenuItem).where(MenuItem.id == menu_item_id))
        await self.session.commit()

    async def count_orders(self) -> int:
        return (await self.session.execute(select(func.count(Order.id)))).scalar()

    async def count_line_items(self) -> int:
        return (await self.session.execute(select(func.count(OrderItem.id)))).scalar()


class MemoryHarness:
    """Seeded InMemoryDataset."""

    async def __aenter__(self):
        self.dataset = InMemoryDataset()
        await seed_catalog(InMemoryCatalogStore(self.dataset))
        return self

    async def __aexit__(self, *exc_info):
        pass

    def stores(self):
        return InMemoryCatalogStore(self.dataset), InMemoryOrderRepository(self.dataset)

    def _update(self, menu_item_id: str, **changes) -> None:
        item = self.dataset.menu_items[menu_item_id]
        self.dataset.menu_items[menu_item_id] = replace(item, **changes)

    async def set_price(self, menu_item_id: str, price: float) -> None:
        self._update(menu_item_id, price=price)

    async def rename_item(self, menu_item_id: str, name: str) -> None:
        self._update(menu_item_id, name=name)

    async def set_available(self, menu_item_id: str, available: bool) -> None:
        self._update(menu_item_id, available=available)

    async def delete_menu_item(self, menu_item_id: str) -> None:
        del self.dataset.menu_items[menu_item_id]

    async def count_orders(self) -> int:
        return len(self.dataset.orders)

    async def count_line_items(self) -> int:
        return sum(len(lines) for lines in self.dataset.line_items.values())


@pytest.fixture(params=BACKENDS)
def harness(request, tmp_path):
    """Unopened harness; use as ``async with harness as h`` inside run()."""
    if request.param == "sql":
        return SqlHarness(make_settings(tmp_path, "sql"))
    return MemoryHarness()


# =============================================================================
# HTTP CLIENT
# =============================================================================

@pytest.fixture(params=BACKENDS)
def client(request, tmp_path):
    app = create_app(make_settings(tmp_path, request.param))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def memory_client(tmp_path):
    app = create_app(make_settings(tmp_path, "memory"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def order_payload():
    return {
        "customer": {
            "name": "A",
            "email": "a@x.com",
            "phone": "1",
            "address": "addr",
        },
        "items": [{"menu_item_id": "item-1", "quantity": 2}],
        "delivery_platform": "UberEats",
    }
