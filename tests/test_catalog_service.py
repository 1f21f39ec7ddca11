import pytest

from food_ordering.core.errors import NotFoundError
from food_ordering.services.catalog import UNCATEGORIZED, CatalogService, group_menu_by_category
from food_ordering.stores.base import MenuItemRecord
from tests.conftest import run


def item(item_id: str, name: str, category) -> MenuItemRecord:
    return MenuItemRecord(id=item_id, restaurant_id="rest-x", name=name, price=1.0, category=category)


class TestGroupMenuByCategory:
    def test_groups_and_sorts_by_name(self):
        menu = group_menu_by_category([
            item("3", "Zucchini Fries", "Sides"),
            item("1", "Pepperoni", "Pizza"),
            item("2", "Margherita", "Pizza"),
            item("4", "Aioli Fries", "Sides"),
        ])

        assert list(menu) == ["Pizza", "Sides"]
        assert [i.name for i in menu["Pizza"]] == ["Margherita", "Pepperoni"]
        assert [i.name for i in menu["Sides"]] == ["Aioli Fries", "Zucchini Fries"]

    def test_items_without_category(self):
        menu = group_menu_by_category([item("1", "Mystery", None)])
        assert list(menu) == [UNCATEGORIZED]

    def test_empty(self):
        assert group_menu_by_category([]) == {}


class TestCatalogService:
    def test_get_restaurant_not_found(self, harness):
        async def scenario():
            async with harness as h:
                catalog, _ = h.stores()
                with pytest.raises(NotFoundError, match="Restaurant not found"):
                    await CatalogService(catalog).get_restaurant("rest-404")

        run(scenario())

    def test_menu_grouped(self, harness):
        async def scenario():
            async with harness as h:
                catalog, _ = h.stores()
                return await CatalogService(catalog).get_menu("rest-2")

        menu = run(scenario())
        assert list(menu) == ["Entree", "Soup", "Sushi"]
        assert [i.id for i in menu["Sushi"]] == ["item-4"]

    def test_search_ignores_blank_filters(self, harness):
        async def scenario():
            async with harness as h:
                catalog, _ = h.stores()
                return await CatalogService(catalog).search(q="  ", show="", platform=None)

        assert len(run(scenario())) == 3
