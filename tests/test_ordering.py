"""Order workflow tests, run against both the SQL and in-memory stores."""

import pytest

from food_ordering.core.errors import DependencyError, NotFoundError, ValidationError
from food_ordering.schemas import MAX_QUANTITY, CustomerInfo, OrderItemRequest
from food_ordering.services.ordering import OrderService, calculate_total
from food_ordering.stores.base import LineItemRecord
from tests.conftest import run

DELIVERY_FEE = 2.99


def customer() -> CustomerInfo:
    return CustomerInfo(name="A", email="a@x.com", phone="1", address="addr")


def lines(*pairs) -> list[OrderItemRequest]:
    return [OrderItemRequest(menu_item_id=item_id, quantity=qty) for item_id, qty in pairs]


def service(h) -> OrderService:
    catalog, orders = h.stores()
    return OrderService(catalog, orders, delivery_fee=DELIVERY_FEE)


def line(price: float, quantity: int) -> LineItemRecord:
    return LineItemRecord(id="l", order_id="o", menu_item_id="m", quantity=quantity, price=price)


class TestCalculateTotal:
    def test_sums_price_times_quantity(self):
        assert calculate_total([line(16.99, 2), line(5.99, 1)]) == 39.97

    def test_rounds_to_cents(self):
        assert calculate_total([line(0.1, 3)]) == 0.3

    def test_empty_is_zero(self):
        assert calculate_total([]) == 0


class TestCreateOrder:
    def test_single_item_scenario(self, harness):
        async def scenario():
            async with harness as h:
                return await service(h).create_order(customer(), lines(("item-1", 2)), "UberEats")

        order = run(scenario())
        assert order.total_amount == 33.98
        assert order.delivery_fee == 2.99
        assert order.status == "pending"
        assert order.delivery_platform == "UberEats"
        assert order.created_at is not None

    def test_total_is_sum_over_all_lines(self, harness):
        async def scenario():
            async with harness as h:
                return await service(h).create_order(
                    customer(),
                    lines(("item-4", 3), ("item-5", 1), ("item-6", 2)),
                    "DoorDash",
                )

        order = run(scenario())
        assert order.total_amount == round(8.99 * 3 + 22.99 + 4.99 * 2, 2)

    def test_customer_snapshot_is_copied(self, harness):
        async def scenario():
            async with harness as h:
                svc = service(h)
                created = await svc.create_order(customer(), lines(("item-2", 1)), "UberEats")
                return await svc.get_order(created.id)

        order = run(scenario())
        assert order.customer_name == "A"
        assert order.customer_email == "a@x.com"
        assert order.customer_phone == "1"
        assert order.customer_address == "addr"

    def test_identical_submissions_create_distinct_orders(self, harness):
        async def scenario():
            async with harness as h:
                svc = service(h)
                first = await svc.create_order(customer(), lines(("item-1", 1)), "UberEats")
                second = await svc.create_order(customer(), lines(("item-1", 1)), "UberEats")
                return first, second, await h.count_orders()

        first, second, count = run(scenario())
        assert first.id != second.id
        assert count == 2

    def test_repeated_menu_item_becomes_separate_lines(self, harness):
        async def scenario():
            async with harness as h:
                svc = service(h)
                created = await svc.create_order(
                    customer(), lines(("item-9", 1), ("item-9", 2)), "Grubhub"
                )
                return created, await svc.get_order(created.id)

        created, order = run(scenario())
        assert created.total_amount == round(5.99 * 3, 2)
        assert [i.quantity for i in order.items] == [1, 2]

    def test_empty_items_rejected(self, harness):
        async def scenario():
            async with harness as h:
                with pytest.raises(ValidationError, match="Missing required fields"):
                    await service(h).create_order(customer(), [], "UberEats")
                return await h.count_orders()

        assert run(scenario()) == 0

    @pytest.mark.parametrize("missing", ["customer", "items", "delivery_platform"])
    def test_missing_fields_rejected(self, harness, missing):
        kwargs = {
            "customer": customer(),
            "items": lines(("item-1", 1)),
            "delivery_platform": "UberEats",
        }
        kwargs[missing] = None

        async def scenario():
            async with harness as h:
                with pytest.raises(ValidationError):
                    await service(h).create_order(**kwargs)

        run(scenario())

    @pytest.mark.parametrize("quantity", [0, MAX_QUANTITY + 1, 10**19])
    def test_out_of_range_quantity_rejected(self, harness, quantity):
        items = [OrderItemRequest.model_construct(menu_item_id="item-1", quantity=quantity)]

        async def scenario():
            async with harness as h:
                with pytest.raises(ValidationError, match="must be between 1 and"):
                    await service(h).create_order(customer(), items, "UberEats")
                return await h.count_orders(), await h.count_line_items()

        assert run(scenario()) == (0, 0)

    def test_max_quantity_accepted(self, harness):
        async def scenario():
            async with harness as h:
                return await service(h).create_order(
                    customer(), lines(("item-9", MAX_QUANTITY)), "UberEats"
                )

        assert run(scenario()).total_amount == round(5.99 * MAX_QUANTITY, 2)

    def test_unknown_menu_item_rejected_and_nothing_written(self, harness):
        async def scenario():
            async with harness as h:
                with pytest.raises(NotFoundError, match="no-such-item"):
                    await service(h).create_order(
                        customer(), lines(("item-1", 1), ("no-such-item", 1)), "UberEats"
                    )
                return await h.count_orders(), await h.count_line_items()

        assert run(scenario()) == (0, 0)

    def test_failed_line_item_write_rolls_back_order(self, harness):
        async def scenario():
            async with harness as h:
                catalog, orders = h.stores()
                original_add = orders.add_line_item
                calls = []

                async def flaky_add_line_item(line_item):
                    calls.append(line_item)
                    if len(calls) == 2:
                        raise DependencyError("Database error during order item insert")
                    return await original_add(line_item)

                orders.add_line_item = flaky_add_line_item
                svc = OrderService(catalog, orders, delivery_fee=DELIVERY_FEE)

                with pytest.raises(DependencyError):
                    await svc.create_order(
                        customer(), lines(("item-1", 1), ("item-2", 1), ("item-3", 1)), "UberEats"
                    )
                return await h.count_orders(), await h.count_line_items()

        assert run(scenario()) == (0, 0)


class TestGetOrder:
    def test_unknown_order_not_found(self, harness):
        async def scenario():
            async with harness as h:
                with pytest.raises(NotFoundError, match="Order not found"):
                    await service(h).get_order("does-not-exist")

        run(scenario())

    def test_items_joined_with_catalog(self, harness):
        async def scenario():
            async with harness as h:
                svc = service(h)
                created = await svc.create_order(
                    customer(), lines(("item-7", 1), ("item-9", 3)), "Grubhub"
                )
                return created, await svc.get_order(created.id)

        created, order = run(scenario())
        assert order.id == created.id
        assert order.total_amount == created.total_amount
        assert [i.menu_item_id for i in order.items] == ["item-7", "item-9"]
        assert [i.quantity for i in order.items] == [1, 3]
        assert order.items[0].name == "Classic Cheeseburger"
        assert order.items[1].description == "Crispy golden fries"
        assert order.items[1].image_url.startswith("https://images.unsplash.com/")
        assert all(i.order_id == created.id for i in order.items)

    def test_captured_price_survives_catalog_change(self, harness):
        async def scenario():
            async with harness as h:
                svc = service(h)
                created = await svc.create_order(customer(), lines(("item-1", 2)), "UberEats")
                await h.set_price("item-1", 99.99)
                await h.rename_item("item-1", "Margherita Deluxe")
                return await svc.get_order(created.id)

        order = run(scenario())
        assert len(order.items) == 1
        assert order.items[0].price == 16.99
        assert order.total_amount == 33.98
        # Display fields follow the current catalog
        assert order.items[0].name == "Margherita Deluxe"

    def test_new_orders_use_new_price(self, harness):
        async def scenario():
            async with harness as h:
                await h.set_price("item-1", 10.00)
                return await service(h).create_order(customer(), lines(("item-1", 2)), "UberEats")

        assert run(scenario()).total_amount == 20.00

    def test_deleted_menu_item_keeps_line_with_null_display_fields(self, harness):
        async def scenario():
            async with harness as h:
                svc = service(h)
                created = await svc.create_order(
                    customer(), lines(("item-1", 1), ("item-2", 1)), "UberEats"
                )
                await h.delete_menu_item("item-2")
                return await svc.get_order(created.id)

        order = run(scenario())
        assert len(order.items) == 2
        removed = order.items[1]
        assert removed.menu_item_id == "item-2"
        assert removed.price == 18.99
        assert removed.name is None and removed.description is None and removed.image_url is None

    def test_order_without_items_returns_empty_list(self, harness):
        from food_ordering.stores.base import OrderRecord

        async def scenario():
            async with harness as h:
                _, orders = h.stores()
                async with orders.transaction():
                    await orders.add_order(OrderRecord(
                        id="bare-order",
                        customer_name="A",
                        customer_email="a@x.com",
                        customer_phone="1",
                        customer_address="addr",
                        total_amount=0.0,
                        delivery_fee=DELIVERY_FEE,
                        delivery_platform="UberEats",
                    ))
                return await service(h).get_order("bare-order")

        order = run(scenario())
        assert order.items == []
        assert order.status == "pending"
