"""Tests for OrderService against the Django repositories.

Covers create/update/cancel/delete with their stock side effects,
total recomputation and rollback on failure.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    OrderItemDTO,
    UpdateOrderDTO,
)
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    InvalidOrderItem,
    InvalidOrderState,
    OrderItemNotFound,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def mouse(make_product):
    return make_product(name="Mouse", price="5.00", stock=10)


@pytest.fixture()
def keyboard(make_product):
    return make_product(name="Teclado", price="20.00", stock=4)


def _create(service, customer, *lines):
    return service.create_order(
        CreateOrderDTO(
            customer_id=customer.id,
            items=[
                CreateOrderItemDTO(product_id=product.id, quantity=quantity)
                for product, quantity in lines
            ],
        )
    )


def _stock(product) -> int:
    product.refresh_from_db()
    return product.stock


class TestCreateOrder:
    def test_reserves_stock_and_computes_total(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 3))

        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("15.00")
        assert order.order_date is not None
        assert [item.quantity for item in order.items.all()] == [3]
        assert _stock(mouse) == 7

    def test_same_product_on_two_lines(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 2), (mouse, 3))

        assert order.items.count() == 2
        assert order.total_amount == Decimal("25.00")
        assert _stock(mouse) == 5

    def test_unknown_customer(self, service, mouse):
        with pytest.raises(CustomerNotFound):
            service.create_order(
                CreateOrderDTO(
                    customer_id=uuid4(),
                    items=[CreateOrderItemDTO(product_id=mouse.id, quantity=1)],
                )
            )
        assert _stock(mouse) == 10

    def test_unknown_product(self, service, customer):
        with pytest.raises(ProductNotFound):
            service.create_order(
                CreateOrderDTO(
                    customer_id=customer.id,
                    items=[CreateOrderItemDTO(product_id=uuid4(), quantity=1)],
                )
            )
        assert Order.objects.count() == 0

    def test_insufficient_stock_rolls_back_everything(
        self, service, customer, mouse, keyboard
    ):
        with pytest.raises(InsufficientStock) as excinfo:
            _create(service, customer, (mouse, 2), (keyboard, 5))

        assert excinfo.value.product_name == "Teclado"
        assert excinfo.value.available == 4
        assert excinfo.value.requested == 5
        assert str(excinfo.value) == (
            "Insufficient stock for product Teclado. Available: 4, requested: 5."
        )
        assert Order.objects.count() == 0
        assert _stock(mouse) == 10
        assert _stock(keyboard) == 4


class TestUpdateOrderItems:
    def test_increase_quantity(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 3))
        item = order.items.get()

        order = service.update_order(
            order.id, UpdateOrderDTO(items=[OrderItemDTO(id=item.id, quantity=5)])
        )

        assert order.total_amount == Decimal("25.00")
        assert _stock(mouse) == 5

    def test_decrease_quantity_returns_stock(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 3))
        item = order.items.get()

        service.update_order(
            order.id, UpdateOrderDTO(items=[OrderItemDTO(id=item.id, quantity=1)])
        )

        assert _stock(mouse) == 9

    def test_add_and_remove_lines(self, service, customer, mouse, keyboard):
        order = _create(service, customer, (mouse, 3))

        order = service.update_order(
            order.id,
            UpdateOrderDTO(items=[OrderItemDTO(product_id=keyboard.id, quantity=2)]),
        )

        assert [item.product_id for item in order.items.all()] == [keyboard.id]
        assert order.total_amount == Decimal("40.00")
        assert _stock(mouse) == 10
        assert _stock(keyboard) == 2

    def test_shortage_on_increase_rolls_back(self, service, customer, mouse, keyboard):
        order = _create(service, customer, (mouse, 3), (keyboard, 1))
        mouse_item = order.items.get(product=mouse)
        keyboard_item = order.items.get(product=keyboard)

        with pytest.raises(InsufficientStock):
            service.update_order(
                order.id,
                UpdateOrderDTO(
                    items=[
                        OrderItemDTO(id=mouse_item.id, quantity=1),
                        OrderItemDTO(id=keyboard_item.id, quantity=10),
                    ]
                ),
            )

        assert _stock(mouse) == 7
        assert _stock(keyboard) == 3
        mouse_item.refresh_from_db()
        assert mouse_item.quantity == 3

    def test_unknown_item_id(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 1))
        with pytest.raises(OrderItemNotFound):
            service.update_order(
                order.id, UpdateOrderDTO(items=[OrderItemDTO(id=uuid4(), quantity=1)])
            )

    def test_item_from_another_order(self, service, customer, mouse):
        first = _create(service, customer, (mouse, 1))
        second = _create(service, customer, (mouse, 1))
        foreign = first.items.get()

        with pytest.raises(OrderItemNotFound):
            service.update_order(
                second.id,
                UpdateOrderDTO(items=[OrderItemDTO(id=foreign.id, quantity=2)]),
            )

    def test_kept_item_with_other_product(self, service, customer, mouse, keyboard):
        order = _create(service, customer, (mouse, 1))
        item = order.items.get()
        with pytest.raises(InvalidOrderItem):
            service.update_order(
                order.id,
                UpdateOrderDTO(
                    items=[OrderItemDTO(id=item.id, product_id=keyboard.id, quantity=1)]
                ),
            )

    def test_new_line_with_unknown_product(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 1))
        with pytest.raises(ProductNotFound):
            service.update_order(
                order.id,
                UpdateOrderDTO(items=[OrderItemDTO(product_id=uuid4(), quantity=1)]),
            )
        assert _stock(mouse) == 9

    def test_total_follows_current_price(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 2))
        item = order.items.get()
        mouse.price = Decimal("7.50")
        mouse.save()

        order = service.update_order(
            order.id, UpdateOrderDTO(items=[OrderItemDTO(id=item.id, quantity=2)])
        )

        assert order.total_amount == Decimal("15.00")

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.update_order(uuid4(), UpdateOrderDTO(status=OrderStatus.PAID))


class TestUpdateOrderStatus:
    def test_any_status_change_allowed(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 1))

        order = service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.DELIVERED))
        assert order.status == OrderStatus.DELIVERED

        order = service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.PAID))
        assert order.status == OrderStatus.PAID
        assert _stock(mouse) == 9

    def test_entering_canceled_releases_stock(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 4))

        order = service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.CANCELED))

        assert order.status == OrderStatus.CANCELED
        assert _stock(mouse) == 10

    def test_cancel_with_item_changes_releases_final_lines(
        self, service, customer, mouse
    ):
        order = _create(service, customer, (mouse, 4))
        item = order.items.get()

        service.update_order(
            order.id,
            UpdateOrderDTO(
                status=OrderStatus.CANCELED,
                items=[OrderItemDTO(id=item.id, quantity=6)],
            ),
        )

        assert _stock(mouse) == 10
        item.refresh_from_db()
        assert item.quantity == 6

    def test_leaving_canceled_reserves_again(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 4))
        service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.CANCELED))

        service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.PENDING))

        assert _stock(mouse) == 6

    def test_leaving_canceled_without_stock_fails(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 4))
        service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.CANCELED))
        mouse.stock = 1
        mouse.save()

        with pytest.raises(InsufficientStock):
            service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.PAID))

        assert Order.objects.get(id=order.id).status == OrderStatus.CANCELED
        assert _stock(mouse) == 1

    def test_items_locked_while_canceled(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 1))
        item = order.items.get()
        service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.CANCELED))

        with pytest.raises(InvalidOrderState):
            service.update_order(
                order.id, UpdateOrderDTO(items=[OrderItemDTO(id=item.id, quantity=2)])
            )


class TestCancelOrder:
    def test_cancel(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 3))

        order = service.cancel_order(order.id)

        assert order.status == OrderStatus.CANCELED
        assert _stock(mouse) == 10

    def test_cancel_twice_fails(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 3))
        service.cancel_order(order.id)

        with pytest.raises(InvalidOrderState):
            service.cancel_order(order.id)
        assert _stock(mouse) == 10


class TestDeleteOrder:
    def test_scenario_create_update_delete(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 3))
        assert _stock(mouse) == 7
        assert order.total_amount == Decimal("15.00")

        item = order.items.get()
        order = service.update_order(
            order.id, UpdateOrderDTO(items=[OrderItemDTO(id=item.id, quantity=5)])
        )
        assert _stock(mouse) == 5
        assert order.total_amount == Decimal("25.00")

        service.delete_order(order.id)

        assert _stock(mouse) == 10
        assert not Order.objects.filter(id=order.id).exists()
        assert not OrderItem.objects.filter(order_id=order.id).exists()

    def test_only_pending_orders(self, service, customer, mouse):
        order = _create(service, customer, (mouse, 2))
        service.update_order(order.id, UpdateOrderDTO(status=OrderStatus.SHIPPED))

        with pytest.raises(InvalidOrderState, match="Only pending orders"):
            service.delete_order(order.id)
        assert _stock(mouse) == 8

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.delete_order(uuid4())


class TestQueries:
    def test_list_newest_first_and_filtered(self, service, customer, mouse):
        first = _create(service, customer, (mouse, 1))
        second = _create(service, customer, (mouse, 1))
        service.update_order(second.id, UpdateOrderDTO(status=OrderStatus.PAID))

        assert [o.id for o in service.list_orders()] == [second.id, first.id]
        assert [o.id for o in service.list_orders({"status": "PAID"})] == [second.id]

    def test_get_missing(self, service):
        with pytest.raises(OrderNotFound):
            service.get_order(str(uuid4()))
