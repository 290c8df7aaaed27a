"""Unit tests for the order item three-way diff."""

from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest

from modules.orders.dtos import OrderItemDTO
from modules.orders.exceptions import InvalidOrderItem, OrderItemNotFound
from modules.orders.reconciliation import diff_items

pytestmark = pytest.mark.unit


def _item(quantity=1, product_id=None):
    return SimpleNamespace(id=uuid4(), product_id=product_id or uuid4(), quantity=quantity)


class TestDiffItems:
    def test_splits_added_kept_removed(self):
        keep, drop = _item(2), _item(3)
        current = {keep.id: keep, drop.id: drop}
        new_product = uuid4()

        changes = diff_items(
            current,
            [
                OrderItemDTO(id=keep.id, quantity=5),
                OrderItemDTO(product_id=new_product, quantity=1),
            ],
        )

        assert [(item.id, wanted.quantity) for item, wanted in changes.kept] == [
            (keep.id, 5)
        ]
        assert [wanted.product_id for wanted in changes.added] == [new_product]
        assert changes.removed == [drop]

    def test_unknown_item_id_raises(self):
        existing = _item()
        with pytest.raises(OrderItemNotFound):
            diff_items({existing.id: existing}, [OrderItemDTO(id=uuid4(), quantity=1)])

    def test_kept_item_cannot_change_product(self):
        existing = _item()
        with pytest.raises(InvalidOrderItem):
            diff_items(
                {existing.id: existing},
                [OrderItemDTO(id=existing.id, product_id=uuid4(), quantity=1)],
            )

    def test_kept_item_may_repeat_its_product(self):
        existing = _item()
        changes = diff_items(
            {existing.id: existing},
            [OrderItemDTO(id=existing.id, product_id=existing.product_id, quantity=4)],
        )
        assert len(changes.kept) == 1
        assert not changes.added and not changes.removed

    def test_same_product_on_new_lines_is_allowed(self):
        product_id = uuid4()
        changes = diff_items(
            {},
            [
                OrderItemDTO(product_id=product_id, quantity=1),
                OrderItemDTO(product_id=product_id, quantity=2),
            ],
        )
        assert len(changes.added) == 2
