"""Three-way diff between an order's current lines and a target list.

Lines are matched by item id:

- a target line with an id is *kept* and must belong to the order and
  keep its product;
- a target line without an id is *added*;
- a current line whose id is absent from the target is *removed*.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Mapping, Sequence, Tuple
from uuid import UUID

from modules.orders.exceptions import InvalidOrderItem, OrderItemNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import OrderItemDTO
    from modules.orders.models import OrderItem


@dataclass(frozen=True)
class ItemChanges:
    added: List[OrderItemDTO] = field(default_factory=list)
    kept: List[Tuple[OrderItem, OrderItemDTO]] = field(default_factory=list)
    removed: List[OrderItem] = field(default_factory=list)


def diff_items(
    current: Mapping[UUID, OrderItem], target: Sequence[OrderItemDTO]
) -> ItemChanges:
    """Split ``target`` against ``current`` (keyed by item id).

    Raises:
        OrderItemNotFound: a target id is not one of the order's items.
        InvalidOrderItem: a kept line names a different product.
    """
    changes = ItemChanges()
    seen: set[UUID] = set()

    for wanted in target:
        if wanted.id is None:
            changes.added.append(wanted)
            continue

        item = current.get(wanted.id)
        if item is None:
            raise OrderItemNotFound(f"Order item {wanted.id} not found.")
        if wanted.product_id is not None and wanted.product_id != item.product_id:
            raise InvalidOrderItem(
                f"Order item {wanted.id} cannot change its product."
            )
        changes.kept.append((item, wanted))
        seen.add(wanted.id)

    changes.removed.extend(
        item for item_id, item in current.items() if item_id not in seen
    )
    return changes
