"""Curtain line item and its per-line status."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from perde.domain.model.value_objects import Money


class LineStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    WORKSHOP = "workshop"

    @staticmethod
    def parse(value: str | None, default: LineStatus) -> LineStatus:
        try:
            return LineStatus(value)
        except ValueError:
            return default


def new_line_id() -> str:
    """Client-side id for lines that have not been persisted yet."""
    return uuid.uuid4().hex[:12]


@dataclass
class LineItem:
    """One curtain line of an order.

    ``subtotal`` is whatever the pricing calculator produced at commit time.
    ``slot_index`` is meaningful only for boxed categories and is ``None``
    for quick-entry lines and for boxed lines that overflowed their table.
    """

    id: str
    category_id: str
    variant_id: str
    qty: int
    width: int
    height: int
    unit_price: Money
    file_density: Decimal
    subtotal: Money
    note: str | None = None
    slot_index: int | None = None
    line_status: LineStatus = LineStatus.PENDING
