"""Order aggregate: the core of the domain.

The Order owns its curtain lines.  Totals are derived on every read and
are never stored as an independent source of truth:

    sub_total = Σ line.subtotal
    discount  = min(sub_total, fixed if fixed > 0 else sub_total * pct / 100)
    net_total = max(0, sub_total - discount)
    balance   = max(0, net_total - paid_amount)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from perde.domain.exceptions import EntityNotFoundError, ValidationError
from perde.domain.model.line_item import LineItem
from perde.domain.model.value_objects import Money, to_decimal


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    WORKSHOP = "workshop"


class OrderType(Enum):
    ORDER = 0
    QUOTE = 1  # price quote


class PaymentMethod(Enum):
    CASH = "CASH"
    TRANSFER = "TRANSFER"
    CARD = "CARD"


@dataclass(frozen=True)
class OrderTotals:
    sub_total: Money
    discount: Money
    net_total: Money
    paid: Money
    balance: Money


def resolve_discount(sub_total: Money, percent: object, fixed_amount: object) -> Money:
    """Fixed amount wins over percentage; both are capped at the subtotal."""
    fixed = max(Decimal("0"), to_decimal(fixed_amount, Decimal("0")))
    if fixed > 0:
        return Money(fixed).min(sub_total)
    pct = min(Decimal("100"), max(Decimal("0"), to_decimal(percent, Decimal("0"))))
    return Money(sub_total.amount * pct / Decimal("100")).min(sub_total)


@dataclass
class Order:
    """Aggregate root for a curtain order.

    ``paid_amount`` mirrors the payments recorded by the backend; it is not
    computed locally.
    """

    id: str | None
    customer_name: str = ""
    customer_phone: str = ""
    lines: list[LineItem] = field(default_factory=list)
    note: str = ""
    status: OrderStatus = OrderStatus.PENDING
    order_type: OrderType = OrderType.ORDER
    delivery_date: date | None = None
    discount_percent: Decimal = Decimal("0")
    discount_fixed_amount: Decimal = Decimal("0")
    paid_amount: Money = field(default_factory=Money.zero)

    # --- Lines ----------------------------------------------------------------

    def find_line(self, line_id: str) -> LineItem | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def get_line(self, line_id: str) -> LineItem:
        line = self.find_line(line_id)
        if line is None:
            raise EntityNotFoundError(f"Line '{line_id}' not found in this order")
        return line

    def add_line(self, line: LineItem) -> None:
        if self.find_line(line.id) is not None:
            raise ValidationError(f"Line '{line.id}' already in this order")
        self.lines.append(line)

    def remove_line(self, line_id: str) -> LineItem:
        line = self.get_line(line_id)
        self.lines.remove(line)
        return line

    # --- Computed properties --------------------------------------------------

    @property
    def sub_total(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.subtotal
        return result

    @property
    def discount(self) -> Money:
        return resolve_discount(
            self.sub_total, self.discount_percent, self.discount_fixed_amount
        )

    @property
    def net_total(self) -> Money:
        return self.sub_total.minus_floor(self.discount)

    @property
    def balance(self) -> Money:
        return self.net_total.minus_floor(self.paid_amount)

    def totals(self) -> OrderTotals:
        sub_total = self.sub_total
        discount = resolve_discount(
            sub_total, self.discount_percent, self.discount_fixed_amount
        )
        net_total = sub_total.minus_floor(discount)
        return OrderTotals(
            sub_total=sub_total,
            discount=discount,
            net_total=net_total,
            paid=self.paid_amount,
            balance=net_total.minus_floor(self.paid_amount),
        )

    # --- Validation -----------------------------------------------------------

    def validate_for_save(self) -> None:
        """Checks that must pass before any network call is attempted."""
        if not self.customer_name.strip() or not self.customer_phone.strip():
            raise ValidationError("Customer name and phone are required")
        if not self.lines:
            raise ValidationError("Order must contain at least one line")
