"""Data Transfer Objects: plain containers that cross layer boundaries.

Input specs carry what the user typed; wire DTOs carry the backend's
create/patch contract; view DTOs carry display-ready strings to the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineSpec:
    """Input: one curtain line as typed by the user."""

    category_name: str
    variant_name: str
    qty: object = 1
    width: object = 0
    height: object = 0
    density: object = 1
    slot_index: int | None = None  # 0-based; None = first empty / quick row
    unit_price: object = None  # manual price override
    note: str = ""


@dataclass(frozen=True)
class PaymentRequest:
    amount: object
    method: str = "CASH"
    note: str | None = None


# ---------------------------------------------------------------------------
# Wire (backend contract)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineItemDTO:
    category_id: str
    variant_id: str
    qty: int
    width: int
    height: int
    unit_price: Decimal
    file_density: Decimal
    note: str | None
    slot_index: int | None
    line_status: str
    id: str | None = None  # only for lines the backend already knows

    def to_dict(self) -> dict:
        data: dict = {}
        if self.id is not None:
            data["id"] = self.id
        data.update(
            {
                "categoryId": self.category_id,
                "variantId": self.variant_id,
                "qty": self.qty,
                "width": self.width,
                "height": self.height,
                "unitPrice": str(self.unit_price),
                "fileDensity": float(self.file_density),
                "note": self.note,
                "slotIndex": self.slot_index,
                "lineStatus": self.line_status,
            }
        )
        return data


@dataclass(frozen=True)
class DeleteMarkerDTO:
    id: str

    def to_dict(self) -> dict:
        return {"id": self.id, "_action": "delete"}


@dataclass(frozen=True)
class PaymentDTO:
    amount: Decimal
    method: str
    note: str | None = None

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "method": self.method, "note": self.note}


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateOrderResult:
    """Outcome of saving a new order plus its optional initial payment.

    ``payment_error`` set means the order exists but the payment must be
    added again by hand.
    """

    order_id: str
    payment_recorded: bool = False
    payment_error: str | None = None

    @property
    def is_partial(self) -> bool:
        return self.payment_error is not None


@dataclass(frozen=True)
class PaymentTotalsDTO:
    net_total: str
    total_paid: str
    remaining: str


@dataclass(frozen=True)
class LineViewDTO:
    id: str
    category: str
    variant: str
    qty: int
    size: str  # "300×250"
    density: str
    unit_price: str
    subtotal: str
    slot: str  # 1-based slot number, "-" for quick-entry lines
    status: str


@dataclass(frozen=True)
class OrderViewDTO:
    id: str
    customer_name: str
    customer_phone: str
    status: str
    order_type: str
    delivery_date: str
    note: str
    sections: list[tuple[str, list[LineViewDTO]]] = field(default_factory=list)
    sub_total: str = ""
    discount: str = ""
    net_total: str = ""
    paid: str = ""
    balance: str = ""
