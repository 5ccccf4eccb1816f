"""Order persistence adapter.

Translates the in-memory Order to the backend's create/patch payloads and
back.  Patch payloads never rely on whole-list replacement:

* lines whose id is in ``persisted_ids`` are sent with their ``id`` (update),
* other lines are sent without an id (create),
* persisted ids missing from the order become ``{id, _action: "delete"}``.

Dates leave as plain ``YYYY-MM-DD`` and are parsed leniently on the way in.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

from perde.application.dto import DeleteMarkerDTO, LineItemDTO
from perde.domain.model.catalog import Catalog
from perde.domain.model.line_item import LineItem, LineStatus, new_line_id
from perde.domain.model.order import Order, OrderStatus, OrderType
from perde.domain.model.value_objects import Money, floor_int, to_decimal
from perde.domain.service.pricing import (
    line_subtotal,
    sanitize_density,
    sanitize_dimension,
    sanitize_qty,
)

# --- Dates --------------------------------------------------------------------


def to_ymd(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date(value: object) -> date | None:
    """Accept a date, a bare ``YYYY-MM-DD`` or an ISO datetime; else None.

    Aware datetimes are converted to UTC before the date is taken.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return value
    else:
        text = str(value).strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


# --- Outbound -----------------------------------------------------------------


def line_to_dto(line: LineItem, persisted_ids: frozenset[str] = frozenset()) -> LineItemDTO:
    return LineItemDTO(
        id=line.id if line.id in persisted_ids else None,
        category_id=line.category_id,
        variant_id=line.variant_id,
        qty=line.qty,
        width=line.width,
        height=line.height,
        unit_price=line.unit_price.amount,
        file_density=line.file_density,
        note=line.note,
        slot_index=line.slot_index,
        line_status=line.line_status.value,
    )


def to_create_payload(order: Order) -> dict:
    return {
        "customerName": order.customer_name.strip(),
        "customerPhone": order.customer_phone.strip(),
        "note": order.note or "",
        "status": order.status.value,
        "orderType": order.order_type.value,
        "deliveryDate": to_ymd(order.delivery_date),
        "discount": str(order.discount.amount),
        "items": [line_to_dto(line).to_dict() for line in order.lines],
    }


def to_patch_payload(order: Order, persisted_ids: frozenset[str]) -> dict:
    current_ids = {line.id for line in order.lines}
    upserts = [line_to_dto(line, persisted_ids).to_dict() for line in order.lines]
    deletes = [
        DeleteMarkerDTO(line_id).to_dict()
        for line_id in sorted(persisted_ids - current_ids)
    ]
    return {
        "customerName": order.customer_name.strip(),
        "customerPhone": order.customer_phone.strip(),
        "note": order.note or None,
        "status": order.status.value,
        "orderType": order.order_type.value,
        "deliveryAt": to_ymd(order.delivery_date),
        "items": upserts + deletes,
    }


# --- Inbound ------------------------------------------------------------------


def line_from_raw(raw: dict, catalog: Catalog, fallback_status: LineStatus) -> LineItem:
    qty = sanitize_qty(raw.get("qty", 1))
    width = sanitize_dimension(raw.get("width", 0))
    height = sanitize_dimension(raw.get("height", 0))
    unit_price = Money(max(Decimal("0"), to_decimal(raw.get("unitPrice"), Decimal("0"))))
    density = sanitize_density(raw.get("fileDensity", 1))
    category_id = str(raw.get("categoryId") or "")
    slot = raw.get("slotIndex")
    category = catalog.find(category_id)
    if category is not None:
        subtotal = line_subtotal(category.pricing, unit_price, qty, width, height, density)
    else:
        subtotal = Money(max(Decimal("0"), to_decimal(raw.get("subtotal"), Decimal("0"))))
    return LineItem(
        id=str(raw.get("id") or new_line_id()),
        category_id=category_id,
        variant_id=str(raw.get("variantId") or ""),
        qty=qty,
        width=width,
        height=height,
        unit_price=unit_price,
        file_density=density,
        subtotal=subtotal,
        note=raw.get("note") or None,
        slot_index=floor_int(slot, 0, 0) if slot is not None else None,
        line_status=LineStatus.parse(raw.get("lineStatus"), fallback_status),
    )


def order_from_raw(raw: dict, catalog: Catalog) -> tuple[Order, frozenset[str]]:
    """Rebuild an Order from a backend response.

    Returns the order and the set of line ids the backend knows about, which
    the caller retains to emit delete markers on the next patch.
    """
    status = _parse_status(raw.get("status"))
    fallback = LineStatus.parse(status.value, LineStatus.PROCESSING)
    lines = [line_from_raw(item, catalog, fallback) for item in raw.get("items") or []]
    order = Order(
        id=str(raw["id"]) if raw.get("id") is not None else None,
        customer_name=raw.get("customerName") or "",
        customer_phone=raw.get("customerPhone") or "",
        lines=lines,
        note=raw.get("note") or "",
        status=status,
        order_type=OrderType.QUOTE if raw.get("orderType") == 1 else OrderType.ORDER,
        delivery_date=parse_date(raw.get("deliveryAt") or raw.get("deliveryDate")),
        discount_fixed_amount=max(Decimal("0"), to_decimal(raw.get("discount"), Decimal("0"))),
        paid_amount=Money(max(Decimal("0"), to_decimal(raw.get("paidTotal"), Decimal("0")))),
    )
    persisted = frozenset(str(item["id"]) for item in raw.get("items") or [] if item.get("id"))
    return order, persisted


def _parse_status(value: object) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        return OrderStatus.PROCESSING
