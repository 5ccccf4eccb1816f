"""JSON-file-backed implementation of OrderGateway.

Plays the part of the order backend for local use.  It never trusts the
client's numbers: line subtotals are re-priced from the catalog, the
requested discount is clamped to ``[0, total]`` and ``netTotal`` is
stored alongside.  Reads add the derived ``paidTotal`` and ``balance``.

Errors are raised as GatewayError carrying an HTTP-like status, so the
application layer handles this backend and the REST one the same way.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from perde.application.order_mapper import parse_date, to_ymd
from perde.domain.exceptions import GatewayError
from perde.domain.model.catalog import Catalog
from perde.domain.model.line_item import LineStatus
from perde.domain.model.order import OrderStatus, PaymentMethod
from perde.domain.model.value_objects import Money, floor_int, to_decimal
from perde.domain.repository.catalog_repository import CatalogRepository
from perde.domain.repository.order_gateway import OrderGateway
from perde.domain.service.pricing import (
    line_subtotal,
    sanitize_density,
    sanitize_dimension,
    sanitize_qty,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
PAYMENT_EPSILON = Decimal("0.009")


class JsonOrderGateway(OrderGateway):

    def __init__(self, file_path: Path, catalog_repo: CatalogRepository) -> None:
        self._file_path = file_path
        self._catalog_repo = catalog_repo
        self._ensure_file()

    # --- OrderGateway interface -----------------------------------------------

    def get_order(self, order_id: str) -> dict | None:
        for raw in self._load_raw():
            if raw["id"] == str(order_id):
                return self._to_view(raw)
        return None

    def create_order(self, payload: dict) -> dict:
        self._require_customer(payload)
        items = payload.get("items") or []
        if not items:
            raise GatewayError("validation_error: items required", status=422)

        orders = self._load_raw()
        catalog = self._catalog_repo.load()
        raw = {
            "id": str(self._next_id(orders)),
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "customerName": payload["customerName"].strip(),
            "customerPhone": payload["customerPhone"].strip(),
            "note": (payload.get("note") or "").strip() or None,
            "status": self._status(payload.get("status"), OrderStatus.PENDING),
            "orderType": 1 if payload.get("orderType") == 1 else 0,
            "deliveryAt": to_ymd(parse_date(payload.get("deliveryDate"))),
            "items": [self._price_item(item, catalog) for item in items],
            "payments": [],
        }
        self._apply_totals(raw, payload.get("discount"))
        orders.append(raw)
        self._persist_raw(orders)
        logger.info("Stored order %s", raw["id"])
        return self._to_view(raw)

    def update_order(self, order_id: str, payload: dict) -> dict:
        orders = self._load_raw()
        raw = self._find(orders, order_id)
        catalog = self._catalog_repo.load()

        for key in ("customerName", "customerPhone"):
            if key in payload:
                value = (payload[key] or "").strip()
                if not value:
                    raise GatewayError(f"validation_error: {key} required", status=422)
                raw[key] = value
        if "note" in payload:
            raw["note"] = (payload["note"] or "").strip() or None
        if "status" in payload:
            raw["status"] = self._status(payload["status"], None)
        if "orderType" in payload:
            raw["orderType"] = 1 if payload["orderType"] == 1 else 0
        if "deliveryAt" in payload:
            raw["deliveryAt"] = to_ymd(parse_date(payload["deliveryAt"]))

        self._apply_items(raw, payload.get("items") or [], catalog)
        self._apply_totals(raw, payload.get("discount", raw.get("discount")))
        self._persist_raw(orders)
        logger.info("Updated order %s", raw["id"])
        return self._to_view(raw)

    def add_payment(self, order_id: str, payload: dict) -> dict:
        amount = to_decimal(payload.get("amount"), ZERO)
        if amount <= 0:
            raise GatewayError("validation_error: amount_positive", status=422)
        try:
            method = PaymentMethod(payload.get("method"))
        except ValueError as exc:
            raise GatewayError("validation_error: method", status=422) from exc

        orders = self._load_raw()
        raw = self._find(orders, order_id)
        net_total = Decimal(raw["netTotal"])
        remaining = net_total - self._paid(raw)
        if amount > remaining + PAYMENT_EPSILON:
            raise GatewayError(
                f"amount_exceeds_remaining (remaining {max(ZERO, remaining)})", status=400
            )

        raw["payments"].append(
            {
                "id": uuid.uuid4().hex,
                "amount": str(amount),
                "method": method.value,
                "note": (payload.get("note") or "").strip() or None,
                "paidAt": datetime.now(timezone.utc).isoformat(),
            }
        )
        self._persist_raw(orders)

        paid = self._paid(raw)
        return {
            "ok": True,
            "orderId": raw["id"],
            "totals": {
                "netTotal": str(net_total),
                "totalPaid": str(paid),
                "remaining": str(max(ZERO, net_total - paid)),
            },
        }

    # --- Items / totals -------------------------------------------------------

    def _apply_items(self, raw: dict, items: list[dict], catalog: Catalog) -> None:
        """Apply upserts and ``_action: delete`` markers to the stored lines."""
        by_id = {item["id"]: item for item in raw["items"]}
        for item in items:
            item_id = str(item["id"]) if item.get("id") else None
            if item.get("_action") == "delete":
                if item_id in by_id:
                    raw["items"].remove(by_id.pop(item_id))
                continue
            priced = self._price_item(item, catalog)
            if item_id in by_id:
                priced["id"] = item_id
                by_id[item_id].update(priced)
            else:
                raw["items"].append(priced)
                by_id[priced["id"]] = priced

    def _price_item(self, item: dict, catalog: Catalog) -> dict:
        category = catalog.find(str(item.get("categoryId", "")))
        if category is None or category.find_variant(str(item.get("variantId", ""))) is None:
            raise GatewayError("validation_error: unknown category or variant", status=422)
        qty = sanitize_qty(item.get("qty"))
        width = sanitize_dimension(item.get("width"))
        height = sanitize_dimension(item.get("height"))
        density = sanitize_density(item.get("fileDensity"))
        unit_price = Money(max(ZERO, to_decimal(item.get("unitPrice"), ZERO)))
        slot = item.get("slotIndex")
        return {
            "id": uuid.uuid4().hex[:16],
            "categoryId": category.id,
            "variantId": str(item["variantId"]),
            "qty": qty,
            "width": width,
            "height": height,
            "unitPrice": str(unit_price.amount),
            "fileDensity": str(density),
            "subtotal": str(
                line_subtotal(category.pricing, unit_price, qty, width, height, density).amount
            ),
            "note": (item.get("note") or "").strip() or None,
            "slotIndex": floor_int(slot, 0, 0) if slot is not None else None,
            "lineStatus": LineStatus.parse(item.get("lineStatus"), LineStatus.PROCESSING).value,
        }

    @staticmethod
    def _apply_totals(raw: dict, requested_discount: object) -> None:
        total = sum((Decimal(item["subtotal"]) for item in raw["items"]), ZERO)
        discount = min(total, max(ZERO, to_decimal(requested_discount, ZERO)))
        raw["total"] = str(total)
        raw["discount"] = str(discount)
        raw["netTotal"] = str(max(ZERO, total - discount))

    # --- Views ----------------------------------------------------------------

    def _to_view(self, raw: dict) -> dict:
        view = {k: v for k, v in raw.items() if k != "payments"}
        view["items"] = sorted(raw["items"], key=self._line_order)
        paid = self._paid(raw)
        view["paidTotal"] = str(paid)
        view["balance"] = str(max(ZERO, Decimal(raw["netTotal"]) - paid))
        view["payments"] = list(raw["payments"])
        return view

    @staticmethod
    def _line_order(item: dict) -> tuple:
        # Stable sort: ties keep insertion order.
        slot = item.get("slotIndex")
        return (item["categoryId"], slot is None, slot or 0)

    @staticmethod
    def _paid(raw: dict) -> Decimal:
        return sum((Decimal(p["amount"]) for p in raw["payments"]), ZERO)

    # --- Validation helpers ---------------------------------------------------

    @staticmethod
    def _require_customer(payload: dict) -> None:
        for key in ("customerName", "customerPhone"):
            if not (payload.get(key) or "").strip():
                raise GatewayError(f"validation_error: {key} required", status=422)

    @staticmethod
    def _status(value: object, default: OrderStatus | None) -> str:
        try:
            return OrderStatus(value).value
        except ValueError as exc:
            if default is None:
                raise GatewayError(f"validation_error: status {value!r}", status=422) from exc
            return default.value

    @staticmethod
    def _find(orders: list[dict], order_id: str) -> dict:
        for raw in orders:
            if raw["id"] == str(order_id):
                return raw
        raise GatewayError("not_found", status=404)

    @staticmethod
    def _next_id(orders: list[dict]) -> int:
        return max((int(o["id"]) for o in orders), default=0) + 1

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
