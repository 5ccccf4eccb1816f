"""Tests for the order persistence adapter (payloads, load fallbacks, dates)."""

from datetime import date
from decimal import Decimal

import pytest

from perde.application.order_mapper import (
    order_from_raw,
    parse_date,
    to_create_payload,
    to_patch_payload,
    to_ymd,
)
from perde.domain.model.catalog import Catalog, Category, Variant
from perde.domain.model.line_item import LineItem, LineStatus
from perde.domain.model.order import Order, OrderStatus, OrderType
from perde.domain.model.value_objects import Money
from perde.domain.service.order_composer import OrderComposer
from tests.fakes import make_catalog


def _line(line_id: str, slot: int | None = 0, status=LineStatus.PROCESSING) -> LineItem:
    return LineItem(
        id=line_id,
        category_id="c-tul",
        variant_id="v-bambu",
        qty=2,
        width=300,
        height=250,
        unit_price=Money.of("50"),
        file_density=Decimal("1.5"),
        subtotal=Money.of("450"),
        note="pencere",
        slot_index=slot,
        line_status=status,
    )


def _order(*lines: LineItem) -> Order:
    return Order(
        id="9",
        customer_name=" Ayşe ",
        customer_phone="0555",
        lines=list(lines),
        status=OrderStatus.PROCESSING,
        order_type=OrderType.QUOTE,
        delivery_date=date(2024, 5, 17),
        discount_percent=Decimal("10"),
    )


class TestCreatePayload:

    def test_header_fields(self):
        payload = to_create_payload(_order(_line("a")))
        assert payload["customerName"] == "Ayşe"
        assert payload["status"] == "processing"
        assert payload["orderType"] == 1
        assert payload["deliveryDate"] == "2024-05-17"
        assert Decimal(payload["discount"]) == Decimal("45")

    def test_items_carry_no_ids(self):
        item = to_create_payload(_order(_line("a", slot=3)))["items"][0]
        assert "id" not in item
        assert item["slotIndex"] == 3
        assert item["lineStatus"] == "processing"
        assert Decimal(item["unitPrice"]) == Decimal("50")
        assert item["fileDensity"] == 1.5


class TestPatchPayload:

    def test_persisted_lines_keep_ids_new_lines_do_not(self):
        payload = to_patch_payload(_order(_line("old"), _line("new", slot=1)), frozenset({"old"}))
        items = payload["items"]
        assert items[0]["id"] == "old"
        assert "id" not in items[1]

    def test_removed_lines_become_delete_markers(self):
        payload = to_patch_payload(_order(_line("keep")), frozenset({"keep", "gone"}))
        assert payload["items"][-1] == {"id": "gone", "_action": "delete"}
        assert len(payload["items"]) == 2

    def test_uses_delivery_at(self):
        payload = to_patch_payload(_order(_line("a")), frozenset())
        assert payload["deliveryAt"] == "2024-05-17"
        assert "deliveryDate" not in payload

    def test_empty_note_sent_as_null(self):
        assert to_patch_payload(_order(_line("a")), frozenset())["note"] is None


class TestOrderFromRaw:

    def test_round_trip_of_line_fields(self):
        original = _order(_line("a", slot=2, status=LineStatus.WORKSHOP))
        raw = to_create_payload(original)
        raw["id"] = "9"
        raw["items"][0]["id"] = "L1"

        order, persisted = order_from_raw(raw, make_catalog())
        line = order.lines[0]
        assert persisted == frozenset({"L1"})
        assert (line.qty, line.width, line.height) == (2, 300, 250)
        assert line.unit_price == Money.of("50")
        assert line.file_density == Decimal("1.5")
        assert line.slot_index == 2
        assert line.line_status is LineStatus.WORKSHOP
        assert order.delivery_date == date(2024, 5, 17)
        assert order.order_type is OrderType.QUOTE

    def test_subtotal_recomputed_from_catalog(self):
        raw = {"id": "1", "items": [
            {"id": "L1", "categoryId": "c-stor", "variantId": "v-zebra",
             "qty": 1, "width": 200, "height": 100, "unitPrice": 100, "subtotal": 1},
        ]}
        order, _ = order_from_raw(raw, make_catalog())
        assert order.lines[0].subtotal == Money.of("200")

    def test_numeric_ids_match_string_catalog_ids(self):
        catalog = Catalog((Category("7", "FON PERDE", (Variant("12", "Saten", Money.of("120")),)),))
        raw = {"id": 3, "items": [
            {"id": 44, "categoryId": 7, "variantId": 12, "qty": 1, "width": 100, "unitPrice": 120,
             "slotIndex": 0},
        ]}
        order, persisted = order_from_raw(raw, catalog)
        line = order.lines[0]
        assert (line.id, line.category_id, line.variant_id) == ("44", "7", "12")
        assert OrderComposer(catalog, order, persisted).slot_table("FON PERDE")[0] is line

    def test_unknown_category_keeps_stored_subtotal(self):
        raw = {"id": "1", "items": [{"id": "L1", "categoryId": "gone", "subtotal": "75"}]}
        order, _ = order_from_raw(raw, make_catalog())
        assert order.lines[0].subtotal == Money.of("75")

    def test_missing_fields_get_safe_defaults(self):
        raw = {"id": "1", "status": "workshop", "items": [
            {"id": "L1", "categoryId": "c-fon", "variantId": "v-saten"},
        ]}
        order, _ = order_from_raw(raw, make_catalog())
        line = order.lines[0]
        assert (line.qty, line.width, line.file_density) == (1, 0, Decimal("1"))
        assert line.slot_index is None
        assert line.line_status is LineStatus.WORKSHOP

    def test_line_status_falls_back_to_processing(self):
        raw = {"id": "1", "status": "bogus", "items": [{"id": "L1", "categoryId": "c-fon"}]}
        order, _ = order_from_raw(raw, make_catalog())
        assert order.status is OrderStatus.PROCESSING
        assert order.lines[0].line_status is LineStatus.PROCESSING

    def test_stored_discount_and_payments(self):
        raw = {"id": "1", "discount": "25", "paidTotal": "100", "items": [
            {"id": "L1", "categoryId": "c-fon", "variantId": "v-saten", "unitPrice": "120",
             "width": 100},
        ]}
        order, _ = order_from_raw(raw, make_catalog())
        totals = order.totals()
        assert totals.discount == Money.of("25")
        assert totals.net_total == Money.of("95")
        assert totals.balance.is_zero


class TestDates:

    def test_to_ymd(self):
        assert to_ymd(date(2024, 1, 2)) == "2024-01-02"
        assert to_ymd(None) is None

    @pytest.mark.parametrize("value, expected", [
        ("2024-05-17", date(2024, 5, 17)),
        ("2024-05-17T00:00:00.000Z", date(2024, 5, 17)),
        ("2024-05-17T23:30:00+03:00", date(2024, 5, 17)),
        ("2024-05-18T01:30:00+03:00", date(2024, 5, 17)),
        (date(2024, 5, 17), date(2024, 5, 17)),
    ])
    def test_parse_date(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_parse_date_invalid(self, value):
        assert parse_date(value) is None
