"""Domain service: Order Composer.

Holds the in-memory order being composed or edited together with the
catalog snapshot and the slot tables of its boxed categories.  Every line
mutation goes through here so that slot occupancy and the order's line set
never drift apart.  Totals are read straight off the Order aggregate, so
they are recomputed on every call.
"""

from __future__ import annotations

from perde.domain.model.catalog import BOX_COUNTS, Catalog, Category, normalize_name
from perde.domain.model.line_item import LineItem, LineStatus
from perde.domain.model.order import Order, OrderTotals
from perde.domain.model.slots import SlotAllocator, quick_rows
from perde.domain.model.value_objects import to_decimal

UNKNOWN_SECTION = "Kategori"


class OrderComposer:

    def __init__(
        self,
        catalog: Catalog,
        order: Order | None = None,
        persisted_ids: frozenset[str] = frozenset(),
    ) -> None:
        self.catalog = catalog
        self.order = order if order is not None else Order(id=None)
        self.persisted_ids = frozenset(persisted_ids)
        self.slots = SlotAllocator()
        for line in self.order.lines:
            self._place(line, line.slot_index)

    # --- Catalog --------------------------------------------------------------

    def use_catalog(self, catalog: Catalog) -> None:
        """Swap in an updated catalog snapshot (e.g. after a variant append)."""
        self.catalog = catalog

    def category_of(self, line: LineItem) -> Category | None:
        return self.catalog.find(line.category_id)

    # --- Line mutations -------------------------------------------------------

    def add_line(self, line: LineItem, slot_index: int | None = None) -> LineItem:
        self.order.add_line(line)
        self._place(line, slot_index)
        return line

    def update_line(
        self, line_id: str, updated: LineItem, slot_index: int | None = None
    ) -> LineItem:
        """Overwrite an existing line's fields in place.

        The line keeps its identity; for boxed categories it stays in (or
        moves to) *slot_index*, defaulting to the slot it already holds.
        """
        line = self.order.get_line(line_id)
        target = slot_index if slot_index is not None else line.slot_index
        self.slots.remove(line.id)
        line.category_id = updated.category_id
        line.variant_id = updated.variant_id
        line.qty = updated.qty
        line.width = updated.width
        line.height = updated.height
        line.unit_price = updated.unit_price
        line.file_density = updated.file_density
        line.subtotal = updated.subtotal
        line.note = updated.note
        line.line_status = updated.line_status
        self._place(line, target)
        return line

    def remove_line(self, line_id: str) -> LineItem:
        line = self.order.remove_line(line_id)
        self.slots.remove(line_id)
        return line

    def swap(self, category_name: str, i: int, j: int) -> None:
        self.slots.swap(category_name, i, j)

    def set_line_status(self, line_id: str, status: LineStatus) -> None:
        self.order.get_line(line_id).line_status = status

    # --- Order fields ---------------------------------------------------------

    def set_discount(self, percent: object = 0, fixed_amount: object = 0) -> None:
        self.order.discount_percent = to_decimal(percent, self.order.discount_percent)
        self.order.discount_fixed_amount = to_decimal(
            fixed_amount, self.order.discount_fixed_amount
        )

    def totals(self) -> OrderTotals:
        return self.order.totals()

    def mark_persisted(self, order: Order) -> None:
        """Adopt the server's view of the order after a successful save."""
        self.order = order
        self.persisted_ids = frozenset(line.id for line in order.lines)
        self.slots = SlotAllocator()
        for line in order.lines:
            self._place(line, line.slot_index)

    # --- Views ----------------------------------------------------------------

    def slot_table(self, category_name: str) -> list[LineItem | None]:
        return self.slots.table(category_name)

    def quick_lines(self, category_name: str) -> list[LineItem]:
        key = normalize_name(category_name)
        return [
            line
            for line in self.order.lines
            if self._section_key(line) == key
        ]

    def quick_rows(self, category_name: str) -> list[tuple[int, LineItem | None]]:
        return quick_rows(self.quick_lines(category_name))

    def section_titles(self) -> list[str]:
        """Boxed sections first in fixed order, then others alphabetically."""
        others: dict[str, str] = {}
        for line in self.order.lines:
            category = self.category_of(line)
            title = category.name.strip() if category else UNKNOWN_SECTION
            key = normalize_name(title)
            if key not in BOX_COUNTS:
                others.setdefault(key, title)
        return list(BOX_COUNTS) + sorted(others.values(), key=normalize_name)

    # --- Internal helpers -----------------------------------------------------

    def _section_key(self, line: LineItem) -> str:
        category = self.category_of(line)
        return category.key if category else normalize_name(UNKNOWN_SECTION)

    def _place(self, line: LineItem, slot_index: int | None) -> None:
        category = self.category_of(line)
        if category is None:
            return
        if not category.kind.is_boxed:
            line.slot_index = None
            return
        self.slots.place(category.key, line, slot_index)

