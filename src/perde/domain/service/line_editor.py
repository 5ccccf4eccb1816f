"""Domain service: Line Editor.

Models the add/edit drawer for a single curtain line:

    IDLE --open_add/open_quick--> COMPOSING --commit--> IDLE (line committed)
    IDLE --open_edit-----------> EDITING   --commit--> IDLE (line updated)
                                 EDITING   --delete--> IDLE (line removed)
    COMPOSING/EDITING --close--> IDLE (nothing changes)

Numeric fields are coerced to safe defaults rather than rejected
(qty -> 1, width/height -> 0, density -> 1).  Only a missing category or
variant, or a non-finite manual price, blocks a commit.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from perde.domain.exceptions import EntityNotFoundError, ValidationError
from perde.domain.model.catalog import Catalog, Category, Variant
from perde.domain.model.line_item import LineItem, LineStatus, new_line_id
from perde.domain.model.value_objects import Money, to_decimal
from perde.domain.service.order_composer import OrderComposer
from perde.domain.service.pricing import (
    line_subtotal,
    sanitize_density,
    sanitize_dimension,
    sanitize_qty,
)

PRICE_TOLERANCE = Decimal("0.0001")


class EditorFlow(Enum):
    """Which screen hosts the editor; each has its own default line status."""

    NEW_ORDER = "new_order"
    EDIT_ORDER = "edit_order"

    @property
    def default_status(self) -> LineStatus:
        if self is EditorFlow.NEW_ORDER:
            return LineStatus.PROCESSING
        return LineStatus.PENDING


class EditorPhase(Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    EDITING = "editing"


class LineEditor:

    def __init__(self, composer: OrderComposer, flow: EditorFlow) -> None:
        self._composer = composer
        self.flow = flow
        self.phase = EditorPhase.IDLE
        self._reset()

    # --- Opening --------------------------------------------------------------

    def open_add(self, section_title: str, slot_index: int | None) -> None:
        """Open the drawer on an empty slot of a boxed section."""
        self._open_new(section_title)
        self.target_slot = slot_index
        self.line_status = self.flow.default_status

    def open_quick(self, category_name: str) -> None:
        """Open the drawer for a new quick-entry row (STOR PERDE, AKSESUAR...).

        Quick-entry lines are always appended after the existing rows.
        """
        self._open_new(category_name)
        self.target_slot = None
        self.line_status = LineStatus.PENDING

    def open_edit(self, line_id: str) -> None:
        line = self._composer.order.get_line(line_id)
        self._reset()
        self.phase = EditorPhase.EDITING
        self.editing_line_id = line.id
        self.category_id = line.category_id
        self.variant_id = line.variant_id
        self.qty = line.qty
        self.width = line.width
        self.height = line.height
        self.density = line.file_density
        self.note = line.note or ""
        self.line_status = line.line_status
        self.target_slot = line.slot_index
        variant = self.selected_variant
        catalog_price = variant.unit_price if variant else line.unit_price
        self.price_input = line.unit_price.amount
        self.manual_price = (
            abs(line.unit_price.amount - catalog_price.amount) > PRICE_TOLERANCE
        )

    def close(self) -> None:
        self.phase = EditorPhase.IDLE
        self._reset()

    # --- Field changes --------------------------------------------------------

    @property
    def selected_category(self) -> Category | None:
        if not self.category_id:
            return None
        return self._composer.catalog.find(self.category_id)

    @property
    def selected_variant(self) -> Variant | None:
        category = self.selected_category
        if category is None or not self.variant_id:
            return None
        return category.find_variant(self.variant_id)

    def select_category(self, category_id: str | None) -> None:
        """Change category; the variant resets to the category's first one."""
        self._require_open()
        category = self._composer.catalog.find(category_id) if category_id else None
        if category_id and category is None:
            raise EntityNotFoundError(f"Category '{category_id}' not found")
        self.category_id = category.id if category else None
        first = category.first_variant if category else None
        self.variant_id = first.id if first else None
        self._sync_price()

    def select_variant(self, variant_id: str) -> None:
        self._require_open()
        category = self.selected_category
        if category is None or category.find_variant(variant_id) is None:
            raise EntityNotFoundError(f"Variant '{variant_id}' not in selected category")
        self.variant_id = variant_id
        self._sync_price()

    def set_manual_price(self, enabled: bool, price: object = None) -> None:
        """Freeze the unit price independent of the variant, or snap back."""
        self._require_open()
        self.manual_price = enabled
        if enabled and price is not None:
            self.price_input = to_decimal(price, Decimal("NaN"))
        self._sync_price()

    def use_catalog(self, catalog: Catalog) -> None:
        """Adopt a catalog that gained a confirmed variant; keeps selection."""
        self._composer.use_catalog(catalog)
        self._sync_price()

    # --- Pricing --------------------------------------------------------------

    @property
    def unit_price(self) -> Money | None:
        if self.manual_price:
            if not self.price_input.is_finite() or self.price_input < 0:
                return None
            return Money(self.price_input)
        variant = self.selected_variant
        return variant.unit_price if variant else None

    def preview(self) -> Money | None:
        """Live subtotal for the current drawer fields, or None."""
        category = self.selected_category
        price = self.unit_price
        if category is None or self.selected_variant is None or price is None:
            return None
        return line_subtotal(
            category.pricing, price, self.qty, self.width, self.height, self.density
        )

    # --- Commit / delete ------------------------------------------------------

    def commit(self) -> LineItem:
        self._require_open()
        category = self.selected_category
        variant = self.selected_variant
        if category is None or variant is None:
            raise ValidationError("Select a category and a variant first")
        price = self.unit_price
        if price is None:
            raise ValidationError(f"Invalid unit price: {self.price_input}")

        draft = LineItem(
            id=self.editing_line_id or new_line_id(),
            category_id=category.id,
            variant_id=variant.id,
            qty=sanitize_qty(self.qty),
            width=sanitize_dimension(self.width),
            height=sanitize_dimension(self.height),
            unit_price=price,
            file_density=sanitize_density(self.density),
            subtotal=line_subtotal(
                category.pricing, price, self.qty, self.width, self.height, self.density
            ),
            note=self.note.strip() or None,
            line_status=self.line_status,
        )
        if self.phase is EditorPhase.EDITING:
            line = self._composer.update_line(draft.id, draft, self.target_slot)
        else:
            line = self._composer.add_line(draft, self.target_slot)
        self.close()
        return line

    def delete(self) -> LineItem:
        """Remove the line being edited and close the drawer in one step."""
        if self.phase is not EditorPhase.EDITING or self.editing_line_id is None:
            raise ValidationError("No line is being edited")
        line = self._composer.remove_line(self.editing_line_id)
        self.close()
        return line

    # --- Internal helpers -----------------------------------------------------

    def _open_new(self, category_name: str) -> None:
        self._reset()
        self.phase = EditorPhase.COMPOSING
        category = self._composer.catalog.find_by_name(category_name)
        self.category_id = category.id if category else None
        first = category.first_variant if category else None
        self.variant_id = first.id if first else None
        self._sync_price()

    def _sync_price(self) -> None:
        if self.manual_price:
            return
        variant = self.selected_variant
        self.price_input = variant.unit_price.amount if variant else Decimal("0")

    def _require_open(self) -> None:
        if self.phase is EditorPhase.IDLE:
            raise ValidationError("Line editor is not open")

    def _reset(self) -> None:
        self.editing_line_id: str | None = None
        self.category_id: str | None = None
        self.variant_id: str | None = None
        self.qty: object = 1
        self.width: object = 0
        self.height: object = 0
        self.density: object = Decimal("1.0")
        self.note = ""
        self.line_status = self.flow.default_status
        self.target_slot: int | None = None
        self.manual_price = False
        self.price_input = Decimal("0")
