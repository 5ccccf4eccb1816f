"""Application service: turn typed line specs into committed order lines.

Drives the LineEditor exactly as the order screen does: boxed categories
open on a slot, quick-entry categories open on the next free row.
"""

from __future__ import annotations

from perde.application.dto import LineSpec
from perde.domain.exceptions import DomainException, EntityNotFoundError
from perde.domain.model.catalog import Category, Variant, normalize_name
from perde.domain.model.line_item import LineItem
from perde.domain.service.line_editor import LineEditor
from perde.domain.service.order_composer import OrderComposer


def find_variant_by_name(category: Category, name: str) -> Variant:
    key = normalize_name(name)
    for variant in category.variants:
        if normalize_name(variant.name) == key:
            return variant
    raise EntityNotFoundError(f"Variant '{name}' not found in {category.name}")


def apply_line_spec(composer: OrderComposer, editor: LineEditor, spec: LineSpec) -> LineItem:
    category = composer.catalog.find_by_name(spec.category_name)
    if category is None:
        raise EntityNotFoundError(f"Category not found: '{spec.category_name}'")
    variant = find_variant_by_name(category, spec.variant_name)

    if category.kind.is_boxed:
        editor.open_add(category.name, spec.slot_index)
    else:
        editor.open_quick(category.name)

    try:
        editor.select_variant(variant.id)
        editor.qty = spec.qty
        editor.width = spec.width
        editor.height = spec.height
        editor.density = spec.density
        editor.note = spec.note
        if spec.unit_price is not None:
            editor.set_manual_price(True, spec.unit_price)
        return editor.commit()
    except DomainException:
        editor.close()
        raise
