"""Category catalog: categories and their priced variants.

The catalog is loaded once per editing session and treated as read-only,
except that a confirmed new variant can be appended.  Appending never
mutates in place: ``Catalog.append_variant`` returns a new catalog.

Category "kind" (boxed with N slots, or unboxed quick-entry) and pricing
model are resolved once from the category name when the Category is
built, so the rest of the code works with typed values instead of
re-normalizing strings.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum

from perde.domain.exceptions import EntityNotFoundError, ValidationError
from perde.domain.model.value_objects import Money, to_decimal

# Fixed slot counts per boxed category (matches the printed order form).
BOX_COUNTS: dict[str, int] = {
    "TÜL PERDE": 10,
    "FON PERDE": 5,
    "GÜNEŞLİK": 5,
}
AREA_PRICED = "STOR PERDE"
DEFAULT_CATEGORIES = ("TÜL PERDE", "FON PERDE", "GÜNEŞLİK", "STOR PERDE", "AKSESUAR")


def normalize_name(name: str) -> str:
    """Trim and upper-case a category name using Turkish casing rules.

    ``str.upper`` maps the dotted ``i`` to ``I``; Turkish maps it to ``İ``.
    """
    text = unicodedata.normalize("NFC", (name or "").strip())
    return text.replace("i", "İ").upper()


# ---------------------------------------------------------------------------
# Category kind (tagged variant)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Boxed:
    """A category laid out in a fixed number of numbered slots."""

    slot_count: int

    @property
    def is_boxed(self) -> bool:
        return True


@dataclass(frozen=True)
class Unboxed:
    """A quick-entry category; lines kept in insertion order."""

    @property
    def is_boxed(self) -> bool:
        return False


CategoryKind = Boxed | Unboxed


class PricingModel(Enum):
    AREA = "AREA"  # unit price per m²
    LINEAR = "LINEAR"  # unit price per linear meter × density


def resolve_kind(name: str) -> CategoryKind:
    slots = BOX_COUNTS.get(normalize_name(name))
    return Boxed(slots) if slots is not None else Unboxed()


def resolve_pricing(name: str) -> PricingModel:
    if normalize_name(name) == AREA_PRICED:
        return PricingModel.AREA
    return PricingModel.LINEAR


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Variant:
    id: str
    name: str
    unit_price: Money


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    variants: tuple[Variant, ...] = ()
    kind: CategoryKind = field(init=False)
    pricing: PricingModel = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", resolve_kind(self.name))
        object.__setattr__(self, "pricing", resolve_pricing(self.name))

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    @property
    def first_variant(self) -> Variant | None:
        return self.variants[0] if self.variants else None

    def find_variant(self, variant_id: str) -> Variant | None:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None


@dataclass(frozen=True)
class Catalog:
    """Immutable snapshot of the category catalog."""

    categories: tuple[Category, ...] = ()

    def get(self, category_id: str) -> Category:
        for category in self.categories:
            if category.id == category_id:
                return category
        raise EntityNotFoundError(f"Category '{category_id}' not found")

    def find(self, category_id: str) -> Category | None:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def find_by_name(self, name: str) -> Category | None:
        key = normalize_name(name)
        for category in self.categories:
            if category.key == key:
                return category
        return None

    def find_variant(self, variant_id: str) -> Variant | None:
        for category in self.categories:
            variant = category.find_variant(variant_id)
            if variant is not None:
                return variant
        return None

    def append_variant(self, category_id: str, variant: Variant) -> Catalog:
        """Return a new catalog with *variant* appended to the category."""
        category = self.get(category_id)
        if category.find_variant(variant.id) is not None:
            raise ValidationError(
                f"Variant '{variant.id}' already exists in {category.name}"
            )
        updated = replace(category, variants=category.variants + (variant,))
        return Catalog(
            tuple(updated if c.id == category_id else c for c in self.categories)
        )


def parse_price(value: object) -> Money:
    """Lenient price parsing: decimal comma allowed, invalid or negative -> 0."""
    amount = to_decimal(value, Decimal("0"))
    return Money(amount if amount >= 0 else Decimal("0"))
