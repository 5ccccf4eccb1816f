"""Unit tests for the category catalog."""

from decimal import Decimal

import pytest

from perde.domain.exceptions import EntityNotFoundError, ValidationError
from perde.domain.model.catalog import (
    Boxed,
    Catalog,
    Category,
    PricingModel,
    Unboxed,
    Variant,
    normalize_name,
    parse_price,
)
from perde.domain.model.value_objects import Money
from tests.fakes import make_catalog


class TestNormalizeName:

    def test_turkish_dotted_i(self):
        assert normalize_name("güneşlik") == "GÜNEŞLİK"

    def test_trims(self):
        assert normalize_name("  tül perde ") == "TÜL PERDE"

    def test_none_safe(self):
        assert normalize_name(None) == ""  # type: ignore[arg-type]


class TestCategoryKind:

    @pytest.mark.parametrize("name, slots", [
        ("TÜL PERDE", 10),
        ("fon perde", 5),
        ("Güneşlik", 5),
    ])
    def test_boxed_categories(self, name, slots):
        category = Category("c", name)
        assert category.kind == Boxed(slots)
        assert category.kind.is_boxed

    def test_other_categories_are_quick_entry(self):
        assert Category("c", "AKSESUAR").kind == Unboxed()
        assert not Category("c", "STOR PERDE").kind.is_boxed

    def test_pricing_model(self):
        assert Category("c", "stor perde").pricing is PricingModel.AREA
        assert Category("c", "TÜL PERDE").pricing is PricingModel.LINEAR


class TestCatalog:

    def test_find_by_name_is_case_insensitive(self):
        catalog = make_catalog()
        assert catalog.find_by_name("güneşlik").id == "c-gun"

    def test_get_unknown_raises(self):
        with pytest.raises(EntityNotFoundError):
            make_catalog().get("nope")

    def test_find_variant_across_categories(self):
        assert make_catalog().find_variant("v-zebra").name == "Zebra"

    def test_append_variant_returns_new_catalog(self):
        catalog = make_catalog()
        variant = Variant("v-x", "Yeni", Money.of("15"))
        updated = catalog.append_variant("c-aks", variant)

        assert updated.get("c-aks").variants[-1] == variant
        assert catalog.get("c-aks").find_variant("v-x") is None

    def test_append_duplicate_rejected(self):
        catalog = make_catalog()
        with pytest.raises(ValidationError, match="already exists"):
            catalog.append_variant("c-tul", Variant("v-bambu", "Bambu", Money.of("1")))

    def test_first_variant(self):
        assert make_catalog().get("c-tul").first_variant.id == "v-bambu"
        assert Catalog((Category("c", "X"),)).get("c").first_variant is None


class TestParsePrice:

    @pytest.mark.parametrize("value, expected", [
        ("12,50", Decimal("12.50")),
        (7, Decimal("7")),
        ("abc", Decimal("0")),
        ("-3", Decimal("0")),
        (None, Decimal("0")),
    ])
    def test_lenient(self, value, expected):
        assert parse_price(value).amount == expected
