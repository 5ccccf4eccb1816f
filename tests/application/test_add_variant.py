"""Tests for the AddVariant use case."""

import pytest

from perde.application.add_variant import AddVariantHandler
from perde.domain.exceptions import EntityNotFoundError, GatewayError, ValidationError
from perde.domain.model.value_objects import Money
from perde.domain.service.line_editor import EditorFlow, LineEditor
from perde.domain.service.order_composer import OrderComposer
from tests.fakes import FakeCatalogRepository, make_catalog


class TestAddVariant:

    def test_appends_confirmed_variant(self):
        repo = FakeCatalogRepository()
        catalog = make_catalog()
        updated, variant = AddVariantHandler(repo).handle(catalog, "c-aks", "  Rustik ", "12,5")
        assert variant.name == "Rustik"
        assert variant.unit_price == Money.of("12.5")
        assert updated.get("c-aks").variants[-1] == variant
        assert catalog.get("c-aks").find_variant(variant.id) is None

    def test_invalid_price_becomes_zero(self):
        _, variant = AddVariantHandler(FakeCatalogRepository()).handle(
            make_catalog(), "c-aks", "Bedava", "abc"
        )
        assert variant.unit_price.is_zero

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddVariantHandler(FakeCatalogRepository()).handle(make_catalog(), "c-aks", " ", "1")

    def test_unknown_category(self):
        with pytest.raises(EntityNotFoundError):
            AddVariantHandler(FakeCatalogRepository()).handle(make_catalog(), "nope", "X", "1")

    def test_failure_leaves_editor_selection(self):
        repo = FakeCatalogRepository()
        repo.fail_create = True
        composer = OrderComposer(make_catalog())
        editor = LineEditor(composer, EditorFlow.NEW_ORDER)
        editor.open_add("TÜL PERDE", 0)
        editor.select_variant("v-keten")

        with pytest.raises(GatewayError):
            AddVariantHandler(repo).handle(composer.catalog, "c-tul", "Yeni", "10")
        assert editor.selected_variant.id == "v-keten"
        assert len(composer.catalog.get("c-tul").variants) == 2

    def test_editor_can_pick_new_variant(self):
        composer = OrderComposer(make_catalog())
        editor = LineEditor(composer, EditorFlow.NEW_ORDER)
        editor.open_add("TÜL PERDE", 0)
        updated, variant = AddVariantHandler(FakeCatalogRepository()).handle(
            composer.catalog, "c-tul", "Yeni", "10"
        )
        editor.use_catalog(updated)
        editor.select_variant(variant.id)
        assert editor.commit().unit_price == Money.of("10")
