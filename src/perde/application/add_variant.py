"""Application service: Add Variant use case."""

from __future__ import annotations

import logging

from perde.domain.exceptions import ValidationError
from perde.domain.model.catalog import Catalog, Variant, parse_price
from perde.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class AddVariantHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(
        self, catalog: Catalog, category_id: str, name: str, price: object
    ) -> tuple[Catalog, Variant]:
        """Create a variant on the backend, then append it to the catalog.

        The catalog is only extended with what the backend confirmed; if the
        call fails the error propagates and the given catalog stays as is.
        """
        if not name or not name.strip():
            raise ValidationError("Variant name is required")
        category = catalog.get(category_id)

        variant = self._catalog_repo.create_variant(
            category.id, name.strip(), parse_price(price)
        )
        logger.info("Variant %s added to %s", variant.name, category.name)
        return catalog.append_variant(category.id, variant), variant
