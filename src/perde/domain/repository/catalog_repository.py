"""Abstract repository for the category catalog.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, REST API) live in
the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from perde.domain.model.catalog import Catalog, Variant
from perde.domain.model.value_objects import Money


class CatalogRepository(ABC):

    @abstractmethod
    def load(self) -> Catalog:
        """Return the full catalog (categories with their variants)."""

    @abstractmethod
    def create_variant(self, category_id: str, name: str, unit_price: Money) -> Variant:
        """Create a variant under a category and return it as confirmed."""
