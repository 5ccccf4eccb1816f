"""JSON-file-backed implementation of CatalogRepository.

The default categories are seeded on every load, so a fresh data
directory always offers the five fixed sections of the order form.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from perde.domain.exceptions import GatewayError
from perde.domain.model.catalog import (
    DEFAULT_CATEGORIES,
    Catalog,
    Category,
    Variant,
    normalize_name,
)
from perde.domain.model.value_objects import Money, to_decimal
from perde.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

_DEFAULT_ORDER = {name: i for i, name in enumerate(DEFAULT_CATEGORIES)}


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CatalogRepository interface ------------------------------------------

    def load(self) -> Catalog:
        raw = self._seed_defaults(self._load_raw())
        categories = sorted(
            (self._to_domain(item) for item in raw), key=self._section_order
        )
        return Catalog(tuple(categories))

    def create_variant(self, category_id: str, name: str, unit_price: Money) -> Variant:
        raw = self._load_raw()
        category = next((c for c in raw if c["id"] == category_id), None)
        if category is None:
            raise GatewayError("category_not_found", status=404)
        if not name.strip():
            raise GatewayError("validation_error: name is required", status=422)

        variant = {
            "id": str(self._next_variant_id(raw)),
            "name": name.strip(),
            "unitPrice": str(unit_price.amount),
        }
        category.setdefault("variants", []).append(variant)
        self._persist_raw(raw)
        return self._variant(variant)

    # --- Serialization --------------------------------------------------------

    @classmethod
    def _to_domain(cls, raw: dict) -> Category:
        return Category(
            id=raw["id"],
            name=raw["name"],
            variants=tuple(cls._variant(v) for v in raw.get("variants", [])),
        )

    @staticmethod
    def _variant(raw: dict) -> Variant:
        amount = to_decimal(raw.get("unitPrice"), Decimal("0"))
        return Variant(
            id=raw["id"],
            name=raw["name"],
            unit_price=Money(max(Decimal("0"), amount)),
        )

    @staticmethod
    def _section_order(category: Category) -> tuple[int, str]:
        return _DEFAULT_ORDER.get(category.key, len(_DEFAULT_ORDER)), category.key

    # --- Seeding / ids --------------------------------------------------------

    def _seed_defaults(self, raw: list[dict]) -> list[dict]:
        existing = {normalize_name(c["name"]) for c in raw}
        missing = [name for name in DEFAULT_CATEGORIES if name not in existing]
        if not missing:
            return raw
        next_id = max((int(c["id"]) for c in raw if str(c["id"]).isdigit()), default=0) + 1
        for offset, name in enumerate(missing):
            raw.append({"id": str(next_id + offset), "name": name, "variants": []})
        logger.info("Seeded default categories: %s", ", ".join(missing))
        self._persist_raw(raw)
        return raw

    @staticmethod
    def _next_variant_id(raw: list[dict]) -> int:
        ids = [
            int(v["id"])
            for c in raw
            for v in c.get("variants", [])
            if str(v["id"]).isdigit()
        ]
        return max(ids, default=0) + 1

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, categories: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(categories, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
