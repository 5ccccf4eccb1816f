"""Application service: Load Order use case (query)."""

from __future__ import annotations

from perde.application.order_mapper import order_from_raw
from perde.domain.exceptions import EntityNotFoundError
from perde.domain.repository.catalog_repository import CatalogRepository
from perde.domain.repository.order_gateway import OrderGateway
from perde.domain.service.order_composer import OrderComposer


class LoadOrderHandler:

    def __init__(self, order_gateway: OrderGateway, catalog_repo: CatalogRepository) -> None:
        self._order_gateway = order_gateway
        self._catalog_repo = catalog_repo

    def handle(self, order_id: str) -> OrderComposer:
        """Fetch a stored order and rebuild an editing session around it."""
        raw = self._order_gateway.get_order(order_id)
        if raw is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        catalog = self._catalog_repo.load()
        order, persisted_ids = order_from_raw(raw, catalog)
        return OrderComposer(catalog, order, persisted_ids)
