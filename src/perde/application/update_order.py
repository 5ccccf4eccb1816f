"""Application service: Update Order use case."""

from __future__ import annotations

import logging

from perde.application.order_mapper import order_from_raw, to_patch_payload
from perde.domain.exceptions import GatewayError, SaveFailedError, ValidationError
from perde.domain.model.order import Order
from perde.domain.repository.order_gateway import OrderGateway
from perde.domain.service.order_composer import OrderComposer

logger = logging.getLogger(__name__)


class UpdateOrderHandler:

    def __init__(self, order_gateway: OrderGateway) -> None:
        self._order_gateway = order_gateway

    def handle(self, composer: OrderComposer) -> Order:
        """Patch a stored order with the composer's current state.

        On failure nothing local changes, so the same edit can be retried.
        On success the composer adopts the server's order and the new set
        of persisted line ids.
        """
        order = composer.order
        if order.id is None:
            raise ValidationError("Order has not been saved yet")
        order.validate_for_save()

        payload = to_patch_payload(order, composer.persisted_ids)
        try:
            updated = self._order_gateway.update_order(order.id, payload)
        except GatewayError as exc:
            logger.error("Order %s update failed: %s", order.id, exc)
            raise SaveFailedError(f"Order #{order.id} could not be saved: {exc}") from exc

        saved, _ = order_from_raw(updated, composer.catalog)
        composer.mark_persisted(saved)
        logger.info("Order %s updated (%d lines)", saved.id, len(saved.lines))
        return saved
