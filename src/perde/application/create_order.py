"""Application service: Create Order use case.

Saving a new order is two backend calls: the order itself, then the
optional initial payment.  The first failing aborts everything and leaves
the composer untouched; the second failing leaves a saved order without
its payment, which is reported back instead of raised.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from perde.application.add_payment import AddPaymentHandler
from perde.application.dto import CreateOrderResult, PaymentRequest
from perde.application.order_mapper import order_from_raw, to_create_payload
from perde.domain.exceptions import DomainException, GatewayError, SaveFailedError
from perde.domain.model.value_objects import Money, to_decimal
from perde.domain.repository.order_gateway import OrderGateway
from perde.domain.service.order_composer import OrderComposer

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(self, order_gateway: OrderGateway) -> None:
        self._order_gateway = order_gateway
        self._payments = AddPaymentHandler(order_gateway)

    def handle(
        self,
        composer: OrderComposer,
        initial_payment: PaymentRequest | None = None,
    ) -> CreateOrderResult:
        """Persist the composed order, then record the initial payment.

        Steps:
        1. Validate customer and lines (no network call on failure).
        2. Send the create payload; a gateway error becomes SaveFailedError.
        3. Adopt the server's order (ids, stored prices) into the composer.
        4. Record the payment, if one was given, as a separate call, and
           count it toward the composer's paid amount.
        """
        order = composer.order
        order.validate_for_save()

        try:
            created = self._order_gateway.create_order(to_create_payload(order))
        except GatewayError as exc:
            logger.error("Order save failed for %s: %s", order.customer_name, exc)
            raise SaveFailedError(f"Order could not be saved: {exc}") from exc

        saved, _ = order_from_raw(created, composer.catalog)
        composer.mark_persisted(saved)
        order_id = str(saved.id)
        logger.info("Order %s created with %d lines", order_id, len(saved.lines))

        if initial_payment is None:
            return CreateOrderResult(order_id=order_id)

        try:
            self._payments.handle(order_id, initial_payment)
        except DomainException as exc:
            logger.warning("Order %s saved but initial payment failed: %s", order_id, exc)
            return CreateOrderResult(order_id=order_id, payment_error=str(exc))

        paid = Money(to_decimal(initial_payment.amount, Decimal("0")))
        composer.order.paid_amount = composer.order.paid_amount + paid
        return CreateOrderResult(order_id=order_id, payment_recorded=True)
