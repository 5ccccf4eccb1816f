"""Application service: Add Payment use case."""

from __future__ import annotations

import logging
from decimal import Decimal

from perde.application.dto import PaymentDTO, PaymentRequest, PaymentTotalsDTO
from perde.domain.exceptions import ValidationError
from perde.domain.model.order import PaymentMethod
from perde.domain.model.value_objects import Money, to_decimal
from perde.domain.repository.order_gateway import OrderGateway

logger = logging.getLogger(__name__)


class AddPaymentHandler:

    def __init__(self, order_gateway: OrderGateway) -> None:
        self._order_gateway = order_gateway

    def handle(self, order_id: str, request: PaymentRequest) -> PaymentTotalsDTO:
        """Record a payment against a saved order.

        The backend enforces the upper bound (remaining balance); only the
        shape of the request is checked here.
        """
        amount = to_decimal(request.amount, Decimal("0"))
        if amount <= 0:
            raise ValidationError(f"Payment amount must be positive, got {request.amount!r}")
        try:
            method = PaymentMethod(str(request.method).strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown payment method '{request.method}'") from exc
        note = (request.note or "").strip() or None

        response = self._order_gateway.add_payment(
            order_id, PaymentDTO(amount=amount, method=method.value, note=note).to_dict()
        )
        logger.info("Payment of %s recorded for order %s", amount, order_id)

        totals = response.get("totals") or {}
        return PaymentTotalsDTO(
            net_total=str(_money(totals.get("netTotal"))),
            total_paid=str(_money(totals.get("totalPaid"))),
            remaining=str(_money(totals.get("remaining"))),
        )


def _money(value: object) -> Money:
    return Money(max(Decimal("0"), to_decimal(value, Decimal("0"))))
