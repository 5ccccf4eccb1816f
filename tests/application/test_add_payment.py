"""Tests for the AddPayment use case."""

import pytest

from perde.application.add_payment import AddPaymentHandler
from perde.application.dto import PaymentRequest
from perde.domain.exceptions import GatewayError, ValidationError
from tests.fakes import FakeOrderGateway


def _setup() -> tuple[AddPaymentHandler, FakeOrderGateway]:
    gateway = FakeOrderGateway()
    gateway.payments["1"] = []
    return AddPaymentHandler(gateway), gateway


class TestAddPayment:

    def test_sends_normalized_payload(self):
        handler, gateway = _setup()
        handler.handle("1", PaymentRequest("150,50", "transfer", "  kapora  "))
        assert gateway.payments["1"] == [
            {"amount": "150.50", "method": "TRANSFER", "note": "kapora"}
        ]

    def test_blank_note_sent_as_null(self):
        handler, gateway = _setup()
        handler.handle("1", PaymentRequest("10", "CASH", "   "))
        assert gateway.payments["1"][0]["note"] is None

    def test_returns_totals(self):
        handler, _ = _setup()
        handler.handle("1", PaymentRequest("10", "CASH"))
        totals = handler.handle("1", PaymentRequest("5", "CARD"))
        assert totals.total_paid == "15,00 ₺"

    @pytest.mark.parametrize("amount", ["0", "-5", "abc", None])
    def test_non_positive_amount_rejected(self, amount):
        handler, gateway = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle("1", PaymentRequest(amount, "CASH"))
        assert gateway.calls == []

    def test_unknown_method_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Unknown payment method") as exc_info:
            handler.handle("1", PaymentRequest("10", "CHEQUE"))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_backend_rejection_propagates(self):
        handler, gateway = _setup()
        gateway.fail_payment = True
        with pytest.raises(GatewayError) as exc_info:
            handler.handle("1", PaymentRequest("10", "CASH"))
        assert exc_info.value.status == 400
