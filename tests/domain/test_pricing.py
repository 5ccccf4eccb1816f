"""Unit tests for the line pricing calculator."""

from decimal import Decimal

import pytest

from perde.domain.exceptions import ValidationError
from perde.domain.model.catalog import PricingModel
from perde.domain.model.value_objects import Money
from perde.domain.service.pricing import (
    compute_subtotal,
    line_subtotal,
    sanitize_density,
    sanitize_dimension,
    sanitize_qty,
)


class TestAreaPricing:

    def test_stor_perde_priced_per_square_meter(self):
        # 100 × 2.00 m × 1.50 m × 2
        assert compute_subtotal("STOR PERDE", 100, 2, 200, 150) == Money.of("600")

    def test_name_is_normalized(self):
        assert compute_subtotal("  stor perde ", 100, 1, 100, 100) == Money.of("100")

    def test_density_ignored(self):
        assert compute_subtotal("STOR PERDE", 100, 1, 100, 100, 3) == Money.of("100")

    def test_zero_height_gives_zero(self):
        assert compute_subtotal("STOR PERDE", 100, 1, 200, 0).is_zero


class TestLinearPricing:

    def test_tul_with_density(self):
        # 50 × max(1, 3.00 m × 1.5) × 1
        assert compute_subtotal("TÜL PERDE", 50, 1, 300, 0, 1.5) == Money.of("225")

    def test_never_less_than_one_unit(self):
        assert compute_subtotal("FON PERDE", 120, 2, 40, 0, 1) == Money.of("240")

    def test_zero_width_still_bills_one_unit(self):
        assert compute_subtotal("AKSESUAR", 40, 3, 0) == Money.of("120")

    def test_invalid_density_treated_as_one(self):
        assert compute_subtotal("TÜL PERDE", 10, 1, 200, 0, 0) == Money.of("20")
        assert compute_subtotal("TÜL PERDE", 10, 1, 200, 0, "abc") == Money.of("20")

    def test_line_subtotal_with_model(self):
        price = Money.of("10")
        assert line_subtotal(PricingModel.LINEAR, price, 1, 250, 0, 2) == Money.of("50")


class TestSanitization:

    def test_qty_floored_and_at_least_one(self):
        assert sanitize_qty("2.7") == 2
        assert sanitize_qty(0) == 1
        assert sanitize_qty(None) == 1

    def test_dimension_floored_and_non_negative(self):
        assert sanitize_dimension(150.9) == 150
        assert sanitize_dimension(-20) == 0
        assert sanitize_dimension(float("nan")) == 0

    def test_density_positive(self):
        assert sanitize_density("2,5") == Decimal("2.5")
        assert sanitize_density(-1) == Decimal("1")

    def test_fractional_inputs_floored_before_pricing(self):
        assert compute_subtotal("STOR PERDE", 100, 1.9, 100.7, 100.2) == Money.of("100")


class TestInvalidPrice:

    def test_non_finite_price_rejected(self):
        with pytest.raises(ValidationError, match="Invalid unit price"):
            compute_subtotal("TÜL PERDE", "abc", 1, 100)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            compute_subtotal("TÜL PERDE", -5, 1, 100)
