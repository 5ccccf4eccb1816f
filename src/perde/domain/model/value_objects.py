"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from perde.domain.exceptions import ValidationError

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.  Amounts are never negative;
    use ``minus_floor`` where a difference may dip below zero.
    """

    amount: Decimal
    currency: str = "TRY"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int | Decimal) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError(
                f"Can only multiply Money by int or Decimal, got {type(factor).__name__}"
            )
        return Money(self.amount * factor, self.currency)

    def minus_floor(self, other: Money) -> Money:
        """Subtract, flooring the result at zero."""
        self._assert_same_currency(other)
        return Money(max(Decimal("0"), self.amount - other.amount), self.currency)

    def min(self, other: Money) -> Money:
        return self if self <= other else other

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        # tr-TR grouping: 1.234,56
        text = f"{self.amount.quantize(CENT):,.2f}"
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
        return f"{text} ₺"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount).strip().replace(",", ".")))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))


# ---------------------------------------------------------------------------
# Lenient numeric coercion for form-style input
# ---------------------------------------------------------------------------


def to_decimal(value: object, default: Decimal) -> Decimal:
    """Parse *value* as a finite Decimal, or return *default*.

    Accepts ints, floats, Decimals and strings using either a dot or a
    decimal comma.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    try:
        result = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def floor_int(value: object, default: int, minimum: int) -> int:
    """Floor *value* to an int clamped to ``>= minimum``."""
    number = to_decimal(value, Decimal(default))
    return max(minimum, int(number.to_integral_value(rounding="ROUND_FLOOR")))
