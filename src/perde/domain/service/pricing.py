"""Domain service: line pricing.

Two billing models exist:

* AREA (``STOR PERDE``): ``price * (w/100) * (h/100) * qty``: billed per m²,
  density ignored.
* LINEAR (everything else): ``price * max(1, (w/100) * density) * qty``:
  linear meters times pleat density, never less than one unit.

Quantities and dimensions are floored to whole numbers and clamped
(``qty >= 1``, ``width, height >= 0``) before pricing.  The functions are
pure; callers re-run them whenever an input changes.
"""

from __future__ import annotations

from decimal import Decimal

from perde.domain.exceptions import ValidationError
from perde.domain.model.catalog import PricingModel, resolve_pricing
from perde.domain.model.value_objects import Money, floor_int, to_decimal

ONE = Decimal("1")
HUNDRED = Decimal("100")


def sanitize_qty(value: object) -> int:
    return floor_int(value, default=1, minimum=1)


def sanitize_dimension(value: object) -> int:
    return floor_int(value, default=0, minimum=0)


def sanitize_density(value: object) -> Decimal:
    density = to_decimal(value, ONE)
    return density if density > 0 else ONE


def line_subtotal(
    model: PricingModel,
    unit_price: Money,
    qty: object,
    width_cm: object,
    height_cm: object = 0,
    density: object = 1,
) -> Money:
    q = sanitize_qty(qty)
    w = Decimal(sanitize_dimension(width_cm))
    if model is PricingModel.AREA:
        h = Decimal(sanitize_dimension(height_cm))
        return unit_price * ((w / HUNDRED) * (h / HUNDRED) * q)
    meters = max(ONE, (w / HUNDRED) * sanitize_density(density))
    return unit_price * (meters * q)


def compute_subtotal(
    category_name: str,
    unit_price: Money | Decimal | int | float | str,
    qty: object,
    width_cm: object,
    height_cm: object = 0,
    density: object = 1,
) -> Money:
    """Price one curtain line for a category given by name."""
    if not isinstance(unit_price, Money):
        amount = to_decimal(unit_price, Decimal("NaN"))
        if not amount.is_finite():
            raise ValidationError(f"Invalid unit price: {unit_price!r}")
        unit_price = Money(amount)
    return line_subtotal(
        resolve_pricing(category_name), unit_price, qty, width_cm, height_cm, density
    )
