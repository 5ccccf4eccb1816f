"""CLI command for the standalone price calculator."""

from __future__ import annotations

import click

from perde.domain.exceptions import DomainException
from perde.domain.service.pricing import compute_subtotal


@click.command("price")
@click.option("--category", required=True, help="Category name (decides the pricing model).")
@click.option("--unit-price", required=True, help="Unit price.")
@click.option("--qty", default="1", help="Quantity.")
@click.option("--width", default="0", help="Width in cm.")
@click.option("--height", default="0", help="Height in cm.")
@click.option("--density", default="1", help="Pleat density.")
def price(category: str, unit_price: str, qty: str, width: str, height: str, density: str) -> None:
    """Compute a line subtotal without touching any order."""
    try:
        subtotal = compute_subtotal(category, unit_price, qty, width, height, density)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(str(subtotal))
