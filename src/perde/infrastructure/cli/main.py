import logging

import click

from perde.infrastructure.cli.catalog_commands import catalog_add_variant, catalog_list
from perde.infrastructure.cli.order_commands import (
    order_create,
    order_edit,
    order_pay,
    order_show,
)
from perde.infrastructure.cli.price_commands import price


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Perde: curtain order composition"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def order() -> None:
    """Compose, edit and pay orders."""


@cli.group()
def catalog() -> None:
    """Browse and extend the category catalog."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_edit)
order.add_command(order_pay)
order.add_command(order_show)
catalog.add_command(catalog_add_variant)
catalog.add_command(catalog_list)
cli.add_command(price)
