"""CLI commands for the category catalog."""

from __future__ import annotations

import click

from perde.application.add_variant import AddVariantHandler
from perde.domain.exceptions import DomainException
from perde.domain.model.catalog import Boxed
from perde.infrastructure.bootstrap import catalog_repository


@click.command("list")
def catalog_list() -> None:
    """List categories and their variants."""
    try:
        catalog = catalog_repository().load()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for category in catalog.categories:
        kind = (
            f"{category.kind.slot_count} slots"
            if isinstance(category.kind, Boxed)
            else "quick entry"
        )
        click.echo(f"[{category.id}] {category.name}  ({kind}, {category.pricing.value.lower()})")
        if not category.variants:
            click.echo("    (no variants)")
        for variant in category.variants:
            click.echo(f"    {variant.id:<6} {variant.name:<24} {str(variant.unit_price):>14}")


@click.command("add-variant")
@click.option("--category", "category_name", required=True, help="Category name.")
@click.option("--name", required=True, help="Variant name.")
@click.option("--price", required=True, help="Unit price (e.g. 120,50).")
def catalog_add_variant(category_name: str, name: str, price: str) -> None:
    """Add a priced variant to a category."""
    repo = catalog_repository()
    handler = AddVariantHandler(catalog_repo=repo)

    try:
        current = repo.load()
        category = current.find_by_name(category_name)
        if category is None:
            raise click.ClickException(f"Category not found: '{category_name}'")
        _, variant = handler.handle(current, category.id, name, price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant #{variant.id} '{variant.name}' added to {category.name} at {variant.unit_price}")
