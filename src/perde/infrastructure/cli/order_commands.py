"""CLI commands for composing, editing and paying orders."""

from __future__ import annotations

from datetime import date

import click

from perde.application.add_payment import AddPaymentHandler
from perde.application.compose_lines import apply_line_spec
from perde.application.create_order import CreateOrderHandler
from perde.application.dto import LineSpec, OrderViewDTO, PaymentRequest
from perde.application.load_order import LoadOrderHandler
from perde.application.show_order import ShowOrderHandler
from perde.application.update_order import UpdateOrderHandler
from perde.domain.exceptions import DomainException
from perde.domain.model.line_item import LineStatus
from perde.domain.model.order import Order, OrderStatus, OrderType, PaymentMethod
from perde.domain.service.line_editor import EditorFlow, LineEditor
from perde.domain.service.order_composer import OrderComposer
from perde.infrastructure.bootstrap import catalog_repository, order_gateway

_STATUSES = [s.value for s in OrderStatus]
_METHODS = [m.value for m in PaymentMethod]


# --- Option parsing -----------------------------------------------------------


def _parse_line(raw: str) -> LineSpec:
    """Parse 'TÜL PERDE:Bambu:2:300:250:2.5@3' into a LineSpec (slot is 1-based)."""
    body, slot_index = raw, None
    if "@" in raw:
        body, slot_str = raw.rsplit("@", 1)
        try:
            slot_index = int(slot_str) - 1
        except ValueError:
            raise click.BadParameter(f"Invalid slot '{slot_str}' in '{raw}'.")
        if slot_index < 0:
            raise click.BadParameter(f"Slots start at 1, got '{slot_str}'.")

    parts = [p.strip() for p in body.split(":")]
    if len(parts) not in (5, 6):
        raise click.BadParameter(
            f"Invalid line '{raw}'. Expected 'CATEGORY:VARIANT:QTY:WIDTH:HEIGHT[:DENSITY][@SLOT]'."
        )
    category, variant, qty, width, height = parts[:5]
    density = parts[5] if len(parts) == 6 else 1
    return LineSpec(
        category_name=category,
        variant_name=variant,
        qty=qty,
        width=width,
        height=height,
        density=density,
        slot_index=slot_index,
    )


def _parse_swap(raw: str) -> tuple[str, int, int]:
    """Parse 'TÜL PERDE:1:4' into (category, 0, 3)."""
    try:
        category, i, j = raw.rsplit(":", 2)
        return category.strip(), int(i) - 1, int(j) - 1
    except ValueError:
        raise click.BadParameter(f"Invalid swap '{raw}'. Expected 'CATEGORY:SLOT:SLOT'.")


def _parse_line_status(raw: str) -> tuple[str, LineStatus]:
    line_id, _, status = raw.rpartition(":")
    try:
        return line_id.strip(), LineStatus(status.strip())
    except ValueError:
        raise click.BadParameter(f"Invalid line status '{raw}'. Expected 'LINE_ID:STATUS'.")


def _parse_delivery(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{raw}'. Expected YYYY-MM-DD.")


# --- Display ------------------------------------------------------------------


def _display_order(dto: OrderViewDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  ({dto.order_type}, status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}  {dto.customer_phone}")
    click.echo(f"Delivery: {dto.delivery_date}")
    if dto.note:
        click.echo(f"Note:     {dto.note}")

    for title, lines in dto.sections:
        click.echo()
        click.echo(title)
        click.echo(
            f"  {'#':>3} {'Line':<14} {'Variant':<16} {'Qty':>4} {'Size':>10} "
            f"{'Dens.':>5} {'Price':>14} {'Subtotal':>14}  Status"
        )
        click.echo(f"  {'-'*100}")
        for line in lines:
            click.echo(
                f"  {line.slot:>3} {line.id:<14} {line.variant:<16} {line.qty:>4} "
                f"{line.size:>10} {line.density:>5} {line.unit_price:>14} "
                f"{line.subtotal:>14}  {line.status}"
            )

    click.echo()
    click.echo(f"  {'Subtotal':<20} {dto.sub_total:>16}")
    click.echo(f"  {'Discount':<20} {dto.discount:>16}")
    click.echo(f"  {'Net total':<20} {dto.net_total:>16}")
    click.echo(f"  {'Paid':<20} {dto.paid:>16}")
    click.echo(f"  {'Balance':<20} {dto.balance:>16}")


# --- Commands -----------------------------------------------------------------


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--phone", required=True, help="Customer phone.")
@click.option("--line", "lines", multiple=True, required=True,
              help="Line as 'CATEGORY:VARIANT:QTY:WIDTH:HEIGHT[:DENSITY][@SLOT]'.")
@click.option("--note", default="", help="Order note.")
@click.option("--status", type=click.Choice(_STATUSES), default="pending", help="Order status.")
@click.option("--delivery", default=None, help="Delivery date (YYYY-MM-DD).")
@click.option("--discount-percent", default="0", help="Discount in percent.")
@click.option("--discount-amount", default="0", help="Fixed discount amount (wins over percent).")
@click.option("--pay", "pay_amount", default=None, help="Initial payment amount.")
@click.option("--method", type=click.Choice(_METHODS), default="CASH", help="Payment method.")
@click.option("--quote", is_flag=True, default=False, help="Save as a price quote.")
def order_create(
    customer: str,
    phone: str,
    lines: tuple[str, ...],
    note: str,
    status: str,
    delivery: str | None,
    discount_percent: str,
    discount_amount: str,
    pay_amount: str | None,
    method: str,
    quote: bool,
) -> None:
    """Compose and save a new order."""
    specs = [_parse_line(raw) for raw in lines]
    gateway = order_gateway()

    try:
        catalog = catalog_repository().load()
        composer = OrderComposer(
            catalog,
            Order(
                id=None,
                customer_name=customer,
                customer_phone=phone,
                note=note,
                status=OrderStatus(status),
                order_type=OrderType.QUOTE if quote else OrderType.ORDER,
                delivery_date=_parse_delivery(delivery),
            ),
        )
        editor = LineEditor(composer, EditorFlow.NEW_ORDER)
        for spec in specs:
            apply_line_spec(composer, editor, spec)
        composer.set_discount(discount_percent, discount_amount)

        payment = PaymentRequest(amount=pay_amount, method=method) if pay_amount else None
        result = CreateOrderHandler(order_gateway=gateway).handle(composer, payment)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{result.order_id} created")
    if result.payment_recorded:
        click.echo(f"Payment of {pay_amount} recorded")
    if result.is_partial:
        click.echo(
            f"Warning: order saved but payment failed ({result.payment_error}); "
            f"add it again with 'perde order pay --id {result.order_id}'",
            err=True,
        )
    _display_order(ShowOrderHandler.to_view(composer))


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show an order grouped by section."""
    handler = ShowOrderHandler(order_gateway=order_gateway(), catalog_repo=catalog_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("edit")
@click.option("--id", "order_id", required=True, help="Order ID to edit.")
@click.option("--remove-line", "remove_lines", multiple=True, help="Line ID to delete.")
@click.option("--swap", "swaps", multiple=True, help="Swap two slots as 'CATEGORY:SLOT:SLOT'.")
@click.option("--line", "lines", multiple=True,
              help="New line as 'CATEGORY:VARIANT:QTY:WIDTH:HEIGHT[:DENSITY][@SLOT]'.")
@click.option("--line-status", "line_statuses", multiple=True, help="'LINE_ID:STATUS'.")
@click.option("--status", type=click.Choice(_STATUSES), default=None, help="Order status.")
@click.option("--delivery", default=None, help="Delivery date (YYYY-MM-DD).")
@click.option("--note", default=None, help="Order note.")
@click.option("--customer", default=None, help="Customer name.")
@click.option("--phone", default=None, help="Customer phone.")
def order_edit(
    order_id: str,
    remove_lines: tuple[str, ...],
    swaps: tuple[str, ...],
    lines: tuple[str, ...],
    line_statuses: tuple[str, ...],
    status: str | None,
    delivery: str | None,
    note: str | None,
    customer: str | None,
    phone: str | None,
) -> None:
    """Edit a saved order; only the differences are sent."""
    specs = [_parse_line(raw) for raw in lines]
    parsed_swaps = [_parse_swap(raw) for raw in swaps]
    parsed_statuses = [_parse_line_status(raw) for raw in line_statuses]
    gateway = order_gateway()

    try:
        composer = LoadOrderHandler(gateway, catalog_repository()).handle(order_id)
        editor = LineEditor(composer, EditorFlow.EDIT_ORDER)
        for line_id in remove_lines:
            composer.remove_line(line_id)
        for category, i, j in parsed_swaps:
            composer.swap(category, i, j)
        for spec in specs:
            apply_line_spec(composer, editor, spec)
        for line_id, line_status in parsed_statuses:
            composer.set_line_status(line_id, line_status)

        order = composer.order
        if status is not None:
            order.status = OrderStatus(status)
        if delivery is not None:
            order.delivery_date = _parse_delivery(delivery)
        if note is not None:
            order.note = note
        if customer is not None:
            order.customer_name = customer
        if phone is not None:
            order.customer_phone = phone

        UpdateOrderHandler(order_gateway=gateway).handle(composer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} updated")
    _display_order(ShowOrderHandler.to_view(composer))


@click.command("pay")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--amount", required=True, help="Payment amount.")
@click.option("--method", type=click.Choice(_METHODS), default="CASH", help="Payment method.")
@click.option("--note", default=None, help="Payment note.")
def order_pay(order_id: str, amount: str, method: str, note: str | None) -> None:
    """Record a payment against an order."""
    handler = AddPaymentHandler(order_gateway=order_gateway())

    try:
        totals = handler.handle(order_id, PaymentRequest(amount=amount, method=method, note=note))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Payment recorded for order #{order_id}")
    click.echo(f"  {'Net total':<12} {totals.net_total:>16}")
    click.echo(f"  {'Paid':<12} {totals.total_paid:>16}")
    click.echo(f"  {'Remaining':<12} {totals.remaining:>16}")
