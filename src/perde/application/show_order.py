"""Application service: Show Order use case (query)."""

from __future__ import annotations

from perde.application.dto import LineViewDTO, OrderViewDTO
from perde.application.load_order import LoadOrderHandler
from perde.domain.model.catalog import normalize_name
from perde.domain.model.line_item import LineItem
from perde.domain.model.order import OrderType
from perde.domain.repository.catalog_repository import CatalogRepository
from perde.domain.repository.order_gateway import OrderGateway
from perde.domain.service.order_composer import OrderComposer


class ShowOrderHandler:

    def __init__(self, order_gateway: OrderGateway, catalog_repo: CatalogRepository) -> None:
        self._loader = LoadOrderHandler(order_gateway, catalog_repo)

    def handle(self, order_id: str) -> OrderViewDTO:
        return self.to_view(self._loader.handle(order_id))

    @classmethod
    def to_view(cls, composer: OrderComposer) -> OrderViewDTO:
        order = composer.order
        totals = order.totals()
        return OrderViewDTO(
            id=str(order.id),
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            status=order.status.value,
            order_type="quote" if order.order_type is OrderType.QUOTE else "order",
            delivery_date=order.delivery_date.isoformat() if order.delivery_date else "-",
            note=order.note,
            sections=cls._sections(composer),
            sub_total=str(totals.sub_total),
            discount=str(totals.discount),
            net_total=str(totals.net_total),
            paid=str(totals.paid),
            balance=str(totals.balance),
        )

    # --- Mapping --------------------------------------------------------------

    @classmethod
    def _sections(cls, composer: OrderComposer) -> list[tuple[str, list[LineViewDTO]]]:
        sections = []
        for title in composer.section_titles():
            category = composer.catalog.find_by_name(title)
            if category is not None and category.kind.is_boxed:
                lines = [line for line in composer.slot_table(title) if line is not None]
                lines += composer.slots.overflow(title)
            else:
                lines = composer.quick_lines(title)
            if lines:
                sections.append(
                    (normalize_name(title), [cls._line_view(composer, line) for line in lines])
                )
        return sections

    @staticmethod
    def _line_view(composer: OrderComposer, line: LineItem) -> LineViewDTO:
        category = composer.category_of(line)
        variant = category.find_variant(line.variant_id) if category else None
        return LineViewDTO(
            id=line.id,
            category=category.name if category else "?",
            variant=variant.name if variant else line.variant_id,
            qty=line.qty,
            size=f"{line.width}×{line.height}",
            density=str(line.file_density),
            unit_price=str(line.unit_price),
            subtotal=str(line.subtotal),
            slot=str(line.slot_index + 1) if line.slot_index is not None else "-",
            status=line.line_status.value,
        )
