"""Abstract gateway to the order backend.

The gateway speaks the backend's wire contract: plain JSON-ready dicts
with camelCase keys.  Translating between those dicts and the Order
aggregate is the job of ``perde.application.order_mapper``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class OrderGateway(ABC):

    @abstractmethod
    def get_order(self, order_id: str) -> dict | None:
        """Return the stored order (with ``paidTotal``), or None."""

    @abstractmethod
    def create_order(self, payload: dict) -> dict:
        """Create an order; the response carries the generated ``id``."""

    @abstractmethod
    def update_order(self, order_id: str, payload: dict) -> dict:
        """Patch an order (upserts plus ``_action: delete`` markers)."""

    @abstractmethod
    def add_payment(self, order_id: str, payload: dict) -> dict:
        """Record a payment; the response carries the new ``totals``."""
