"""REST implementation of CatalogRepository and OrderGateway.

Talks to the shop's web backend over HTTP with a ``requests.Session``:

    GET   /api/categories                  -> categories with variants
    POST  /api/categories/{id}/variants    -> new variant
    GET   /api/orders/{id}                 -> order (with paidTotal)
    POST  /api/orders                      -> create order
    PATCH /api/orders/{id}                 -> patch order
    POST  /api/orders/{id}/payments        -> add payment

Saves are never retried automatically; any transport failure or non-2xx
response surfaces as GatewayError.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import requests

from perde.domain.exceptions import GatewayError
from perde.domain.model.catalog import Catalog, Category, Variant
from perde.domain.model.value_objects import Money, to_decimal
from perde.domain.repository.catalog_repository import CatalogRepository
from perde.domain.repository.order_gateway import OrderGateway

logger = logging.getLogger(__name__)


class RestClient:

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 10,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.session = session if session is not None else requests.Session()

    def request(self, method: str, path: str, payload: dict | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout_sec)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise GatewayError(f"Backend unreachable: {exc}") from exc

        if not resp.ok:
            raise GatewayError(
                f"HTTP {resp.status_code}: {self._error_text(resp)}", status=resp.status_code
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise GatewayError(f"Invalid JSON from {url}: {exc}", status=resp.status_code) from exc

    @staticmethod
    def _error_text(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return resp.text


class RestCatalogRepository(CatalogRepository):

    def __init__(self, client: RestClient) -> None:
        self._client = client

    def load(self) -> Catalog:
        raw = self._client.request("GET", "/api/categories")
        return Catalog(
            tuple(
                Category(
                    id=str(c["id"]),
                    name=c["name"],
                    variants=tuple(_variant(v) for v in c.get("variants") or []),
                )
                for c in raw
            )
        )

    def create_variant(self, category_id: str, name: str, unit_price: Money) -> Variant:
        raw = self._client.request(
            "POST",
            f"/api/categories/{category_id}/variants",
            {"name": name, "unitPrice": str(unit_price.amount)},
        )
        return _variant(raw)


class RestOrderGateway(OrderGateway):

    def __init__(self, client: RestClient) -> None:
        self._client = client

    def get_order(self, order_id: str) -> dict | None:
        try:
            return self._client.request("GET", f"/api/orders/{order_id}")
        except GatewayError as exc:
            if exc.status == 404:
                return None
            raise

    def create_order(self, payload: dict) -> dict:
        return self._client.request("POST", "/api/orders", payload)

    def update_order(self, order_id: str, payload: dict) -> dict:
        return self._client.request("PATCH", f"/api/orders/{order_id}", payload)

    def add_payment(self, order_id: str, payload: dict) -> dict:
        return self._client.request("POST", f"/api/orders/{order_id}/payments", payload)


def _variant(raw: dict) -> Variant:
    amount = to_decimal(raw.get("unitPrice"), Decimal("0"))
    return Variant(
        id=str(raw["id"]),
        name=raw["name"],
        unit_price=Money(max(Decimal("0"), amount)),
    )
