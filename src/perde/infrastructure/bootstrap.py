"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Configuration comes from the environment:

    PERDE_DATA_DIR     directory of the JSON backend (default: <repo>/data)
    PERDE_API_URL      base URL of the web backend; when set, REST is used
    PERDE_API_TIMEOUT  HTTP timeout in seconds (default: 10)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from perde.domain.repository.catalog_repository import CatalogRepository
from perde.domain.repository.order_gateway import OrderGateway
from perde.infrastructure.http.rest_gateway import (
    RestCatalogRepository,
    RestClient,
    RestOrderGateway,
)
from perde.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from perde.infrastructure.persistence.json_order_gateway import JsonOrderGateway

logger = logging.getLogger(__name__)

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    return Path(os.environ.get("PERDE_DATA_DIR") or _DEFAULT_DATA_DIR)


def api_url() -> str | None:
    return os.environ.get("PERDE_API_URL") or None


def api_timeout() -> float:
    raw = os.environ.get("PERDE_API_TIMEOUT", "10")
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid PERDE_API_TIMEOUT=%r", raw)
        return 10.0


def _rest_client() -> RestClient:
    return RestClient(api_url(), timeout_sec=api_timeout())  # type: ignore[arg-type]


def catalog_repository() -> CatalogRepository:
    if api_url():
        return RestCatalogRepository(_rest_client())
    return JsonCatalogRepository(data_dir() / "categories.json")


def order_gateway() -> OrderGateway:
    if api_url():
        return RestOrderGateway(_rest_client())
    return JsonOrderGateway(data_dir() / "orders.json", catalog_repository())
