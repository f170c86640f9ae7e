"""HTTP client for the secondary catalog backend."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from shelfsync.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from shelfsync.config.catalog_sink import CatalogSinkConfig
    from shelfsync.config.http_resilience import ResilienceConfig
    from shelfsync.domain.catalog import CatalogBatch
    from shelfsync.domain.model import MerchantKey
    from shelfsync.domain.ports.catalog import CatalogSink

log = getLogger(__name__)

PRODUCTS_SYNC_PATH = "v1/shopify/products/sync"
BRANDS_SYNC_PATH = "v1/shopify/brands/sync"
SIZES_SYNC_PATH = "v1/shopify/sizes/sync"
IMAGES_SYNC_PATH = "v1/shopify/images/sync"
CATEGORIES_SYNC_PATH = "v1/shopify/categories/sync"
PRODUCTS_PATH = "v1/shopify/products"


class CatalogSinkError(RuntimeError):
    """Raised when the backend answers a sync call with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class _SinkModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BackendProductsData(_SinkModel):
    products: list[dict[str, object]] = Field(default_factory=list[dict[str, object]])


class BackendProductsResponse(_SinkModel):
    status: str | None = None
    data: BackendProductsData | None = None


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpCatalogSink:
    """Publish catalog batches section by section.

    Sections with nothing to send are skipped. The first failing section raises
    ``CatalogSinkError`` and the remaining sections are not sent.
    """

    config: CatalogSinkConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def publish(self, merchant_key: MerchantKey, batch: CatalogBatch) -> None:
        if batch.is_empty:
            log.info("Nothing to publish to the catalog sink for %s", merchant_key)
            return
        asyncio.run(self._publish(merchant_key, batch))

    def fetch_products(self, merchant_key: MerchantKey) -> list[dict[str, object]]:
        """Return what the backend currently holds for ``merchant_key``."""

        return asyncio.run(self._fetch_products(merchant_key))

    async def _publish(self, merchant_key: MerchantKey, batch: CatalogBatch) -> None:
        sections: list[tuple[str, dict[str, object]]] = []
        if batch.products:
            sections.append(
                (
                    PRODUCTS_SYNC_PATH,
                    {
                        "shop_domain": merchant_key,
                        "products": [asdict(product) for product in batch.products],
                    },
                )
            )
        if batch.brands:
            sections.append(
                (BRANDS_SYNC_PATH, {"shop_domain": merchant_key, "brands": list(batch.brands)})
            )
        if batch.sizes:
            sections.append(
                (
                    SIZES_SYNC_PATH,
                    {"shop_domain": merchant_key, "sizes": [asdict(size) for size in batch.sizes]},
                )
            )
        if batch.images:
            sections.append(
                (
                    IMAGES_SYNC_PATH,
                    {
                        "shop_domain": merchant_key,
                        "images": [asdict(image) for image in batch.images],
                    },
                )
            )
        if batch.categories:
            sections.append(
                (
                    CATEGORIES_SYNC_PATH,
                    {
                        "shop": merchant_key,
                        "categories": [asdict(category) for category in batch.categories],
                        "replace_all": True,
                    },
                )
            )

        async with self.client_factory(self.config.resilience) as client:
            for path, body in sections:
                await self._post(client, path, body)
                log.info("Published %s to the catalog sink for %s", path, merchant_key)

    async def _post(self, client: ResilientClient, path: str, body: dict[str, object]) -> None:
        response = await client.post(self._url(path), json=body)
        if response.is_success:
            return
        message = f"HTTP {response.status_code}: {response.text}"
        log.error("Catalog sink rejected %s: %s", path, message)
        raise CatalogSinkError(message, status_code=response.status_code)

    async def _fetch_products(self, merchant_key: MerchantKey) -> list[dict[str, object]]:
        async with self.client_factory(self.config.resilience) as client:
            response = await client.get(
                self._url(PRODUCTS_PATH), params={"shop_domain": merchant_key}
            )
        if not response.is_success:
            raise CatalogSinkError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )
        payload = BackendProductsResponse.model_validate(response.json())
        if payload.status != "success" or payload.data is None:
            return []
        log.info(
            "Got %s product(s) from the catalog backend for %s",
            len(payload.data.products),
            merchant_key,
        )
        return payload.data.products

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"


if TYPE_CHECKING:

    def _sink_check(config: CatalogSinkConfig) -> CatalogSink:
        return HttpCatalogSink(config)
