"""Full-catalog snapshots from the Shopify Admin API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .client import ShopifyAdminClient, ShopifyAPIError
from .schema import ProductsData
from .translator import translate_product

if TYPE_CHECKING:
    from shelfsync.adapters.http_resilience import ResilientClient
    from shelfsync.domain.model import MerchantKey, RemoteProduct
    from shelfsync.domain.ports.fetching import SnapshotFetcher

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

PRODUCTS_QUERY = """
query Products($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    nodes {
      id
      title
      description
      vendor
      productType
      tags
      totalInventory
      featuredImage { url }
      images(first: 10) { nodes { url } }
      variants(first: 5) {
        nodes {
          id
          inventoryQuantity
          selectedOptions { name value }
        }
      }
      priceRange {
        minVariantPrice { amount currencyCode }
      }
      category { fullName }
      metafields(first: 10) { nodes { namespace key value } }
    }
    pageInfo { hasNextPage endCursor }
  }
}
"""


@dataclass(slots=True)
class ShopifySnapshotFetcher:
    """Fetch every product of the bound shop, following cursor pagination.

    Any failure raises; a partial catalog is never returned.
    """

    admin: ShopifyAdminClient
    page_size: int = DEFAULT_PAGE_SIZE

    def __call__(self, merchant_key: MerchantKey) -> list[RemoteProduct]:
        self.admin.ensure_merchant(merchant_key)
        return asyncio.run(self._fetch_all())

    async def _fetch_all(self) -> list[RemoteProduct]:
        products: list[RemoteProduct] = []
        cursor: str | None = None
        page = 1
        async with self.admin.read_client() as client:
            while True:
                data = await self._fetch_page(client, cursor)
                products.extend(translate_product(node) for node in data.products.nodes)
                log.debug(
                    "Fetched page %s with %s product(s) from %s",
                    page,
                    len(data.products.nodes),
                    self.admin.config.shop_domain,
                )
                page_info = data.products.page_info
                if not page_info.has_next_page or not page_info.end_cursor:
                    break
                cursor = page_info.end_cursor
                page += 1
        log.info(
            "Loaded %s product(s) from Shopify store %s",
            len(products),
            self.admin.config.shop_domain,
        )
        return products

    async def _fetch_page(self, client: ResilientClient, cursor: str | None) -> ProductsData:
        variables: dict[str, object] = {"first": self.page_size}
        if cursor is not None:
            variables["after"] = cursor
        envelope = await self.admin.execute(client, PRODUCTS_QUERY, variables)
        if envelope.errors:
            raise ShopifyAPIError(
                envelope.first_error or "API error",
                errors=[error.message for error in envelope.errors],
            )
        if envelope.data is None or "products" not in envelope.data:
            raise ShopifyAPIError("Invalid response from Shopify API")
        return ProductsData.model_validate(envelope.data)


if TYPE_CHECKING:
    from shelfsync.config.shopify import ShopifyConfig

    def _fetcher_check(config: ShopifyConfig) -> SnapshotFetcher:
        return ShopifySnapshotFetcher(ShopifyAdminClient(config))
