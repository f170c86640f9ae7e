"""Single-field writes back to the Shopify catalog."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from shelfsync.domain.model import WriteResult

from .client import ShopifyAdminClient, ShopifyAPIError, location_gid, product_gid
from .schema import InventorySetQuantitiesData, ProductUpdateData, ProductVariantsData
from .translator import translate_variant_refs

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelfsync.domain.model import ExternalId, InventoryQuantity, MerchantKey, VariantRef
    from shelfsync.domain.ports.remote import RemoteCatalogWriter

    from .schema import GraphQLResponse, MutationPayload

log = getLogger(__name__)

PRODUCT_UPDATE_MUTATION = """
mutation productUpdate($input: ProductInput!) {
  productUpdate(input: $input) {
    product { id title }
    userErrors { field message }
  }
}
"""

PRODUCT_VARIANTS_QUERY = """
query getProduct($id: ID!) {
  product(id: $id) {
    id
    variants(first: 10) {
      nodes {
        id
        inventoryItem { id }
      }
    }
  }
}
"""

INVENTORY_SET_QUANTITIES_MUTATION = """
mutation inventorySetQuantities($input: InventorySetQuantitiesInput!) {
  inventorySetQuantities(input: $input) {
    inventoryAdjustmentGroup { createdAt reason }
    userErrors { field message }
  }
}
"""


def _mutation_result(envelope: GraphQLResponse, payload: MutationPayload | None) -> WriteResult:
    if envelope.errors:
        return WriteResult.failed(envelope.first_error or "API error")
    if payload is not None and payload.user_errors:
        return WriteResult.failed(payload.user_errors[0].message)
    return WriteResult.ok()


@dataclass(slots=True)
class ShopifyRemoteWriter:
    """Write titles and stock levels; each call is sent exactly once."""

    admin: ShopifyAdminClient

    def update_title(
        self, merchant_key: MerchantKey, external_id: ExternalId, title: str
    ) -> WriteResult:
        self.admin.ensure_merchant(merchant_key)
        return asyncio.run(self._update_title(external_id, title))

    def query_variants(
        self, merchant_key: MerchantKey, external_id: ExternalId
    ) -> list[VariantRef]:
        self.admin.ensure_merchant(merchant_key)
        return asyncio.run(self._query_variants(external_id))

    def set_inventory(
        self, merchant_key: MerchantKey, quantities: Sequence[InventoryQuantity]
    ) -> WriteResult:
        self.admin.ensure_merchant(merchant_key)
        return asyncio.run(self._set_inventory(quantities))

    async def _update_title(self, external_id: ExternalId, title: str) -> WriteResult:
        variables = {"input": {"id": product_gid(external_id), "title": title}}
        async with self.admin.write_client() as client:
            envelope = await self.admin.execute(client, PRODUCT_UPDATE_MUTATION, variables)
        data = ProductUpdateData.model_validate(envelope.data or {})
        return _mutation_result(envelope, data.product_update)

    async def _query_variants(self, external_id: ExternalId) -> list[VariantRef]:
        async with self.admin.read_client() as client:
            envelope = await self.admin.execute(
                client, PRODUCT_VARIANTS_QUERY, {"id": product_gid(external_id)}
            )
        if envelope.errors:
            raise ShopifyAPIError(
                envelope.first_error or "API error",
                errors=[error.message for error in envelope.errors],
            )
        data = ProductVariantsData.model_validate(envelope.data or {})
        return translate_variant_refs(data.product)

    async def _set_inventory(self, quantities: Sequence[InventoryQuantity]) -> WriteResult:
        variables = {
            "input": {
                "name": "available",
                "reason": "correction",
                "ignoreCompareQuantity": True,
                "quantities": [
                    {
                        "inventoryItemId": quantity.inventory_item_id,
                        "locationId": location_gid(quantity.location_id),
                        "quantity": quantity.quantity,
                    }
                    for quantity in quantities
                ],
            }
        }
        async with self.admin.write_client() as client:
            envelope = await self.admin.execute(
                client, INVENTORY_SET_QUANTITIES_MUTATION, variables
            )
        data = InventorySetQuantitiesData.model_validate(envelope.data or {})
        return _mutation_result(envelope, data.inventory_set_quantities)


if TYPE_CHECKING:
    from shelfsync.config.shopify import ShopifyConfig

    def _writer_check(config: ShopifyConfig) -> RemoteCatalogWriter:
        return ShopifyRemoteWriter(ShopifyAdminClient(config))
