"""Shopify Admin API adapter package."""

from __future__ import annotations

from .client import (
    MerchantMismatchError,
    ShopifyAdminClient,
    ShopifyAPIError,
    location_gid,
    product_gid,
)
from .fetcher import ShopifySnapshotFetcher
from .schema import GraphQLResponse, ProductNode
from .translator import translate_product, translate_variant_refs
from .writer import ShopifyRemoteWriter

__all__ = [
    "GraphQLResponse",
    "MerchantMismatchError",
    "ProductNode",
    "ShopifyAPIError",
    "ShopifyAdminClient",
    "ShopifyRemoteWriter",
    "ShopifySnapshotFetcher",
    "location_gid",
    "product_gid",
    "translate_product",
    "translate_variant_refs",
]
