"""HTTP client for the Shopify Admin GraphQL API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from shelfsync.adapters.http_resilience import ResilientClient

from .schema import GraphQLResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from shelfsync.config.http_resilience import ResilienceConfig
    from shelfsync.config.shopify import ShopifyConfig

log = getLogger(__name__)

PRODUCT_GID_PREFIX = "gid://shopify/Product/"
LOCATION_GID_PREFIX = "gid://shopify/Location/"


def product_gid(external_id: str) -> str:
    if external_id.startswith("gid://"):
        return external_id
    return f"{PRODUCT_GID_PREFIX}{external_id}"


def location_gid(location_id: str) -> str:
    if location_id.startswith("gid://"):
        return location_id
    return f"{LOCATION_GID_PREFIX}{location_id}"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ShopifyAPIError(RuntimeError):
    """Raised when the Admin API rejects a request at the GraphQL level."""

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class MerchantMismatchError(ValueError):
    """Raised when an adapter bound to one shop is asked about another."""

    def __init__(self, *, expected: str, actual: str) -> None:
        super().__init__(f"Shopify adapter is bound to {expected}, not {actual}")
        self.expected = expected
        self.actual = actual


@dataclass(slots=True)
class ShopifyAdminClient:
    """Posts GraphQL documents to one shop and validates the envelope."""

    config: ShopifyConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def ensure_merchant(self, merchant_key: str) -> None:
        if merchant_key != self.config.shop_domain:
            raise MerchantMismatchError(expected=self.config.shop_domain, actual=merchant_key)

    async def execute(
        self,
        client: ResilientClient,
        query: str,
        variables: Mapping[str, object] | None = None,
    ) -> GraphQLResponse:
        """Send one document; transport errors and non-2xx statuses are raised."""

        body: dict[str, object] = {"query": query}
        if variables:
            body["variables"] = dict(variables)
        response = await client.post(self.config.graphql_url, json=body)
        response.raise_for_status()
        envelope = GraphQLResponse.model_validate(response.json())
        if envelope.errors:
            log.error(
                "Shopify API errors [%s]: %s",
                self.config.shop_domain,
                [error.message for error in envelope.errors],
            )
        return envelope

    def read_client(self) -> ResilientClient:
        return self.client_factory(self.config.read_resilience)

    def write_client(self) -> ResilientClient:
        return self.client_factory(self.config.write_resilience)
