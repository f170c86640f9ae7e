"""Shopify Admin API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy
from .sync import SyncConfig, get_sync_config

DEFAULT_SHOPIFY_API_VERSION = "2024-10"


@dataclass(frozen=True, slots=True)
class ShopifyConfig:
    """Credentials and HTTP behaviour for one shop's Admin GraphQL API.

    Reads (catalog snapshot, variant lookups) retry transient failures and are
    rate limited per client, which spans every page of one snapshot. Writes are
    sent exactly once on a fresh client per call, so their pacing comes from
    ``SyncConfig.push_delay_seconds`` between pushes. Every call carries the
    same timeout.
    """

    shop_domain: str
    access_token: str
    location_id: str
    api_version: str
    read_resilience: ResilienceConfig
    write_resilience: ResilienceConfig

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"


def shopify_resilience(
    *, access_token: str, timeout_seconds: float, write: bool
) -> ResilienceConfig:
    return ResilienceConfig(
        name=f"shopify-{'write' if write else 'read'}",
        timeout_seconds=timeout_seconds,
        retry=NO_RETRY if write else RetryPolicy(total=3),
        ratelimit=None if write else RateLimit(max_calls=2, per_seconds=1.0),
        cache=None,
        default_headers={
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        },
    )


def get_shopify_config(*, sync: SyncConfig | None = None) -> ShopifyConfig:
    values = require_env_vars(
        ("SHOPIFY_SHOP_DOMAIN", "SHOPIFY_ACCESS_TOKEN", "SHOPIFY_LOCATION_ID")
    )
    sync_config = sync or get_sync_config()
    shop_domain = values["SHOPIFY_SHOP_DOMAIN"]
    access_token = values["SHOPIFY_ACCESS_TOKEN"]
    return ShopifyConfig(
        shop_domain=shop_domain,
        access_token=access_token,
        location_id=values["SHOPIFY_LOCATION_ID"],
        api_version=optional_env_var("SHOPIFY_API_VERSION", DEFAULT_SHOPIFY_API_VERSION)
        or DEFAULT_SHOPIFY_API_VERSION,
        read_resilience=shopify_resilience(
            access_token=access_token,
            timeout_seconds=sync_config.remote_timeout_seconds,
            write=False,
        ),
        write_resilience=shopify_resilience(
            access_token=access_token,
            timeout_seconds=sync_config.remote_timeout_seconds,
            write=True,
        ),
    )
