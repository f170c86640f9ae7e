"""Catalog sink (secondary backend) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, ResilienceConfig, RetryPolicy
from .sync import DEFAULT_REMOTE_TIMEOUT_SECONDS

CATALOG_SINK_TIMEOUT_SECONDS = DEFAULT_REMOTE_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class CatalogSinkConfig:
    base_url: str
    api_token: str
    resilience: ResilienceConfig


def get_catalog_sink_config(*, resilience: ResilienceConfig | None = None) -> CatalogSinkConfig:
    values = require_env_vars(("BACKEND_URL", "SHOPIFY_API_TOKEN"))
    base_url = values["BACKEND_URL"]
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"
    api_token = values["SHOPIFY_API_TOKEN"]
    return CatalogSinkConfig(
        base_url=base_url,
        api_token=api_token,
        resilience=resilience
        or ResilienceConfig(
            name="catalog-sink",
            base_url=base_url,
            timeout_seconds=CATALOG_SINK_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            cache=CacheConfig(default_ttl_seconds=60.0),
            default_headers={"X-API-Token": api_token, "Content-Type": "application/json"},
        ),
    )
