"""Reconciliation defaults and tunables."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, optional_env_var

DEFAULT_PUSH_DELAY_SECONDS = 0.05
DEFAULT_REMOTE_TIMEOUT_SECONDS = 15.0
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class SyncConfig:
    push_delay_seconds: float = DEFAULT_PUSH_DELAY_SECONDS
    remote_timeout_seconds: float = DEFAULT_REMOTE_TIMEOUT_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE
    preserve_pending_edits: bool = False
    publish_to_sink: bool = True


def get_sync_config() -> SyncConfig:
    preserve = optional_env_var("SHELFSYNC_PRESERVE_PENDING_EDITS", "0") or "0"
    publish = optional_env_var("SHELFSYNC_PUBLISH_TO_SINK", "1") or "1"
    return SyncConfig(
        push_delay_seconds=env_float("SHELFSYNC_PUSH_DELAY_SECONDS", DEFAULT_PUSH_DELAY_SECONDS),
        remote_timeout_seconds=env_float(
            "SHELFSYNC_REMOTE_TIMEOUT_SECONDS", DEFAULT_REMOTE_TIMEOUT_SECONDS
        ),
        page_size=env_int("SHELFSYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        preserve_pending_edits=preserve.lower() in {"1", "true", "yes"},
        publish_to_sink=publish.lower() in {"1", "true", "yes"},
    )
