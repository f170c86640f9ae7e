"""Ports for fetching remote catalog snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shelfsync.domain.model import MerchantKey, RemoteProduct


@runtime_checkable
class SnapshotFetcher(Protocol):
    """Callable port returning the full current remote catalog of one merchant.

    Implementations raise when the snapshot cannot be retrieved; a partial
    snapshot must never be returned as if it were complete.
    """

    def __call__(self, merchant_key: MerchantKey) -> Sequence[RemoteProduct]: ...


__all__ = ["SnapshotFetcher"]
