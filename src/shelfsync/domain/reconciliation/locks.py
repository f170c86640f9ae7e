"""Per-merchant leases held for the duration of one reconciliation run."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from .errors import ReconciliationInProgressError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from shelfsync.domain.model import MerchantKey


class MerchantLocks:
    """Non-blocking mutual exclusion keyed by merchant.

    A second caller for a merchant that is already being reconciled fails fast
    instead of queueing behind the first run.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[MerchantKey] = set()

    @contextmanager
    def hold(self, merchant_key: MerchantKey) -> Iterator[None]:
        with self._guard:
            if merchant_key in self._held:
                raise ReconciliationInProgressError(merchant_key)
            self._held.add(merchant_key)
        try:
            yield
        finally:
            with self._guard:
                self._held.discard(merchant_key)

    def is_held(self, merchant_key: MerchantKey) -> bool:
        with self._guard:
            return merchant_key in self._held


PROCESS_LOCKS = MerchantLocks()
