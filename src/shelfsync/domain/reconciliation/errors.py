"""Reconciliation errors."""

from __future__ import annotations


class ReconciliationInProgressError(RuntimeError):
    """Raised when a run for the same merchant is already active."""

    def __init__(self, merchant_key: str) -> None:
        super().__init__(f"Reconciliation already in progress for {merchant_key}")
        self.merchant_key = merchant_key
