"""Bidirectional reconciliation of a merchant's local inventory with its remote catalog.

Layered flow:
1) detect local -> remote deltas (``detect``)
2) push deltas to the remote catalog (``push``)
3) overwrite the local store from the remote snapshot (``engine``)
"""

from __future__ import annotations

from .contracts import (
    Delta,
    DeltaField,
    DetectedChanges,
    Direction,
    OverwritePolicy,
    PushSummary,
)
from .detect import detect_changes
from .engine import ReconcileResult, ReconciliationEngine, SyncReport
from .errors import ReconciliationInProgressError
from .locks import PROCESS_LOCKS, MerchantLocks
from .push import DEFAULT_PUSH_DELAY_SECONDS, NO_VARIANTS_ERROR, DeltaPusher

__all__ = [
    "DEFAULT_PUSH_DELAY_SECONDS",
    "NO_VARIANTS_ERROR",
    "PROCESS_LOCKS",
    "Delta",
    "DeltaField",
    "DeltaPusher",
    "DetectedChanges",
    "Direction",
    "MerchantLocks",
    "OverwritePolicy",
    "PushSummary",
    "ReconcileResult",
    "ReconciliationEngine",
    "ReconciliationInProgressError",
    "SyncReport",
    "detect_changes",
]
