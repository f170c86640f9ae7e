"""Shared reconciliation contract components.

This module intentionally holds only:
- the delta model produced by change detection
- enums and small results exchanged between detection, push and overwrite
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shelfsync.domain.model import ExternalId


class DeltaField(StrEnum):
    TITLE = "title"
    INVENTORY = "inventory"


class Direction(StrEnum):
    """Which side a delta is applied to.

    Only local -> remote deltas are computed; the remote -> local direction is
    covered by the unconditional overwrite phase.
    """

    LOCAL_TO_REMOTE = "local_to_remote"


class OverwritePolicy(StrEnum):
    """How the overwrite phase treats fields whose push failed."""

    REMOTE_WINS = "remote_wins"
    PRESERVE_PENDING = "preserve_pending"


@dataclass(frozen=True, slots=True, kw_only=True)
class Delta:
    """One field-level divergence between a local record and its remote twin."""

    record_id: int | None
    external_id: ExternalId
    field: DeltaField
    local_value: str | int
    remote_value: str | int
    direction: Direction = Direction.LOCAL_TO_REMOTE


@dataclass(frozen=True, slots=True)
class DetectedChanges:
    title_deltas: tuple[Delta, ...] = ()
    inventory_deltas: tuple[Delta, ...] = ()
    remote_only: tuple[ExternalId, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.title_deltas or self.inventory_deltas)


@dataclass(slots=True)
class PushSummary:
    """Outcome of pushing one run's deltas to the remote side."""

    title_pushed: int = 0
    inventory_pushed: int = 0
    errors: int = 0
    failed: list[Delta] = field(default_factory=list[Delta])
