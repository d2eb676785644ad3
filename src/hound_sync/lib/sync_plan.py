"""Sync planner — decides which records need pushing.

Fingerprints each record, compares against the sync ledger and reports
NoChange / NeedsSync / Unknown. After a successful push the caller records
the new fingerprints with ``mark_pushed``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .canonical import canonicalize
from .errors import ValidationError
from .fingerprint import try_fingerprint
from .models import Bill, LineItem, Receipt
from .state import SyncLedger


class SyncStatus(str, Enum):
    NO_CHANGE = "NoChange"
    NEEDS_SYNC = "NeedsSync"
    UNKNOWN = "Unknown"  # Fingerprint could not be computed


@dataclass
class SyncEntry:
    """A record and its line items as read from the local store."""

    record: Receipt | Bill
    line_items: list[LineItem] = field(default_factory=list)


@dataclass
class PlannedSync:
    kind: str
    record_id: str
    status: SyncStatus
    fingerprint: str | None
    previous: str | None


def evaluate(entry: SyncEntry, ledger: SyncLedger) -> PlannedSync:
    """Compare one record against its last-synced fingerprint.

    Raises ValidationError when the record is missing required fields.
    """
    record = entry.record
    if not record.id:
        raise ValidationError(f"{record.kind} id is required", field="id")
    payload = canonicalize(record, entry.line_items)
    fp = try_fingerprint(payload)
    previous = ledger.get_fingerprint(record.kind, record.id)

    if fp is None:
        status = SyncStatus.UNKNOWN
    elif fp == previous:
        status = SyncStatus.NO_CHANGE
    else:
        status = SyncStatus.NEEDS_SYNC
    return PlannedSync(
        kind=record.kind,
        record_id=record.id,
        status=status,
        fingerprint=fp,
        previous=previous,
    )


def plan_sync(entries: list[SyncEntry], ledger: SyncLedger) -> list[PlannedSync]:
    """Evaluate every entry. Returns one PlannedSync per entry, in input order."""
    return [evaluate(entry, ledger) for entry in entries]


def mark_pushed(plans: list[PlannedSync], ledger: SyncLedger) -> int:
    """Record fingerprints for pushed records. Unknown fingerprints are skipped.

    Returns the number of records marked synced.
    """
    batch = [
        (p.kind, p.record_id, p.fingerprint)
        for p in plans
        if p.status is SyncStatus.NEEDS_SYNC and p.fingerprint
    ]
    return ledger.mark_batch(batch)
