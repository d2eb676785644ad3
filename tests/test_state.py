"""Tests for the sync ledger."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from hound_sync.lib.state import SyncLedger


def test_unsynced_record_has_no_fingerprint():
    with TemporaryDirectory() as tmp:
        with SyncLedger(Path(tmp) / "state" / "ledger.sqlite") as ledger:
            assert ledger.get_fingerprint("receipt", "r-1") is None
            assert ledger.count() == 0


def test_mark_synced_replaces_previous_fingerprint():
    with TemporaryDirectory() as tmp:
        with SyncLedger(Path(tmp) / "ledger.sqlite") as ledger:
            ledger.mark_synced("receipt", "r-1", "aaa")
            ledger.mark_synced("receipt", "r-1", "bbb")
            assert ledger.get_fingerprint("receipt", "r-1") == "bbb"
            assert ledger.count() == 1


def test_kinds_are_separate():
    with TemporaryDirectory() as tmp:
        with SyncLedger(Path(tmp) / "ledger.sqlite") as ledger:
            ledger.mark_synced("receipt", "1", "aaa")
            assert ledger.get_fingerprint("bill", "1") is None


def test_empty_fingerprint_rejected():
    with TemporaryDirectory() as tmp:
        with SyncLedger(Path(tmp) / "ledger.sqlite") as ledger:
            with pytest.raises(ValueError):
                ledger.mark_synced("receipt", "r-1", "")


def test_mark_batch_counts_changes_only():
    with TemporaryDirectory() as tmp:
        with SyncLedger(Path(tmp) / "ledger.sqlite") as ledger:
            ledger.mark_synced("receipt", "r-1", "aaa")
            changed = ledger.mark_batch(
                [("receipt", "r-1", "aaa"), ("receipt", "r-2", "bbb"), ("bill", "b-1", "ccc")]
            )
            assert changed == 2
            assert ledger.count() == 3


def test_forget_and_persistence():
    with TemporaryDirectory() as tmp:
        path = Path(tmp) / "ledger.sqlite"
        with SyncLedger(path) as ledger:
            ledger.mark_synced("receipt", "r-1", "aaa")
            ledger.mark_synced("receipt", "r-2", "bbb")
        with SyncLedger(path) as ledger:
            assert ledger.get_fingerprint("receipt", "r-1") == "aaa"
            assert ledger.forget("receipt", "r-1") is True
            assert ledger.forget("receipt", "r-1") is False
            assert ledger.count() == 1
