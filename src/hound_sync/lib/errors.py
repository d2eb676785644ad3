"""Exception taxonomy for sync fingerprinting and accounting identifiers."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for every error raised by hound_sync."""


class ValidationError(SyncError, ValueError):
    """A required field (amount, description, abbreviation) is missing or blank."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class DigestUnavailableError(SyncError):
    """The digest primitive is unsupported or failed.

    Never means "unchanged": a record whose fingerprint could not be
    computed must not be marked as synced.
    """
