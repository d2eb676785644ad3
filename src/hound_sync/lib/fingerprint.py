"""Sync fingerprinting for change detection.

Generates stable SHA-256 hashes from canonical receipt and bill payloads,
so a record is only pushed to the accounting system when it has actually
changed since the last successful sync.
"""

from __future__ import annotations

import hashlib
from typing import Iterable

from .canonical import CanonicalPayload, canonicalize_bill, canonicalize_receipt
from .errors import DigestUnavailableError
from .logging_setup import get_logger
from .models import Bill, LineItem, Receipt

logger = get_logger(__name__)

DEFAULT_ALGORITHM = "sha256"

STORE_HASH_HEADER = "PROJECTHOUND-HEADER-2024"
STORE_HASH_FOOTER = "PROJECTHOUND-FOOTER-2024"


def digest_text(text: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Hash the UTF-8 bytes of ``text`` and return a lowercase hex digest.

    Raises:
        DigestUnavailableError: the algorithm is unsupported or hashing failed
    """
    try:
        h = hashlib.new(algorithm)
        h.update(text.encode("utf-8"))
        return h.hexdigest()
    except (ValueError, TypeError, UnicodeEncodeError) as e:
        logger.error("Digest %s failed: %s", algorithm, e)
        raise DigestUnavailableError(f"Digest {algorithm!r} unavailable: {e}") from e


def fingerprint(payload: CanonicalPayload, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Generate a stable fingerprint for a canonical payload.

    Returns:
        Hex digest string (64 characters for SHA-256)
    """
    return digest_text(payload.to_json(), algorithm)


def try_fingerprint(
    payload: CanonicalPayload, algorithm: str = DEFAULT_ALGORITHM
) -> str | None:
    """Like ``fingerprint`` but returns None when the digest is unavailable.

    None means "fingerprint unknown", never "unchanged".
    """
    try:
        return fingerprint(payload, algorithm)
    except DigestUnavailableError:
        logger.warning("Fingerprint unknown for %s payload", payload.kind)
        return None


def receipt_sync_hash(receipt: Receipt, line_items: Iterable[LineItem]) -> str:
    """Fingerprint a receipt together with its line items."""
    return fingerprint(canonicalize_receipt(receipt, line_items))


def bill_sync_hash(bill: Bill, line_items: Iterable[LineItem]) -> str:
    """Fingerprint a bill together with its line items."""
    return fingerprint(canonicalize_bill(bill, line_items))


def store_identity_hash(
    store_id: str,
    change_id: str,
    end_date: int | str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """Derive the external accounting key for a store and period.

    Fields are concatenated in the given order between fixed sentinels and
    are not normalized; callers own their order and formatting.

    Args:
        store_id: Local store identifier
        change_id: Store change counter, as text
        end_date: Period end (epoch milliseconds or text)
    """
    text = f"{STORE_HASH_HEADER}{store_id}{change_id}{end_date}{STORE_HASH_FOOTER}"
    logger.debug("Store identity input: %s", text)
    return digest_text(text, algorithm)
