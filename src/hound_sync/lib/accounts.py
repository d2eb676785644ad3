"""Account reference sanitizer.

Keeps the account ids stored in settings pointing at accounts that still
exist. Invalid references are repaired, not reported: the expense account
is cleared, dead payment accounts are dropped, and a dead default payment
account is replaced by the first surviving payment account.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from .logging_setup import get_logger
from .models import AccountingSettings

logger = get_logger(__name__)

ACCOUNT_REFERENCE_FIELDS = (
    "expense_account_id",
    "payment_accounts",
    "default_payment_account_id",
)


def split_account_ids(raw: str | None) -> list[str]:
    """Split a comma-delimited id list, trimming entries and dropping blanks."""
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def sanitize_account_settings(
    settings: AccountingSettings, valid_account_ids: Iterable[str]
) -> dict[str, str]:
    """Return a partial settings update with every account reference valid.

    Only the three account reference fields are returned; apply them with
    ``apply_settings_update``. Running this on its own output with the same
    account ids changes nothing.
    """
    valid = frozenset(valid_account_ids)

    expense = settings.expense_account_id if settings.expense_account_id in valid else ""
    if expense != settings.expense_account_id:
        logger.info("Cleared expense account %s", settings.expense_account_id)

    payment_ids = [pid for pid in split_account_ids(settings.payment_accounts) if pid in valid]

    default = settings.default_payment_account_id
    # Checked against the surviving list so the default is always one of them.
    if default not in payment_ids:
        replacement = payment_ids[0] if payment_ids else ""
        if default != replacement:
            logger.info("Default payment account %r replaced by %r", default, replacement)
        default = replacement

    return {
        "expense_account_id": expense,
        "payment_accounts": ",".join(payment_ids),
        "default_payment_account_id": default,
    }


def apply_settings_update(
    settings: AccountingSettings, update: dict[str, Any]
) -> AccountingSettings:
    """Return a copy of ``settings`` with the partial update applied."""
    return replace(settings, **update)


def needs_sanitizing(settings: AccountingSettings, valid_account_ids: Iterable[str]) -> bool:
    """True when sanitizing would change any stored reference."""
    update = sanitize_account_settings(settings, valid_account_ids)
    return any(getattr(settings, key) != value for key, value in update.items())
