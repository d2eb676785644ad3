"""Guards and helpers for building external accounting identifiers."""

from __future__ import annotations

import re

from .errors import ValidationError
from .logging_setup import get_logger

logger = get_logger(__name__)


def require_non_empty(text: str | None, context_id: str) -> str:
    """Return ``text`` trimmed, or raise if it is missing or blank.

    Args:
        text: Identifying string, e.g. a project abbreviation
        context_id: Id of the owning entity, used in the log message
    """
    value = (text or "").strip()
    if not value:
        logger.error("Required identifier is missing for %s", context_id)
        raise ValidationError(
            "Unable to generate accounting ID. Project abbreviation is missing.",
            field="abbreviation",
        )
    return value


def generate_abbreviation(name: str) -> str:
    """Derive a project abbreviation from its name.

    Uppercases and replaces every character outside A-Z with an underscore,
    e.g. "Main Street Renovation" -> "MAIN_STREET_RENOVATION".
    """
    return re.sub(r"[^A-Z]", "_", name.upper())
