"""Canonical payloads — order-independent projections of receipts and bills.

Two records that mean the same thing must serialize to the same bytes:
line items are reduced to the fields the accounting system sees and
sorted by a total order, record fields are written positionally in a
fixed order, and amounts are written as normalized decimal strings.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from .errors import ValidationError
from .models import Bill, DateValue, LineItem, Receipt, parse_amount

# Field order is part of the fingerprint; changing it invalidates every
# stored fingerprint.
RECEIPT_FIELDS = (
    "amount",
    "description",
    "vendor_id",
    "payment_account_id",
    "receipt_date",
    "image_id",
    "notes",
)
BILL_FIELDS = (
    "amount",
    "description",
    "vendor_id",
    "invoice_date",
    "due_date",
    "image_id",
    "notes",
)
_DATE_FIELDS = {"receipt_date", "invoice_date", "due_date"}


def format_amount(amount: Decimal) -> str:
    """Render an amount so that equal values give equal text ("42.50" -> "42.5")."""
    if amount == 0:
        return "0"
    return format(amount.normalize(), "f")


def _require_text(value: str | None, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value)


def _optional_text(value: str | None) -> str:
    return "" if value is None else str(value)


def _date(value: DateValue | None) -> Any:
    if isinstance(value, (int, str)) or value is None:
        return value
    return str(value)


@dataclass(frozen=True)
class CanonicalLineItem:
    """The part of a line item that is compared for sync."""

    work_item_id: str
    description: str
    project_id: str
    amount: Decimal

    @property
    def sort_key(self) -> tuple[str, str, str, Decimal]:
        return (self.work_item_id, self.description, self.project_id, self.amount)

    def as_row(self) -> list[str]:
        return [self.work_item_id, self.description, self.project_id, format_amount(self.amount)]


@dataclass(frozen=True)
class CanonicalPayload:
    """A normalized record ready for hashing."""

    kind: str
    fields: tuple[Any, ...]
    line_items: tuple[CanonicalLineItem, ...]

    def to_json(self) -> str:
        """Compact positional JSON; no objects, so key order never matters."""
        body = [
            self.kind,
            list(self.fields),
            [item.as_row() for item in self.line_items],
        ]
        return json.dumps(body, ensure_ascii=False, separators=(",", ":"))


def canonicalize_line_item(item: LineItem, index: int | None = None) -> CanonicalLineItem:
    """Reduce a line item to (work item, description, project, amount)."""
    prefix = "line_items" if index is None else f"line_items[{index}]"
    return CanonicalLineItem(
        work_item_id=_optional_text(item.work_item_id),
        description=_require_text(item.description, f"{prefix}.description"),
        project_id=_optional_text(item.project_id),
        amount=parse_amount(item.amount, f"{prefix}.amount"),
    )


def canonicalize_line_items(line_items: Iterable[LineItem]) -> tuple[CanonicalLineItem, ...]:
    """Reduce and sort line items; the result does not depend on input order."""
    reduced = [canonicalize_line_item(item, i) for i, item in enumerate(line_items)]
    # Full sort key is a total order over reduced items, so ties are identical items.
    reduced.sort(key=lambda item: item.sort_key)
    return tuple(reduced)


def _record_fields(record: Receipt | Bill, names: tuple[str, ...]) -> tuple[Any, ...]:
    values: list[Any] = []
    for name in names:
        raw = getattr(record, name)
        if name == "amount":
            values.append(format_amount(parse_amount(raw, "amount")))
        elif name == "description":
            values.append(_require_text(raw, "description"))
        elif name in _DATE_FIELDS:
            values.append(_date(raw))
        else:
            values.append(_optional_text(raw))
    return tuple(values)


def canonicalize_receipt(receipt: Receipt, line_items: Iterable[LineItem]) -> CanonicalPayload:
    return CanonicalPayload(
        kind="receipt",
        fields=_record_fields(receipt, RECEIPT_FIELDS),
        line_items=canonicalize_line_items(line_items),
    )


def canonicalize_bill(bill: Bill, line_items: Iterable[LineItem]) -> CanonicalPayload:
    return CanonicalPayload(
        kind="bill",
        fields=_record_fields(bill, BILL_FIELDS),
        line_items=canonicalize_line_items(line_items),
    )


def canonicalize(record: Receipt | Bill, line_items: Iterable[LineItem]) -> CanonicalPayload:
    """Build the canonical payload for a receipt or a bill."""
    if isinstance(record, Receipt):
        return canonicalize_receipt(record, line_items)
    if isinstance(record, Bill):
        return canonicalize_bill(record, line_items)
    raise TypeError(f"Cannot canonicalize {type(record).__name__}")
