"""Records exchanged with the local store — receipts, bills, line items, settings.

These are plain values handed over by the store layer. They are not
validated on construction; the canonicalizer rejects records whose
required fields are missing.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from .errors import ValidationError

Amount = Union[Decimal, int, float, str, None]
DateValue = Union[int, str]


def parse_amount(value: Amount, field_name: str = "amount") -> Decimal:
    """Convert a stored amount to an exact ``Decimal``.

    Floats go through ``repr`` so that ``42.1`` becomes ``Decimal("42.1")``
    rather than its binary expansion. Strings must be plain decimals (no
    grouping commas). Missing or non-finite amounts raise
    ``ValidationError``; no default is ever substituted.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required", field=field_name)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(repr(value))
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, str):
        if not value.strip():
            raise ValidationError(f"{field_name} is required", field=field_name)
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValidationError(
                f"{field_name} is not a number: {value!r}", field=field_name
            ) from None
    else:
        raise ValidationError(
            f"{field_name} has unsupported type {type(value).__name__}", field=field_name
        )
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be finite: {value!r}", field=field_name)
    return amount


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def _record_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    # Missing amount/description stay None so canonicalization rejects them.
    return {"amount": None, "description": None, **_known_fields(cls, data)}


@dataclass
class LineItem:
    """A cost entry owned by a receipt or bill."""

    amount: Amount
    description: str | None
    work_item_id: str = ""  # Work classification (cost code)
    project_id: str = ""
    id: str = ""  # Local storage id, never compared

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        return cls(**_record_fields(cls, data))


@dataclass
class Receipt:
    """A purchase paid from a payment account."""

    amount: Amount
    description: str | None
    vendor_id: str = ""
    payment_account_id: str = ""
    receipt_date: DateValue = 0
    image_id: str = ""
    notes: str = ""
    id: str = ""

    kind = "receipt"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Receipt":
        return cls(**_record_fields(cls, data))


@dataclass
class Bill:
    """A vendor bill, payable by its due date."""

    amount: Amount
    description: str | None
    vendor_id: str = ""
    invoice_date: DateValue = 0
    due_date: DateValue = 0
    image_id: str = ""
    notes: str = ""
    id: str = ""

    kind = "bill"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bill":
        return cls(**_record_fields(cls, data))


RECORD_TYPES: dict[str, type] = {"receipt": Receipt, "bill": Bill}


def record_from_dict(kind: str, data: dict[str, Any]) -> Receipt | Bill:
    """Build a receipt or bill from a plain mapping."""
    try:
        record_cls = RECORD_TYPES[kind]
    except KeyError:
        raise ValidationError(
            f"Unknown record kind: {kind!r} (expected one of {sorted(RECORD_TYPES)})",
            field="kind",
        ) from None
    return record_cls.from_dict(data)


@dataclass
class AccountingSettings:
    """Accounting-related app settings.

    ``payment_accounts`` is a comma-delimited list of account ids; the
    default payment account should be one of them.
    """

    expense_account_id: str = ""
    payment_accounts: str = ""
    default_payment_account_id: str = ""
    company_name: str = ""
    sync_enabled: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra")
        return {**extra, **data}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountingSettings":
        known = _known_fields(cls, data)
        known.pop("extra", None)
        extra = {k: v for k, v in data.items() if k not in known and k != "extra"}
        for key in ("expense_account_id", "payment_accounts", "default_payment_account_id"):
            if known.get(key) is None:
                known[key] = ""
            else:
                known[key] = str(known[key])
        return cls(**known, extra=extra)
