"""Tests for canonical payloads."""

from decimal import Decimal

import pytest

from hound_sync.lib.canonical import (
    canonicalize,
    canonicalize_bill,
    canonicalize_line_items,
    canonicalize_receipt,
    format_amount,
)
from hound_sync.lib.errors import ValidationError
from hound_sync.lib.models import Bill, LineItem, Receipt


def test_format_amount_normalizes():
    assert format_amount(Decimal("42.50")) == "42.5"
    assert format_amount(Decimal("100")) == "100"
    assert format_amount(Decimal("1E+2")) == "100"
    assert format_amount(Decimal("-0.00")) == "0"


def test_line_items_sorted_by_work_item_then_description_then_amount():
    items = [
        LineItem("5", "b", "w2"),
        LineItem("9", "a", "w1"),
        LineItem("3", "a", "w1"),
        LineItem("1", "c", "w1"),
    ]
    rows = [item.as_row() for item in canonicalize_line_items(items)]
    assert rows == [
        ["w1", "a", "", "3"],
        ["w1", "a", "", "9"],
        ["w1", "c", "", "1"],
        ["w2", "b", "", "5"],
    ]


def test_amount_ordering_is_numeric():
    items = [LineItem("10", "x", "w"), LineItem("9", "x", "w")]
    rows = [item.as_row() for item in canonicalize_line_items(items)]
    assert [r[3] for r in rows] == ["9", "10"]


def test_permutations_serialize_identically():
    a = LineItem("1.10", "Paint", "finish", id="1")
    b = LineItem("2", "Brushes", "finish", id="2")
    c = LineItem("2.00", "Brushes", "finish", id="3")
    receipt = Receipt(amount="5.10", description="Paint")
    first = canonicalize_receipt(receipt, [a, b, c]).to_json()
    assert canonicalize_receipt(receipt, [c, a, b]).to_json() == first
    assert canonicalize_receipt(receipt, [b, c, a]).to_json() == first


def test_payload_is_positional_json():
    receipt = Receipt(
        amount=Decimal("12.50"),
        description="Tape",
        vendor_id="v",
        payment_account_id="p",
        receipt_date=7,
        image_id="i",
        notes="n",
    )
    payload = canonicalize_receipt(receipt, [LineItem("12.5", "Tape", "w", project_id="pr")])
    assert payload.to_json() == (
        '["receipt",["12.5","Tape","v","p",7,"i","n"],[["w","Tape","pr","12.5"]]]'
    )


def test_bill_payload_fields():
    bill = Bill(amount=3, description="Bill", vendor_id="v", invoice_date=1, due_date=2)
    payload = canonicalize_bill(bill, [])
    assert payload.kind == "bill"
    assert payload.fields == ("3", "Bill", "v", 1, 2, "", "")


def test_canonicalize_dispatches_on_type():
    assert canonicalize(Receipt(amount=1, description="x"), []).kind == "receipt"
    assert canonicalize(Bill(amount=1, description="x"), []).kind == "bill"
    with pytest.raises(TypeError):
        canonicalize(object(), [])


def test_optional_none_fields_treated_as_empty():
    plain = canonicalize_receipt(Receipt(amount=1, description="x"), [])
    with_none = canonicalize_receipt(Receipt(amount=1, description="x", notes=None), [])
    assert plain.to_json() == with_none.to_json()


def test_float_amount_is_exact():
    payload = canonicalize_receipt(Receipt(amount=0.1, description="x"), [])
    assert payload.fields[0] == "0.1"


@pytest.mark.parametrize("amount", [None, "", "abc", "NaN", True, "1,2", "1,000.00"])
def test_missing_or_bad_record_amount_raises(amount):
    with pytest.raises(ValidationError):
        canonicalize_receipt(Receipt(amount=amount, description="x"), [])


def test_missing_description_raises():
    with pytest.raises(ValidationError) as exc:
        canonicalize_receipt(Receipt(amount=1, description=None), [])
    assert exc.value.field == "description"


def test_missing_line_item_amount_raises():
    with pytest.raises(ValidationError) as exc:
        canonicalize_receipt(
            Receipt(amount=1, description="x"),
            [LineItem(1, "ok", "w"), LineItem(None, "bad", "w")],
        )
    assert exc.value.field == "line_items[1].amount"


def test_blank_description_is_allowed():
    payload = canonicalize_receipt(Receipt(amount=1, description=""), [])
    assert payload.fields[1] == ""
