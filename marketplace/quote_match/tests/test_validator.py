"""
Tests for the quote validator: schema gate and total reconciliation.

Run with: pytest marketplace/quote_match/tests/test_validator.py -v
"""

from datetime import datetime
from decimal import Decimal

import pytest

from marketplace.quote_match.errors import SchemaError, TotalMismatchError
from marketplace.quote_match.models import QuoteStatus
from marketplace.quote_match.validator import TOTAL_TOLERANCE, validate_quote


def make_payload(total=Decimal("130000"), **overrides):
    payload = {
        "projectId": "proj-1",
        "lineItems": [
            {"category": "도배", "unitPrice": 10000, "quantity": 10,
             "included": ["자재비"], "excluded": [], "assumptions": []},
            {"category": "타일", "unitPrice": 15000, "quantity": 2},
        ],
        "totalAmount": float(total),
    }
    payload.update(overrides)
    return payload


class TestValidQuotes:

    def test_exact_total(self):
        quote = validate_quote(make_payload(), vendor_id="vendor-a")
        assert quote.status == QuoteStatus.PENDING
        assert quote.vendor_id == "vendor-a"
        assert quote.project_id == "proj-1"
        assert quote.computed_total == Decimal("130000")
        assert len(quote.line_items) == 2
        assert quote.line_items[0].included == ["자재비"]

    def test_total_within_tolerance(self):
        quote = validate_quote(make_payload(total=Decimal("130100")), vendor_id="v")
        assert quote.total_amount == Decimal("130100")

        quote = validate_quote(make_payload(total=Decimal("129900")), vendor_id="v")
        assert quote.total_amount == Decimal("129900")

    def test_valid_until_parsed(self):
        quote = validate_quote(
            make_payload(validUntil="2026-11-01T00:00:00Z"), vendor_id="v"
        )
        assert isinstance(quote.valid_until, datetime)
        assert quote.valid_until.year == 2026

    def test_zero_unit_price_allowed(self):
        payload = make_payload(total=Decimal("100000"))
        payload["lineItems"][1]["unitPrice"] = 0
        quote = validate_quote(payload, vendor_id="v")
        assert quote.computed_total == Decimal("100000")


class TestTotalMismatch:

    def test_off_by_101_rejected(self):
        with pytest.raises(TotalMismatchError) as exc_info:
            validate_quote(make_payload(total=Decimal("130101")), vendor_id="v")
        err = exc_info.value
        assert err.computed == Decimal("130000")
        assert err.declared == Decimal("130101")
        assert err.tolerance == TOTAL_TOLERANCE
        assert err.status_code == 400

    def test_under_by_101_rejected(self):
        with pytest.raises(TotalMismatchError):
            validate_quote(make_payload(total=Decimal("129899")), vendor_id="v")


class TestSchemaErrors:

    def test_missing_fields(self):
        with pytest.raises(SchemaError) as exc_info:
            validate_quote({}, vendor_id="v")
        details = exc_info.value.details
        assert any(d.startswith("projectId") for d in details)
        assert any(d.startswith("lineItems") for d in details)
        assert any(d.startswith("totalAmount") for d in details)

    def test_empty_line_items(self):
        with pytest.raises(SchemaError):
            validate_quote(make_payload(lineItems=[]), vendor_id="v")

    def test_bad_line_item_fields(self):
        payload = make_payload()
        payload["lineItems"][0]["quantity"] = 0
        payload["lineItems"][1]["unitPrice"] = -1
        with pytest.raises(SchemaError) as exc_info:
            validate_quote(payload, vendor_id="v")
        details = exc_info.value.details
        assert any(d.startswith("lineItems.0.quantity") for d in details)
        assert any(d.startswith("lineItems.1.unitPrice") for d in details)

    def test_blank_category(self):
        payload = make_payload()
        payload["lineItems"][0]["category"] = "   "
        with pytest.raises(SchemaError) as exc_info:
            validate_quote(payload, vendor_id="v")
        assert any(d.startswith("lineItems.0.category") for d in exc_info.value.details)

    def test_non_positive_total(self):
        with pytest.raises(SchemaError):
            validate_quote(make_payload(totalAmount=0), vendor_id="v")

    def test_missing_vendor_identity(self):
        with pytest.raises(SchemaError):
            validate_quote(make_payload(), vendor_id="")

    def test_non_object_body(self):
        with pytest.raises(SchemaError):
            validate_quote(["not", "an", "object"], vendor_id="v")

    def test_schema_checked_before_total(self):
        """A shape failure is reported even when the totals also disagree."""
        payload = make_payload(total=Decimal("1"))
        payload["lineItems"][0]["quantity"] = -5
        with pytest.raises(SchemaError):
            validate_quote(payload, vendor_id="v")

    def test_numeric_strings_rejected(self):
        payload = {
            "projectId": "p",
            "lineItems": [{"category": "x", "unitPrice": "1000", "quantity": "2"}],
            "totalAmount": "2000",
        }
        with pytest.raises(SchemaError) as exc_info:
            validate_quote(payload, vendor_id="v")
        details = exc_info.value.details
        assert any(d.startswith("lineItems.0.unitPrice") for d in details)
        assert any(d.startswith("lineItems.0.quantity") for d in details)
        assert any(d.startswith("totalAmount") for d in details)

    def test_boolean_amount_rejected(self):
        with pytest.raises(SchemaError):
            validate_quote(make_payload(totalAmount=True), vendor_id="v")
