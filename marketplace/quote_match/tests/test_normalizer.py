"""
Tests for the line-item normalizer.

Run with: pytest marketplace/quote_match/tests/test_normalizer.py -v
"""

from decimal import Decimal

from marketplace.quote_match.normalizer import normalize_line_items, to_decimal


class TestNormalizeShapes:
    """Accepted payload shapes."""

    def test_list_of_items(self):
        items = normalize_line_items([
            {"category": "도배", "unitPrice": 10000, "quantity": 3},
            {"category": "타일", "unitPrice": 5000, "quantity": 2},
        ])
        assert [i.category for i in items] == ["도배", "타일"]
        assert items[0].amount == Decimal("30000")

    def test_single_object(self):
        items = normalize_line_items({"category": "도배", "unitPrice": 100, "quantity": 1})
        assert len(items) == 1
        assert items[0].unit_price == Decimal("100")

    def test_none(self):
        assert normalize_line_items(None) == []

    def test_unrecognized_types(self):
        assert normalize_line_items("도배") == []
        assert normalize_line_items(42) == []

    def test_snake_case_keys(self):
        items = normalize_line_items([{"category": "도배", "unit_price": 7, "quantity": 2}])
        assert items[0].amount == Decimal("14")


class TestNormalizeDegradation:
    """Malformed entries degrade instead of failing."""

    def test_entries_without_category_dropped(self):
        items = normalize_line_items([
            {"unitPrice": 100, "quantity": 1},
            {"category": "", "unitPrice": 100, "quantity": 1},
            "not a dict",
            {"category": "마루", "unitPrice": 100, "quantity": 1},
        ])
        assert [i.category for i in items] == ["마루"]

    def test_missing_numbers_become_zero(self):
        items = normalize_line_items([{"category": "도배"}])
        assert items[0].unit_price == Decimal("0")
        assert items[0].quantity == Decimal("0")
        assert items[0].amount == Decimal("0")

    def test_optional_lists_and_material_spec(self):
        items = normalize_line_items([{
            "category": "도배", "unitPrice": 1, "quantity": 1,
            "included": ["자재", 3], "excluded": "nope", "materialSpec": "실크벽지",
        }])
        assert items[0].included == ["자재"]
        assert items[0].excluded == []
        assert items[0].material_spec == "실크벽지"


class TestToDecimal:
    def test_numbers(self):
        assert to_decimal(12) == Decimal("12")
        assert to_decimal(0.5) == Decimal("0.5")
        assert to_decimal("1500") == Decimal("1500")

    def test_unusable(self):
        assert to_decimal(None) == Decimal("0")
        assert to_decimal(True) == Decimal("0")
        assert to_decimal("abc") == Decimal("0")
        assert to_decimal(float("nan")) == Decimal("0")
        assert to_decimal(float("inf")) == Decimal("0")
