"""
Quote comparison engine.

Aligns 2-3 quotes for one project by work category and reports:
- mappingRate: share of categories (across all quotes) represented in at least one quote
- differences: categories whose non-null amounts disagree between quotes
- table: one row per category, one `quote_<id>` column per quote

A quote contributes unitPrice x quantity of its FIRST line item in a category.
Pure computation: same input, same output.
"""

from decimal import Decimal
from typing import Optional

from .categories import CategoryNormalizer, ExactCategoryNormalizer
from .errors import InvalidCardinalityError
from .models import ComparisonResult, Difference, QuoteColumn
from .normalizer import normalize_line_items

MIN_QUOTES = 2
MAX_QUOTES = 3


def check_cardinality(count: int) -> None:
    """Raise InvalidCardinalityError unless 2 <= count <= 3."""
    if not MIN_QUOTES <= count <= MAX_QUOTES:
        raise InvalidCardinalityError(count)


def compare_quotes(
    quotes: list[QuoteColumn],
    normalizer: Optional[CategoryNormalizer] = None,
) -> ComparisonResult:
    """
    Compare quotes category by category.

    Args:
        quotes: 2-3 quotes, in the column order wanted in the table
        normalizer: Category alignment strategy (default: exact string match)

    Returns:
        ComparisonResult

    Raises:
        InvalidCardinalityError: fewer than 2 or more than 3 distinct quotes
    """
    # repeated columns for one quote collapse into a single table column
    check_cardinality(len({q.quote_id for q in quotes}))
    normalizer = normalizer or ExactCategoryNormalizer()

    # category -> {quote_id: amount}; insertion order = first appearance
    category_map: dict[str, dict[str, Decimal]] = {}
    all_categories: list[str] = []

    for quote in quotes:
        for item in normalize_line_items(quote.line_items):
            category = normalizer.canonical(item.category)
            if category not in category_map:
                category_map[category] = {}
                all_categories.append(category)
            per_quote = category_map[category]
            if quote.quote_id not in per_quote:
                per_quote[quote.quote_id] = item.amount

    mapped = [c for c in all_categories if category_map[c]]
    mapping_rate = len(mapped) / len(all_categories) if all_categories else 0.0

    differences = []
    for category in all_categories:
        values = [
            category_map[category][q.quote_id]
            for q in quotes
            if q.quote_id in category_map[category]
        ]
        if len(set(values)) > 1:
            differences.append(Difference(field=category, values=values))

    table = build_table(all_categories, category_map, quotes)

    return ComparisonResult(
        mapping_rate=mapping_rate,
        differences=differences,
        table=table,
        categories=all_categories,
    )


def build_table(
    categories: list[str],
    category_map: dict[str, dict[str, Decimal]],
    quotes: list[QuoteColumn],
) -> list[dict]:
    """Row per category; cell is the quote's amount or None when absent."""
    rows = []
    for category in categories:
        row = {"category": category}
        for quote in quotes:
            row[column_key(quote.quote_id)] = category_map[category].get(quote.quote_id)
        rows.append(row)
    return rows


def column_key(quote_id: str) -> str:
    return f"quote_{quote_id}"
