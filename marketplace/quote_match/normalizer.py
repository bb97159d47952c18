"""
Line-item normalizer.

Stored quotes carry their line items as a JSON blob that may be a list,
a single object, or something unusable. Comparison is read-only, so bad
input degrades to an empty item list instead of failing.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from .models import LineItem


def normalize_line_items(raw: Any) -> list[LineItem]:
    """
    Convert a raw line-item payload into LineItem objects.

    Examples:
        [{"category": "도배", "unitPrice": 1000, "quantity": 2}] -> [LineItem(...)]
        {"category": "도배", "unitPrice": 1000, "quantity": 2}   -> [LineItem(...)]
        None / "garbage" / 42                                      -> []

    Entries without a category are dropped. Missing or non-numeric
    price/quantity become 0.
    """
    if isinstance(raw, list):
        entries = raw
    elif isinstance(raw, dict):
        entries = [raw]
    else:
        return []

    items = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        category = entry.get("category")
        if not isinstance(category, str) or not category:
            continue
        items.append(LineItem(
            category=category,
            unit_price=to_decimal(_first_present(entry, "unitPrice", "unit_price")),
            quantity=to_decimal(entry.get("quantity")),
            included=_string_list(entry.get("included")),
            excluded=_string_list(entry.get("excluded")),
            assumptions=_string_list(entry.get("assumptions")),
            material_spec=_optional_str(_first_present(entry, "materialSpec", "material_spec")),
        ))
    return items


def to_decimal(value: Any) -> Decimal:
    """Coerce a JSON number (or numeric string) to Decimal, 0 when unusable."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result


def _first_present(entry: dict, *keys: str) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _optional_str(value: Any):
    return value if isinstance(value, str) else None
