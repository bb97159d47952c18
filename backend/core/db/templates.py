"""
Quote template database operations (vendor autofill snapshots).
"""
from typing import Optional, List, Dict, Any
import uuid

from .base import get_db
from .utils import decode_row, to_iso, to_json, utc_now

_JSON_FIELDS = ("line_items",)


def save_quote_template(vendor_id: str, line_items: List[Dict[str, Any]]) -> str:
    """Store a line-item snapshot for a vendor. Returns the template ID."""
    template_id = str(uuid.uuid4())
    with get_db() as conn:
        conn.execute("""
            INSERT INTO quote_templates (id, vendor_id, line_items, used_at)
            VALUES (?, ?, ?, ?)
        """, (template_id, vendor_id, to_json(line_items), to_iso(utc_now())))
    return template_id


def list_recent_templates(
    vendor_id: str,
    category: Optional[str] = None,
    limit: int = 3
) -> List[Dict[str, Any]]:
    """
    Most recently used templates for a vendor.

    With `category`, only templates containing a line item in that
    category are returned.
    """
    with get_db() as conn:
        rows = conn.execute("""
            SELECT * FROM quote_templates
            WHERE vendor_id = ?
            ORDER BY used_at DESC
        """, (vendor_id,)).fetchall()

    templates = []
    for row in rows:
        template = decode_row(row, _JSON_FIELDS)
        if category and not any(
            isinstance(item, dict) and item.get("category") == category
            for item in template["line_items"]
        ):
            continue
        templates.append(template)
        if len(templates) == limit:
            break
    return templates
