"""
Quote database operations.
"""
from typing import Optional, List, Dict, Any
import uuid

from marketplace.quote_match import ValidatedQuote

from .base import get_db
from .utils import decode_row, to_iso, to_json, utc_now

_JSON_FIELDS = ("line_items",)


def create_quote(quote: ValidatedQuote) -> Dict[str, Any]:
    """Persist a validated quote. Only validated quotes reach this point."""
    quote_id = str(uuid.uuid4())
    now = to_iso(utc_now())

    with get_db() as conn:
        conn.execute("""
            INSERT INTO quotes
            (id, project_id, vendor_id, line_items, total_amount, valid_until, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            quote_id, quote.project_id, quote.vendor_id,
            to_json([item.to_dict() for item in quote.line_items]),
            float(quote.total_amount),
            to_iso(quote.valid_until) if quote.valid_until else None,
            quote.status.value, now, now
        ))

    return get_quote(quote_id)


def get_quote(quote_id: str) -> Optional[Dict[str, Any]]:
    """Get a quote by ID."""
    with get_db() as conn:
        row = conn.execute("SELECT * FROM quotes WHERE id = ?", (quote_id,)).fetchone()
        if row:
            return decode_row(row, _JSON_FIELDS)
    return None


def get_quotes_by_ids(project_id: str, quote_ids: List[str]) -> List[Dict[str, Any]]:
    """Fetch the given quotes that belong to project_id (missing IDs are skipped)."""
    if not quote_ids:
        return []
    placeholders = ",".join("?" for _ in quote_ids)

    with get_db() as conn:
        rows = conn.execute(
            f"SELECT * FROM quotes WHERE project_id = ? AND id IN ({placeholders})",
            [project_id, *quote_ids]
        ).fetchall()
        return [decode_row(row, _JSON_FIELDS) for row in rows]


def list_project_quotes(project_id: str) -> List[Dict[str, Any]]:
    """All quotes for a project, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM quotes WHERE project_id = ? ORDER BY created_at DESC",
            (project_id,)
        ).fetchall()
        return [decode_row(row, _JSON_FIELDS) for row in rows]


def count_project_quotes(project_id: str) -> int:
    with get_db() as conn:
        row = conn.execute(
            "SELECT COUNT(*) AS n FROM quotes WHERE project_id = ?", (project_id,)
        ).fetchone()
        return row["n"] or 0
