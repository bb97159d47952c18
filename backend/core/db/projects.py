"""
Project database operations.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any
import uuid

from marketplace.quote_match import ProjectStatus
from marketplace.quote_match.sla import sla_deadline

from .base import get_db
from .utils import decode_row, to_iso, to_json, utc_now

_JSON_FIELDS = ("space_types", "regions", "rental_checklist")
_JSON_DEFAULTS = {"rental_checklist": {}}


def create_project(
    user_id: str,
    title: str,
    budget: int,
    space_types: Optional[List[str]] = None,
    area_value: Optional[float] = None,
    area_unit: Optional[str] = None,
    regions: Optional[List[str]] = None,
    is_rental: bool = False,
    rental_checklist: Optional[Dict[str, Any]] = None,
    created_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Create a pending project; the SLA deadline is fixed at creation."""
    project_id = str(uuid.uuid4())
    created = created_at or utc_now()
    now = to_iso(created)

    with get_db() as conn:
        conn.execute("""
            INSERT INTO projects
            (id, user_id, title, space_types, area_value, area_unit, budget, regions,
             is_rental, rental_checklist, status, sla_deadline, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            project_id, user_id, title, to_json(space_types or []), area_value, area_unit,
            budget, to_json(regions or []), int(is_rental),
            to_json(rental_checklist) if rental_checklist else None,
            ProjectStatus.PENDING.value, to_iso(sla_deadline(created)), now, now
        ))

    return get_project(project_id)


def get_project(project_id: str) -> Optional[Dict[str, Any]]:
    """Get a project by ID."""
    with get_db() as conn:
        row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
        if row:
            return _decode(row)
    return None


def list_projects(
    status: Optional[ProjectStatus] = None,
    user_id: Optional[str] = None,
    limit: int = 100
) -> List[Dict[str, Any]]:
    """List projects, newest first."""
    query = "SELECT * FROM projects WHERE 1=1"
    params: list = []

    if status:
        query += " AND status = ?"
        params.append(status.value)
    if user_id:
        query += " AND user_id = ?"
        params.append(user_id)

    query += " ORDER BY created_at DESC LIMIT ?"
    params.append(limit)

    with get_db() as conn:
        rows = conn.execute(query, params).fetchall()
        return [_decode(row) for row in rows]


def list_open_projects_past_deadline(now: datetime) -> List[Dict[str, Any]]:
    """Pending/quoted projects whose SLA deadline has passed, with quote counts."""
    with get_db() as conn:
        rows = conn.execute("""
            SELECT p.*, (SELECT COUNT(*) FROM quotes q WHERE q.project_id = p.id) AS quote_count
            FROM projects p
            WHERE p.status IN (?, ?) AND p.sla_deadline <= ?
            ORDER BY p.sla_deadline ASC
        """, (ProjectStatus.PENDING.value, ProjectStatus.QUOTED.value, to_iso(now))).fetchall()
        return [_decode(row) for row in rows]


def mark_project_quoted(project_id: str) -> bool:
    """Move a pending project to quoted. Returns True if the status changed."""
    with get_db() as conn:
        result = conn.execute(
            "UPDATE projects SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
            (ProjectStatus.QUOTED.value, to_iso(utc_now()), project_id, ProjectStatus.PENDING.value)
        )
        return result.rowcount > 0


def _decode(row) -> Dict[str, Any]:
    data = decode_row(row, _JSON_FIELDS, _JSON_DEFAULTS)
    data["is_rental"] = bool(data.get("is_rental"))
    return data
