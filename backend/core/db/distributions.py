"""
Distribution round and distribution record database operations.

Two tables:
- distribution_rounds: one row per round. Claimed under the write lock with
  UNIQUE(project_id, round_no), so two racing rounds cannot both commit.
- quote_distributions: per-vendor audit rows for a round, append-only.
"""
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, List, Dict, Any
import uuid

from .base import begin_immediate, get_db
from .utils import to_iso


class RoundConflict(Exception):
    """Another round for the same project committed first."""


class ProjectRoundLock:
    """
    Handle for the per-project critical section.

    Only valid inside `project_round_lock`; everything runs on the
    connection that holds the write lock.
    """

    def __init__(self, conn: sqlite3.Connection, project_id: str):
        self.conn = conn
        self.project_id = project_id

    def latest_round(self) -> Optional[Dict[str, Any]]:
        """Most recent round for the project (by distributed_at), or None."""
        row = self.conn.execute("""
            SELECT * FROM distribution_rounds
            WHERE project_id = ?
            ORDER BY distributed_at DESC, round_no DESC
            LIMIT 1
        """, (self.project_id,)).fetchone()
        return dict(row) if row else None

    def claim_round(
        self,
        distributed_at: datetime,
        cooldown_until: datetime,
        vendor_count: int,
    ) -> Dict[str, Any]:
        """
        Insert the next round row.

        Raises:
            RoundConflict: the round number was taken by a concurrent writer
        """
        latest = self.conn.execute(
            "SELECT MAX(round_no) AS n FROM distribution_rounds WHERE project_id = ?",
            (self.project_id,)
        ).fetchone()
        round_no = (latest["n"] or 0) + 1
        round_id = str(uuid.uuid4())

        try:
            self.conn.execute("""
                INSERT INTO distribution_rounds
                (id, project_id, round_no, vendor_count, distributed_at, cooldown_until)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (round_id, self.project_id, round_no, vendor_count,
                  to_iso(distributed_at), to_iso(cooldown_until)))
        except sqlite3.IntegrityError as e:
            raise RoundConflict(f"Round {round_no} already claimed for {self.project_id}") from e

        return {
            "id": round_id,
            "project_id": self.project_id,
            "round_no": round_no,
            "vendor_count": vendor_count,
            "distributed_at": to_iso(distributed_at),
            "cooldown_until": to_iso(cooldown_until),
        }


@contextmanager
def project_round_lock(project_id: str) -> Iterator[ProjectRoundLock]:
    """
    Serialize distribution for a project.

    Takes the write lock before the cooldown read; commits on clean exit,
    rolls back if the body raises.
    """
    with get_db() as conn:
        begin_immediate(conn)
        yield ProjectRoundLock(conn, project_id)


def get_latest_round(project_id: str) -> Optional[Dict[str, Any]]:
    """Most recent round for a project, outside any lock (read-only views)."""
    with get_db() as conn:
        row = conn.execute("""
            SELECT * FROM distribution_rounds
            WHERE project_id = ?
            ORDER BY distributed_at DESC, round_no DESC
            LIMIT 1
        """, (project_id,)).fetchone()
        return dict(row) if row else None


def insert_distribution_records(
    project_id: str,
    round_no: int,
    vendor_ids: List[str],
    distributed_at: datetime,
    cooldown_until: datetime,
) -> int:
    """Write one audit row per vendor in a round. Returns count written."""
    with get_db() as conn:
        for vendor_id in vendor_ids:
            conn.execute("""
                INSERT INTO quote_distributions
                (id, project_id, vendor_id, round_no, distributed_at, cooldown_until)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (str(uuid.uuid4()), project_id, vendor_id, round_no,
                  to_iso(distributed_at), to_iso(cooldown_until)))
    return len(vendor_ids)


def list_distribution_records(project_id: str) -> List[Dict[str, Any]]:
    """All distribution records for a project, newest first."""
    with get_db() as conn:
        rows = conn.execute("""
            SELECT * FROM quote_distributions
            WHERE project_id = ?
            ORDER BY distributed_at DESC, vendor_id ASC
        """, (project_id,)).fetchall()
        return [dict(row) for row in rows]
