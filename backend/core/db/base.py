"""
Database base module - connection management, schema, and initialization.
"""
import sqlite3
from pathlib import Path
from contextlib import contextmanager

from backend.core.config import settings

# Database location (relative paths resolve against the project root)
_configured = Path(settings.DB_PATH)
DB_PATH = _configured if _configured.is_absolute() else Path(__file__).resolve().parents[3] / _configured

# Seconds a connection waits on a locked database; sqlite3 sets busy_timeout from it
BUSY_TIMEOUT = 5.0


SCHEMA = """
    -- Projects: a consumer's renovation request
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        space_types TEXT,          -- JSON array
        area_value REAL,
        area_unit TEXT,            -- '평' or '㎡'
        budget INTEGER NOT NULL,
        regions TEXT,              -- JSON array of region ids
        is_rental INTEGER DEFAULT 0,
        rental_checklist TEXT,     -- JSON object
        status TEXT DEFAULT 'pending',
        sla_deadline TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    -- Vendor profiles (owned by vendor management, read by the selector)
    CREATE TABLE IF NOT EXISTS vendor_profiles (
        user_id TEXT PRIMARY KEY,
        business_name TEXT,
        verified INTEGER DEFAULT 0,
        specialties TEXT,          -- JSON array
        min_ticket REAL DEFAULT 0,
        regions TEXT,              -- JSON array
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    -- Distribution rounds: one row per round, claimed inside the per-project lock
    CREATE TABLE IF NOT EXISTS distribution_rounds (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        round_no INTEGER NOT NULL,
        vendor_count INTEGER DEFAULT 0,
        distributed_at TEXT NOT NULL,
        cooldown_until TEXT NOT NULL,
        UNIQUE(project_id, round_no),
        FOREIGN KEY (project_id) REFERENCES projects(id)
    );

    -- Distribution records: one per (project, vendor, round), append-only
    CREATE TABLE IF NOT EXISTS quote_distributions (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        vendor_id TEXT NOT NULL,
        round_no INTEGER NOT NULL,
        distributed_at TEXT NOT NULL,
        cooldown_until TEXT NOT NULL,
        UNIQUE(project_id, vendor_id, round_no),
        FOREIGN KEY (project_id) REFERENCES projects(id)
    );

    -- Quotes submitted by vendors
    CREATE TABLE IF NOT EXISTS quotes (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        vendor_id TEXT NOT NULL,
        line_items TEXT NOT NULL,  -- JSON array
        total_amount REAL NOT NULL,
        valid_until TEXT,
        status TEXT DEFAULT 'pending',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY (project_id) REFERENCES projects(id)
    );

    -- Quote templates: line-item snapshots for vendor autofill
    CREATE TABLE IF NOT EXISTS quote_templates (
        id TEXT PRIMARY KEY,
        vendor_id TEXT NOT NULL,
        line_items TEXT NOT NULL,  -- JSON array
        used_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_projects_status ON projects(status);
    CREATE INDEX IF NOT EXISTS idx_projects_created ON projects(created_at);
    CREATE INDEX IF NOT EXISTS idx_rounds_project ON distribution_rounds(project_id, distributed_at);
    CREATE INDEX IF NOT EXISTS idx_distributions_project ON quote_distributions(project_id, distributed_at);
    CREATE INDEX IF NOT EXISTS idx_quotes_project ON quotes(project_id);
    CREATE INDEX IF NOT EXISTS idx_quotes_vendor ON quotes(vendor_id);
    CREATE INDEX IF NOT EXISTS idx_templates_vendor ON quote_templates(vendor_id, used_at);
"""


@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(str(DB_PATH), timeout=BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def begin_immediate(conn: sqlite3.Connection) -> None:
    """
    Take the database write lock now rather than at the first write.

    Readers inside the transaction then see a state no other writer can
    change until commit, which is what the distribution cooldown check needs.
    """
    if not conn.in_transaction:
        conn.execute("BEGIN IMMEDIATE")


def init_db():
    """Initialize database tables."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    with get_db() as conn:
        # WAL lets readers proceed while a distribution round holds the write lock
        conn.execute("PRAGMA journal_mode=WAL")
        conn.executescript(SCHEMA)
