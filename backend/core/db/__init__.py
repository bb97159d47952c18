"""
Database package for the quote marketplace.

All functions are re-exported here so callers can import from one place:

    from backend.core.db import get_project, list_project_quotes
"""

# Base - connection, schema, initialization
from .base import (
    DB_PATH,
    SCHEMA,
    get_db,
    begin_immediate,
    init_db,
)

# Projects
from .projects import (
    create_project,
    get_project,
    list_projects,
    list_open_projects_past_deadline,
    mark_project_quoted,
)

# Vendor profiles
from .vendors import (
    upsert_vendor_profile,
    get_vendor_profile,
    list_vendor_profiles,
    load_vendor_pool,
    to_vendor_profile,
)

# Distribution rounds and records
from .distributions import (
    RoundConflict,
    ProjectRoundLock,
    project_round_lock,
    get_latest_round,
    insert_distribution_records,
    list_distribution_records,
)

# Quotes
from .quotes import (
    create_quote,
    get_quote,
    get_quotes_by_ids,
    list_project_quotes,
    count_project_quotes,
)

# Quote templates
from .templates import (
    save_quote_template,
    list_recent_templates,
)

# Utilities
from .utils import (
    utc_now,
    to_iso,
    parse_json_field,
    to_json,
    decode_row,
)

__all__ = [
    # Base
    "DB_PATH",
    "SCHEMA",
    "get_db",
    "begin_immediate",
    "init_db",
    # Projects
    "create_project",
    "get_project",
    "list_projects",
    "list_open_projects_past_deadline",
    "mark_project_quoted",
    # Vendors
    "upsert_vendor_profile",
    "get_vendor_profile",
    "list_vendor_profiles",
    "load_vendor_pool",
    "to_vendor_profile",
    # Distributions
    "RoundConflict",
    "ProjectRoundLock",
    "project_round_lock",
    "get_latest_round",
    "insert_distribution_records",
    "list_distribution_records",
    # Quotes
    "create_quote",
    "get_quote",
    "get_quotes_by_ids",
    "list_project_quotes",
    "count_project_quotes",
    # Templates
    "save_quote_template",
    "list_recent_templates",
    # Utils
    "utc_now",
    "to_iso",
    "parse_json_field",
    "to_json",
    "decode_row",
]
