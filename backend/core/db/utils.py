"""
Shared database utilities.

Common functions used across database modules for:
- Timestamp handling
- JSON field parsing
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional
import json


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialize a datetime for storage, normalized to UTC so ISO strings sort correctly."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_json_field(value: Optional[str], default: Any = None) -> Any:
    """
    Safely parse a JSON field from the database.

    Args:
        value: JSON string from database, may be None
        default: Default value if parsing fails or value is None

    Returns:
        Parsed JSON value or default
    """
    if not value:
        return default if default is not None else []
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return default if default is not None else []


def to_json(value: Any) -> str:
    """Convert a value to JSON string for database storage."""
    return json.dumps(value, ensure_ascii=False)


def decode_row(row, json_fields: Iterable[str] = (), json_defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Convert a sqlite3.Row into a dict, decoding JSON columns.

    Args:
        row: sqlite3.Row
        json_fields: Column names holding JSON text
        json_defaults: Per-column default when the stored value is empty/invalid
    """
    data = dict(row)
    json_defaults = json_defaults or {}
    for name in json_fields:
        if name in data:
            data[name] = parse_json_field(data[name], json_defaults.get(name))
    return data
