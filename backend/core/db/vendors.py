"""
Vendor profile database operations.

Profiles belong to the vendor-management side; this service reads them
for selection and exposes an upsert so the pool can be seeded.
"""
from decimal import Decimal
from typing import Optional, List, Dict, Any

from marketplace.quote_match import VendorProfile

from .base import get_db
from .utils import decode_row, to_iso, to_json, utc_now

_JSON_FIELDS = ("specialties", "regions")


def upsert_vendor_profile(
    vendor_id: str,
    verified: bool = False,
    specialties: Optional[List[str]] = None,
    min_ticket: float = 0,
    regions: Optional[List[str]] = None,
    business_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert or update a vendor profile. Preserves created_at on update."""
    now = to_iso(utc_now())

    with get_db() as conn:
        existing = conn.execute(
            "SELECT user_id FROM vendor_profiles WHERE user_id = ?", (vendor_id,)
        ).fetchone()

        if existing:
            conn.execute("""
                UPDATE vendor_profiles
                SET business_name = ?, verified = ?, specialties = ?, min_ticket = ?,
                    regions = ?, updated_at = ?
                WHERE user_id = ?
            """, (business_name, int(verified), to_json(specialties or []), min_ticket,
                  to_json(regions or []), now, vendor_id))
        else:
            conn.execute("""
                INSERT INTO vendor_profiles
                (user_id, business_name, verified, specialties, min_ticket, regions, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (vendor_id, business_name, int(verified), to_json(specialties or []),
                  min_ticket, to_json(regions or []), now, now))

    return get_vendor_profile(vendor_id)


def get_vendor_profile(vendor_id: str) -> Optional[Dict[str, Any]]:
    """Get a vendor profile by vendor ID."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM vendor_profiles WHERE user_id = ?", (vendor_id,)
        ).fetchone()
        if row:
            return _decode(row)
    return None


def list_vendor_profiles(verified_only: bool = False) -> List[Dict[str, Any]]:
    """List vendor profiles, oldest first (the selector's tie-break order)."""
    query = "SELECT * FROM vendor_profiles"
    if verified_only:
        query += " WHERE verified = 1"
    query += " ORDER BY created_at ASC, user_id ASC"

    with get_db() as conn:
        rows = conn.execute(query).fetchall()
        return [_decode(row) for row in rows]


def load_vendor_pool() -> List[VendorProfile]:
    """Verified vendors as engine VendorProfile objects."""
    return [to_vendor_profile(row) for row in list_vendor_profiles(verified_only=True)]


def to_vendor_profile(row: Dict[str, Any]) -> VendorProfile:
    return VendorProfile(
        vendor_id=row["user_id"],
        verified=bool(row.get("verified")),
        specialties=set(row.get("specialties") or []),
        min_ticket=Decimal(str(row.get("min_ticket") or 0)),
        regions=set(row.get("regions") or []),
    )


def _decode(row) -> Dict[str, Any]:
    data = decode_row(row, _JSON_FIELDS)
    data["verified"] = bool(data.get("verified"))
    return data
