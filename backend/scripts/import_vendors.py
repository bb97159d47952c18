#!/usr/bin/env python3
"""
Seed the vendor pool from a JSON export of vendor profiles.

Input is a list of objects:
    [{"vendorId": "v1", "businessName": "...", "verified": true,
      "specialties": ["도배"], "minTicket": 1000000, "regions": ["seoul-mapo"]}]
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

# Add parent to path
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from backend.api.models import VendorProfileRequest
from backend.core.db import init_db, upsert_vendor_profile


def import_vendor_records(records: list) -> tuple:
    """Upsert each record. Returns (imported_count, failures)."""
    imported = 0
    failures = []

    for index, record in enumerate(records):
        vendor_id = record.get("vendorId") if isinstance(record, dict) else None
        if not vendor_id:
            failures.append(f"#{index}: missing vendorId")
            continue
        try:
            profile = VendorProfileRequest.model_validate(record)
        except ValidationError as e:
            failures.append(f"{vendor_id}: {e.error_count()} invalid field(s)")
            continue

        upsert_vendor_profile(
            vendor_id,
            verified=profile.verified,
            specialties=profile.specialties,
            min_ticket=profile.min_ticket,
            regions=profile.regions,
            business_name=profile.business_name,
        )
        imported += 1

    return imported, failures


def main():
    parser = argparse.ArgumentParser(description="Import vendor profiles into the marketplace database")
    parser.add_argument("path", type=Path, help="JSON file with a list of vendor profiles")
    args = parser.parse_args()

    print("=" * 60)
    print(f"Importing vendor profiles from {args.path}")
    print("=" * 60)

    if not args.path.exists():
        print(f"ERROR: File not found: {args.path}")
        sys.exit(1)

    with open(args.path, "r", encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        print("ERROR: Expected a JSON list of vendor profiles")
        sys.exit(1)

    init_db()
    imported, failures = import_vendor_records(records)

    for failure in failures:
        print(f"  FAILED: {failure}")

    print("\n" + "=" * 60)
    print(f"COMPLETE: {imported} vendor profiles imported, {len(failures)} skipped")
    print("=" * 60)


if __name__ == "__main__":
    main()
