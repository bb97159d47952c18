"""
Vendor pool API router.

Profiles are owned by vendor management; these endpoints seed and
inspect the pool the distribution selector reads from.
"""
from fastapi import APIRouter, Depends, Query

from backend.core.db import get_vendor_profile, list_vendor_profiles, upsert_vendor_profile
from backend.api.models import VendorProfileRequest
from backend.api.security import require_api_key

from marketplace.quote_match import NotFoundError

router = APIRouter(prefix="/api/vendors", tags=["Vendors"])


def serialize_vendor(profile: dict) -> dict:
    return {
        "vendorId": profile["user_id"],
        "businessName": profile["business_name"],
        "verified": profile["verified"],
        "specialties": profile["specialties"],
        "minTicket": profile["min_ticket"],
        "regions": profile["regions"],
    }


@router.get("")
def list_vendors(verified_only: bool = Query(False, alias="verifiedOnly")):
    """List vendor profiles in selection order."""
    vendors = list_vendor_profiles(verified_only=verified_only)
    return {"vendors": [serialize_vendor(v) for v in vendors], "count": len(vendors)}


@router.get("/{vendor_id}")
def get_vendor(vendor_id: str):
    profile = get_vendor_profile(vendor_id)
    if not profile:
        raise NotFoundError("업체를 찾을 수 없습니다.")
    return {"success": True, "vendor": serialize_vendor(profile)}


@router.put("/{vendor_id}", dependencies=[Depends(require_api_key)])
def put_vendor(vendor_id: str, request: VendorProfileRequest):
    """Insert or update a vendor profile."""
    profile = upsert_vendor_profile(
        vendor_id,
        verified=request.verified,
        specialties=request.specialties,
        min_ticket=request.min_ticket,
        regions=request.regions,
        business_name=request.business_name,
    )
    return {"success": True, "vendor": serialize_vendor(profile)}
