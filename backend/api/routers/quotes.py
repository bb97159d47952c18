"""
Quotes API router - submission, comparison and template autocomplete.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from marketplace.quote_match import NotFoundError

from backend.core.db import get_quote
from backend.core.quotes import (
    autocomplete_templates,
    compare_project_quotes,
    parse_quote_ids,
    submit_quote,
)
from backend.api.security import acting_vendor

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])


def serialize_quote(quote: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": quote["id"],
        "projectId": quote["project_id"],
        "vendorId": quote["vendor_id"],
        "lineItems": quote["line_items"],
        "totalAmount": quote["total_amount"],
        "validUntil": quote["valid_until"],
        "status": quote["status"],
        "createdAt": quote["created_at"],
    }


@router.post("")
def create_quote_endpoint(
    payload: Any = Body(None),
    vendor_id: Optional[str] = Depends(acting_vendor),
):
    """Validate and store a vendor's quote."""
    result = submit_quote(payload, vendor_id)
    quote = result["quote"]
    return {
        "success": True,
        "quote": {"id": quote["id"], "status": quote["status"]},
        "warnings": result["warnings"],
    }


@router.get("/compare")
def compare_quotes_endpoint(
    project_id: str = Query(..., alias="projectId", min_length=1),
    quote_ids: Optional[str] = Query(None, alias="quoteIds"),
):
    """Compare 2-3 quotes of a project category by category."""
    result = compare_project_quotes(project_id, parse_quote_ids(quote_ids))
    return {"success": True, "comparison": result.to_dict()}


@router.get("/autocomplete")
def autocomplete(
    vendor_id: Optional[str] = Query(None, alias="vendorId"),
    category: Optional[str] = Query(None),
):
    """A vendor's 3 most recent line-item templates."""
    templates = autocomplete_templates(vendor_id, category)
    return {
        "success": True,
        "templates": [
            {"id": t["id"], "lineItems": t["line_items"], "usedAt": t["used_at"]}
            for t in templates
        ],
    }


@router.get("/{quote_id}")
def get_quote_detail(quote_id: str):
    """Get a quote by ID."""
    quote = get_quote(quote_id)
    if not quote:
        raise NotFoundError("견적을 찾을 수 없습니다.")
    return {"success": True, "quote": serialize_quote(quote)}
