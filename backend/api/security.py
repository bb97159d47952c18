"""
Request identity and API key dependencies.

Identity is issued by an external auth layer and arrives as headers;
handlers receive it explicitly instead of reading ambient session state.
"""
from typing import Optional

from fastapi import Header, HTTPException

from backend.core.config import settings


def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Require a matching API key when MARKETPLACE_API_KEY is configured."""
    if not settings.API_KEY:
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


def acting_user(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Consumer identity, when the caller supplies one."""
    return x_user_id or None


def acting_vendor(x_vendor_id: Optional[str] = Header(None)) -> Optional[str]:
    """Vendor identity for quote submission."""
    return x_vendor_id or None
