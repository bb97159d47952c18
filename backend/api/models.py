"""
Pydantic request models for the API.

Transport uses camelCase; fields are snake_case with aliases.
Quote submission bodies are validated by the quote engine, not here.
"""
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from marketplace.quote_match import DEFAULT_MAX_VENDORS, MAX_VENDORS_LIMIT, VendorFilters


# ============== Projects ==============

class AreaInput(BaseModel):
    value: float = Field(gt=0)
    unit: Literal["평", "㎡"] = "평"


class ProjectCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    space_types: List[str] = Field(default_factory=list, alias="spaceTypes")
    area: Optional[AreaInput] = None
    budget: int = Field(gt=0)
    regions: List[str] = Field(default_factory=list)
    is_rental: bool = Field(False, alias="isRental")
    rental_checklist: Optional[Dict[str, Any]] = Field(None, alias="rentalChecklist")


# ============== Distribution ==============

class DistributionFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    specialties: Optional[List[str]] = None
    min_ticket: Optional[float] = Field(None, ge=0, alias="minTicket")
    regions: Optional[List[str]] = None

    def to_vendor_filters(self) -> VendorFilters:
        return VendorFilters(
            specialties=set(self.specialties) if self.specialties else None,
            min_ticket=Decimal(str(self.min_ticket)) if self.min_ticket is not None else None,
            regions=set(self.regions) if self.regions else None,
        )


class DistributeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_vendors: int = Field(
        DEFAULT_MAX_VENDORS, ge=1, le=MAX_VENDORS_LIMIT, strict=True, alias="maxVendors"
    )
    filters: Optional[DistributionFilters] = None


# ============== Vendors ==============

class VendorProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    business_name: Optional[str] = Field(None, alias="businessName")
    verified: bool = False
    specialties: List[str] = Field(default_factory=list)
    min_ticket: float = Field(0, ge=0, alias="minTicket")
    regions: List[str] = Field(default_factory=list)
