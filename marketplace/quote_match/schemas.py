"""Pydantic v2 models for vendor quote submissions (camelCase on the wire)."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def require_json_number(value: Any) -> Any:
    # Lax Decimal parsing would accept "1000" and True
    if isinstance(value, (str, bool)):
        raise ValueError("must be a number")
    return value


class LineItemInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(..., min_length=1)
    unit_price: Decimal = Field(..., alias="unitPrice", ge=0, allow_inf_nan=False)
    quantity: Decimal = Field(..., gt=0, allow_inf_nan=False)
    included: list[str] = Field(default_factory=list)
    excluded: list[str] = Field(default_factory=list)
    assumptions: list[str] = Field(default_factory=list)
    material_spec: Optional[str] = Field(None, alias="materialSpec")

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("category must not be blank")
        return value

    @field_validator("unit_price", "quantity", mode="before")
    @classmethod
    def amounts_are_numbers(cls, value: Any) -> Any:
        return require_json_number(value)


class QuoteSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(..., alias="projectId", min_length=1)
    line_items: list[LineItemInput] = Field(..., alias="lineItems", min_length=1)
    total_amount: Decimal = Field(..., alias="totalAmount", gt=0, allow_inf_nan=False)
    valid_until: Optional[datetime] = Field(None, alias="validUntil")

    @field_validator("total_amount", mode="before")
    @classmethod
    def total_is_number(cls, value: Any) -> Any:
        return require_json_number(value)
