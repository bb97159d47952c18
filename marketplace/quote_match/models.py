"""
Data models for the quote distribution and comparison engine.

All structured data uses dataclasses for type hints, __eq__, and __repr__.
Money values use Decimal so the total reconciliation rule is exact.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional


class QuoteStatus(str, Enum):
    """Lifecycle of a vendor quote. Only `pending` is set by this engine."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ProjectStatus(str, Enum):
    PENDING = "pending"
    QUOTED = "quoted"
    CONTRACTED = "contracted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class LineItem:
    """
    One priced work category within a quote.

    `category` is the vendor's free-text label (e.g. "도배", "타일공사").
    """
    category: str
    unit_price: Decimal
    quantity: Decimal
    included: list[str] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)
    assumptions: list[str] = field(default_factory=list)
    material_spec: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        """Transport/storage shape (camelCase keys, numbers as float/int)."""
        data = {
            "category": self.category,
            "unitPrice": _plain_number(self.unit_price),
            "quantity": _plain_number(self.quantity),
            "included": list(self.included),
            "excluded": list(self.excluded),
            "assumptions": list(self.assumptions),
        }
        if self.material_spec is not None:
            data["materialSpec"] = self.material_spec
        return data


@dataclass
class VendorProfile:
    """
    A vendor as seen by the selector. Owned by vendor management; read-only here.
    """
    vendor_id: str
    verified: bool
    specialties: set[str] = field(default_factory=set)
    min_ticket: Decimal = Decimal("0")
    regions: set[str] = field(default_factory=set)


@dataclass
class VendorFilters:
    """Optional narrowing criteria for a distribution round."""
    specialties: Optional[set[str]] = None
    min_ticket: Optional[Decimal] = None
    regions: Optional[set[str]] = None


@dataclass
class ValidatedQuote:
    """A quote that passed schema and total reconciliation, ready to persist."""
    project_id: str
    vendor_id: str
    line_items: list[LineItem]
    total_amount: Decimal
    computed_total: Decimal
    valid_until: Optional[datetime] = None
    status: QuoteStatus = QuoteStatus.PENDING


@dataclass
class QuoteColumn:
    """A persisted quote as fed to the comparison engine."""
    quote_id: str
    line_items: object  # raw payload; normalized by the engine


@dataclass
class Difference:
    field: str
    values: list[Decimal]


@dataclass
class ComparisonResult:
    mapping_rate: float
    differences: list[Difference]
    table: list[dict]
    categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "mappingRate": self.mapping_rate,
            "differences": [
                {"field": d.field, "values": [_plain_number(v) for v in d.values]}
                for d in self.differences
            ],
            "table": [
                {k: (_plain_number(v) if isinstance(v, Decimal) else v) for k, v in row.items()}
                for row in self.table
            ],
        }


@dataclass
class SLAStatus:
    """Snapshot of the 24h / minimum-quotes guarantee for one project."""
    deadline: datetime
    met: bool
    remaining: timedelta
    quote_count: int
    target_count: int

    @property
    def expired(self) -> bool:
        return self.remaining <= timedelta(0)


def _plain_number(value: Decimal):
    """Render a Decimal as int when integral, float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
