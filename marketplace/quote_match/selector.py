"""
Vendor selector - picks who receives a project request.

Filter order:
1. verified vendors only
2. specialty overlap (when a specialties filter is given)
3. min_ticket <= ceiling (explicit minTicket filter, else the project budget)
4. serves one of the requested regions (when a regions filter is given)
5. truncate to max_vendors, preserving pool order
"""

import logging
from decimal import Decimal
from typing import Optional

from .errors import NoEligibleVendorsError, SchemaError
from .models import VendorFilters, VendorProfile
from .regions import RegionMatcher, SetRegionMatcher

logger = logging.getLogger(__name__)

MAX_VENDORS_LIMIT = 5
DEFAULT_MAX_VENDORS = 5


def select_vendors(
    pool: list[VendorProfile],
    filters: Optional[VendorFilters] = None,
    max_vendors: int = DEFAULT_MAX_VENDORS,
    budget: Optional[Decimal] = None,
    region_matcher: Optional[RegionMatcher] = None,
) -> list[str]:
    """
    Select eligible vendor IDs for a distribution round.

    Args:
        pool: All vendor profiles, in the order ties should be broken
        filters: Optional specialties / min_ticket / regions criteria
        max_vendors: Upper bound on the result (1-5)
        budget: Project budget, used as the min_ticket ceiling when
            filters.min_ticket is not given
        region_matcher: Region predicate (defaults to SetRegionMatcher)

    Returns:
        Ordered list of at most max_vendors vendor IDs

    Raises:
        SchemaError: max_vendors outside 1-5
        NoEligibleVendorsError: nothing left after filtering
    """
    if isinstance(max_vendors, bool) or not isinstance(max_vendors, int) \
            or not 1 <= max_vendors <= MAX_VENDORS_LIMIT:
        raise SchemaError(details=[f"maxVendors: must be between 1 and {MAX_VENDORS_LIMIT}"])

    filters = filters or VendorFilters()
    matcher = region_matcher or SetRegionMatcher()
    ceiling = filters.min_ticket if filters.min_ticket is not None else budget

    selected = []
    for vendor in pool:
        if not vendor.verified:
            continue
        if filters.specialties and not (vendor.specialties & filters.specialties):
            continue
        if ceiling is not None and vendor.min_ticket > ceiling:
            continue
        if filters.regions and not matcher.serves_any(vendor, filters.regions):
            continue
        selected.append(vendor.vendor_id)
        if len(selected) == max_vendors:
            break

    if not selected:
        logger.info(f"No eligible vendors in pool of {len(pool)} (ceiling={ceiling})")
        raise NoEligibleVendorsError()

    return selected
