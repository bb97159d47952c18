"""
Region matching - bridge to whatever knows which vendor serves which area.

The selector only asks "does this vendor serve region X?". Polygon or
geofence tests belong to a geospatial service; plug one in by implementing
RegionMatcher. The default answers from the vendor's precomputed region set.
"""

from abc import ABC, abstractmethod
from typing import Callable

from .models import VendorProfile


class RegionMatcher(ABC):
    """Abstract "vendor serves region" predicate."""

    @abstractmethod
    def serves(self, vendor: VendorProfile, region: str) -> bool:
        pass

    def serves_any(self, vendor: VendorProfile, regions: set[str]) -> bool:
        return any(self.serves(vendor, region) for region in regions)


class SetRegionMatcher(RegionMatcher):
    """Matches against VendorProfile.regions."""

    def serves(self, vendor: VendorProfile, region: str) -> bool:
        return region in vendor.regions


class CallableRegionMatcher(RegionMatcher):
    """
    Wraps an external predicate, e.g. a geospatial client's point-in-polygon check.

    Args:
        predicate: fn(vendor_id, region) -> bool
    """

    def __init__(self, predicate: Callable[[str, str], bool]):
        self._predicate = predicate

    def serves(self, vendor: VendorProfile, region: str) -> bool:
        return bool(self._predicate(vendor.vendor_id, region))
