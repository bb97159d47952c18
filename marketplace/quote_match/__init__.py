# Quote distribution and comparison engine
# Siloed module - no imports from backend

from .models import (
    LineItem, VendorProfile, VendorFilters, ValidatedQuote, QuoteColumn,
    Difference, ComparisonResult, SLAStatus, QuoteStatus, ProjectStatus,
)
from .errors import (
    MarketplaceError, SchemaError, TotalMismatchError, NotFoundError,
    ForbiddenError, CooldownActiveError, NoEligibleVendorsError,
    InvalidCardinalityError, PartialPersistenceWarning,
)
from .normalizer import normalize_line_items
from .categories import (
    CategoryNormalizer, ExactCategoryNormalizer, AliasCategoryNormalizer,
    CategoryConfig, load_category_config,
)
from .validator import validate_quote, TOTAL_TOLERANCE
from .cooldown import check_cooldown, compute_cooldown_until, COOLDOWN_WINDOW
from .regions import RegionMatcher, SetRegionMatcher, CallableRegionMatcher
from .selector import select_vendors, MAX_VENDORS_LIMIT, DEFAULT_MAX_VENDORS
from .comparison import compare_quotes, check_cardinality
from .sla import evaluate_sla, format_time_remaining, SLA_WINDOW, SLA_TARGET_QUOTES

__version__ = "1.0.0"

__all__ = [
    # Models
    "LineItem",
    "VendorProfile",
    "VendorFilters",
    "ValidatedQuote",
    "QuoteColumn",
    "Difference",
    "ComparisonResult",
    "SLAStatus",
    "QuoteStatus",
    "ProjectStatus",
    # Errors
    "MarketplaceError",
    "SchemaError",
    "TotalMismatchError",
    "NotFoundError",
    "ForbiddenError",
    "CooldownActiveError",
    "NoEligibleVendorsError",
    "InvalidCardinalityError",
    "PartialPersistenceWarning",
    # Normalization
    "normalize_line_items",
    "CategoryNormalizer",
    "ExactCategoryNormalizer",
    "AliasCategoryNormalizer",
    "CategoryConfig",
    "load_category_config",
    # Validation
    "validate_quote",
    "TOTAL_TOLERANCE",
    # Distribution
    "check_cooldown",
    "compute_cooldown_until",
    "COOLDOWN_WINDOW",
    "RegionMatcher",
    "SetRegionMatcher",
    "CallableRegionMatcher",
    "select_vendors",
    "MAX_VENDORS_LIMIT",
    "DEFAULT_MAX_VENDORS",
    # Comparison
    "compare_quotes",
    "check_cardinality",
    # SLA
    "evaluate_sla",
    "format_time_remaining",
    "SLA_WINDOW",
    "SLA_TARGET_QUOTES",
]
