"""
Quote submission, comparison and autofill services.

Submission: validate -> persist -> best-effort side effects
(project status, template snapshot). Comparison loads 2-3 persisted
quotes of one project and hands them to the comparison engine.
"""
import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional

from marketplace.quote_match import (
    AliasCategoryNormalizer,
    CategoryNormalizer,
    ComparisonResult,
    ExactCategoryNormalizer,
    NotFoundError,
    QuoteColumn,
    SchemaError,
    SLAStatus,
    TotalMismatchError,
    check_cardinality,
    compare_quotes,
    evaluate_sla,
    load_category_config,
    validate_quote,
)

from .config import settings
from .db import (
    count_project_quotes,
    create_quote,
    get_project,
    get_quotes_by_ids,
    list_recent_templates,
    mark_project_quoted,
    save_quote_template,
)
from .side_effects import run_best_effort

logger = logging.getLogger(__name__)

AUTOCOMPLETE_LIMIT = 3


@lru_cache
def get_category_normalizer() -> CategoryNormalizer:
    """Category alignment strategy selected by CATEGORY_MATCHING."""
    if settings.CATEGORY_MATCHING == "alias":
        if settings.CATEGORY_CONFIG_PATH:
            config = load_category_config(settings.CATEGORY_CONFIG_PATH)
        else:
            config = load_category_config()
        logger.info(f"Category matching: alias ({len(config.aliases)} alias groups)")
        return AliasCategoryNormalizer(config)
    return ExactCategoryNormalizer()


def submit_quote(payload: Any, vendor_id: str) -> Dict[str, Any]:
    """
    Validate and persist a vendor's quote.

    Args:
        payload: Decoded request body ({projectId, lineItems, totalAmount, validUntil?})
        vendor_id: Submitting vendor, from the auth layer

    Returns:
        {"quote": stored quote row, "warnings": [...]}

    Raises:
        SchemaError, TotalMismatchError: nothing is written
        NotFoundError: the project does not exist
    """
    try:
        validated = validate_quote(payload, vendor_id)
    except (SchemaError, TotalMismatchError) as e:
        logger.info(f"Quote from vendor {vendor_id or '-'} rejected: {e.code} ({len(e.details)} issues)")
        raise

    project = get_project(validated.project_id)
    if not project:
        raise NotFoundError("프로젝트를 찾을 수 없습니다.")

    quote = create_quote(validated)
    logger.info(
        f"Quote {quote['id']} accepted for project {validated.project_id} "
        f"from vendor {vendor_id} (total {validated.total_amount})"
    )

    warnings: List[str] = []
    context = {"project_id": validated.project_id, "vendor_id": vendor_id}

    warning = run_best_effort("project_status", mark_project_quoted, validated.project_id, context=context)
    if warning:
        warnings.append(warning)

    snapshot = [item.to_dict() for item in validated.line_items]
    warning = run_best_effort("quote_template", save_quote_template, vendor_id, snapshot, context=context)
    if warning:
        warnings.append(warning)

    return {"quote": quote, "warnings": warnings}


def parse_quote_ids(raw: Optional[str]) -> List[str]:
    """Split a comma-delimited ID list, dropping blanks and repeats."""
    if not raw:
        return []
    ids: List[str] = []
    for part in raw.split(","):
        part = part.strip()
        if part and part not in ids:
            ids.append(part)
    return ids


def compare_project_quotes(
    project_id: str,
    quote_ids: List[str],
    normalizer: Optional[CategoryNormalizer] = None,
) -> ComparisonResult:
    """
    Compare 2-3 quotes of one project.

    Cardinality is checked before the store is touched. Quotes that do not
    exist, or belong to another project, are reported as missing.

    Raises:
        InvalidCardinalityError: not 2-3 IDs
        NotFoundError: any requested quote is missing
    """
    check_cardinality(len(quote_ids))

    rows = get_quotes_by_ids(project_id, quote_ids)
    by_id = {row["id"]: row for row in rows}
    missing = [qid for qid in quote_ids if qid not in by_id]
    if missing:
        raise NotFoundError(
            "견적을 찾을 수 없습니다.",
            details=[f"quoteIds: {qid} not found" for qid in missing],
        )

    columns = [QuoteColumn(quote_id=qid, line_items=by_id[qid]["line_items"]) for qid in quote_ids]
    return compare_quotes(columns, normalizer or get_category_normalizer())


def autocomplete_templates(vendor_id: Optional[str], category: Optional[str] = None) -> List[Dict[str, Any]]:
    """The vendor's most recent line-item snapshots for autofill."""
    if not vendor_id:
        raise SchemaError(details=["vendorId: required"])
    return list_recent_templates(vendor_id, category=category, limit=AUTOCOMPLETE_LIMIT)


def get_project_sla(project_id: str, now: Optional[datetime] = None) -> SLAStatus:
    """SLA status for a stored project."""
    project = get_project(project_id)
    if not project:
        raise NotFoundError("프로젝트를 찾을 수 없습니다.")
    return evaluate_sla(project["created_at"], count_project_quotes(project_id), now=now)
