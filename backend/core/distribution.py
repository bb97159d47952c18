"""
Distribution orchestrator.

One distribution round for a project:
1. Load the project (404 if absent, 403 if the acting user is not the owner)
2. Inside the per-project write lock: cooldown check, vendor selection,
   claim the next round row
3. After commit: per-vendor distribution records, best-effort

The round row is what the cooldown check reads, so a round either fully
exists (and throttles the next one) or does not exist at all.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from marketplace.quote_match import (
    CooldownActiveError,
    DEFAULT_MAX_VENDORS,
    ForbiddenError,
    NotFoundError,
    RegionMatcher,
    VendorFilters,
    check_cooldown,
    compute_cooldown_until,
    select_vendors,
)
from marketplace.quote_match.cooldown import parse_timestamp

from .db import (
    RoundConflict,
    get_latest_round,
    get_project,
    insert_distribution_records,
    load_vendor_pool,
    project_round_lock,
    utc_now,
)
from .side_effects import run_best_effort

logger = logging.getLogger(__name__)


def distribute_project(
    project_id: str,
    max_vendors: int = DEFAULT_MAX_VENDORS,
    filters: Optional[VendorFilters] = None,
    acting_user_id: Optional[str] = None,
    region_matcher: Optional[RegionMatcher] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Run one distribution round.

    Args:
        project_id: Project to distribute
        max_vendors: Upper bound on selected vendors (1-5)
        filters: Optional specialties / min_ticket / regions criteria
        acting_user_id: When given, must own the project
        region_matcher: "vendor serves region" predicate for the regions filter
        now: Evaluation instant (defaults to current UTC time)

    Returns:
        {"distributed_vendor_ids", "cooldown_until", "round", "warnings"}

    Raises:
        NotFoundError, ForbiddenError, CooldownActiveError,
        NoEligibleVendorsError, SchemaError
    """
    project = get_project(project_id)
    if not project:
        raise NotFoundError("프로젝트를 찾을 수 없습니다.")
    if acting_user_id is not None and project["user_id"] != acting_user_id:
        raise ForbiddenError()

    now = now or utc_now()
    budget = Decimal(str(project["budget"]))

    # Vendor profiles are owned elsewhere; read them before taking the lock
    pool = load_vendor_pool()

    try:
        with project_round_lock(project_id) as lock:
            blocked_until = check_cooldown(lock.latest_round(), now)
            if blocked_until:
                logger.info(f"Distribution for {project_id} blocked until {blocked_until.isoformat()}")
                raise CooldownActiveError(blocked_until)

            vendor_ids = select_vendors(
                pool,
                filters=filters,
                max_vendors=max_vendors,
                budget=budget,
                region_matcher=region_matcher,
            )
            cooldown_until = compute_cooldown_until(now)
            claimed = lock.claim_round(now, cooldown_until, len(vendor_ids))
    except RoundConflict:
        raise CooldownActiveError(_winning_deadline(project_id, now))

    round_no = claimed["round_no"]
    logger.info(f"Project {project_id} round {round_no}: distributed to {len(vendor_ids)} vendors")

    warnings: List[str] = []
    warning = run_best_effort(
        "distribution_records",
        insert_distribution_records,
        project_id, round_no, vendor_ids, now, cooldown_until,
        context={"project_id": project_id, "round_no": round_no},
    )
    if warning:
        warnings.append(warning)

    return {
        "distributed_vendor_ids": vendor_ids,
        "cooldown_until": cooldown_until,
        "round": round_no,
        "warnings": warnings,
    }


def get_cooldown_status(project_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Whether a project is currently throttled, and until when."""
    latest = get_latest_round(project_id)
    blocked_until = check_cooldown(latest, now or utc_now())
    return {
        "active": blocked_until is not None,
        "cooldown_until": blocked_until,
        "round": latest["round_no"] if latest else 0,
    }


def _winning_deadline(project_id: str, now: datetime) -> datetime:
    """Deadline of the round that beat us to the claim."""
    latest = get_latest_round(project_id)
    if latest:
        return parse_timestamp(latest["cooldown_until"])
    return compute_cooldown_until(now)
