"""
Projects API router - creation, lookup, SLA and quote distribution.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from marketplace.quote_match import NotFoundError, ProjectStatus, SchemaError, SLAStatus, format_time_remaining

from backend.core.db import create_project, get_project, list_project_quotes, list_projects
from backend.core.distribution import distribute_project, get_cooldown_status
from backend.core.quotes import get_project_sla
from backend.api.models import DistributeRequest, ProjectCreateRequest
from backend.api.routers.quotes import serialize_quote
from backend.api.security import acting_user

router = APIRouter(prefix="/api/projects", tags=["Projects"])


def serialize_project(project: Dict[str, Any]) -> Dict[str, Any]:
    area = None
    if project.get("area_value") is not None:
        area = {"value": project["area_value"], "unit": project.get("area_unit")}
    return {
        "id": project["id"],
        "userId": project["user_id"],
        "title": project["title"],
        "spaceTypes": project["space_types"],
        "area": area,
        "budget": project["budget"],
        "regions": project["regions"],
        "isRental": project["is_rental"],
        "rentalChecklist": project["rental_checklist"] or None,
        "status": project["status"],
        "slaDeadline": project["sla_deadline"],
        "createdAt": project["created_at"],
    }


def serialize_sla(status: SLAStatus) -> Dict[str, Any]:
    return {
        "deadline": status.deadline.isoformat(),
        "met": status.met,
        "remainingSeconds": int(status.remaining.total_seconds()),
        "remainingLabel": format_time_remaining(status.remaining),
        "quoteCount": status.quote_count,
        "targetCount": status.target_count,
    }


@router.post("")
def create_project_endpoint(request: ProjectCreateRequest, user_id: Optional[str] = Depends(acting_user)):
    """Create a pending project owned by the calling consumer."""
    if not user_id:
        raise SchemaError(details=["X-User-Id: consumer identity is required"])

    project = create_project(
        user_id=user_id,
        title=request.title,
        budget=request.budget,
        space_types=request.space_types,
        area_value=request.area.value if request.area else None,
        area_unit=request.area.unit if request.area else None,
        regions=request.regions,
        is_rental=request.is_rental,
        rental_checklist=request.rental_checklist,
    )
    return {"success": True, "project": serialize_project(project)}


@router.get("")
def list_projects_endpoint(
    status: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500)
):
    """List projects, newest first."""
    try:
        project_status = ProjectStatus(status) if status else None
    except ValueError:
        raise SchemaError(details=[f"status: unknown project status '{status}'"])

    projects = list_projects(status=project_status, limit=limit)
    return {"projects": [serialize_project(p) for p in projects], "count": len(projects)}


@router.get("/{project_id}")
def get_project_detail(project_id: str):
    """Project with its quotes (newest first), SLA status and cooldown."""
    project = get_project(project_id)
    if not project:
        raise NotFoundError("프로젝트를 찾을 수 없습니다.")

    quotes = list_project_quotes(project_id)
    cooldown = get_cooldown_status(project_id)
    return {
        "success": True,
        "project": serialize_project(project),
        "quotes": [serialize_quote(q) for q in quotes],
        "sla": serialize_sla(get_project_sla(project_id)),
        "cooldown": {
            "active": cooldown["active"],
            "cooldownUntil": cooldown["cooldown_until"].isoformat() if cooldown["active"] else None,
            "round": cooldown["round"],
        },
    }


@router.get("/{project_id}/sla")
def get_project_sla_endpoint(project_id: str):
    """24h / 2-quote guarantee status."""
    return serialize_sla(get_project_sla(project_id))


@router.post("/{project_id}/distribute-quotes")
def distribute_quotes(
    project_id: str,
    request: Optional[DistributeRequest] = Body(None),
    user_id: Optional[str] = Depends(acting_user),
):
    """Run a distribution round: select vendors and start the cooldown."""
    request = request or DistributeRequest()
    outcome = distribute_project(
        project_id,
        max_vendors=request.max_vendors,
        filters=request.filters.to_vendor_filters() if request.filters else None,
        acting_user_id=user_id,
    )
    return {
        "success": True,
        "distributedVendorIds": outcome["distributed_vendor_ids"],
        "cooldownUntil": outcome["cooldown_until"].isoformat(),
        "round": outcome["round"],
        "warnings": outcome["warnings"],
    }
