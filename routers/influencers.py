# Influencers Router for the Seeding Dashboard
# Creator CRUD plus every workflow step of the pipeline (contract, shipping,
# content, payments, milestones and messages)

from fastapi import APIRouter, HTTPException, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
import logging

from database.config import get_db
from schemas.seeding import InfluencerStatus
from core.errors import DuplicateError, EngineResult, NotFoundError, PreconditionError
from core.milestones import milestone_view
from services.influencer_store import InfluencerFilter, InfluencerStore, TemplateStore, to_document
from services.workflow_service import WorkflowService
from auth.roles import OperatorRole, Permission
from auth.dependencies import Operator
from auth.decorators import require_role, require_permission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/influencers", tags=["Influencers"])


# ============================================================================
# SCHEMAS
# ============================================================================

class InfluencerCreateRequest(BaseModel):
    handle: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = ""
    country: Optional[str] = ""
    categories: Optional[List[str]] = None
    follower_count: int = Field(0, ge=0)
    project_id: Optional[str] = None
    notes: Optional[str] = ""
    contract: Optional[Dict[str, Any]] = None
    logistics: Optional[Dict[str, Any]] = None


class StatusUpdateRequest(BaseModel):
    status: InfluencerStatus


class ApprovalRequest(BaseModel):
    approved: bool = True


class VideoRequest(BaseModel):
    link: str = Field(..., description="Link to the posted video")


class MessageRequest(BaseModel):
    text: str = Field(..., description="Message or note text")
    internal: bool = Field(True, description="Internal notes are only visible to the team")


class OutreachRequest(BaseModel):
    template_id: Optional[str] = None
    body: Optional[str] = Field(None, description="Custom message; overrides the template body")
    brand: Optional[str] = None


class PaymentReleaseRequest(BaseModel):
    amount_paid: Optional[float] = Field(None, ge=0)
    date: Optional[str] = None
    proof_file_name: Optional[str] = None
    screenshot_file_name: Optional[str] = None


class GenerateMilestonesRequest(BaseModel):
    videos_per_batch: int
    amount_per_batch: float
    strategy: Optional[str] = Field(None, description="replace or merge_preserve_paid")


# ============================================================================
# HELPERS
# ============================================================================

def raise_for_error(result: Optional[EngineResult]) -> EngineResult:
    """Translate a missing creator or an engine error into an HTTP error."""
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Influencer not found"
        )
    if not result.ok:
        error = result.error
        if isinstance(error, NotFoundError):
            code = status.HTTP_404_NOT_FOUND
        elif isinstance(error, (DuplicateError, PreconditionError)):
            code = status.HTTP_409_CONFLICT
        else:
            code = status.HTTP_422_UNPROCESSABLE_ENTITY
        raise HTTPException(status_code=code, detail=error.to_dict())
    return result


def workflow_response(service: WorkflowService, result: EngineResult) -> dict:
    influencer = result.influencer
    return {
        "influencer": to_document(influencer),
        "effects": [e.model_dump() for e in result.effects],
        "eligibility": service.engine.eligibility(influencer).model_dump(mode="json"),
    }


def run_step(db: Session, influencer_id: str, operation) -> dict:
    """Apply one engine operation to a stored creator and commit it."""
    service = WorkflowService(db)
    result = raise_for_error(service.apply(influencer_id, lambda i: operation(service.engine, i)))
    db.commit()
    return workflow_response(service, result)


# ============================================================================
# CRUD ENDPOINTS
# ============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_influencer(
    request: InfluencerCreateRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    """Add a creator to the pool. New creators always start in Discovery."""
    data = request.model_dump(exclude_none=True)
    service = WorkflowService(db)
    result = service.create(data)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=result.error.to_dict()
        )
    db.commit()
    logger.info(f"Influencer {result.influencer.handle} created by {operator.email}")
    return workflow_response(service, result)


@router.get("")
async def list_influencers(
    project_id: Optional[str] = Query(None),
    status_filter: Optional[List[InfluencerStatus]] = Query(None, alias="status"),
    view: Optional[str] = Query(None, description="negotiation, performance or finance"),
    q: Optional[str] = Query(None, description="Search handle, name or email"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_CREATORS))
):
    """List creators with optional pipeline filters."""
    influencers = InfluencerStore(db).list(InfluencerFilter(
        project_id=project_id,
        statuses=status_filter,
        view=view,
        query=q,
    ))
    total = len(influencers)
    offset = (page - 1) * limit

    return {
        "influencers": [to_document(i) for i in influencers[offset:offset + limit]],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit
        }
    }


@router.get("/{influencer_id}")
async def get_influencer(
    influencer_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_CREATORS))
):
    influencer = InfluencerStore(db).get(influencer_id)
    if not influencer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Influencer not found"
        )
    return to_document(influencer)


@router.patch("/{influencer_id}")
async def update_profile(
    influencer_id: str,
    changes: Dict[str, Any],
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    """Edit identity fields (handle, name, email, categories, notes...)."""
    return run_step(db, influencer_id, lambda engine, i: engine.update_profile(i, changes))


@router.delete("/{influencer_id}")
async def delete_influencer(
    influencer_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_role(OperatorRole.ADMIN))
):
    if not InfluencerStore(db).delete(influencer_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Influencer not found"
        )
    db.commit()
    logger.info(f"Influencer {influencer_id} deleted by {operator.email}")
    return {"message": "Influencer deleted"}


# ============================================================================
# WORKFLOW ENDPOINTS
# ============================================================================

@router.put("/{influencer_id}/status")
async def set_status(
    influencer_id: str,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    """Move a creator to a stage chosen by the operator."""
    return run_step(db, influencer_id, lambda engine, i: engine.set_status(i, request.status))


@router.patch("/{influencer_id}/contract")
async def update_contract(
    influencer_id: str,
    changes: Dict[str, Any],
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CONTRACTS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.update_contract(i, changes))


@router.patch("/{influencer_id}/logistics")
async def update_logistics(
    influencer_id: str,
    changes: Dict[str, Any],
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.update_logistics(i, changes))


@router.patch("/{influencer_id}/content")
async def update_content(
    influencer_id: str,
    changes: Dict[str, Any],
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.update_content(i, changes))


@router.post("/{influencer_id}/approval")
async def set_content_approval(
    influencer_id: str,
    request: ApprovalRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.set_content_approval(i, request.approved))


@router.post("/{influencer_id}/videos", status_code=status.HTTP_201_CREATED)
async def add_video(
    influencer_id: str,
    request: VideoRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    """Log a posted video by link."""
    return run_step(db, influencer_id, lambda engine, i: engine.add_posted_video(i, request.link))


@router.post("/{influencer_id}/messages", status_code=status.HTTP_201_CREATED)
async def add_message(
    influencer_id: str,
    request: MessageRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CREATORS))
):
    """Add an internal note or log a free-text reply."""
    if request.internal:
        return run_step(db, influencer_id, lambda engine, i: engine.add_internal_note(i, operator.email, request.text))
    return run_step(db, influencer_id, lambda engine, i: engine.log_reply(i, operator.email, request.text))


@router.post("/{influencer_id}/outreach", status_code=status.HTTP_201_CREATED)
async def send_outreach(
    influencer_id: str,
    request: OutreachRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.SEND_OUTREACH))
):
    template = None
    if request.template_id:
        template = TemplateStore(db).get(request.template_id)
        if not template:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )
    return run_step(db, influencer_id, lambda engine, i: engine.send_outreach(
        i, template=template, operator=operator.email, body=request.body, brand=request.brand
    ))


# ============================================================================
# PAYMENT ENDPOINTS
# ============================================================================

@router.get("/{influencer_id}/eligibility")
async def get_eligibility(
    influencer_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_CREATORS))
):
    """Whether the creator has unlocked their next payment."""
    influencer = InfluencerStore(db).get(influencer_id)
    if not influencer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Influencer not found"
        )
    service = WorkflowService(db)
    return {
        "eligibility": service.engine.eligibility(influencer).model_dump(mode="json"),
        "milestones": milestone_view(influencer.contract, influencer.posted_count),
    }


@router.post("/{influencer_id}/payment")
async def release_payment(
    influencer_id: str,
    request: Optional[PaymentReleaseRequest] = None,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.RELEASE_PAYMENTS))
):
    """Mark the creator paid. Content must be approved first."""
    record = request.model_dump(exclude_none=True) if request else None
    return run_step(db, influencer_id, lambda engine, i: engine.release_payment(i, record or None))


@router.post("/{influencer_id}/milestones/generate")
async def generate_milestones(
    influencer_id: str,
    request: GenerateMilestonesRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CONTRACTS))
):
    """Rebuild the payment batches from pacing inputs."""
    return run_step(db, influencer_id, lambda engine, i: engine.generate_milestones(
        i, request.videos_per_batch, request.amount_per_batch, strategy=request.strategy
    ))


@router.post("/{influencer_id}/milestones", status_code=status.HTTP_201_CREATED)
async def add_milestone(
    influencer_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CONTRACTS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.add_milestone(i))


@router.patch("/{influencer_id}/milestones/{milestone_id}")
async def update_milestone(
    influencer_id: str,
    milestone_id: str,
    changes: Dict[str, Any],
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CONTRACTS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.update_milestone(i, milestone_id, changes))


@router.delete("/{influencer_id}/milestones/{milestone_id}")
async def remove_milestone(
    influencer_id: str,
    milestone_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_CONTRACTS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.remove_milestone(i, milestone_id))


@router.post("/{influencer_id}/milestones/{milestone_id}/pay")
async def pay_milestone(
    influencer_id: str,
    milestone_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.RELEASE_PAYMENTS))
):
    return run_step(db, influencer_id, lambda engine, i: engine.pay_milestone(i, milestone_id))
