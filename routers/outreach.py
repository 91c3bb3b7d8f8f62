# Outreach Router for the Seeding Dashboard
# Message templates (macros) and bulk outreach to several creators at once

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel, Field
import logging

from database.config import get_db
from schemas.seeding import MessageTemplate
from services.influencer_store import TemplateStore
from services.workflow_service import WorkflowService
from auth.roles import Permission
from auth.dependencies import Operator
from auth.decorators import require_permission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/outreach", tags=["Outreach"])


# ============================================================================
# SCHEMAS
# ============================================================================

class TemplateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subject: Optional[str] = ""
    body: str = Field(..., min_length=1)


class BulkOutreachRequest(BaseModel):
    influencer_ids: List[str] = Field(..., min_length=1)
    template_id: Optional[str] = None
    body: Optional[str] = None
    brand: Optional[str] = None


# ============================================================================
# TEMPLATE ENDPOINTS
# ============================================================================

@router.get("/templates")
async def list_templates(
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_CREATORS))
):
    return {"templates": [t.model_dump() for t in TemplateStore(db).list()]}


@router.post("/templates", status_code=status.HTTP_201_CREATED)
async def create_template(
    request: TemplateRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_TEMPLATES))
):
    template = TemplateStore(db).save(MessageTemplate(**request.model_dump()))
    db.commit()
    return template.model_dump()


@router.put("/templates/{template_id}")
async def update_template(
    template_id: str,
    request: TemplateRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_TEMPLATES))
):
    store = TemplateStore(db)
    if not store.get(template_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found"
        )
    template = store.save(MessageTemplate(id=template_id, **request.model_dump()))
    db.commit()
    return template.model_dump()


# ============================================================================
# BULK OUTREACH
# ============================================================================

@router.post("/bulk")
async def send_bulk_outreach(
    request: BulkOutreachRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.SEND_OUTREACH))
):
    """
    Send one macro to several creators.
    Each creator is saved independently; failures are listed per creator.
    """
    template = None
    if request.template_id:
        template = TemplateStore(db).get(request.template_id)
        if not template:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )
    if not template and not request.body:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Either template_id or body is required"
        )

    outcome = WorkflowService(db).bulk_outreach(
        request.influencer_ids,
        template=template,
        operator=operator.email,
        body=request.body,
        brand=request.brand,
    )
    return {
        "message": f"Outreach sent to {len(outcome['sent'])} of {len(request.influencer_ids)} creators",
        **outcome,
    }
