# Reports Router for the Seeding Dashboard
# Read-only aggregates, recomputed from the stored creators on every request

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from database.config import get_db
from services.influencer_store import InfluencerFilter, InfluencerStore, ProjectStore
from core.reporting import (
    campaign_overview,
    eligibility_summaries,
    finance_summary,
    logistics_counts,
    status_counts,
)
from auth.roles import Permission
from auth.dependencies import Operator
from auth.decorators import require_permission

router = APIRouter(prefix="/reports", tags=["Reports"])


def load_influencers(db: Session, project_id: Optional[str] = None):
    return InfluencerStore(db).list(InfluencerFilter(project_id=project_id))


@router.get("/overview")
async def get_overview(
    project_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_REPORTS))
):
    projects = ProjectStore(db).list()
    if project_id:
        projects = [p for p in projects if p.id == project_id]
    return campaign_overview(load_influencers(db, project_id), projects)


@router.get("/status-counts")
async def get_status_counts(
    project_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_REPORTS))
):
    return {"counts": status_counts(load_influencers(db, project_id))}


@router.get("/finance")
async def get_finance(
    project_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_REPORTS))
):
    return finance_summary(load_influencers(db, project_id))


@router.get("/eligibility")
async def get_eligibility_report(
    project_id: Optional[str] = Query(None),
    eligible_only: bool = Query(False),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_REPORTS))
):
    """Video progress and payment unlock state per creator."""
    return {"creators": eligibility_summaries(load_influencers(db, project_id), eligible_only=eligible_only)}


@router.get("/logistics")
async def get_logistics(
    project_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_REPORTS))
):
    return {"counts": logistics_counts(load_influencers(db, project_id))}
