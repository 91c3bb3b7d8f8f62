# Projects Router for the Seeding Dashboard
# Brand campaigns that group creators

from fastapi import APIRouter, HTTPException, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel, Field
import logging

from database.config import get_db
from schemas.seeding import Project, ProjectStatus
from services.influencer_store import InfluencerFilter, InfluencerStore, ProjectStore, to_document
from core.reporting import campaign_overview
from auth.roles import OperatorRole, Permission
from auth.dependencies import Operator
from auth.decorators import require_role, require_permission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


class ProjectRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    brand: Optional[str] = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    budget: float = Field(0, ge=0)
    spent: float = Field(0, ge=0)
    description: Optional[str] = ""
    start_date: Optional[str] = None
    managers: List[str] = []


def get_project_or_404(store: ProjectStore, project_id: str) -> Project:
    project = store.get(project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project


@router.get("")
async def list_projects(
    status_filter: Optional[ProjectStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_PROJECTS))
):
    projects = ProjectStore(db).list(status=status_filter)
    return {"projects": [p.model_dump(mode="json") for p in projects]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_PROJECTS))
):
    data = request.model_dump()
    if not data["managers"]:
        data["managers"] = [operator.email]
    project = ProjectStore(db).save(Project(**data))
    db.commit()
    logger.info(f"Project {project.title} created by {operator.email}")
    return project.model_dump(mode="json")


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_PROJECTS))
):
    """Project details with its creators and headline numbers."""
    project = get_project_or_404(ProjectStore(db), project_id)
    influencers = InfluencerStore(db).list(InfluencerFilter(project_id=project_id))
    return {
        "project": project.model_dump(mode="json"),
        "influencers": [to_document(i) for i in influencers],
        "overview": campaign_overview(influencers, [project]),
    }


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    request: ProjectRequest,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.MANAGE_PROJECTS))
):
    store = ProjectStore(db)
    get_project_or_404(store, project_id)
    project = store.save(Project(id=project_id, **request.model_dump()))
    db.commit()
    return project.model_dump(mode="json")


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_role(OperatorRole.ADMIN))
):
    """Delete a project. Its creators are kept and become unassigned."""
    store = ProjectStore(db)
    get_project_or_404(store, project_id)
    influencer_store = InfluencerStore(db)
    for influencer in influencer_store.list(InfluencerFilter(project_id=project_id)):
        influencer_store.put(influencer.id, {"project_id": None})
    store.delete(project_id)
    db.commit()
    logger.info(f"Project {project_id} deleted by {operator.email}")
    return {"message": "Project deleted"}
