# Notifications Router for the Seeding Dashboard
# Operator notifications produced from workflow effects

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from database.config import get_db
from database.models import Notification
from services.notification_service import NotificationService
from auth.roles import Permission
from auth.dependencies import Operator
from auth.decorators import require_permission

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def serialize_notification(n: Notification) -> dict:
    return {
        "id": n.id,
        "influencer_id": n.influencer_id,
        "type": n.type,
        "level": n.level,
        "title": n.title,
        "message": n.message,
        "data": n.data,
        "read": n.read,
        "read_at": n.read_at.isoformat() if n.read_at else None,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


@router.get("")
async def get_notifications(
    unread_only: bool = Query(False, description="Only return unread notifications"),
    influencer_id: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_NOTIFICATIONS))
):
    notifications = NotificationService(db).list(
        unread_only=unread_only, influencer_id=influencer_id, limit=limit
    )
    return {"notifications": [serialize_notification(n) for n in notifications]}


@router.get("/unread-count")
async def get_unread_count(
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_NOTIFICATIONS))
):
    return {"unread_count": NotificationService(db).get_unread_count()}


@router.post("/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_NOTIFICATIONS))
):
    if not NotificationService(db).mark_read(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    db.commit()
    return {"status": "success"}


@router.post("/read-all")
async def mark_all_as_read(
    db: Session = Depends(get_db),
    operator: Operator = Depends(require_permission(Permission.VIEW_NOTIFICATIONS))
):
    count = NotificationService(db).mark_all_read()
    db.commit()
    return {"status": "success", "message": f"{count} notifications marked as read"}
