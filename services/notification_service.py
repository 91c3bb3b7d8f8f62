# Notification Service for the Seeding Dashboard
# Turns engine effects into operator notifications (rendered as toasts by the UI)

from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import datetime
from enum import Enum
import logging

from database.models import Notification
from core.errors import Effect

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """Notification types, one per engine effect."""
    INFLUENCER_CREATED = "influencer_created"
    STATUS_CHANGED = "status_changed"
    MESSAGE_LOGGED = "message_logged"
    NOTE_ADDED = "note_added"
    VIDEO_ADDED = "video_added"
    MILESTONES_GENERATED = "milestones_generated"
    MILESTONE_ADDED = "milestone_added"
    MILESTONE_PAID = "milestone_paid"
    PAYMENT_RELEASED = "payment_released"
    SYSTEM = "system"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def describe_effect(effect: Effect, subject: str = "") -> dict:
    """Title, message and level for one effect."""
    data = effect.data
    who = subject or "Creator"

    if effect.type == NotificationType.STATUS_CHANGED:
        return {
            "level": NotificationLevel.INFO,
            "title": "Status Updated",
            "message": f"{who} moved from {data.get('from')} to {data.get('to')}.",
        }
    if effect.type == NotificationType.PAYMENT_RELEASED:
        return {
            "level": NotificationLevel.SUCCESS,
            "title": "Payment Released",
            "message": f"Payment of {data.get('amount', 0):,.2f} {data.get('currency', '')} to {who} marked as released.",
        }
    if effect.type == NotificationType.MILESTONE_PAID:
        return {
            "level": NotificationLevel.SUCCESS,
            "title": "Milestone Paid",
            "message": f"{data.get('label')} paid to {who}.",
        }
    if effect.type == NotificationType.MILESTONES_GENERATED:
        return {
            "level": NotificationLevel.INFO,
            "title": "Milestones Generated",
            "message": f"Created {data.get('batches')} payment batches for {who}.",
        }
    if effect.type == NotificationType.VIDEO_ADDED:
        return {
            "level": NotificationLevel.INFO,
            "title": "Video Added",
            "message": f"{who} now has {data.get('posted_count')} posted video(s).",
        }
    if effect.type == NotificationType.MESSAGE_LOGGED:
        return {
            "level": NotificationLevel.SUCCESS,
            "title": "Outreach Sent",
            "message": f"Message logged for {who}.",
        }
    if effect.type == NotificationType.NOTE_ADDED:
        return {
            "level": NotificationLevel.SUCCESS,
            "title": "Note Added",
            "message": f"Internal note saved for {who}.",
        }
    if effect.type == NotificationType.INFLUENCER_CREATED:
        return {
            "level": NotificationLevel.SUCCESS,
            "title": "Creator Added",
            "message": f"{who} added to the pool.",
        }
    return {
        "level": NotificationLevel.INFO,
        "title": effect.type.replace("_", " ").title(),
        "message": "",
    }


class NotificationService:
    """
    Service for creating and managing operator notifications.
    Routers hand it the effects returned by the engine.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        type: NotificationType | str,
        title: str,
        message: str,
        level: NotificationLevel | str = NotificationLevel.INFO,
        influencer_id: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> Notification:
        """
        Create a new notification.

        Args:
            type: Notification type (use NotificationType enum)
            title: Short notification title
            message: Full notification message
            level: Toast level for the UI
            influencer_id: Creator the notification is about
            data: Optional additional data as JSON

        Returns:
            The created Notification object
        """
        notification = Notification(
            influencer_id=influencer_id,
            type=type.value if isinstance(type, Enum) else type,
            level=level.value if isinstance(level, Enum) else level,
            title=title,
            message=message,
            data=data or {},
            created_at=datetime.utcnow(),
        )
        self.db.add(notification)
        self.db.flush()  # Get the ID without committing
        return notification

    def from_effects(
        self,
        effects: List[Effect],
        influencer_id: Optional[str] = None,
        subject: str = "",
    ) -> List[Notification]:
        """Create one notification per effect."""
        notifications = []
        for effect in effects:
            described = describe_effect(effect, subject)
            notifications.append(self.create(
                type=effect.type,
                title=described["title"],
                message=described["message"],
                level=described["level"],
                influencer_id=influencer_id,
                data=effect.data,
            ))
        return notifications

    def list(self, unread_only: bool = False, influencer_id: Optional[str] = None, limit: int = 50) -> List[Notification]:
        query = self.db.query(Notification)
        if unread_only:
            query = query.filter(Notification.read == False)
        if influencer_id:
            query = query.filter(Notification.influencer_id == influencer_id)
        return query.order_by(Notification.created_at.desc()).limit(limit).all()

    def mark_read(self, notification_id: str) -> bool:
        """
        Mark a notification as read.

        Returns:
            True if notification was marked read, False if not found
        """
        notification = self.db.query(Notification).filter(
            Notification.id == notification_id
        ).first()

        if notification:
            notification.read = True
            notification.read_at = datetime.utcnow()
            self.db.flush()
            return True
        return False

    def mark_all_read(self) -> int:
        """
        Mark all notifications as read.

        Returns:
            Number of notifications marked as read
        """
        count = self.db.query(Notification).filter(
            Notification.read == False
        ).update({
            "read": True,
            "read_at": datetime.utcnow()
        })
        return count

    def get_unread_count(self) -> int:
        return self.db.query(Notification).filter(
            Notification.read == False
        ).count()
