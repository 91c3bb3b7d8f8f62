# Services Module for the Seeding Dashboard
# Persistence and workflow services around the seeding engine

from services.notification_service import NotificationService, NotificationType
from services.influencer_store import InfluencerStore, ProjectStore, TemplateStore
from services.workflow_service import WorkflowService

__all__ = [
    'NotificationService',
    'NotificationType',
    'InfluencerStore',
    'ProjectStore',
    'TemplateStore',
    'WorkflowService',
]
