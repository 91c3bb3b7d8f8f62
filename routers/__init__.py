# Seeding Dashboard Routers Module
# Exports all API routers

from routers.influencers import router as influencers_router
from routers.outreach import router as outreach_router
from routers.projects import router as projects_router
from routers.reports import router as reports_router
from routers.notifications import router as notifications_router

__all__ = [
    'influencers_router',
    'outreach_router',
    'projects_router',
    'reports_router',
    'notifications_router',
]
