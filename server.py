# FastAPI Server for the Seeding Dashboard

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
import logging

from database.config import init_db, session_scope
from services.influencer_store import TemplateStore
from config.app_config import LOG_LEVEL
from config.templates import MESSAGE_TEMPLATES
from auth.dependencies import Operator, get_current_operator
from routers import (
    influencers_router,
    outreach_router,
    projects_router,
    reports_router,
    notifications_router,
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Seeding OS API",
    description="Influencer seeding campaign dashboard API",
    version="1.0.0"
)


@app.on_event("startup")
def startup_event():
    init_db()

    # Seed default outreach macros
    with session_scope() as db:
        added = TemplateStore(db).seed_defaults(MESSAGE_TEMPLATES)
    if added:
        logger.info(f"Seeded {added} outreach templates")


# CORS Setup - Allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Required when using "*"
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ROUTERS
# ============================================================================
app.include_router(influencers_router, prefix="/api")
app.include_router(outreach_router, prefix="/api")
app.include_router(projects_router, prefix="/api")
app.include_router(reports_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")


# Health Check
@app.get("/")
def root():
    return {
        "message": "Seeding OS API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.get("/api/me")
async def get_me(operator: Operator = Depends(get_current_operator)):
    """The operator behind the bearer token."""
    return operator.model_dump()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
