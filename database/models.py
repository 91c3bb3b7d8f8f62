# Database Models for the Seeding Dashboard
# Creators are stored document-style: scalar columns for the fields that get
# filtered on, JSON columns for the nested workflow records.

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, JSON, Enum, Boolean, Float
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from schemas.seeding import InfluencerStatus, ProjectStatus

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())


# ============================================================================
# PROJECT
# ============================================================================

class ProjectRecord(Base):
    """A brand-funded seeding campaign."""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    brand = Column(String(255))
    status = Column(Enum(ProjectStatus, values_callable=lambda x: [e.value for e in x], name="projectstatus"), default=ProjectStatus.ACTIVE)
    budget = Column(Float, default=0)
    spent = Column(Float, default=0)
    description = Column(Text)
    start_date = Column(String(10))  # YYYY-MM-DD
    managers = Column(JSON)  # Array of operator emails

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    influencers = relationship("InfluencerRecord", back_populates="project")


# ============================================================================
# INFLUENCER
# ============================================================================

class InfluencerRecord(Base):
    """A creator and their contract, logistics and content workflow."""
    __tablename__ = "influencers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True)

    handle = Column(String(100), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    country = Column(String(50))
    categories = Column(JSON)  # Array of category names
    follower_count = Column(Integer, default=0)

    status = Column(Enum(InfluencerStatus, values_callable=lambda x: [e.value for e in x], name="influencerstatus"), default=InfluencerStatus.DISCOVERY, index=True)

    # Workflow documents
    contract = Column(JSON, nullable=False)
    logistics = Column(JSON, nullable=False)
    content = Column(JSON, nullable=False)
    history = Column(JSON)  # Array of ChatMessage
    metrics = Column(JSON)
    payment_record = Column(JSON)
    notes = Column(Text)

    # Bumped on every write; last writer wins
    version = Column(Integer, default=1, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    project = relationship("ProjectRecord", back_populates="influencers")


# ============================================================================
# OUTREACH TEMPLATES
# ============================================================================

class TemplateRecord(Base):
    """Outreach macro."""
    __tablename__ = "message_templates"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    key = Column(String(100), unique=True)  # Set for seeded defaults
    title = Column(String(200), nullable=False)
    subject = Column(String(255))
    body = Column(Text)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# ============================================================================
# NOTIFICATION
# ============================================================================

class Notification(Base):
    """Operator notifications produced from engine effects."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    influencer_id = Column(String(36), ForeignKey("influencers.id", ondelete="CASCADE"), nullable=True, index=True)

    type = Column(String(50), nullable=False)  # status_changed, payment_released, etc.
    level = Column(String(20), default="info")  # success, info, warning, error
    title = Column(String(200), nullable=False)
    message = Column(Text)
    data = Column(JSON)

    read = Column(Boolean, default=False)
    read_at = Column(DateTime)

    created_at = Column(DateTime, server_default=func.now())
