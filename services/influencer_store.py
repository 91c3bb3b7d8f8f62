# Influencer Store
# Persistence collaborator for the lifecycle engine: loads creators as domain
# entities and writes the engine's results back. Callers own the transaction.

from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional, List, Union
from datetime import datetime
import logging

from pydantic import BaseModel

from database.models import InfluencerRecord, ProjectRecord, TemplateRecord
from schemas.seeding import (
    Influencer,
    InfluencerStatus,
    MessageTemplate,
    Project,
)
from core.reporting import PIPELINE_VIEWS

logger = logging.getLogger(__name__)


DOCUMENT_COLUMNS = ("contract", "logistics", "content", "history", "metrics", "payment_record")
SCALAR_COLUMNS = ("project_id", "handle", "name", "email", "country", "categories", "follower_count", "notes")


def to_document(influencer: Influencer) -> dict:
    """Storage representation of a creator (JSON-safe, legacy fields included)."""
    doc = influencer.model_dump(mode="json")
    doc["payment_status"] = influencer.payment_status.value
    doc["category"] = influencer.category
    return doc


def from_document(doc: dict) -> Influencer:
    """Rebuild a creator from its storage representation. Derived fields are ignored."""
    data = dict(doc)
    data.pop("payment_status", None)
    legacy_category = data.pop("category", None)
    if not data.get("categories") and legacy_category:
        data["categories"] = [legacy_category]
    return Influencer(**data)


class InfluencerFilter(BaseModel):
    project_id: Optional[str] = None
    statuses: Optional[List[InfluencerStatus]] = None
    view: Optional[str] = None  # negotiation, performance, finance
    query: Optional[str] = None  # matches handle, name or email


class InfluencerStore:
    """
    get/list/put access to creators.

    Usage:
        store = InfluencerStore(db)
        influencer = store.get(influencer_id)
        store.put(influencer.id, result.influencer)
        db.commit()
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, influencer_id: str) -> Optional[Influencer]:
        record = self._get_record(influencer_id)
        return self._to_entity(record) if record else None

    def list(self, filters: Optional[InfluencerFilter] = None) -> List[Influencer]:
        filters = filters or InfluencerFilter()
        query = self.db.query(InfluencerRecord)

        if filters.project_id:
            query = query.filter(InfluencerRecord.project_id == filters.project_id)
        statuses = list(filters.statuses) if filters.statuses else None
        if filters.view in PIPELINE_VIEWS:
            stages = PIPELINE_VIEWS[filters.view]
            statuses = [s for s in statuses if s in stages] if statuses is not None else stages
        if statuses is not None:
            query = query.filter(InfluencerRecord.status.in_(statuses))
        if filters.query:
            pattern = f"%{filters.query}%"
            query = query.filter(or_(
                InfluencerRecord.handle.ilike(pattern),
                InfluencerRecord.name.ilike(pattern),
                InfluencerRecord.email.ilike(pattern),
            ))

        records = query.order_by(InfluencerRecord.created_at, InfluencerRecord.id).all()
        return [self._to_entity(r) for r in records]

    def create(self, influencer: Influencer) -> Influencer:
        record = InfluencerRecord(id=influencer.id, version=1, created_at=influencer.created_at or datetime.utcnow())
        self._write(record, influencer)
        self.db.add(record)
        self.db.flush()
        logger.info(f"Created influencer {influencer.id} ({influencer.handle})")
        return self._to_entity(record)

    def put(self, influencer_id: str, update: Union[Influencer, dict]) -> Influencer:
        """
        Store the next state of a creator.

        `update` is either the full entity returned by the engine or a partial
        dict of top-level fields. Raises LookupError for unknown ids.
        """
        record = self._get_record(influencer_id)
        if record is None:
            raise LookupError(f"Influencer {influencer_id} not found")

        if isinstance(update, Influencer):
            entity = update
        else:
            entity = from_document({**to_document(self._to_entity(record)), **update})

        self._write(record, entity)
        record.version = (record.version or 0) + 1
        record.updated_at = datetime.utcnow()
        self.db.flush()
        return self._to_entity(record)

    def delete(self, influencer_id: str) -> bool:
        record = self._get_record(influencer_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        logger.info(f"Deleted influencer {influencer_id}")
        return True

    def _get_record(self, influencer_id: str) -> Optional[InfluencerRecord]:
        return self.db.query(InfluencerRecord).filter(InfluencerRecord.id == influencer_id).first()

    @staticmethod
    def _write(record: InfluencerRecord, influencer: Influencer) -> None:
        doc = to_document(influencer)
        for column in SCALAR_COLUMNS:
            setattr(record, column, doc[column])
        record.status = influencer.status
        for column in DOCUMENT_COLUMNS:
            setattr(record, column, doc[column])

    @staticmethod
    def _to_entity(record: InfluencerRecord) -> Influencer:
        doc = {column: getattr(record, column) for column in SCALAR_COLUMNS + DOCUMENT_COLUMNS}
        doc["id"] = record.id
        doc["status"] = record.status.value if isinstance(record.status, InfluencerStatus) else record.status
        doc["history"] = doc["history"] or []
        doc["notes"] = doc["notes"] or ""
        doc["created_at"] = record.created_at
        doc["updated_at"] = record.updated_at
        return from_document(doc)


class ProjectStore:
    """Campaign (project) persistence."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, project_id: str) -> Optional[Project]:
        record = self.db.query(ProjectRecord).filter(ProjectRecord.id == project_id).first()
        return self._to_entity(record) if record else None

    def list(self, status: Optional[str] = None) -> List[Project]:
        query = self.db.query(ProjectRecord)
        if status:
            query = query.filter(ProjectRecord.status == status)
        return [self._to_entity(r) for r in query.order_by(ProjectRecord.created_at, ProjectRecord.id).all()]

    def save(self, project: Project) -> Project:
        record = self.db.query(ProjectRecord).filter(ProjectRecord.id == project.id).first()
        if record is None:
            record = ProjectRecord(id=project.id, created_at=datetime.utcnow())
            self.db.add(record)
        data = project.model_dump(exclude={"id"})
        for field, value in data.items():
            setattr(record, field, value)
        self.db.flush()
        return self._to_entity(record)

    def delete(self, project_id: str) -> bool:
        record = self.db.query(ProjectRecord).filter(ProjectRecord.id == project_id).first()
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True

    @staticmethod
    def _to_entity(record: ProjectRecord) -> Project:
        return Project(
            id=record.id,
            title=record.title,
            brand=record.brand or "",
            status=record.status,
            budget=record.budget or 0,
            spent=record.spent or 0,
            description=record.description or "",
            start_date=record.start_date,
            managers=record.managers or [],
        )


class TemplateStore:
    """Outreach macro persistence."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, template_id: str) -> Optional[MessageTemplate]:
        record = self.db.query(TemplateRecord).filter(TemplateRecord.id == template_id).first()
        return self._to_entity(record) if record else None

    def list(self) -> List[MessageTemplate]:
        records = self.db.query(TemplateRecord).order_by(TemplateRecord.created_at, TemplateRecord.title).all()
        return [self._to_entity(r) for r in records]

    def save(self, template: MessageTemplate, key: Optional[str] = None) -> MessageTemplate:
        record = self.db.query(TemplateRecord).filter(TemplateRecord.id == template.id).first()
        if record is None:
            record = TemplateRecord(id=template.id, key=key, created_at=datetime.utcnow())
            self.db.add(record)
        record.title = template.title
        record.subject = template.subject
        record.body = template.body
        self.db.flush()
        return self._to_entity(record)

    def seed_defaults(self, templates: dict) -> int:
        """Insert the default macros that are not stored yet. Returns how many were added."""
        added = 0
        for key, data in templates.items():
            exists = self.db.query(TemplateRecord).filter(TemplateRecord.key == key).first()
            if exists:
                continue
            self.save(MessageTemplate(**data), key=key)
            added += 1
        return added

    @staticmethod
    def _to_entity(record: TemplateRecord) -> MessageTemplate:
        return MessageTemplate(
            id=record.id,
            title=record.title,
            subject=record.subject or "",
            body=record.body or "",
        )
