# Workflow Service
# Loads a creator, runs one lifecycle operation on it, stores the result and
# records the effects as notifications.

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Callable, List, Optional
import logging

from core.errors import EngineResult
from core.lifecycle import LifecycleEngine
from schemas.seeding import Influencer, MessageTemplate
from services.influencer_store import InfluencerStore
from services.notification_service import NotificationService
from config.app_config import STATUS_TRANSITION_POLICY, MILESTONE_MERGE_STRATEGY

logger = logging.getLogger(__name__)


def build_lifecycle_engine() -> LifecycleEngine:
    return LifecycleEngine(
        policy=STATUS_TRANSITION_POLICY,
        milestone_strategy=MILESTONE_MERGE_STRATEGY,
    )


class WorkflowService:
    """
    Glue between the pure lifecycle engine and the database.

    Usage:
        service = WorkflowService(db)
        result = service.apply(influencer_id, lambda i: service.engine.release_payment(i))
        db.commit()
    """

    def __init__(self, db: Session, engine: Optional[LifecycleEngine] = None):
        self.db = db
        self.engine = engine or build_lifecycle_engine()
        self.store = InfluencerStore(db)
        self.notifications = NotificationService(db)

    def create(self, data: dict) -> EngineResult:
        result = self.engine.create_influencer(data)
        if not result.ok:
            return result
        stored = self.store.create(result.influencer)
        self.notifications.from_effects(result.effects, stored.id, subject=stored.handle)
        return EngineResult(influencer=stored, effects=result.effects)

    def apply(self, influencer_id: str, operation: Callable[[Influencer], EngineResult]) -> Optional[EngineResult]:
        """
        Run `operation` on the stored creator and persist what it returns.

        Returns None when the creator does not exist. Rejected operations are
        returned as-is and nothing is written.
        """
        influencer = self.store.get(influencer_id)
        if influencer is None:
            return None

        result = operation(influencer)
        if not result.ok:
            return result
        if result.influencer == influencer and not result.effects:
            return result

        stored = self.store.put(influencer_id, result.influencer)
        self.notifications.from_effects(result.effects, influencer_id, subject=stored.handle)
        return EngineResult(influencer=stored, effects=result.effects)

    def bulk_outreach(
        self,
        influencer_ids: List[str],
        template: Optional[MessageTemplate],
        operator: str,
        body: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> dict:
        """
        Send the same outreach to several creators.

        Each creator is committed on its own; a failure is reported for that
        creator and the rest are still processed.
        """
        sent, failed = [], []
        for influencer_id in influencer_ids:
            try:
                result = self.apply(
                    influencer_id,
                    lambda i: self.engine.send_outreach(i, template=template, operator=operator, body=body, brand=brand),
                )
                if result is None:
                    failed.append({"id": influencer_id, "error": "Influencer not found"})
                    continue
                if not result.ok:
                    failed.append({"id": influencer_id, "error": result.error.message})
                    continue
                self.db.commit()
                sent.append({"id": influencer_id, "status": result.influencer.status.value})
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Outreach to influencer {influencer_id} failed: {e}")
                failed.append({"id": influencer_id, "error": "Could not save outreach"})

        logger.info(f"Bulk outreach: {len(sent)} sent, {len(failed)} failed")
        return {"sent": sent, "failed": failed}
