# Influencer Lifecycle Engine
# Owns the creator's pipeline status. Every operation takes the current entity
# plus a proposed change and returns the next entity with the effects to announce.
# Inputs are never mutated; persisting the result is up to the caller.

from datetime import datetime
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple
import logging

from pydantic import ValidationError as SchemaValidationError

from schemas.seeding import (
    ChatMessage,
    ContentStatus,
    ContractDetails,
    ContractStatus,
    Influencer,
    InfluencerStatus,
    Logistics,
    LogisticsStatus,
    MessageTemplate,
    MessageType,
    PaymentRecord,
)
from core.errors import (
    Effect,
    EngineResult,
    PreconditionError,
    ValidationError,
    from_schema_error,
)
from core import milestones as milestone_engine
from core.milestones import EligibilityResult, MergeStrategy
from core.templating import render_template
from core.videos import add_manual_video
from config.app_config import DEFAULT_OPERATOR

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    CONTRACT_SIGNED = "contract_signed"
    PRODUCT_SHIPPED = "product_shipped"
    FIRST_VIDEO_POSTED = "first_video_posted"
    CONTENT_APPROVED = "content_approved"
    PAYMENT_RELEASED = "payment_released"
    OUTREACH_SENT = "outreach_sent"


class TransitionPolicy:
    FORWARD_ONLY = "forward_only"
    PERMISSIVE = "permissive"

    ALL = (FORWARD_ONLY, PERMISSIVE)


ANY_STATE: Optional[FrozenSet[InfluencerStatus]] = None

# event -> (states the event may fire from, target status)
TRANSITIONS: Dict[LifecycleEvent, Tuple[Optional[FrozenSet[InfluencerStatus]], InfluencerStatus]] = {
    LifecycleEvent.CONTRACT_SIGNED: (ANY_STATE, InfluencerStatus.CONTRACTED),
    LifecycleEvent.PRODUCT_SHIPPED: (ANY_STATE, InfluencerStatus.SHIPPED),
    LifecycleEvent.FIRST_VIDEO_POSTED: (ANY_STATE, InfluencerStatus.CONTENT_LIVE),
    LifecycleEvent.CONTENT_APPROVED: (ANY_STATE, InfluencerStatus.PAYMENT_PENDING),
    LifecycleEvent.PAYMENT_RELEASED: (ANY_STATE, InfluencerStatus.PAID),
    LifecycleEvent.OUTREACH_SENT: (frozenset({InfluencerStatus.DISCOVERY}), InfluencerStatus.CONTACTED),
}

TERMINAL_STATUS = InfluencerStatus.PAID


def next_status(current: InfluencerStatus, event: LifecycleEvent, policy: str = TransitionPolicy.FORWARD_ONLY) -> InfluencerStatus:
    """
    Resolve the status an event leads to from `current`.

    Paid is terminal. Under FORWARD_ONLY an event never moves a creator back
    to an earlier stage than the one they are in.
    """
    sources, target = TRANSITIONS[event]
    if current == TERMINAL_STATUS:
        return current
    if sources is not ANY_STATE and current not in sources:
        return current
    if policy == TransitionPolicy.FORWARD_ONLY and target.rank <= current.rank:
        return current
    return target


PROFILE_FIELDS = {
    "project_id", "handle", "name", "email", "country", "categories", "category",
    "follower_count", "notes", "metrics",
}
CONTRACT_FIELDS = set(ContractDetails.model_fields) - {"milestones", "pacing_config"}
LOGISTICS_FIELDS = set(Logistics.model_fields)
CONTENT_FIELDS = {"status", "draft_link", "is_approved", "last_detected_at"}


class LifecycleEngine:
    """
    Applies field updates to an influencer and derives the resulting status.

    Usage:
        engine = LifecycleEngine()
        result = engine.update_contract(influencer, {"status": "Signed"})
        if result.ok:
            store.put(result.influencer)
    """

    def __init__(
        self,
        policy: str = TransitionPolicy.FORWARD_ONLY,
        milestone_strategy: str = MergeStrategy.REPLACE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if policy not in TransitionPolicy.ALL:
            raise ValueError(f"Unknown transition policy: {policy}")
        self.policy = policy
        self.milestone_strategy = milestone_strategy
        self.clock = clock or datetime.utcnow

    # =========================================================================
    # CREATION & PROFILE
    # =========================================================================

    def create_influencer(self, data: dict) -> EngineResult:
        """Build a new creator in Discovery with a fresh Draft contract."""
        try:
            influencer = Influencer(**data)
        except SchemaValidationError as e:
            return EngineResult(influencer=None, error=from_schema_error(e))

        error = self._check_identity(influencer)
        if error:
            return EngineResult(influencer=None, error=error)

        influencer.status = InfluencerStatus.DISCOVERY
        influencer.history = []
        influencer.content.posted_videos = []
        influencer.content.is_approved = False
        influencer.contract.status = ContractStatus.DRAFT
        influencer.payment_record = None
        return EngineResult(influencer=influencer, effects=[
            Effect(type="influencer_created", data={"id": influencer.id, "handle": influencer.handle}),
        ])

    def update_profile(self, influencer: Influencer, changes: dict) -> EngineResult:
        """Edit identity and bookkeeping fields. Never changes status."""
        error = self._check_fields(changes, PROFILE_FIELDS, "profile")
        if error:
            return self._reject(influencer, error)

        merged = {**influencer.model_dump(), **changes}
        if "category" in changes and "categories" not in changes:
            merged["categories"] = changes["category"]
        merged.pop("category", None)
        try:
            updated = Influencer(**merged)
        except SchemaValidationError as e:
            return self._reject(influencer, from_schema_error(e))

        error = self._check_identity(updated)
        if error:
            return self._reject(influencer, error)
        return EngineResult(influencer=updated)

    # =========================================================================
    # NESTED RECORDS
    # =========================================================================

    def update_contract(self, influencer: Influencer, changes: dict) -> EngineResult:
        """Edit contract fields. Signing the contract moves the creator to Contracted."""
        error = self._check_fields(changes, CONTRACT_FIELDS, "contract")
        if error:
            return self._reject(influencer, error)

        try:
            contract = ContractDetails(**{**influencer.contract.model_dump(), **changes})
        except SchemaValidationError as e:
            return self._reject(influencer, from_schema_error(e))

        updated = influencer.model_copy(deep=True)
        was_signed = influencer.contract.status == ContractStatus.SIGNED
        if contract.status == ContractStatus.SIGNED and not was_signed and not contract.signed_date:
            contract.signed_date = self.clock().date().isoformat()
        updated.contract = contract

        effects = []
        if contract.status == ContractStatus.SIGNED and not was_signed:
            self._apply_event(updated, LifecycleEvent.CONTRACT_SIGNED, effects)
        return EngineResult(influencer=updated, effects=effects)

    def update_logistics(self, influencer: Influencer, changes: dict) -> EngineResult:
        """Edit shipping fields. Marking the product shipped moves the creator to Shipped."""
        error = self._check_fields(changes, LOGISTICS_FIELDS, "logistics")
        if error:
            return self._reject(influencer, error)

        try:
            logistics = Logistics(**{**influencer.logistics.model_dump(), **changes})
        except SchemaValidationError as e:
            return self._reject(influencer, from_schema_error(e))

        updated = influencer.model_copy(deep=True)
        was_shipped = influencer.logistics.status == LogisticsStatus.SHIPPED
        now_shipped = logistics.status == LogisticsStatus.SHIPPED
        if now_shipped and not was_shipped and not logistics.shipped_date:
            logistics.shipped_date = self.clock().date().isoformat()
        updated.logistics = logistics

        effects = []
        if now_shipped and not was_shipped:
            self._apply_event(updated, LifecycleEvent.PRODUCT_SHIPPED, effects)
        return EngineResult(influencer=updated, effects=effects)

    def update_content(self, influencer: Influencer, changes: dict) -> EngineResult:
        """
        Edit the content record. Switching `is_approved` on moves the creator to
        Payment Pending; switching it off again leaves the status alone.
        Posted videos are only added through add_posted_video.
        """
        error = self._check_fields(changes, CONTENT_FIELDS, "content")
        if error:
            return self._reject(influencer, error)

        try:
            content = ContentStatus(**{**influencer.content.model_dump(), **changes})
        except SchemaValidationError as e:
            return self._reject(influencer, from_schema_error(e))

        updated = influencer.model_copy(deep=True)
        updated.content = content

        effects = []
        if content.is_approved and not influencer.content.is_approved:
            self._apply_event(updated, LifecycleEvent.CONTENT_APPROVED, effects)
        return EngineResult(influencer=updated, effects=effects)

    def set_content_approval(self, influencer: Influencer, approved: bool) -> EngineResult:
        return self.update_content(influencer, {"is_approved": approved})

    def add_posted_video(self, influencer: Influencer, link: str) -> EngineResult:
        """Log a posted video by link. The first video moves the creator to Content Live."""
        result = add_manual_video(influencer.content, link, now=self.clock())
        if not result.ok:
            return self._reject(influencer, result.error)

        updated = influencer.model_copy(deep=True)
        updated.content = result.value
        video = result.value.posted_videos[-1]

        effects = [Effect(type="video_added", data={
            "video_id": video.id,
            "link": video.link,
            "posted_count": len(result.value.posted_videos),
        })]
        if len(influencer.content.posted_videos) == 0:
            self._apply_event(updated, LifecycleEvent.FIRST_VIDEO_POSTED, effects)
        return EngineResult(influencer=updated, effects=effects)

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def release_payment(self, influencer: Influencer, record: Optional[dict] = None) -> EngineResult:
        """
        Mark the creator paid once their content is approved.

        `record` carries the payment proof (amount paid, date, file names). When
        omitted, the contract total is recorded as paid today.
        """
        if not influencer.content.is_approved:
            return self._reject(influencer, PreconditionError(
                "Content must be approved before payment is released", field="content.is_approved"
            ))
        if influencer.status == InfluencerStatus.PAID and record is None:
            return EngineResult(influencer=influencer)

        try:
            payment_record = PaymentRecord(**{
                "amount_paid": influencer.contract.total_amount,
                "date": self.clock().date().isoformat(),
                **(record or {}),
            })
        except SchemaValidationError as e:
            return self._reject(influencer, from_schema_error(e))

        updated = influencer.model_copy(deep=True)
        updated.payment_record = payment_record

        effects = [Effect(type="payment_released", data={
            "amount": payment_record.amount_paid,
            "currency": updated.contract.currency,
        })]
        self._apply_event(updated, LifecycleEvent.PAYMENT_RELEASED, effects)
        return EngineResult(influencer=updated, effects=effects)

    def eligibility(self, influencer: Influencer) -> EligibilityResult:
        return milestone_engine.compute_eligibility(influencer.contract, influencer.posted_count)

    def generate_milestones(
        self,
        influencer: Influencer,
        videos_per_batch: int,
        amount_per_batch: float,
        strategy: Optional[str] = None,
    ) -> EngineResult:
        """Regenerate the contract's payment batches from pacing inputs."""
        result = milestone_engine.apply_batch_milestones(
            influencer.contract, videos_per_batch, amount_per_batch,
            strategy=strategy or self.milestone_strategy, now=self.clock(),
        )
        if not result.ok:
            return self._reject(influencer, result.error)
        if result.value is influencer.contract:
            return EngineResult(influencer=influencer)

        updated = influencer.model_copy(deep=True)
        updated.contract = result.value
        return EngineResult(influencer=updated, effects=[
            Effect(type="milestones_generated", data={"batches": len(result.value.milestones)}),
        ])

    def add_milestone(self, influencer: Influencer) -> EngineResult:
        contract, milestone = milestone_engine.add_milestone(influencer.contract, now=self.clock())
        updated = influencer.model_copy(deep=True)
        updated.contract = contract
        return EngineResult(influencer=updated, effects=[
            Effect(type="milestone_added", data={"milestone_id": milestone.id}),
        ])

    def remove_milestone(self, influencer: Influencer, milestone_id: str) -> EngineResult:
        updated = influencer.model_copy(deep=True)
        updated.contract = milestone_engine.remove_milestone(influencer.contract, milestone_id)
        return EngineResult(influencer=updated)

    def update_milestone(self, influencer: Influencer, milestone_id: str, changes: dict) -> EngineResult:
        result = milestone_engine.update_milestone(influencer.contract, milestone_id, changes)
        if not result.ok:
            return self._reject(influencer, result.error)
        updated = influencer.model_copy(deep=True)
        updated.contract = result.value
        return EngineResult(influencer=updated)

    def pay_milestone(self, influencer: Influencer, milestone_id: str) -> EngineResult:
        """Record one milestone as paid. Its video requirement must be met."""
        result = milestone_engine.mark_milestone_paid(
            influencer.contract, milestone_id, influencer.posted_count
        )
        if not result.ok:
            return self._reject(influencer, result.error)
        if result.value is influencer.contract:
            return EngineResult(influencer=influencer)

        updated = influencer.model_copy(deep=True)
        updated.contract = result.value
        milestone = next(m for m in result.value.milestones if m.id == milestone_id)
        return EngineResult(influencer=updated, effects=[
            Effect(type="milestone_paid", data={
                "milestone_id": milestone.id,
                "label": milestone.label,
                "amount": milestone.amount,
            }),
        ])

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def send_outreach(
        self,
        influencer: Influencer,
        template: Optional[MessageTemplate] = None,
        operator: Optional[str] = None,
        body: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> EngineResult:
        """
        Log an outreach message from a macro (or a custom body) and move a
        Discovery creator to Contacted.
        """
        raw = body if body else (template.body if template else "")
        content = render_template(raw, influencer, brand=brand)
        if not content.strip():
            return self._reject(influencer, ValidationError("Message body is required", field="body"))

        updated = influencer.model_copy(deep=True)
        effects = []
        self._append_message(updated, operator, content, internal=False, message_type=MessageType.MACRO, effects=effects)
        self._apply_event(updated, LifecycleEvent.OUTREACH_SENT, effects)
        return EngineResult(influencer=updated, effects=effects)

    def add_internal_note(self, influencer: Influencer, operator: str, text: str) -> EngineResult:
        """Append a team-only note. Notes never change status."""
        return self._log_text(influencer, operator, text, internal=True)

    def log_reply(self, influencer: Influencer, operator: str, text: str) -> EngineResult:
        """Append a free-text message sent to the creator."""
        return self._log_text(influencer, operator, text, internal=False)

    # =========================================================================
    # EXPLICIT STATUS MOVES
    # =========================================================================

    def set_status(self, influencer: Influencer, status: InfluencerStatus) -> EngineResult:
        """
        Move a creator to a stage picked by an operator (e.g. Negotiating).

        Forward moves are always allowed. Backward moves need the permissive
        policy. A paid creator stays paid.
        """
        target = InfluencerStatus(status)
        current = influencer.status
        if target == current:
            return EngineResult(influencer=influencer)
        if current == TERMINAL_STATUS:
            return self._reject(influencer, ValidationError("A paid creator cannot change stage", field="status"))
        if target.rank < current.rank and self.policy == TransitionPolicy.FORWARD_ONLY:
            return self._reject(influencer, ValidationError(
                f"Cannot move from {current.value} back to {target.value}", field="status"
            ))

        updated = influencer.model_copy(deep=True)
        updated.status = target
        effects = [self._status_effect(current, target, "manual")]
        logger.info(f"Influencer {influencer.id} moved {current.value} -> {target.value} by operator")
        return EngineResult(influencer=updated, effects=effects)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _apply_event(self, influencer: Influencer, event: LifecycleEvent, effects: List[Effect]) -> None:
        current = influencer.status
        target = next_status(current, event, self.policy)
        if target == current:
            return
        influencer.status = target
        effects.append(self._status_effect(current, target, event.value))
        logger.info(f"Influencer {influencer.id} status {current.value} -> {target.value} ({event.value})")

    @staticmethod
    def _status_effect(current: InfluencerStatus, target: InfluencerStatus, event: str) -> Effect:
        return Effect(type="status_changed", data={
            "from": current.value,
            "to": target.value,
            "event": event,
        })

    def _log_text(self, influencer: Influencer, operator: str, text: str, internal: bool) -> EngineResult:
        if not text or not text.strip():
            return self._reject(influencer, ValidationError("Message text is required", field="text"))
        updated = influencer.model_copy(deep=True)
        effects = []
        self._append_message(updated, operator, text, internal=internal, message_type=MessageType.TEXT, effects=effects)
        return EngineResult(influencer=updated, effects=effects)

    def _append_message(
        self,
        influencer: Influencer,
        operator: Optional[str],
        content: str,
        internal: bool,
        message_type: MessageType,
        effects: List[Effect],
    ) -> None:
        now = self.clock()
        message = ChatMessage(
            id=f"msg-{int(now.timestamp() * 1000)}-{len(influencer.history)}",
            sender=operator or DEFAULT_OPERATOR,
            content=content,
            timestamp=now.isoformat(),
            is_internal=internal,
            type=message_type,
        )
        influencer.history.append(message)
        effects.append(Effect(
            type="note_added" if internal else "message_logged",
            data={"message_id": message.id, "sender": message.sender},
        ))

    @staticmethod
    def _check_fields(changes: dict, allowed: set, section: str) -> Optional[ValidationError]:
        if not changes:
            return ValidationError(f"No {section} changes given")
        unknown = set(changes) - allowed
        if unknown:
            return ValidationError(
                f"Cannot update {section} field(s): {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        return None

    @staticmethod
    def _check_identity(influencer: Influencer) -> Optional[ValidationError]:
        if not influencer.handle.strip():
            return ValidationError("Handle is required", field="handle")
        if not influencer.name.strip():
            return ValidationError("Name is required", field="name")
        return None

    @staticmethod
    def _reject(influencer: Influencer, error) -> EngineResult:
        logger.warning(f"Rejected update for influencer {influencer.id}: {error.message}")
        return EngineResult(influencer=influencer, error=error)
