# Payment Milestone Engine
# Decides which payment a creator has unlocked from the videos they have posted,
# and builds batch milestone lists from a pacing configuration.

from datetime import datetime
from typing import List, Optional, Tuple
import math
import logging

from pydantic import BaseModel, ValidationError as SchemaValidationError

from schemas.seeding import (
    ContractDetails,
    MilestoneStatus,
    PacingConfig,
    PaymentMilestone,
)
from core.errors import Result, ValidationError, PreconditionError, NotFoundError, from_schema_error
from config.app_config import DEFAULT_VIDEO_TARGET

logger = logging.getLogger(__name__)


class MergeStrategy:
    REPLACE = "replace"
    MERGE_PRESERVE_PAID = "merge_preserve_paid"

    ALL = (REPLACE, MERGE_PRESERVE_PAID)


class EligibilityMode:
    SIMPLE = "simple"
    MILESTONE = "milestone"
    FULLY_PAID = "fully_paid"


class EligibilityResult(BaseModel):
    """Payment eligibility of one contract at a given posted-video count."""
    mode: str
    eligible: bool
    posted_count: int
    required: int = 0
    gap: int = 0
    milestone: Optional[PaymentMilestone] = None

    @property
    def fully_paid(self) -> bool:
        return self.mode == EligibilityMode.FULLY_PAID


def next_unpaid_milestone(contract: ContractDetails) -> Optional[PaymentMilestone]:
    # List order decides what is "next", not the requirement
    for milestone in contract.milestones:
        if milestone.status != MilestoneStatus.PAID:
            return milestone
    return None


def compute_eligibility(contract: ContractDetails, posted_count: int) -> EligibilityResult:
    """
    Work out whether the next payment on a contract can be released.

    Without milestones the whole contract is one payment that unlocks once the
    posted count reaches `video_count`. With milestones the first unpaid one in
    list order is evaluated against the cumulative posted count.
    """
    if not contract.milestones:
        required = contract.video_count
        return EligibilityResult(
            mode=EligibilityMode.SIMPLE,
            eligible=posted_count >= required,
            posted_count=posted_count,
            required=required,
            gap=max(0, required - posted_count),
        )

    milestone = next_unpaid_milestone(contract)
    if milestone is None:
        return EligibilityResult(
            mode=EligibilityMode.FULLY_PAID,
            eligible=False,
            posted_count=posted_count,
        )

    required = milestone.video_requirement
    return EligibilityResult(
        mode=EligibilityMode.MILESTONE,
        eligible=posted_count >= required,
        posted_count=posted_count,
        required=required,
        gap=max(0, required - posted_count),
        milestone=milestone,
    )


def generate_batch_milestones(
    total_video_target: int,
    videos_per_batch: int,
    amount_per_batch: float,
    existing: Optional[List[PaymentMilestone]] = None,
    strategy: str = MergeStrategy.REPLACE,
    now: Optional[datetime] = None,
) -> Optional[List[PaymentMilestone]]:
    """
    Build one milestone per batch of `videos_per_batch` videos.

    Requirements are cumulative and the last one is clamped to the target, so a
    partial final batch still pays the full batch amount. Returns None when the
    pacing inputs are not positive; callers treat that as "nothing to do".

    With MERGE_PRESERVE_PAID, already paid milestones from `existing` are kept
    and only batches beyond the highest paid requirement are added.
    """
    if videos_per_batch <= 0 or amount_per_batch <= 0 or total_video_target <= 0:
        return None

    stamp = int((now or datetime.utcnow()).timestamp() * 1000)
    batches = math.ceil(total_video_target / videos_per_batch)

    generated = []
    for i in range(1, batches + 1):
        requirement = min(i * videos_per_batch, total_video_target)
        generated.append(PaymentMilestone(
            id=f"gen-ms-{stamp}-{i}",
            label=f"Batch {i} (Cumulative: {requirement} videos)",
            amount=amount_per_batch,
            video_requirement=requirement,
            status=MilestoneStatus.PENDING,
        ))

    if strategy != MergeStrategy.MERGE_PRESERVE_PAID or not existing:
        return generated

    paid = [m.model_copy() for m in existing if m.status == MilestoneStatus.PAID]
    covered = max((m.video_requirement for m in paid), default=0)
    return paid + [m for m in generated if m.video_requirement > covered]


def apply_batch_milestones(
    contract: ContractDetails,
    videos_per_batch: int,
    amount_per_batch: float,
    strategy: str = MergeStrategy.REPLACE,
    now: Optional[datetime] = None,
) -> Result:
    """
    Regenerate a contract's milestones from pacing inputs.

    The contract's `pacing_config` records the parameters used. Non-positive
    inputs leave the contract as it is.
    """
    if strategy not in MergeStrategy.ALL:
        return Result.failure(ValidationError(f"Unknown merge strategy: {strategy}", field="strategy"))

    total = contract.video_count or DEFAULT_VIDEO_TARGET
    milestones = generate_batch_milestones(
        total, videos_per_batch, amount_per_batch,
        existing=contract.milestones, strategy=strategy, now=now,
    )
    if milestones is None:
        logger.info("Skipped milestone generation: pacing inputs must be positive")
        return Result.success(contract)

    updated = contract.model_copy(deep=True)
    updated.milestones = milestones
    updated.pacing_config = PacingConfig(
        videos_per_batch=videos_per_batch,
        amount_per_batch=amount_per_batch,
        frequency_label="Custom Batch",
    )
    return Result.success(updated)


def add_milestone(contract: ContractDetails, now: Optional[datetime] = None) -> Tuple[ContractDetails, PaymentMilestone]:
    """Append a blank milestone for manual editing."""
    now = now or datetime.utcnow()
    milestone = PaymentMilestone(
        id=str(int(now.timestamp() * 1000)),
        label="New Milestone",
        amount=0,
        video_requirement=0,
        due_date=now.date().isoformat(),
        status=MilestoneStatus.PENDING,
    )
    updated = contract.model_copy(deep=True)
    updated.milestones.append(milestone)
    return updated, milestone


def remove_milestone(contract: ContractDetails, milestone_id: str) -> ContractDetails:
    updated = contract.model_copy(deep=True)
    updated.milestones = [m for m in updated.milestones if m.id != milestone_id]
    return updated


EDITABLE_MILESTONE_FIELDS = {"label", "amount", "video_requirement", "due_date"}


def update_milestone(contract: ContractDetails, milestone_id: str, changes: dict) -> Result:
    """Edit label, amount, requirement or due date of one milestone."""
    unknown = set(changes) - EDITABLE_MILESTONE_FIELDS
    if unknown:
        return Result.failure(ValidationError(
            f"Cannot edit milestone field(s): {', '.join(sorted(unknown))}"
        ))

    updated = contract.model_copy(deep=True)
    for index, milestone in enumerate(updated.milestones):
        if milestone.id == milestone_id:
            try:
                updated.milestones[index] = PaymentMilestone(**{**milestone.model_dump(), **changes})
            except SchemaValidationError as e:
                return Result.failure(from_schema_error(e))
            return Result.success(updated)

    return Result.failure(NotFoundError(f"Milestone {milestone_id} not found", field="milestone_id"))


def mark_milestone_paid(contract: ContractDetails, milestone_id: str, posted_count: int) -> Result:
    """
    Mark one milestone paid. Its video requirement must already be met.
    Paying an already paid milestone changes nothing.
    """
    updated = contract.model_copy(deep=True)
    for milestone in updated.milestones:
        if milestone.id != milestone_id:
            continue
        if milestone.status == MilestoneStatus.PAID:
            return Result.success(contract)
        if posted_count < milestone.video_requirement:
            return Result.failure(PreconditionError(
                f"{milestone.label} needs {milestone.video_requirement} videos, "
                f"{posted_count} posted",
                field="milestone_id",
            ))
        milestone.status = MilestoneStatus.PAID
        return Result.success(updated)

    return Result.failure(NotFoundError(f"Milestone {milestone_id} not found", field="milestone_id"))


def derived_status(milestone: PaymentMilestone, posted_count: int) -> MilestoneStatus:
    if milestone.status == MilestoneStatus.PAID:
        return MilestoneStatus.PAID
    if posted_count >= milestone.video_requirement:
        return MilestoneStatus.ELIGIBLE
    return MilestoneStatus.PENDING


def milestone_view(contract: ContractDetails, posted_count: int) -> List[dict]:
    """Milestones with their status derived from the posted count (not stored)."""
    return [
        {
            **m.model_dump(mode="json"),
            "status": derived_status(m, posted_count).value,
            "gap": max(0, m.video_requirement - posted_count),
        }
        for m in contract.milestones
    ]


def unlocked_milestones(contract: ContractDetails, posted_count: int) -> List[PaymentMilestone]:
    return [m for m in contract.milestones if posted_count >= m.video_requirement]

