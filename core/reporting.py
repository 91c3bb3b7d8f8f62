# Reporting aggregates
# Everything here is recomputed from the current entity list on each call.

from typing import Dict, List, Optional

from schemas.seeding import (
    Influencer,
    InfluencerStatus,
    LogisticsStatus,
    PaymentStatus,
    Project,
    ProjectStatus,
)
from core.milestones import compute_eligibility, unlocked_milestones


# Dashboard tabs and the pipeline stages each one shows
PIPELINE_VIEWS: Dict[str, List[InfluencerStatus]] = {
    "negotiation": [
        InfluencerStatus.DISCOVERY,
        InfluencerStatus.CONTACTED,
        InfluencerStatus.NEGOTIATING,
        InfluencerStatus.APPROVED,
    ],
    "performance": [
        InfluencerStatus.CONTRACTED,
        InfluencerStatus.SHIPPED,
        InfluencerStatus.CONTENT_LIVE,
    ],
    "finance": [
        InfluencerStatus.PAYMENT_PENDING,
        InfluencerStatus.PAID,
    ],
}


def status_counts(influencers: List[Influencer]) -> Dict[str, int]:
    """Number of creators in every stage, including empty ones."""
    counts = {status.value: 0 for status in InfluencerStatus}
    for influencer in influencers:
        counts[influencer.status.value] += 1
    return counts


def total_paid_amount(influencers: List[Influencer]) -> float:
    return sum(
        i.contract.total_amount for i in influencers
        if i.payment_status == PaymentStatus.PAID
    )


def finance_summary(influencers: List[Influencer]) -> dict:
    """Contract liability split into what was paid and what is still owed."""
    contracted = [i for i in influencers if i.contract.total_amount > 0]
    liability = sum(i.contract.total_amount for i in contracted)
    paid = total_paid_amount(contracted)
    awaiting = [i for i in contracted if i.status == InfluencerStatus.PAYMENT_PENDING]
    return {
        "total_liability": liability,
        "total_paid": paid,
        "pending_amount": liability - paid,
        "awaiting_payment_count": len(awaiting),
        "awaiting_payment_amount": sum(i.contract.total_amount for i in awaiting),
    }


def progress_percent(influencer: Influencer) -> float:
    target = influencer.contract.video_count
    if target <= 0:
        return 100.0
    return round(min(100.0, influencer.posted_count * 100.0 / target), 1)


def eligibility_summary(influencer: Influencer) -> dict:
    """Video progress and payment unlock state of one creator."""
    posted = influencer.posted_count
    result = compute_eligibility(influencer.contract, posted)
    unlocked = unlocked_milestones(influencer.contract, posted)
    return {
        "id": influencer.id,
        "handle": influencer.handle,
        "name": influencer.name,
        "status": influencer.status.value,
        "posted_count": posted,
        "video_target": influencer.contract.video_count,
        "progress_percent": progress_percent(influencer),
        "mode": result.mode,
        "eligible": result.eligible,
        "gap": result.gap,
        "next_milestone": result.milestone.model_dump(mode="json") if result.milestone else None,
        "milestone_count": len(influencer.contract.milestones),
        "unlocked_milestones": len(unlocked),
        "unlocked_amount": sum(m.amount for m in unlocked),
    }


def eligibility_summaries(influencers: List[Influencer], eligible_only: bool = False) -> List[dict]:
    summaries = [eligibility_summary(i) for i in influencers]
    if eligible_only:
        summaries = [s for s in summaries if s["eligible"]]
    return summaries


def pipeline_view(influencers: List[Influencer], view: str) -> List[Influencer]:
    stages = PIPELINE_VIEWS.get(view)
    if stages is None:
        return list(influencers)
    return [i for i in influencers if i.status in stages]


def logistics_counts(influencers: List[Influencer]) -> Dict[str, int]:
    counts = {status.value: 0 for status in LogisticsStatus}
    for influencer in influencers:
        counts[influencer.logistics.status.value] += 1
    return counts


def campaign_overview(influencers: List[Influencer], projects: Optional[List[Project]] = None) -> dict:
    """Headline numbers for the reports page."""
    projects = projects or []
    total = len(influencers)
    with_metrics = [i.metrics for i in influencers if i.metrics]
    total_views = sum(m.views for m in with_metrics)
    avg_engagement = (
        sum(m.engagement_rate for m in with_metrics) / total if total else 0.0
    )

    return {
        "total_creators": total,
        "active_creators": len([
            i for i in influencers
            if i.status not in (InfluencerStatus.DISCOVERY, InfluencerStatus.PAID)
        ]),
        "paid_creators": len([i for i in influencers if i.status == InfluencerStatus.PAID]),
        "content_live": len([i for i in influencers if i.status == InfluencerStatus.CONTENT_LIVE]),
        "total_videos": sum(i.posted_count for i in influencers),
        "total_views": total_views,
        "avg_engagement": round(avg_engagement, 2),
        "total_budget": sum(p.budget for p in projects),
        "total_spent": sum(p.spent for p in projects),
        "active_projects": len([p for p in projects if p.status == ProjectStatus.ACTIVE]),
        "status_breakdown": status_counts(influencers),
    }
