from conftest import make_influencer
from core.reporting import (
    campaign_overview,
    eligibility_summaries,
    finance_summary,
    logistics_counts,
    pipeline_view,
    progress_percent,
    status_counts,
    total_paid_amount,
)
from schemas.seeding import InfluencerStatus, PostedVideo, Project, ProjectStatus


def videos(count):
    return [
        PostedVideo(id=str(n), link=f"https://www.tiktok.com/@c/video/{n}", date="2026-03-01")
        for n in range(count)
    ]


def roster():
    return [
        make_influencer(handle="@a", status=InfluencerStatus.DISCOVERY),
        make_influencer(handle="@b", status=InfluencerStatus.CONTENT_LIVE,
                        contract={"total_amount": 500, "video_count": 4},
                        content={"posted_videos": videos(2)},
                        metrics={"views": 12000, "engagement_rate": 6.0}),
        make_influencer(handle="@c", status=InfluencerStatus.PAYMENT_PENDING,
                        contract={"total_amount": 800, "video_count": 3},
                        content={"posted_videos": videos(3), "is_approved": True},
                        logistics={"status": "Delivered"}),
        make_influencer(handle="@d", status=InfluencerStatus.PAID,
                        contract={"total_amount": 1000, "video_count": 1},
                        content={"posted_videos": videos(1), "is_approved": True},
                        metrics={"views": 3000, "engagement_rate": 2.0},
                        logistics={"status": "Shipped"}),
    ]


def test_status_counts_cover_every_stage():
    counts = status_counts(roster())
    assert set(counts) == {s.value for s in InfluencerStatus}
    assert counts["Discovery"] == 1
    assert counts["Content Live"] == 1
    assert counts["Paid"] == 1
    assert counts["Shipped"] == 0


def test_total_paid_counts_only_paid_creators():
    assert total_paid_amount(roster()) == 1000


def test_finance_summary():
    summary = finance_summary(roster())
    assert summary["total_liability"] == 2300
    assert summary["total_paid"] == 1000
    assert summary["pending_amount"] == 1300
    assert summary["awaiting_payment_count"] == 1
    assert summary["awaiting_payment_amount"] == 800


def test_eligibility_summaries():
    summaries = {s["handle"]: s for s in eligibility_summaries(roster())}
    assert summaries["@b"]["eligible"] is False
    assert summaries["@b"]["gap"] == 2
    assert summaries["@b"]["progress_percent"] == 50.0
    assert summaries["@c"]["eligible"] is True

    eligible = [s["handle"] for s in eligibility_summaries(roster(), eligible_only=True)]
    assert eligible == ["@c", "@d"]


def test_progress_is_capped():
    influencer = make_influencer(contract={"video_count": 2}, content={"posted_videos": videos(5)})
    assert progress_percent(influencer) == 100.0


def test_pipeline_views():
    creators = roster()
    assert [i.handle for i in pipeline_view(creators, "negotiation")] == ["@a"]
    assert [i.handle for i in pipeline_view(creators, "performance")] == ["@b"]
    assert [i.handle for i in pipeline_view(creators, "finance")] == ["@c", "@d"]
    assert len(pipeline_view(creators, "everything")) == 4


def test_logistics_counts():
    counts = logistics_counts(roster())
    assert counts == {"Pending": 2, "Shipped": 1, "Delivered": 1}


def test_campaign_overview():
    projects = [
        Project(title="Spring Glow", budget=5000, spent=1000),
        Project(title="Old Launch", budget=2000, spent=2000, status=ProjectStatus.COMPLETED),
    ]
    overview = campaign_overview(roster(), projects)

    assert overview["total_creators"] == 4
    assert overview["active_creators"] == 2
    assert overview["paid_creators"] == 1
    assert overview["content_live"] == 1
    assert overview["total_videos"] == 6
    assert overview["total_views"] == 15000
    assert overview["avg_engagement"] == 2.0
    assert overview["total_budget"] == 7000
    assert overview["total_spent"] == 3000
    assert overview["active_projects"] == 1


def test_overview_of_empty_roster():
    overview = campaign_overview([])
    assert overview["total_creators"] == 0
    assert overview["avg_engagement"] == 0.0
