from datetime import datetime

import pytest

from conftest import make_influencer
from schemas.seeding import (
    ChatMessage,
    InfluencerStatus,
    MessageType,
    PaymentMilestone,
    PostedVideo,
    Project,
)
from services.influencer_store import (
    InfluencerFilter,
    InfluencerStore,
    ProjectStore,
    TemplateStore,
    from_document,
    to_document,
)
from config.templates import MESSAGE_TEMPLATES


def full_influencer():
    return make_influencer(
        status=InfluencerStatus.PAYMENT_PENDING,
        categories=["Beauty", "Lifestyle"],
        follower_count=84000,
        contract={
            "total_amount": 1500,
            "currency": "EUR",
            "video_count": 24,
            "payment_method": "Wise",
            "payment_schedule": "Performance Batches",
            "status": "Signed",
            "signed_date": "2026-02-10",
            "pacing_config": {"videos_per_batch": 12, "amount_per_batch": 750, "frequency_label": "Custom Batch"},
            "milestones": [
                PaymentMilestone(id="m1", label="Batch 1", amount=750, video_requirement=12, status="Paid"),
                PaymentMilestone(id="m2", label="Batch 2", amount=750, video_requirement=24),
            ],
            "tiktok_shop_fee": 12.5,
        },
        logistics={"status": "Delivered", "carrier": "DHL", "tracking_number": "JD0142", "shipped_date": "2026-02-12"},
        content={
            "status": "Live",
            "is_approved": True,
            "posted_videos": [PostedVideo(id="7301", link="https://www.tiktok.com/@m/video/7301", date="2026-02-20T10:00:00", is_manual=True)],
        },
        history=[ChatMessage(id="msg-1", sender="ops@agency.test", content="Hi Mia", timestamp="2026-02-01T09:00:00", type=MessageType.MACRO)],
        metrics={"views": 45000, "likes": 3000, "engagement_rate": 7.1},
        notes="Prefers email",
        created_at=datetime(2026, 2, 1, 9, 0, 0),
    )


# ============================================================================
# DOCUMENT ROUND-TRIP
# ============================================================================

def test_round_trip_is_lossless():
    influencer = full_influencer()
    assert from_document(to_document(influencer)) == influencer


def test_round_trip_of_fresh_creator():
    influencer = make_influencer()
    assert from_document(to_document(influencer)) == influencer


def test_document_carries_legacy_fields():
    doc = to_document(full_influencer())
    assert doc["payment_status"] == "Processing"
    assert doc["category"] == "Beauty"
    assert doc["status"] == "Payment Pending"


def test_legacy_category_is_folded_into_categories():
    doc = to_document(make_influencer())
    doc["categories"] = []
    doc["category"] = "Fitness"
    doc["payment_status"] = "Paid"

    influencer = from_document(doc)
    assert influencer.categories == ["Fitness"]
    assert influencer.payment_status.value == "Unpaid"


# ============================================================================
# INFLUENCER STORE
# ============================================================================

def test_stored_creator_reads_back_equal(db):
    store = InfluencerStore(db)
    created = store.create(full_influencer())
    db.commit()

    loaded = store.get(created.id)
    assert loaded == created
    assert loaded.contract.milestones[0].status == "Paid"


def test_put_replaces_entity_and_bumps_version(db):
    from database.models import InfluencerRecord

    store = InfluencerStore(db)
    created = store.create(make_influencer())
    updated = created.model_copy(deep=True)
    updated.status = InfluencerStatus.CONTACTED
    store.put(created.id, updated)
    db.commit()

    assert store.get(created.id).status == InfluencerStatus.CONTACTED
    assert db.get(InfluencerRecord, created.id).version == 2


def test_put_accepts_partial_update(db):
    store = InfluencerStore(db)
    created = store.create(make_influencer())
    stored = store.put(created.id, {"notes": "Met at VidCon"})
    assert stored.notes == "Met at VidCon"
    assert stored.handle == created.handle


def test_put_unknown_creator_raises(db):
    with pytest.raises(LookupError):
        InfluencerStore(db).put("missing", {"notes": "x"})


def test_list_filters(db):
    store = InfluencerStore(db)
    project = ProjectStore(db).save(Project(title="Spring Glow"))
    store.create(make_influencer(handle="@alpha", name="Alpha", project_id=project.id, created_at=datetime(2026, 1, 1)))
    store.create(make_influencer(handle="@beta", name="Beta", status=InfluencerStatus.SHIPPED, created_at=datetime(2026, 1, 2)))
    store.create(make_influencer(handle="@gamma", name="Gamma", status=InfluencerStatus.PAID, email="g@studio.test", created_at=datetime(2026, 1, 3)))
    db.commit()

    def handles(**kwargs):
        return [i.handle for i in store.list(InfluencerFilter(**kwargs))]

    assert handles() == ["@alpha", "@beta", "@gamma"]
    assert handles(project_id=project.id) == ["@alpha"]
    assert handles(statuses=[InfluencerStatus.SHIPPED]) == ["@beta"]
    assert handles(view="finance") == ["@gamma"]
    assert handles(view="negotiation", statuses=[InfluencerStatus.PAID]) == []
    assert handles(query="studio") == ["@gamma"]


def test_delete(db):
    store = InfluencerStore(db)
    created = store.create(make_influencer())
    assert store.delete(created.id) is True
    assert store.get(created.id) is None
    assert store.delete(created.id) is False


# ============================================================================
# PROJECTS & TEMPLATES
# ============================================================================

def test_project_save_and_update(db):
    store = ProjectStore(db)
    project = store.save(Project(title="Spring Glow", brand="GlowCo", budget=5000))
    project.spent = 1200
    store.save(project)
    db.commit()

    loaded = store.get(project.id)
    assert loaded.spent == 1200
    assert loaded.brand == "GlowCo"
    assert [p.id for p in store.list()] == [project.id]


def test_seeding_templates_is_idempotent(db):
    store = TemplateStore(db)
    assert store.seed_defaults(MESSAGE_TEMPLATES) == len(MESSAGE_TEMPLATES)
    assert store.seed_defaults(MESSAGE_TEMPLATES) == 0
    assert {t.title for t in store.list()} == {t["title"] for t in MESSAGE_TEMPLATES.values()}
