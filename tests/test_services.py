from conftest import make_influencer
from core.errors import Effect
from schemas.seeding import InfluencerStatus
from services.notification_service import NotificationLevel, NotificationService, describe_effect
from services.workflow_service import WorkflowService


def test_describe_status_change():
    effect = Effect(type="status_changed", data={"from": "Shipped", "to": "Content Live", "event": "first_video_posted"})
    described = describe_effect(effect, "@glowwithmia")
    assert described["title"] == "Status Updated"
    assert described["message"] == "@glowwithmia moved from Shipped to Content Live."
    assert described["level"] == NotificationLevel.INFO


def test_describe_unknown_effect():
    assert describe_effect(Effect(type="milestone_added"))["title"] == "Milestone Added"


def test_notifications_are_listed_newest_first_and_marked_read(db):
    service = NotificationService(db)
    service.create(type="system", title="First", message="one")
    second = service.create(type="system", title="Second", message="two")
    db.commit()

    assert service.get_unread_count() == 2
    assert service.mark_read(second.id) is True
    assert service.mark_read("missing") is False
    assert service.get_unread_count() == 1
    assert service.mark_all_read() == 1
    assert service.list(unread_only=True) == []


def test_apply_persists_result_and_effects(db, engine):
    service = WorkflowService(db, engine=engine)
    created = service.create({"handle": "@mia", "name": "Mia"}).influencer

    result = service.apply(created.id, lambda i: engine.set_status(i, InfluencerStatus.NEGOTIATING))
    db.commit()

    assert result.ok
    assert service.store.get(created.id).status == InfluencerStatus.NEGOTIATING
    types = [n.type for n in service.notifications.list(influencer_id=created.id)]
    assert sorted(types) == ["influencer_created", "status_changed"]


def test_apply_skips_write_on_rejection(db, engine):
    service = WorkflowService(db, engine=engine)
    created = service.store.create(make_influencer(status=InfluencerStatus.SHIPPED))

    result = service.apply(created.id, lambda i: engine.set_status(i, InfluencerStatus.CONTACTED))

    assert not result.ok
    assert service.store.get(created.id).status == InfluencerStatus.SHIPPED


def test_apply_on_unknown_creator(db, engine):
    assert WorkflowService(db, engine=engine).apply("missing", lambda i: engine.add_milestone(i)) is None


def test_bulk_outreach_commits_each_creator(db, engine):
    service = WorkflowService(db, engine=engine)
    first = service.store.create(make_influencer(handle="@one"))
    late = service.store.create(make_influencer(handle="@late", status=InfluencerStatus.NEGOTIATING))

    outcome = service.bulk_outreach([first.id, late.id], template=None, operator="ops@agency.test", body="Hi [Name]")

    assert [s["status"] for s in outcome["sent"]] == ["Contacted", "Negotiating"]
    assert outcome["failed"] == []
    assert len(service.store.get(late.id).history) == 1
