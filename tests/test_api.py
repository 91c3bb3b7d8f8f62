from conftest import auth_headers
from auth.roles import OperatorRole


def tiktok(video_id: str) -> str:
    return f"https://www.tiktok.com/@glowwithmia/video/{video_id}"


def create_creator(client, headers, **overrides):
    payload = {"handle": "@glowwithmia", "name": "Mia Santos", "email": "mia@example.com"}
    payload.update(overrides)
    response = client.post("/api/influencers", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["influencer"]


# ============================================================================
# AUTH
# ============================================================================

def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_me_reflects_token(client, manager_headers):
    response = client.get("/api/me", headers=manager_headers)
    assert response.json()["role"] == "Manager"


def test_bad_token_is_rejected(client):
    response = client.get("/api/influencers", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_viewer_can_read_but_not_write(client, viewer_headers):
    assert client.get("/api/influencers", headers=viewer_headers).status_code == 200
    response = client.post("/api/influencers", json={"handle": "@x", "name": "X"}, headers=viewer_headers)
    assert response.status_code == 403


def test_only_admin_deletes(client, manager_headers, admin_headers):
    creator = create_creator(client, manager_headers)
    assert client.delete(f"/api/influencers/{creator['id']}", headers=manager_headers).status_code == 403
    assert client.delete(f"/api/influencers/{creator['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/influencers/{creator['id']}", headers=manager_headers).status_code == 404


# ============================================================================
# WORKFLOW
# ============================================================================

def test_create_starts_in_discovery(client, manager_headers):
    creator = create_creator(client, manager_headers, categories=["Beauty"])
    assert creator["status"] == "Discovery"
    assert creator["payment_status"] == "Unpaid"
    assert creator["category"] == "Beauty"


def test_full_pipeline(client, manager_headers):
    creator = create_creator(client, manager_headers)
    base = f"/api/influencers/{creator['id']}"

    response = client.patch(f"{base}/contract", json={"status": "Signed", "total_amount": 900}, headers=manager_headers)
    assert response.json()["influencer"]["status"] == "Contracted"
    assert response.json()["effects"][0]["type"] == "status_changed"

    response = client.patch(f"{base}/logistics", json={"status": "Shipped"}, headers=manager_headers)
    assert response.json()["influencer"]["status"] == "Shipped"

    response = client.post(f"{base}/videos", json={"link": tiktok("7301")}, headers=manager_headers)
    assert response.status_code == 201
    assert response.json()["influencer"]["status"] == "Content Live"
    assert response.json()["eligibility"]["eligible"] is True

    response = client.post(f"{base}/payment", headers=manager_headers)
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "precondition_failed"

    response = client.post(f"{base}/approval", json={"approved": True}, headers=manager_headers)
    assert response.json()["influencer"]["status"] == "Payment Pending"

    response = client.post(f"{base}/payment", json={"proof_file_name": "receipt.pdf"}, headers=manager_headers)
    assert response.status_code == 200
    paid = response.json()["influencer"]
    assert paid["status"] == "Paid"
    assert paid["payment_status"] == "Paid"
    assert paid["payment_record"]["amount_paid"] == 900
    assert paid["payment_record"]["proof_file_name"] == "receipt.pdf"

    notifications = client.get("/api/notifications", params={"influencer_id": creator["id"], "limit": 50}, headers=manager_headers).json()
    titles = {n["title"] for n in notifications["notifications"]}
    assert {"Creator Added", "Status Updated", "Video Added", "Payment Released"} <= titles


def test_duplicate_video_is_a_conflict(client, manager_headers):
    creator = create_creator(client, manager_headers)
    url = f"/api/influencers/{creator['id']}/videos"
    client.post(url, json={"link": tiktok("1")}, headers=manager_headers)

    response = client.post(url, json={"link": tiktok("1")}, headers=manager_headers)
    assert response.status_code == 409
    assert response.json()["detail"]["message"] == "This video has already been logged (Duplicate ID/Link)."


def test_backward_status_move_is_rejected(client, manager_headers):
    creator = create_creator(client, manager_headers)
    url = f"/api/influencers/{creator['id']}/status"
    assert client.put(url, json={"status": "Approved"}, headers=manager_headers).status_code == 200

    response = client.put(url, json={"status": "Contacted"}, headers=manager_headers)
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "status"


def test_unknown_creator_is_404(client, manager_headers):
    response = client.patch("/api/influencers/missing/contract", json={"status": "Signed"}, headers=manager_headers)
    assert response.status_code == 404


def test_milestone_endpoints(client, manager_headers):
    creator = create_creator(client, manager_headers, contract={"video_count": 24})
    base = f"/api/influencers/{creator['id']}"

    response = client.post(f"{base}/milestones/generate", json={"videos_per_batch": 12, "amount_per_batch": 400}, headers=manager_headers)
    milestones = response.json()["influencer"]["contract"]["milestones"]
    assert [m["video_requirement"] for m in milestones] == [12, 24]

    response = client.post(f"{base}/milestones/{milestones[0]['id']}/pay", headers=manager_headers)
    assert response.status_code == 409

    response = client.patch(f"{base}/milestones/{milestones[0]['id']}", json={"video_requirement": 0}, headers=manager_headers)
    assert response.status_code == 200

    response = client.post(f"{base}/milestones/{milestones[0]['id']}/pay", headers=manager_headers)
    assert response.json()["influencer"]["contract"]["milestones"][0]["status"] == "Paid"

    eligibility = client.get(f"{base}/eligibility", headers=manager_headers).json()
    assert eligibility["eligibility"]["milestone"]["id"] == milestones[1]["id"]
    assert eligibility["eligibility"]["gap"] == 24
    assert [m["status"] for m in eligibility["milestones"]] == ["Paid", "Pending"]


def test_unknown_milestone_is_404(client, manager_headers):
    creator = create_creator(client, manager_headers)
    base = f"/api/influencers/{creator['id']}"

    response = client.post(f"{base}/milestones/nope/pay", headers=manager_headers)
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"

    response = client.patch(f"{base}/milestones/nope", json={"amount": 100}, headers=manager_headers)
    assert response.status_code == 404


def test_notes_and_replies(client, manager_headers):
    creator = create_creator(client, manager_headers)
    url = f"/api/influencers/{creator['id']}/messages"

    note = client.post(url, json={"text": "Asked for rates"}, headers=manager_headers).json()
    assert note["influencer"]["history"][-1]["is_internal"] is True
    assert note["influencer"]["history"][-1]["sender"] == "ops@agency.test"
    assert note["influencer"]["status"] == "Discovery"

    reply = client.post(url, json={"text": "Sounds good!", "internal": False}, headers=manager_headers).json()
    assert reply["influencer"]["history"][-1]["is_internal"] is False


# ============================================================================
# OUTREACH
# ============================================================================

def test_single_outreach_renders_template(client, manager_headers):
    template = client.post("/api/outreach/templates", json={
        "title": "Initial Outreach",
        "subject": "Hello",
        "body": "Hi [Name], welcome to [Brand Name]!",
    }, headers=manager_headers).json()
    creator = create_creator(client, manager_headers)

    response = client.post(
        f"/api/influencers/{creator['id']}/outreach",
        json={"template_id": template["id"], "brand": "GlowCo"},
        headers=manager_headers,
    )
    influencer = response.json()["influencer"]
    assert influencer["status"] == "Contacted"
    assert influencer["history"][-1]["content"] == "Hi Mia Santos, welcome to GlowCo!"
    assert influencer["history"][-1]["type"] == "macro"


def test_bulk_outreach_reports_failures(client, manager_headers):
    first = create_creator(client, manager_headers, handle="@one", name="One")
    second = create_creator(client, manager_headers, handle="@two", name="Two")

    response = client.post("/api/outreach/bulk", json={
        "influencer_ids": [first["id"], "missing", second["id"]],
        "body": "Hi [Name]!",
    }, headers=manager_headers)

    outcome = response.json()
    assert [s["id"] for s in outcome["sent"]] == [first["id"], second["id"]]
    assert outcome["failed"] == [{"id": "missing", "error": "Influencer not found"}]

    stored = client.get(f"/api/influencers/{second['id']}", headers=manager_headers).json()
    assert stored["status"] == "Contacted"


def test_bulk_outreach_needs_a_message(client, manager_headers):
    response = client.post("/api/outreach/bulk", json={"influencer_ids": ["x"]}, headers=manager_headers)
    assert response.status_code == 422


# ============================================================================
# PROJECTS & REPORTS
# ============================================================================

def test_project_and_reports(client, manager_headers):
    project = client.post("/api/projects", json={"title": "Spring Glow", "brand": "GlowCo", "budget": 5000}, headers=manager_headers).json()
    assert project["managers"] == ["ops@agency.test"]

    creator = create_creator(client, manager_headers, project_id=project["id"])
    create_creator(client, manager_headers, handle="@other", name="Other")

    detail = client.get(f"/api/projects/{project['id']}", headers=manager_headers).json()
    assert [i["id"] for i in detail["influencers"]] == [creator["id"]]

    counts = client.get("/api/reports/status-counts", params={"project_id": project["id"]}, headers=manager_headers).json()
    assert counts["counts"]["Discovery"] == 1

    overview = client.get("/api/reports/overview", headers=manager_headers).json()
    assert overview["total_creators"] == 2
    assert overview["total_budget"] == 5000

    viewer = auth_headers(OperatorRole.VIEWER)
    assert client.get("/api/reports/finance", headers=viewer).status_code == 200


def test_deleting_project_unassigns_creators(client, manager_headers, admin_headers):
    project = client.post("/api/projects", json={"title": "Short Run"}, headers=manager_headers).json()
    creator = create_creator(client, manager_headers, project_id=project["id"])

    assert client.delete(f"/api/projects/{project['id']}", headers=admin_headers).status_code == 200
    stored = client.get(f"/api/influencers/{creator['id']}", headers=manager_headers).json()
    assert stored["project_id"] is None
