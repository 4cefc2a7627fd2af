from datetime import datetime, UTC


def _seed_pending(fake_db):
    fake_db.seed("Organizations/org_p1", {
        "name": "Chess Club", "email": "chess@school.edu", "status": "pending",
        "tags": ["Interest"], "createdAt": datetime(2025, 1, 5, tzinfo=UTC),
    })
    fake_db.seed("Organizations/org_p2", {
        "name": "Drama Guild", "email": "drama@school.edu", "status": "pending",
    })
    fake_db.seed("events/ev_p1", {
        "eventName": "Chess Open", "organizationId": "org_1",
        "approvalStatus": "pending", "createdAt": "2025-01-07T10:00:00Z",
    })


def test_list_pending_requests(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    r = client.get("/api/v1/admin/requests")
    assert r.status_code == 200
    names = {item["name"] for item in r.json()}
    assert names == {"Chess Club", "Drama Guild", "Chess Open"}

    r = client.get("/api/v1/admin/requests", params={"search": "chess", "type": "organization"})
    data = r.json()
    assert [item["id"] for item in data] == ["org_p1"]
    assert data[0]["submissionDate"] == "2025-01-05"


def test_accept_writes_status_and_one_audit_log(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    r = client.post(
        "/api/v1/admin/requests/organization/org_p1/decision",
        json={"action": "accept", "reason": "should be dropped"},
    )
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"

    org = seeded.store["Organizations/org_p1"]
    assert org["status"] == "accepted"
    assert "rejectionReason" not in org

    logs = list(seeded.collection("auditLogs").values())
    assert len(logs) == 1
    assert logs[0]["requestId"] == "org_p1"
    assert logs[0]["action"] == "accept"
    assert logs[0]["adminId"] == "admin_1"


def test_reject_requires_reason(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    r = client.post(
        "/api/v1/admin/requests/event/ev_p1/decision", json={"action": "reject", "reason": "  "})
    assert r.status_code == 400
    assert seeded.store["events/ev_p1"].get("status") is None
    assert seeded.collection("auditLogs") == {}

    r = client.post(
        "/api/v1/admin/requests/event/ev_p1/decision",
        json={"action": "reject", "reason": "Venue not approved"},
    )
    assert r.status_code == 200
    assert r.json()["rejectionReason"] == "Venue not approved"
    assert seeded.store["events/ev_p1"]["status"] == "rejected"
    assert seeded.store["events/ev_p1"]["rejectionReason"] == "Venue not approved"


def test_decided_request_cannot_be_decided_again(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    first = client.post(
        "/api/v1/admin/requests/organization/org_p2/decision", json={"action": "accept"})
    assert first.status_code == 200
    second = client.post(
        "/api/v1/admin/requests/organization/org_p2/decision",
        json={"action": "reject", "reason": "changed my mind"},
    )
    assert second.status_code == 409
    assert seeded.store["Organizations/org_p2"]["status"] == "accepted"
    assert len(seeded.collection("auditLogs")) == 1


def test_missing_request_is_404(client, login):
    login("admin_1")
    r = client.post(
        "/api/v1/admin/requests/organization/nope/decision", json={"action": "accept"})
    assert r.status_code == 404


def test_bulk_accept_logs_every_item(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    r = client.post("/api/v1/admin/requests/bulk", json={
        "action": "accept",
        "requests": [
            {"id": "org_p1", "type": "organization"},
            {"id": "org_p2", "type": "organization"},
            {"id": "ev_p1", "type": "event"},
        ],
    })
    assert r.status_code == 200
    body = r.json()
    assert sorted(body["processed"]) == ["ev_p1", "org_p1", "org_p2"]
    assert body["failed"] == []
    assert len(seeded.collection("auditLogs")) == 3
    assert seeded.store["events/ev_p1"]["status"] == "accepted"


def test_bulk_reports_failures_and_keeps_going(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    r = client.post("/api/v1/admin/requests/bulk", json={
        "action": "reject",
        "reason": "Incomplete",
        "requests": [
            {"id": "ghost", "type": "organization"},
            {"id": "org_1", "type": "organization"},
            {"id": "org_p1", "type": "organization"},
        ],
    })
    assert r.status_code == 200
    body = r.json()
    assert body["processed"] == ["org_p1"]
    assert {f["id"] for f in body["failed"]} == {"ghost", "org_1"}
    # already accepted organization is untouched
    assert seeded.store["Organizations/org_1"]["status"] == "accepted"
    assert len(seeded.collection("auditLogs")) == 1


def test_bulk_reject_without_reason_writes_nothing(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")

    r = client.post("/api/v1/admin/requests/bulk", json={
        "action": "reject",
        "requests": [{"id": "org_p1", "type": "organization"}],
    })
    assert r.status_code == 400
    assert seeded.store["Organizations/org_p1"]["status"] == "pending"


def test_audit_logs_endpoint(client, login, seeded):
    _seed_pending(seeded)
    login("admin_1")
    client.post("/api/v1/admin/requests/organization/org_p1/decision", json={"action": "accept"})

    r = client.get("/api/v1/admin/audit-logs", params={"requestId": "org_p1"})
    assert r.status_code == 200
    logs = r.json()
    assert len(logs) == 1
    assert logs[0]["requestType"] == "organization"


def test_non_admin_is_forbidden(client, login, seeded):
    _seed_pending(seeded)
    login("officer_1")
    r = client.post(
        "/api/v1/admin/requests/organization/org_p1/decision", json={"action": "accept"})
    assert r.status_code == 403
    assert seeded.store["Organizations/org_p1"]["status"] == "pending"
