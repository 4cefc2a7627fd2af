def test_join_then_approve_shows_approved(client, login, seeded):
    login("member_1")
    r = client.post("/api/v1/organizations/org_1/join")
    assert r.status_code == 201
    assert r.json()["id"] == "member_1_org_1"

    stored = seeded.store["Members/member_1_org_1"]
    assert stored["status"] == "pending"
    assert stored["seenByUser"] is False
    assert stored["approvalDate"] is None

    login("officer_1")
    r = client.get("/api/v1/organizations/org_1/applications")
    assert r.status_code == 200
    apps = r.json()
    assert len(apps) == 1
    assert apps[0]["memberName"] == "Jane Cruz"

    r = client.put("/api/v1/memberships/member_1_org_1/decision", json={"action": "accept"})
    assert r.status_code == 200
    assert r.json()["status"] == "approved"
    assert seeded.store["Members/member_1_org_1"]["approvalDate"] is not None

    login("member_1")
    r = client.get("/api/v1/memberships/me")
    assert r.status_code == 200
    entries = r.json()
    assert len(entries) == 1
    assert entries[0]["organizationName"] == "Computer Society"
    assert entries[0]["label"] == "Approved"
    assert entries[0]["rejectionReason"] is None
    assert entries[0]["seenByUser"] is False


def test_officer_decision_never_touches_organization_status(client, login, seeded):
    login("member_1")
    client.post("/api/v1/organizations/org_1/join")
    login("officer_1")
    client.put("/api/v1/memberships/member_1_org_1/decision", json={"action": "accept"})
    assert seeded.store["Organizations/org_1"]["status"] == "accepted"


def test_duplicate_join_is_rejected(client, login, seeded):
    login("member_1")
    assert client.post("/api/v1/organizations/org_1/join").status_code == 201
    r = client.post("/api/v1/organizations/org_1/join")
    assert r.status_code == 409
    assert len(seeded.collection("Members")) == 1


def test_cannot_join_pending_organization(client, login, seeded):
    seeded.seed("Organizations/org_p", {"name": "New Club", "status": "pending"})
    login("member_1")
    r = client.post("/api/v1/organizations/org_p/join")
    assert r.status_code == 400
    assert seeded.collection("Members") == {}


def test_rejection_needs_reason_and_notifies(client, login, seeded):
    login("member_1")
    client.post("/api/v1/organizations/org_1/join")

    login("officer_1")
    r = client.put("/api/v1/memberships/member_1_org_1/decision", json={"action": "reject"})
    assert r.status_code == 400
    assert seeded.store["Members/member_1_org_1"]["status"] == "pending"

    r = client.put(
        "/api/v1/memberships/member_1_org_1/decision",
        json={"action": "reject", "reason": "Membership is full"},
    )
    assert r.status_code == 200

    notifications = list(seeded.collection("notifications").values())
    assert len(notifications) == 1
    assert notifications[0]["recipientUid"] == "member_1"
    assert notifications[0]["orgName"] == "Computer Society"
    assert "Membership is full" in notifications[0]["message"]

    login("member_1")
    entry = client.get("/api/v1/memberships/me").json()[0]
    assert entry["label"] == "Rejected"
    assert entry["rejectionReason"] == "Membership is full"


def test_decided_request_conflicts(client, login, seeded):
    login("member_1")
    client.post("/api/v1/organizations/org_1/join")
    login("officer_1")
    client.put("/api/v1/memberships/member_1_org_1/decision", json={"action": "accept"})
    r = client.put(
        "/api/v1/memberships/member_1_org_1/decision",
        json={"action": "reject", "reason": "oops"},
    )
    assert r.status_code == 409


def test_officer_of_another_organization_is_forbidden(client, login, seeded):
    seeded.seed("Organizations/org_2", {"name": "Other", "status": "accepted", "officers": ["officer_2"]})
    seeded.seed("Users/officer_2", {"email": "o2@school.edu", "role": "organization", "organizationId": "org_2"})
    login("member_1")
    client.post("/api/v1/organizations/org_1/join")

    login("officer_2")
    r = client.put("/api/v1/memberships/member_1_org_1/decision", json={"action": "accept"})
    assert r.status_code == 403
    assert seeded.store["Members/member_1_org_1"]["status"] == "pending"


def test_mark_all_as_seen_is_idempotent(client, login, seeded):
    seeded.seed("Organizations/org_2", {"name": "Other", "status": "accepted"})
    seeded.seed("Members/member_1_org_1", {
        "uid": "member_1", "organizationId": "org_1", "status": "approved", "seenByUser": False})
    seeded.seed("Members/member_1_org_2", {
        "uid": "member_1", "organizationId": "org_2", "status": "pending", "seenByUser": False})
    login("member_1")

    first = client.post("/api/v1/memberships/me/mark-seen")
    assert first.status_code == 200
    assert first.json()["updated"] == 1
    snapshot = {k: dict(v) for k, v in seeded.collection("Members").items()}

    second = client.post("/api/v1/memberships/me/mark-seen")
    assert second.status_code == 200
    assert second.json()["updated"] == 0
    assert seeded.collection("Members") == snapshot
    assert seeded.store["Members/member_1_org_2"]["seenByUser"] is False


def test_applications_skip_deleted_organizations(client, login, seeded):
    seeded.seed("Members/member_1_gone", {
        "uid": "member_1", "organizationId": "gone", "status": "pending"})
    login("member_1")
    assert client.get("/api/v1/memberships/me").json() == []


def test_members_listing(client, login, seeded):
    seeded.seed("Members/member_1_org_1", {
        "uid": "member_1", "organizationId": "org_1", "status": "approved"})
    login("officer_1")
    r = client.get("/api/v1/organizations/org_1/members", params={"search": "jane"})
    assert r.status_code == 200
    assert [m["uid"] for m in r.json()] == ["member_1"]
