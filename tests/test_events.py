from app.services.storage_service import storage_service


def _seed_events(fake_db):
    fake_db.seed("events/ev_ok", {
        "eventName": "Hackathon", "eventDate": "2025-03-14T09:00:00Z",
        "eventLocation": "Main Hall", "organizationId": "org_1",
        "status": "accepted", "likes": [], "interested": [], "tags": ["tech"],
    })
    fake_db.seed("events/ev_legacy", {
        "eventName": "Career Fair", "eventDate": "2025-02-01T09:00:00Z",
        "organizationId": "org_1", "approvalStatus": "approved",
        "likedBy": [], "interestedBy": [],
    })
    fake_db.seed("events/ev_pending", {
        "eventName": "Secret Party", "eventDate": "2025-04-01T09:00:00Z",
        "organizationId": "org_1", "status": "pending",
    })


EVENT_PAYLOAD = {
    "eventName": "Code Camp",
    "eventDescription": "Two days of workshops",
    "eventDate": "2025-05-10T08:00:00Z",
    "eventLocation": "Lab 3",
    "eventPrice": 0,
    "isFree": True,
    "isOpenForAll": True,
    "tags": "coding, workshop",
}


def test_officer_creates_pending_event(client, login, seeded):
    login("officer_1")
    r = client.post("/api/v1/events", json=EVENT_PAYLOAD)
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "pending"
    assert body["tags"] == ["coding", "workshop"]

    stored = seeded.store[f"events/{body['uid']}"]
    assert stored["organizationId"] == "org_1"
    assert stored["likes"] == []
    assert stored["interested"] == []


def test_member_cannot_create_event(client, login, seeded):
    login("member_1")
    assert client.post("/api/v1/events", json=EVENT_PAYLOAD).status_code == 403


def test_public_listing_only_accepted(client, seeded):
    _seed_events(seeded)
    r = client.get("/api/v1/events")
    assert r.status_code == 200
    assert [e["uid"] for e in r.json()] == ["ev_legacy", "ev_ok"]

    tagged = client.get("/api/v1/events", params={"tag": "tech"}).json()
    assert [e["uid"] for e in tagged] == ["ev_ok"]


def test_like_toggle_keeps_user_and_event_in_step(client, login, seeded):
    _seed_events(seeded)
    login("member_1")

    r = client.post("/api/v1/events/ev_ok/like")
    assert r.status_code == 200
    assert r.json() == {"eventId": "ev_ok", "active": True, "count": 1}
    assert seeded.store["events/ev_ok"]["likes"] == ["member_1"]
    assert seeded.store["Users/member_1"]["likedEvents"] == ["ev_ok"]

    r = client.post("/api/v1/events/ev_ok/like")
    assert r.json() == {"eventId": "ev_ok", "active": False, "count": 0}
    assert seeded.store["events/ev_ok"]["likes"] == []
    assert seeded.store["Users/member_1"]["likedEvents"] == []


def test_interest_on_legacy_event(client, login, seeded):
    _seed_events(seeded)
    login("member_1")
    r = client.post("/api/v1/events/ev_legacy/interest")
    assert r.status_code == 200
    assert r.json()["active"] is True
    assert seeded.store["events/ev_legacy"]["interested"] == ["member_1"]
    assert seeded.store["Users/member_1"]["interestedEvents"] == ["ev_legacy"]


def test_unlike_clears_older_liked_by_array(client, login, seeded):
    seeded.seed("events/ev_old", {
        "eventName": "Alumni Night", "organizationId": "org_1",
        "approvalStatus": "approved", "likedBy": ["member_1"],
    })
    seeded.store["Users/member_1"]["likedEvents"] = ["ev_old"]
    login("member_1")

    r = client.post("/api/v1/events/ev_old/like")
    assert r.json() == {"eventId": "ev_old", "active": False, "count": 0}
    assert seeded.store["events/ev_old"]["likedBy"] == []
    assert seeded.store["events/ev_old"]["likes"] == []
    assert seeded.store["Users/member_1"]["likedEvents"] == []

    r = client.post("/api/v1/events/ev_old/like")
    assert r.json() == {"eventId": "ev_old", "active": True, "count": 1}


def test_cannot_like_pending_event(client, login, seeded):
    _seed_events(seeded)
    login("member_1")
    r = client.post("/api/v1/events/ev_pending/like")
    assert r.status_code == 400
    assert "likes" not in seeded.store["events/ev_pending"]


def test_update_cannot_change_status(client, login, seeded):
    _seed_events(seeded)
    login("officer_1")
    r = client.put("/api/v1/events/ev_pending", json={
        "eventName": "Open Party", "status": "accepted"})
    assert r.status_code == 200
    assert r.json()["eventName"] == "Open Party"
    assert seeded.store["events/ev_pending"]["status"] == "pending"


def test_organization_events_include_all_statuses(client, login, seeded):
    _seed_events(seeded)
    login("officer_1")
    r = client.get("/api/v1/events/organization/org_1")
    assert r.status_code == 200
    assert len(r.json()) == 3


def test_member_feed_uses_approved_memberships(client, login, seeded):
    _seed_events(seeded)
    seeded.seed("Organizations/org_2", {"name": "Other", "status": "accepted"})
    seeded.seed("events/ev_other", {
        "eventName": "Other Event", "organizationId": "org_2", "status": "accepted"})
    seeded.seed("Members/member_1_org_1", {
        "uid": "member_1", "organizationId": "org_1", "status": "approved"})
    seeded.seed("Members/member_1_org_2", {
        "uid": "member_1", "organizationId": "org_2", "status": "pending"})
    login("member_1")

    r = client.get("/api/v1/events/feed")
    assert r.status_code == 200
    assert {e["uid"] for e in r.json()} == {"ev_ok", "ev_legacy"}


def test_comments_and_replies(client, login, seeded):
    _seed_events(seeded)
    login("member_1")
    r = client.post("/api/v1/events/ev_ok/comments", json={"comment": "  See you there!  "})
    assert r.status_code == 201
    comment = r.json()
    assert comment["userName"] == "Jane Cruz"
    assert comment["comment"] == "See you there!"

    r = client.post(f"/api/v1/events/comments/{comment['uid']}/replies", json={"reply": "Same!"})
    assert r.status_code == 200
    assert r.json()["replies"] == ["Same!"]

    listed = client.get("/api/v1/events/ev_ok/comments").json()
    assert len(listed) == 1
    assert listed[0]["replies"] == ["Same!"]

    assert client.post("/api/v1/events/ev_ok/comments", json={"comment": "   "}).status_code == 422


def test_delete_event(client, login, seeded):
    _seed_events(seeded)
    login("officer_1")
    r = client.delete("/api/v1/events/ev_ok")
    assert r.status_code == 204
    assert "events/ev_ok" not in seeded.store


def test_event_images_upload(client, login, seeded, monkeypatch):
    _seed_events(seeded)
    keys = []

    async def fake_upload(key, content, content_type=None):
        keys.append(key)
        return f"https://oms.s3.us-east-1.amazonaws.com/{key}"

    monkeypatch.setattr(storage_service, "upload_bytes", fake_upload)
    login("officer_1")
    r = client.post(
        "/api/v1/events/ev_ok/images",
        files=[
            ("files", ("a poster.png", b"one", "image/png")),
            ("files", ("b.jpg", b"two", "image/jpeg")),
        ],
    )
    assert r.status_code == 200
    assert len(r.json()["eventImages"]) == 2
    assert all(k.startswith("events/") for k in keys)
    assert keys[0].endswith("-a_poster.png")
    assert len(seeded.store["events/ev_ok"]["eventImages"]) == 2


def test_identical_replies_are_both_kept(client, login, seeded):
    _seed_events(seeded)
    seeded.seed("comments/c_1", {
        "eventId": "ev_ok", "comment": "Great event", "replies": [],
        "userName": "Jane Cruz", "timestamp": "2025-03-01T10:00:00Z",
    })
    login("member_1")

    for _ in range(2):
        r = client.post("/api/v1/events/comments/c_1/replies", json={"reply": "Thanks!"})
        assert r.status_code == 200
    assert r.json()["replies"] == ["Thanks!", "Thanks!"]
    assert seeded.store["comments/c_1"]["replies"] == ["Thanks!", "Thanks!"]

    r = client.post("/api/v1/events/comments/missing/replies", json={"reply": "Hi"})
    assert r.status_code == 404
