import copy
import itertools
from datetime import datetime, UTC

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.dependencies import get_current_user, get_optional_user
from app.models.user import User, firestore_user_to_model
from app.services.firebase_service import firebase_service, DocumentExistsError


class FakeFirestore:
    """In-memory stand-in for the FirebaseService document methods"""

    def __init__(self):
        self.store = {}
        self._ids = itertools.count(1)

    # helpers for tests
    def seed(self, path, data):
        self.store[path] = copy.deepcopy(data)

    def collection(self, name):
        return {
            path.split("/", 1)[1]: data
            for path, data in self.store.items()
            if path.split("/", 1)[0] == name
        }

    # FirebaseService surface
    async def get_document(self, path):
        data = self.store.get(path)
        return copy.deepcopy(data) if data is not None else None

    async def set_document(self, path, data, merge=False):
        if merge and path in self.store:
            self.store[path].update(copy.deepcopy(data))
        else:
            self.store[path] = copy.deepcopy(data)

    async def create_document(self, path, data):
        if path in self.store:
            raise DocumentExistsError(path)
        self.store[path] = copy.deepcopy(data)

    async def add_document(self, collection_name, data):
        doc_id = f"{collection_name}_{next(self._ids)}"
        self.store[f"{collection_name}/{doc_id}"] = copy.deepcopy(data)
        return doc_id

    async def update_document(self, path, data):
        if path not in self.store:
            raise LookupError(f"No document to update: {path}")
        self.store[path].update(copy.deepcopy(data))

    async def delete_document(self, path):
        self.store.pop(path, None)

    async def array_union(self, path, field, values):
        doc = self.store[path]
        current = doc.get(field) if isinstance(doc.get(field), list) else []
        for value in values:
            if value not in current:
                current.append(value)
        doc[field] = current

    async def array_remove(self, path, field, values):
        doc = self.store[path]
        current = doc.get(field) if isinstance(doc.get(field), list) else []
        doc[field] = [v for v in current if v not in values]

    async def batch_update(self, updates):
        items = list(updates)
        for path, data in items:
            await self.update_document(path, data)
        return len(items)

    async def batch_delete(self, paths):
        items = list(paths)
        for path in items:
            self.store.pop(path, None)
        return len(items)

    async def transition_document(self, path, mutate):
        if path not in self.store:
            return None
        data = copy.deepcopy(self.store[path])
        updates = mutate(data)
        self.store[path].update(copy.deepcopy(updates))
        return {**data, **updates}

    async def query_collection(self, collection_name, filters=None, order_by=None,
                               direction="ASCENDING", limit=None, offset=None,
                               get_total_count=False):
        if isinstance(filters, dict):
            filters = [(k, "==", v) for k, v in filters.items()]
        for field, op, value in filters or []:
            if op == "in" and len(value) > 30:
                raise ValueError("'in' filters support at most 30 values")

        results = []
        for doc_id, data in self.collection(collection_name).items():
            if all(_matches(data, f) for f in filters or []):
                results.append((doc_id, copy.deepcopy(data)))
        total = len(results)
        if order_by:
            results.sort(key=lambda d: d[1].get(order_by),
                         reverse=direction == "DESCENDING")
        if offset:
            results = results[offset:]
        if limit:
            results = results[:limit]
        return results, total if get_total_count else 0


def _matches(data, flt):
    field, op, value = flt
    actual = data.get(field)
    if op == "==":
        return actual == value
    if op == "in":
        return actual in value
    if op == "array_contains":
        return isinstance(actual, list) and value in actual
    raise ValueError(f"Unsupported operator in fake: {op}")


FAKE_METHODS = (
    "get_document", "set_document", "create_document", "add_document",
    "update_document", "delete_document", "array_union", "array_remove",
    "batch_update", "batch_delete", "transition_document", "query_collection",
)


@pytest.fixture
def fake_db(monkeypatch):
    fake = FakeFirestore()
    for name in FAKE_METHODS:
        monkeypatch.setattr(firebase_service, name, getattr(fake, name))
    return fake


@pytest.fixture
def seeded(fake_db):
    """One accepted organization with an officer, a member and an admin"""
    fake_db.seed("Organizations/org_1", {
        "name": "Computer Society",
        "email": "cs@school.edu",
        "description": "Students building software",
        "photo": "https://bucket.s3.us-east-1.amazonaws.com/logos/org_1",
        "status": "accepted",
        "tags": ["Academic"],
        "hasSeenAcceptance": False,
        "members": ["officer_1"],
        "officers": ["officer_1"],
        "createdAt": datetime(2024, 6, 1, tzinfo=UTC),
    })
    fake_db.seed("Users/officer_1", {
        "email": "cs@school.edu", "role": "organization", "organizationId": "org_1",
    })
    fake_db.seed("Users/member_1", {
        "email": "jane@school.edu", "role": "member", "memberId": "m_1",
        "fullName": "Jane Cruz", "course": "BSIT", "yearLevel": "3",
        "likedEvents": [], "interestedEvents": [],
    })
    fake_db.seed("members/m_1", {"email": "jane@school.edu", "fullName": "Jane Cruz"})
    fake_db.seed("Users/admin_1", {"email": "admin@school.edu", "role": "admin"})
    return fake_db


def load_user(fake_db, uid) -> User:
    return firestore_user_to_model(fake_db.store[f"Users/{uid}"], uid)


@pytest.fixture
def login(seeded):
    """Authenticate requests as the given seeded user"""

    def _login(uid):
        user = load_user(seeded, uid)

        async def override():
            return user

        app.dependency_overrides[get_current_user] = override
        app.dependency_overrides[get_optional_user] = override
        return user

    yield _login
    app.dependency_overrides = {}


@pytest.fixture
def client(fake_db):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides = {}
