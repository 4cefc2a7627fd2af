"""Firestore collection names.

Firestore has no DDL; collections appear on first write. These constants keep
the names used by the web client in one place. Note that ``Members`` (join
requests) and ``members`` (member profiles) are different collections.
"""

COLLECTION_USERS = "Users"
COLLECTION_ORGANIZATIONS = "Organizations"
COLLECTION_MEMBERSHIPS = "Members"
COLLECTION_MEMBER_PROFILES = "members"
COLLECTION_EVENTS = "events"
COLLECTION_TASKS = "tasks"
COLLECTION_COMMENTS = "comments"
COLLECTION_NOTIFICATIONS = "notifications"
COLLECTION_OFFICERS = "officers"
COLLECTION_AUDIT_LOGS = "auditLogs"
