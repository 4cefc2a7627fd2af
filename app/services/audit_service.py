"""
Audit logging for admin decisions
"""

import logging
from datetime import datetime, UTC
from typing import Optional, List

from app.models.collections import COLLECTION_AUDIT_LOGS
from app.models.notification import (
    AuditLog,
    audit_log_to_firestore,
    firestore_audit_log_to_model,
)
from app.services.firebase_service import firebase_service

logger = logging.getLogger(__name__)


class AuditService:
    """Service for the audit trail of admin decisions"""

    async def log_decision(
        self,
        request_id: str,
        request_type: str,
        action: str,
        admin_id: str,
        reason: Optional[str] = None,
    ) -> AuditLog:
        """
        Append one audit log entry.

        Args:
            request_id: Organization or event id that was decided
            request_type: "organization" or "event"
            action: "accept" or "reject"
            admin_id: UID of the deciding admin
            reason: Rejection reason, if any
        """
        entry = AuditLog(
            request_id=request_id,
            request_type=request_type,
            action=action,
            admin_id=admin_id,
            timestamp=datetime.now(UTC),
            reason=reason,
        )
        entry.id = await firebase_service.add_document(
            COLLECTION_AUDIT_LOGS, audit_log_to_firestore(entry)
        )
        logger.info(
            f"[AUDIT] {admin_id} {action} {request_type} {request_id}")
        return entry

    async def list_logs(self, request_id: Optional[str] = None, limit: int = 100) -> List[AuditLog]:
        """Audit entries, newest first"""
        filters = [("requestId", "==", request_id)] if request_id else None
        docs, _ = await firebase_service.query_collection(
            COLLECTION_AUDIT_LOGS, filters=filters
        )
        logs = []
        for doc_id, data in docs:
            try:
                logs.append(firestore_audit_log_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping audit log {doc_id}: {e}")
        logs.sort(key=lambda entry: entry.timestamp, reverse=True)
        return logs[:limit]


audit_service = AuditService()
