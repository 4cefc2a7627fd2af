"""
Admin moderation of organization applications and event submissions

Each decision is a transactional status update on one document followed by
one audit log entry. Bulk decisions run the same steps serially; a failing
item is reported and the loop moves on, earlier items are not rolled back.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any, Type

from app.models.collections import COLLECTION_ORGANIZATIONS, COLLECTION_EVENTS
from app.models.status import (
    DecisionAction,
    EventStatus,
    OrganizationStatus,
    RequestType,
    normalize_reason,
    parse_status,
    target_for,
    validate_transition,
)
from app.schemas.moderation import (
    ModerationRequest,
    BulkDecisionItem,
    BulkDecisionResult,
    BulkFailure,
)
from app.services.audit_service import audit_service
from app.services.firebase_service import firebase_service

logger = logging.getLogger(__name__)

_TARGETS: Dict[RequestType, tuple[str, Type]] = {
    RequestType.ORGANIZATION: (COLLECTION_ORGANIZATIONS, OrganizationStatus),
    RequestType.EVENT: (COLLECTION_EVENTS, EventStatus),
}


def _stored_status(data: Dict[str, Any]) -> Optional[str]:
    return data.get("status") or data.get("approvalStatus")


def _status_filters(request_type: RequestType, status: str) -> List[Optional[list]]:
    """Queries for one status; older event documents only carry approvalStatus"""
    if status == "all":
        return [None]
    filters = [[("status", "==", status)]]
    if request_type == RequestType.EVENT:
        legacy = "approved" if status == "accepted" else status
        filters.append([("approvalStatus", "==", legacy)])
    return filters


def _format_date(value) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, str) and value:
        return value[:10]
    return "N/A"


def _to_request(request_type: RequestType, doc_id: str, data: Dict[str, Any]) -> ModerationRequest:
    enum_cls = _TARGETS[request_type][1]
    if request_type == RequestType.ORGANIZATION:
        name = data.get("name") or ""
        description = data.get("description")
        submitted_by = data.get("createdBy") or data.get("email") or ""
    else:
        name = data.get("eventName") or data.get("title") or ""
        description = data.get("eventDescription") or data.get("description")
        submitted_by = data.get("createdBy") or data.get("organizationId") or ""
    return ModerationRequest(
        id=doc_id,
        name=name,
        type=request_type,
        submitted_by=submitted_by,
        submission_date=_format_date(data.get("createdAt")),
        status=parse_status(enum_cls, _stored_status(data)).value,
        description=description,
        email=data.get("email"),
    )


class ModerationService:
    """Service for admin decisions on organizations and events"""

    async def list_requests(
        self,
        search: Optional[str] = None,
        status: str = "pending",
        request_type: Optional[RequestType] = None,
    ) -> List[ModerationRequest]:
        """
        Organization and event submissions for the admin dashboard.

        Args:
            search: Case-insensitive substring of the request name
            status: A status value, or "all"
            request_type: Restrict to one kind of request
        """
        requests: List[ModerationRequest] = []
        kinds = [request_type] if request_type else list(RequestType)
        for kind in kinds:
            seen = set()
            for filters in _status_filters(kind, status):
                docs, _ = await firebase_service.query_collection(
                    _TARGETS[kind][0], filters=filters)
                for doc_id, data in docs:
                    if doc_id in seen:
                        continue
                    seen.add(doc_id)
                    try:
                        request = _to_request(kind, doc_id, data)
                    except Exception as e:
                        logger.warning(f"Skipping {kind.value} {doc_id}: {e}")
                        continue
                    if status == "all" or request.status == status:
                        requests.append(request)

        if search:
            needle = search.lower()
            requests = [r for r in requests if needle in r.name.lower()]
        return requests

    async def decide(
        self,
        request_type: RequestType,
        request_id: str,
        action: DecisionAction,
        admin_id: str,
        reason: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Accept or reject one pending submission and write its audit log.

        Returns:
            The updated document, or None if it does not exist

        Raises:
            ValueError: rejecting without a reason
            InvalidTransitionError: the submission is no longer pending
        """
        reason = normalize_reason(action, reason)
        collection_name, enum_cls = _TARGETS[request_type]
        target = target_for(enum_cls, action)

        def mutate(data: Dict[str, Any]) -> Dict[str, Any]:
            current = parse_status(enum_cls, _stored_status(data))
            validate_transition(current, target)
            updates: Dict[str, Any] = {"status": target.value}
            if reason:
                updates["rejectionReason"] = reason
            return updates

        updated = await firebase_service.transition_document(
            f"{collection_name}/{request_id}", mutate
        )
        if updated is None:
            return None

        logger.info(
            f"Admin {admin_id} set {request_type.value} {request_id} to {target.value}")
        await audit_service.log_decision(
            request_id=request_id,
            request_type=request_type.value,
            action=action.value,
            admin_id=admin_id,
            reason=reason,
        )
        return updated

    async def bulk_decide(
        self,
        items: List[BulkDecisionItem],
        action: DecisionAction,
        admin_id: str,
        reason: Optional[str] = None,
    ) -> BulkDecisionResult:
        """
        Apply one decision to many submissions, one at a time.

        Raises:
            ValueError: rejecting without a reason (checked before any write)
        """
        normalize_reason(action, reason)
        result = BulkDecisionResult(action=action)

        for item in items:
            try:
                updated = await self.decide(item.type, item.id, action, admin_id, reason)
            except Exception as e:
                logger.warning(
                    f"Bulk {action.value} failed for {item.type.value} {item.id}: {e}")
                result.failed.append(
                    BulkFailure(id=item.id, type=item.type, error=str(e)))
                continue
            if updated is None:
                result.failed.append(
                    BulkFailure(id=item.id, type=item.type, error="Not found"))
            else:
                result.processed.append(item.id)
        return result


moderation_service = ModerationService()
