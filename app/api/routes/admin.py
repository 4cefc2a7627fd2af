"""
Admin moderation API endpoints
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List, Optional

from app.dependencies import require_admin
from app.models.status import InvalidTransitionError, RequestType
from app.models.user import User
from app.schemas.moderation import (
    ModerationRequest,
    DecisionRequest,
    DecisionResponse,
    BulkDecisionRequest,
    BulkDecisionResult,
    AuditLogResponse,
)
from app.services.audit_service import audit_service
from app.services.moderation_service import moderation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


@router.get("/requests", response_model=List[ModerationRequest])
async def list_requests(
    search: Optional[str] = None,
    status_filter: str = Query("pending", alias="status"),
    request_type: Optional[RequestType] = Query(None, alias="type"),
    current_user: User = Depends(require_admin),
):
    """Organization applications and event submissions awaiting review"""
    return await moderation_service.list_requests(search, status_filter, request_type)


@router.post("/requests/bulk", response_model=BulkDecisionResult)
async def bulk_decision(
    payload: BulkDecisionRequest,
    current_user: User = Depends(require_admin),
):
    """
    Apply one decision to several requests

    Requests are processed one by one; failures are listed in ``failed`` and
    do not undo the ones already processed.
    """
    try:
        return await moderation_service.bulk_decide(
            payload.requests, payload.action, current_user.uid, payload.reason)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/requests/{request_type}/{request_id}/decision", response_model=DecisionResponse)
async def decide_request(
    request_type: RequestType,
    request_id: str,
    decision: DecisionRequest,
    current_user: User = Depends(require_admin),
):
    """
    Accept or reject one request

    - **action**: accept or reject
    - **reason**: required when rejecting
    """
    try:
        updated = await moderation_service.decide(
            request_type, request_id, decision.action, current_user.uid, decision.reason)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Decision on {request_type.value} {request_id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update request",
        )

    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{request_type.value.capitalize()} not found",
        )
    return DecisionResponse(
        id=request_id,
        type=request_type,
        status=updated["status"],
        rejection_reason=updated.get("rejectionReason") if updated["status"] == "rejected" else None,
    )


@router.get("/audit-logs", response_model=List[AuditLogResponse])
async def list_audit_logs(
    request_id: Optional[str] = Query(None, alias="requestId"),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_admin),
):
    """Audit trail of admin decisions, newest first"""
    logs = await audit_service.list_logs(request_id=request_id, limit=limit)
    return [AuditLogResponse(**entry.model_dump()) for entry in logs]
