"""
API Router for join request status and officer decisions
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends
from typing import List

from app.dependencies import get_current_user, require_officer, ensure_officer_of
from app.models.membership import Membership
from app.models.status import InvalidTransitionError
from app.models.user import User
from app.schemas.membership import ApplicationStatusEntry, MarkSeenResponse
from app.schemas.moderation import DecisionRequest
from app.services.membership_service import membership_service
from app.services.organization_service import organization_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/memberships", tags=["Memberships"])


@router.get("/me", response_model=List[ApplicationStatusEntry])
async def my_applications(current_user: User = Depends(get_current_user)):
    """Status of every organization the user asked to join"""
    return await membership_service.list_applications(current_user.uid)


@router.post("/me/mark-seen", response_model=MarkSeenResponse)
async def mark_all_as_seen(current_user: User = Depends(get_current_user)):
    """Acknowledge every decided application; calling it again changes nothing"""
    try:
        updated = await membership_service.mark_all_as_seen(current_user.uid)
        return MarkSeenResponse(updated=updated)
    except Exception as e:
        logger.error(f"Failed to mark applications as seen for {current_user.uid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update applications",
        )


@router.put("/{membership_id}/decision", response_model=Membership)
async def decide_membership(
    membership_id: str,
    decision: DecisionRequest,
    current_user: User = Depends(require_officer),
):
    """
    Approve or reject a join request

    - **action**: accept or reject
    - **reason**: required when rejecting
    """
    membership = await membership_service.get(membership_id)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Join request not found"
        )
    organization = await organization_service.get_organization(membership.organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    ensure_officer_of(current_user, organization)

    try:
        updated = await membership_service.decide(
            membership, decision.action, decision.reason, organization)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Join request not found"
        )
    return updated
