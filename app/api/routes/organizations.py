"""
API Router for Organizations
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends, Query, UploadFile, File
from typing import List, Optional

from app.config import settings
from app.dependencies import (
    get_current_user,
    get_optional_user,
    require_member,
    require_officer,
    ensure_officer_of,
)
from app.models.membership import Membership
from app.models.organization import Organization, OfficerRoster
from app.models.status import OrganizationStatus
from app.models.user import User
from app.schemas.membership import JoinRequestView, MemberSummary
from app.schemas.organization import (
    OrganizationUpdate,
    OrganizationStatusView,
    OfficerRosterUpdate,
    OfficerRosterResponse,
    LogoUploadResponse,
)
from app.services.firebase_service import DocumentExistsError
from app.services.membership_service import membership_service
from app.services.organization_service import organization_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/organizations", tags=["Organizations"])


async def _get_organization_or_404(organization_id: str) -> Organization:
    organization = await organization_service.get_organization(organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    return organization


@router.get("", response_model=List[Organization])
async def list_organizations(
    search: Optional[str] = None,
    category: Optional[str] = Query(None, description="All, Academic, Sports, Interest or Others"),
    joined: Optional[str] = Query(None, description="Joined or Not Joined"),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List accepted organizations with search and filters"""
    return await organization_service.list_organizations(
        search=search,
        category=category,
        joined=joined,
        uid=current_user.uid if current_user else None,
    )


@router.get("/{organization_id}", response_model=Organization)
async def get_organization(
    organization_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Get organization by id.

    Organizations that are not accepted are only visible to their officers
    and admins; everyone else gets 404.
    """
    organization = await _get_organization_or_404(organization_id)
    if organization.status == OrganizationStatus.ACCEPTED:
        return organization
    hidden = HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
    )
    if current_user is None:
        raise hidden
    try:
        ensure_officer_of(current_user, organization)
    except HTTPException:
        raise hidden
    return organization


@router.put("/{organization_id}", response_model=Organization)
async def update_organization(
    organization_id: str,
    update_data: OrganizationUpdate,
    current_user: User = Depends(require_officer),
):
    """Edit the organization profile (name, description, tags)"""
    organization = await _get_organization_or_404(organization_id)
    ensure_officer_of(current_user, organization)
    try:
        updated = await organization_service.update_profile(
            organization_id, update_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    return updated


@router.get("/{organization_id}/status", response_model=OrganizationStatusView)
async def get_organization_status(
    organization_id: str,
    current_user: User = Depends(require_officer),
):
    """Application status page; the acceptance notice is shown only once"""
    organization = await _get_organization_or_404(organization_id)
    ensure_officer_of(current_user, organization)
    view = await organization_service.get_status_page(organization_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    return view


@router.get("/{organization_id}/officers", response_model=OfficerRosterResponse)
async def get_officers(
    organization_id: str,
    current_user: User = Depends(get_current_user),
):
    await _get_organization_or_404(organization_id)
    roster = await organization_service.get_roster(organization_id)
    return await organization_service.describe_roster(roster)


@router.put("/{organization_id}/officers", response_model=OfficerRosterResponse)
async def update_officers(
    organization_id: str,
    roster_data: OfficerRosterUpdate,
    current_user: User = Depends(require_officer),
):
    """Assign officer positions to approved members"""
    organization = await _get_organization_or_404(organization_id)
    ensure_officer_of(current_user, organization)
    roster = OfficerRoster(
        organization_id=organization_id, **roster_data.model_dump())
    try:
        eligible = await membership_service.approved_member_uids(organization_id)
        saved = await organization_service.set_roster(organization, roster, eligible)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return await organization_service.describe_roster(saved)


@router.post("/{organization_id}/logo", response_model=LogoUploadResponse)
async def upload_logo(
    organization_id: str,
    file: UploadFile = File(...),
    current_user: User = Depends(require_officer),
):
    """Upload the organization logo"""
    organization = await _get_organization_or_404(organization_id)
    ensure_officer_of(current_user, organization)

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    if len(content) > settings.max_upload_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.MAX_UPLOAD_SIZE_MB} MB",
        )
    try:
        url = await organization_service.set_logo(
            organization_id, content, file.content_type)
    except Exception as e:
        logger.error(f"Logo upload failed for {organization_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload logo",
        )
    return LogoUploadResponse(organization_id=organization_id, photo=url)


# ============================================
# MEMBERSHIP
# ============================================


@router.post("/{organization_id}/join", response_model=Membership, status_code=status.HTTP_201_CREATED)
async def join_organization(
    organization_id: str,
    current_user: User = Depends(require_member),
):
    """Send a join request; one request per member and organization"""
    organization = await _get_organization_or_404(organization_id)
    try:
        return await membership_service.request_to_join(current_user, organization)
    except DocumentExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already requested to join this organization",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{organization_id}/applications", response_model=List[JoinRequestView])
async def list_applications(
    organization_id: str,
    status_filter: Optional[str] = Query("pending", alias="status"),
    current_user: User = Depends(require_officer),
):
    """Join requests for the organization's officers to review"""
    organization = await _get_organization_or_404(organization_id)
    ensure_officer_of(current_user, organization)
    return await membership_service.list_for_organization(organization_id, status_filter)


@router.get("/{organization_id}/members", response_model=List[MemberSummary])
async def list_members(
    organization_id: str,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
):
    """Approved members of the organization"""
    await _get_organization_or_404(organization_id)
    return await membership_service.list_members(organization_id, search)
