"""
API Router for calendar views
"""

from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List

from app.dependencies import get_current_user, ensure_officer_of
from app.models.user import User, UserRole
from app.schemas.calendar import CalendarEntry, MonthGrid
from app.services.calendar_service import calendar_service, month_grid as build_month_grid
from app.services.membership_service import membership_service
from app.services.organization_service import organization_service

router = APIRouter(prefix="/api/v1/calendar", tags=["Calendar"])


@router.get("/organization/{organization_id}", response_model=List[CalendarEntry])
async def organization_calendar(
    organization_id: str,
    current_user: User = Depends(get_current_user),
):
    """Events (green) and tasks (orange) of one organization"""
    organization = await organization_service.get_organization(organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    if current_user.role != UserRole.MEMBER:
        ensure_officer_of(current_user, organization)
    elif organization_id not in await membership_service.approved_organization_ids(current_user.uid):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not a member of this organization",
        )
    return await calendar_service.organization_calendar(
        organization_id, include_pending=current_user.role != UserRole.MEMBER)


@router.get("/me", response_model=List[CalendarEntry])
async def my_calendar(current_user: User = Depends(get_current_user)):
    """Events of the member's organizations and the member's own tasks"""
    return await calendar_service.member_calendar(current_user.uid)


@router.get("/month-grid", response_model=MonthGrid)
async def month_grid(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
):
    """Day cells for a Sunday-first month view"""
    return MonthGrid(year=year, month=month, cells=build_month_grid(year, month))
