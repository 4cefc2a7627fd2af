"""
API Router for organization tasks
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import Optional

from app.dependencies import get_current_user, require_officer, ensure_officer_of
from app.models.organization import Organization
from app.models.task import Task
from app.models.user import User, UserRole
from app.schemas.task import TaskCreate, TaskUpdate, TaskBoard
from app.services.organization_service import organization_service
from app.services.task_service import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])

TAB_QUERY = Query("All", pattern="^(All|Completed|Not Completed)$")


async def _officer_organization(user: User, organization_id: Optional[str]) -> Organization:
    organization_id = organization_id or user.organization_id
    if not organization_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="organizationId is required"
        )
    organization = await organization_service.get_organization(organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found"
        )
    ensure_officer_of(user, organization)
    return organization


async def _get_task_or_404(task_id: str) -> Task:
    task = await task_service.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(require_officer),
):
    """Create a task for approved members; each assignee is notified"""
    organization = await _officer_organization(current_user, task_data.organization_id)
    try:
        return await task_service.create_task(
            organization, task_data.model_dump(exclude={"organization_id"}))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/organization/{organization_id}", response_model=TaskBoard)
async def organization_tasks(
    organization_id: str,
    tab: str = TAB_QUERY,
    current_user: User = Depends(require_officer),
):
    await _officer_organization(current_user, organization_id)
    return await task_service.list_for_organization(organization_id, tab)


@router.get("/me", response_model=TaskBoard)
async def my_tasks(
    tab: str = TAB_QUERY,
    current_user: User = Depends(get_current_user),
):
    """Tasks assigned to the current user"""
    return await task_service.list_for_member(current_user.uid, tab)


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    update_data: TaskUpdate,
    current_user: User = Depends(require_officer),
):
    task = await _get_task_or_404(task_id)
    organization = await _officer_organization(current_user, task.organization_id)
    try:
        return await task_service.update_task(
            task, organization, update_data.model_dump(by_alias=True, exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
):
    """Flip the completed flag; allowed for assignees and the organization's officers"""
    task = await _get_task_or_404(task_id)
    if current_user.uid not in task.assigned_members:
        if current_user.role not in (UserRole.ORGANIZATION, UserRole.ADMIN):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only assignees or officers can update this task",
            )
        await _officer_organization(current_user, task.organization_id)
    return await task_service.toggle_completed(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    current_user: User = Depends(require_officer),
):
    task = await _get_task_or_404(task_id)
    await _officer_organization(current_user, task.organization_id)
    await task_service.delete_task(task_id)
