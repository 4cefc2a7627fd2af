"""
Task service: officer-assigned tasks and their completion state
"""

import logging
from typing import Optional, List, Dict, Any

from app.models.collections import COLLECTION_TASKS
from app.models.organization import Organization, DEFAULT_ORGANIZATION_PHOTO
from app.models.task import (
    Task,
    filter_tasks_by_tab,
    firestore_task_to_model,
    task_model_to_firestore,
)
from app.schemas.task import TaskBoard
from app.services.firebase_service import firebase_service
from app.services.membership_service import membership_service
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)


def _path(task_id: str) -> str:
    return f"{COLLECTION_TASKS}/{task_id}"


def _board(tasks: List[Task], tab: Optional[str]) -> TaskBoard:
    return TaskBoard(
        tasks=filter_tasks_by_tab(tasks, tab),
        completed_count=sum(1 for t in tasks if t.completed),
        total_count=len(tasks),
    )


class TaskService:
    """Service for organization tasks"""

    async def _check_assignees(self, organization_id: str, assignees: List[str]) -> List[str]:
        assignees = list(dict.fromkeys(a for a in assignees if a))
        if not assignees:
            raise ValueError("At least one member must be assigned")
        approved = set(await membership_service.approved_member_uids(organization_id))
        outsiders = [uid for uid in assignees if uid not in approved]
        if outsiders:
            raise ValueError(
                f"Assigned members must be approved members of the organization: {', '.join(outsiders)}")
        return assignees

    async def _notify_assignees(self, task: Task, organization: Organization, uids: List[str]) -> None:
        for uid in uids:
            await notification_service.create(
                recipient_uid=uid,
                message=f"You have been assigned a new task: {task.task_name}",
                type="task-assigned",
                org_name=organization.name,
                org_profile_pic=organization.photo or DEFAULT_ORGANIZATION_PHOTO,
                task_id=task.id,
            )

    async def get_task(self, task_id: str) -> Optional[Task]:
        data = await firebase_service.get_document(_path(task_id))
        if data is None:
            return None
        return firestore_task_to_model(data, task_id)

    async def create_task(self, organization: Organization, payload: Dict[str, Any]) -> Task:
        """
        Create a task and notify each assignee.

        Raises:
            ValueError: no assignee, or an assignee is not an approved member
        """
        assignees = await self._check_assignees(
            organization.id, payload.pop("assigned_members", []))
        task = Task(
            id="",
            organization_id=organization.id,
            assigned_members=assignees,
            completed=False,
            **payload,
        )
        task.id = await firebase_service.add_document(
            COLLECTION_TASKS, task_model_to_firestore(task))
        logger.info(
            f"Task {task.id} created in {organization.id} for {len(assignees)} member(s)")
        await self._notify_assignees(task, organization, assignees)
        return task

    async def _query(self, filters) -> List[Task]:
        docs, _ = await firebase_service.query_collection(COLLECTION_TASKS, filters=filters)
        tasks = []
        for doc_id, data in docs:
            try:
                tasks.append(firestore_task_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping task {doc_id}: {e}")
        return tasks

    async def list_for_organization(self, organization_id: str, tab: Optional[str] = None) -> TaskBoard:
        tasks = await self._query([("organizationId", "==", organization_id)])
        return _board(tasks, tab)

    async def tasks_for_member(self, uid: str) -> List[Task]:
        return await self._query([("assignedMembers", "array_contains", uid)])

    async def list_for_member(self, uid: str, tab: Optional[str] = None) -> TaskBoard:
        return _board(await self.tasks_for_member(uid), tab)

    async def update_task(
        self, task: Task, organization: Organization, updates: Dict[str, Any]
    ) -> Task:
        """
        Edit a task. Newly added assignees are notified.

        Raises:
            ValueError: an assignee is not an approved member
        """
        changes = {k: v for k, v in updates.items() if v is not None}
        changes.pop("organizationId", None)
        changes.pop("completed", None)
        added: List[str] = []
        if "assignedMembers" in changes:
            changes["assignedMembers"] = await self._check_assignees(
                organization.id, changes["assignedMembers"])
            added = [uid for uid in changes["assignedMembers"]
                     if uid not in task.assigned_members]
        if not changes:
            return task

        await firebase_service.update_document(_path(task.id), changes)
        updated = firestore_task_to_model(
            {**task_model_to_firestore(task), **changes}, task.id)
        logger.info(f"Task {task.id} updated: {sorted(changes)}")
        if added:
            await self._notify_assignees(updated, organization, added)
        return updated

    async def toggle_completed(self, task: Task) -> Task:
        completed = not task.completed
        await firebase_service.update_document(_path(task.id), {"completed": completed})
        logger.info(f"Task {task.id} marked {'completed' if completed else 'not completed'}")
        return task.model_copy(update={"completed": completed})

    async def delete_task(self, task_id: str) -> None:
        await firebase_service.delete_document(_path(task_id))
        logger.info(f"Task {task_id} deleted")


task_service = TaskService()
