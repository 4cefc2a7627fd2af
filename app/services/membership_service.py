"""
Membership service: join requests and the officer decision on them

A join request lives at ``Members/{uid}_{organizationId}``, so a member has
at most one request per organization. Officers move it from pending to
approved or rejected; the member is notified and later marks the decision as
seen from the application status page.
"""

import logging
from datetime import datetime, UTC
from typing import Optional, List, Dict, Any

from app.models.collections import COLLECTION_MEMBERSHIPS, COLLECTION_ORGANIZATIONS
from app.models.membership import (
    Membership,
    membership_id,
    firestore_membership_to_model,
    membership_model_to_firestore,
)
from app.models.organization import (
    DEFAULT_ORGANIZATION_PHOTO,
    Organization,
    firestore_organization_to_model,
)
from app.models.status import (
    DecisionAction,
    MembershipStatus,
    OrganizationStatus,
    normalize_reason,
    parse_status,
    status_label,
    target_for,
    validate_transition,
)
from app.models.user import User
from app.schemas.membership import (
    ApplicationStatusEntry,
    JoinRequestView,
    MemberSummary,
)
from app.services.firebase_service import firebase_service, DocumentExistsError
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)


def _path(doc_id: str) -> str:
    return f"{COLLECTION_MEMBERSHIPS}/{doc_id}"


class MembershipService:
    """Service for the join request workflow"""

    async def get(self, doc_id: str) -> Optional[Membership]:
        data = await firebase_service.get_document(_path(doc_id))
        if data is None:
            return None
        return firestore_membership_to_model(data, doc_id)

    async def _memberships_for_user(self, uid: str) -> List[Membership]:
        docs, _ = await firebase_service.query_collection(
            COLLECTION_MEMBERSHIPS, filters=[("uid", "==", uid)]
        )
        memberships = []
        for doc_id, data in docs:
            try:
                memberships.append(firestore_membership_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping membership {doc_id}: {e}")
        return memberships

    async def request_to_join(self, user: User, organization: Organization) -> Membership:
        """
        Create a pending join request.

        Raises:
            ValueError: the organization is not accepting members
            DocumentExistsError: the user already has a request for it
        """
        if organization.status != OrganizationStatus.ACCEPTED:
            raise ValueError("Organization is not accepting members")

        doc_id = membership_id(user.uid, organization.id)
        existing, _ = await firebase_service.query_collection(
            COLLECTION_MEMBERSHIPS,
            filters=[("uid", "==", user.uid), ("organizationId", "==", organization.id)],
            limit=1,
        )
        if existing:
            raise DocumentExistsError(_path(existing[0][0]))

        membership = Membership(
            id=doc_id,
            uid=user.uid,
            organization_id=organization.id,
            status=MembershipStatus.PENDING,
            seen_by_user=False,
            joined_at=datetime.now(UTC),
            approval_date=None,
        )
        await firebase_service.create_document(
            _path(doc_id), membership_model_to_firestore(membership))
        logger.info(f"User {user.uid} requested to join {organization.id}")
        return membership

    async def decide(
        self,
        membership: Membership,
        action: DecisionAction,
        reason: Optional[str] = None,
        organization: Optional[Organization] = None,
    ) -> Optional[Membership]:
        """
        Approve or reject a pending join request and notify the member.

        Raises:
            ValueError: rejecting without a reason
            InvalidTransitionError: the request was already decided
        """
        reason = normalize_reason(action, reason)
        target = target_for(MembershipStatus, action)
        decided_at = datetime.now(UTC)

        def mutate(data: Dict[str, Any]) -> Dict[str, Any]:
            current = parse_status(MembershipStatus, data.get("status"))
            validate_transition(current, target)
            updates: Dict[str, Any] = {"status": target.value, "seenByUser": False}
            if target == MembershipStatus.APPROVED:
                updates["approvalDate"] = decided_at
            else:
                updates["rejectionReason"] = reason
            return updates

        updated = await firebase_service.transition_document(
            _path(membership.id), mutate)
        if updated is None:
            return None
        result = firestore_membership_to_model(updated, membership.id)
        logger.info(
            f"Join request {membership.id} set to {target.value}")

        org_name = organization.name if organization else ""
        org_photo = organization.photo if organization else ""
        if target == MembershipStatus.APPROVED:
            message = f"Your request to join {org_name or 'the organization'} has been approved."
        else:
            message = (
                f"Your request to join {org_name or 'the organization'} was rejected: {reason}")
        await notification_service.create(
            recipient_uid=membership.uid,
            message=message,
            type=f"membership-{target.value}",
            org_name=org_name,
            org_profile_pic=org_photo or DEFAULT_ORGANIZATION_PHOTO,
        )
        return result

    async def list_applications(self, uid: str) -> List[ApplicationStatusEntry]:
        """
        The member's application status page.

        Requests whose organization has since been deleted are left out.
        """
        entries = []
        for membership in await self._memberships_for_user(uid):
            org_data = await firebase_service.get_document(
                f"{COLLECTION_ORGANIZATIONS}/{membership.organization_id}")
            if org_data is None:
                continue
            organization = firestore_organization_to_model(
                org_data, membership.organization_id)
            entries.append(ApplicationStatusEntry(
                membership_id=membership.id,
                organization_id=organization.id,
                organization_name=organization.name,
                photo=organization.photo or DEFAULT_ORGANIZATION_PHOTO,
                status=membership.status.value,
                label=status_label(membership.status),
                rejection_reason=(
                    membership.rejection_reason
                    if membership.status == MembershipStatus.REJECTED else None
                ),
                seen_by_user=membership.seen_by_user,
            ))
        return entries

    async def mark_all_as_seen(self, uid: str) -> int:
        """Flag every decided, unseen request of the user as seen"""
        unseen = [
            m for m in await self._memberships_for_user(uid)
            if m.is_decided and not m.seen_by_user
        ]
        count = await firebase_service.batch_update(
            (_path(m.id), {"seenByUser": True}) for m in unseen
        )
        if count:
            logger.info(f"Marked {count} application(s) as seen for {uid}")
        return count

    async def list_for_organization(
        self, organization_id: str, status: Optional[str] = MembershipStatus.PENDING.value
    ) -> List[JoinRequestView]:
        """Join requests of one organization with the requester's details"""
        filters = [("organizationId", "==", organization_id)]
        if status and status != "all":
            filters.append(("status", "==", status))
        docs, _ = await firebase_service.query_collection(
            COLLECTION_MEMBERSHIPS, filters=filters)

        views = []
        for doc_id, data in docs:
            try:
                membership = firestore_membership_to_model(data, doc_id)
            except Exception as e:
                logger.warning(f"Skipping membership {doc_id}: {e}")
                continue
            user = await firebase_service.get_user_by_uid(membership.uid)
            views.append(JoinRequestView(
                id=membership.id,
                uid=membership.uid,
                organization_id=membership.organization_id,
                status=membership.status.value,
                member_name=user.full_name if user and user.full_name else "Unknown",
                email=user.email if user else None,
                course=user.course if user else None,
                year_level=user.year_level if user else None,
                joined_at=membership.joined_at,
                rejection_reason=membership.rejection_reason,
            ))
        return views

    async def approved_member_uids(self, organization_id: str) -> List[str]:
        docs, _ = await firebase_service.query_collection(
            COLLECTION_MEMBERSHIPS,
            filters=[
                ("organizationId", "==", organization_id),
                ("status", "==", MembershipStatus.APPROVED.value),
            ],
        )
        return [data.get("uid") for _, data in docs if data.get("uid")]

    async def approved_organization_ids(self, uid: str) -> List[str]:
        return [
            m.organization_id for m in await self._memberships_for_user(uid)
            if m.status == MembershipStatus.APPROVED
        ]

    async def list_members(self, organization_id: str, search: Optional[str] = None) -> List[MemberSummary]:
        """Approved members joined with their account details"""
        members = []
        for uid in await self.approved_member_uids(organization_id):
            user = await firebase_service.get_user_by_uid(uid)
            if user is None:
                continue
            members.append(MemberSummary(
                uid=uid,
                full_name=user.full_name or "",
                email=user.email,
                course=user.course,
                year_level=user.year_level,
            ))
        if search:
            needle = search.lower()
            members = [
                m for m in members
                if needle in m.full_name.lower() or needle in m.email.lower()
            ]
        members.sort(key=lambda m: m.full_name.lower())
        return members


membership_service = MembershipService()
