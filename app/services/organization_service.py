"""
Organization service: browsing, profile edits, status page and officer roster

Nothing here writes an organization's ``status``; that field only changes
through admin moderation.
"""

import logging
from typing import Optional, List, Dict, Any

from app.models.collections import (
    COLLECTION_ORGANIZATIONS,
    COLLECTION_MEMBERSHIPS,
    COLLECTION_OFFICERS,
)
from app.models.organization import (
    Organization,
    OfficerRoster,
    firestore_organization_to_model,
    firestore_roster_to_model,
    roster_model_to_firestore,
)
from app.models.status import OrganizationStatus, status_label
from app.schemas.organization import (
    OrganizationStatusView,
    OfficerSeat,
    OfficerRosterResponse,
)
from app.services.firebase_service import firebase_service
from app.services.storage_service import storage_service, organization_logo_key

logger = logging.getLogger(__name__)

OFFICER_POSITIONS = (
    ("president", "President"),
    ("vice_president", "Vice President"),
    ("secretary", "Secretary"),
    ("treasurer", "Treasurer"),
    ("auditor", "Auditor"),
)


class OrganizationService:
    """Service for organization reads and officer-side edits"""

    async def get_organization(self, organization_id: str) -> Optional[Organization]:
        data = await firebase_service.get_document(
            f"{COLLECTION_ORGANIZATIONS}/{organization_id}")
        if data is None:
            return None
        return firestore_organization_to_model(data, organization_id)

    async def is_name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        docs, _ = await firebase_service.query_collection(
            COLLECTION_ORGANIZATIONS, filters=[("name", "==", name)], limit=2
        )
        return any(doc_id != exclude_id for doc_id, _ in docs)

    async def list_organizations(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        joined: Optional[str] = None,
        uid: Optional[str] = None,
    ) -> List[Organization]:
        """
        Accepted organizations for the browse page.

        Args:
            search: Case-insensitive substring of the name
            category: "All", "Others" or a tag
            joined: "Joined" or "Not Joined", relative to ``uid``
            uid: Caller, needed for the joined filter
        """
        docs, _ = await firebase_service.query_collection(
            COLLECTION_ORGANIZATIONS,
            filters=[("status", "==", OrganizationStatus.ACCEPTED.value)],
        )
        organizations = []
        for doc_id, data in docs:
            try:
                organizations.append(firestore_organization_to_model(data, doc_id))
            except Exception as e:
                logger.warning(f"Skipping organization {doc_id}: {e}")

        if search:
            needle = search.lower()
            organizations = [o for o in organizations if needle in o.name.lower()]
        organizations = [o for o in organizations if o.matches_category(category)]

        if joined in ("Joined", "Not Joined") and uid:
            requested = await self._requested_organization_ids(uid)
            want = joined == "Joined"
            organizations = [
                o for o in organizations if (o.id in requested) == want]

        organizations.sort(key=lambda o: o.name.lower())
        return organizations

    async def _requested_organization_ids(self, uid: str) -> set:
        docs, _ = await firebase_service.query_collection(
            COLLECTION_MEMBERSHIPS, filters=[("uid", "==", uid)]
        )
        return {data.get("organizationId") for _, data in docs}

    async def update_profile(self, organization_id: str, updates: Dict[str, Any]) -> Optional[Organization]:
        """
        Edit name, description or tags.

        Raises:
            ValueError: the new name is used by another organization
        """
        allowed = {k: v for k, v in updates.items()
                   if k in ("name", "description", "tags") and v is not None}
        organization = await self.get_organization(organization_id)
        if organization is None:
            return None
        if not allowed:
            return organization

        if "name" in allowed and allowed["name"] != organization.name:
            if await self.is_name_taken(allowed["name"], exclude_id=organization_id):
                raise ValueError("Organization name already exists")

        await firebase_service.update_document(
            f"{COLLECTION_ORGANIZATIONS}/{organization_id}", allowed)
        logger.info(f"Organization {organization_id} updated: {sorted(allowed)}")
        return organization.model_copy(update=allowed)

    async def get_status_page(self, organization_id: str) -> Optional[OrganizationStatusView]:
        """
        Application status as shown to the organization's officers.

        The acceptance notice is shown once: the first view of an accepted
        organization sets ``hasSeenAcceptance``.
        """
        organization = await self.get_organization(organization_id)
        if organization is None:
            return None

        show_notice = (
            organization.status == OrganizationStatus.ACCEPTED
            and not organization.has_seen_acceptance
        )
        if show_notice:
            await firebase_service.update_document(
                f"{COLLECTION_ORGANIZATIONS}/{organization_id}",
                {"hasSeenAcceptance": True},
            )

        return OrganizationStatusView(
            organization_id=organization_id,
            name=organization.name,
            status=organization.status.value,
            label=status_label(organization.status),
            rejection_reason=(
                organization.rejection_reason
                if organization.status == OrganizationStatus.REJECTED else None
            ),
            show_acceptance_notice=show_notice,
        )

    # ============================================
    # OFFICERS
    # ============================================

    async def get_roster(self, organization_id: str) -> OfficerRoster:
        data = await firebase_service.get_document(
            f"{COLLECTION_OFFICERS}/{organization_id}")
        return firestore_roster_to_model(data, organization_id)

    async def describe_roster(self, roster: OfficerRoster) -> OfficerRosterResponse:
        seats = []
        for field, position in OFFICER_POSITIONS:
            uid = getattr(roster, field)
            full_name = None
            if uid:
                user = await firebase_service.get_user_by_uid(uid)
                full_name = user.display_name if user else None
            seats.append(OfficerSeat(position=position, uid=uid, full_name=full_name))
        return OfficerRosterResponse(organization_id=roster.organization_id, officers=seats)

    async def set_roster(
        self, organization: Organization, roster: OfficerRoster, eligible_uids: List[str]
    ) -> OfficerRoster:
        """
        Replace the officer roster.

        Args:
            organization: Organization being edited
            roster: New roster
            eligible_uids: Approved members of the organization

        Raises:
            ValueError: a position is given to someone outside the organization
        """
        allowed = set(eligible_uids) | set(organization.officers)
        outsiders = [uid for uid in roster.assigned_uids() if uid not in allowed]
        if outsiders:
            raise ValueError(
                f"Officers must be approved members of the organization: {', '.join(outsiders)}")

        await firebase_service.set_document(
            f"{COLLECTION_OFFICERS}/{organization.id}", roster_model_to_firestore(roster)
        )
        logger.info(f"Officer roster updated for organization {organization.id}")
        return roster

    async def set_logo(
        self, organization_id: str, content: bytes, content_type: Optional[str]
    ) -> str:
        """Upload the logo to ``logos/{organizationId}`` and point ``photo`` at it"""
        url = await storage_service.upload_bytes(
            organization_logo_key(organization_id), content, content_type
        )
        try:
            await firebase_service.update_document(
                f"{COLLECTION_ORGANIZATIONS}/{organization_id}", {"photo": url})
        except Exception as e:
            logger.error(
                f"Logo uploaded to {url} but organization {organization_id} was not updated: {e}")
            raise
        return url


organization_service = OrganizationService()
