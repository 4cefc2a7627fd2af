"""
Authentication service handling token exchange and account registration
"""

import logging
import uuid
from datetime import datetime, UTC
from typing import Dict, Any, Optional

from jose import JWTError

from app.models.collections import (
    COLLECTION_MEMBER_PROFILES,
    COLLECTION_ORGANIZATIONS,
    COLLECTION_USERS,
)
from app.models.organization import Organization, organization_model_to_firestore
from app.models.status import OrganizationStatus
from app.models.user import (
    MemberProfile,
    User,
    UserRole,
    member_profile_to_firestore,
    user_model_to_firestore,
)
from app.schemas.auth import MemberRegister, OrganizationRegister
from app.services.firebase_service import firebase_service
from app.services.organization_service import organization_service
from app.utils.security import create_token_pair, verify_refresh_token

logger = logging.getLogger(__name__)


async def verify_id_token(id_token: str) -> dict:
    """Convenience wrapper to verify Firebase ID tokens for simple use in routes/tests."""
    return await firebase_service.verify_id_token(id_token)


class AuthService:
    """Service for authentication operations"""

    def __init__(self):
        self.firebase = firebase_service

    async def login_user(self, id_token: str) -> Dict[str, Any]:
        """
        Authenticate user via Firebase ID token and generate internal tokens.

        Accounts that exist in Firebase Auth but have no Users document yet
        (first Google sign-in) get one with role ``member``.

        Returns:
            Dictionary containing user and internal tokens.

        Raises:
            ValueError: If the ID token is invalid or carries no UID.
        """
        decoded_token = await verify_id_token(id_token)
        uid = decoded_token.get("uid")
        if not uid:
            raise ValueError("Firebase ID token missing UID.")

        user = await self.firebase.get_user_by_uid(uid)
        if user is None:
            user = User(
                uid=uid,
                email=decoded_token.get("email") or "",
                role=UserRole.MEMBER,
                full_name=decoded_token.get("name"),
                created_at=datetime.now(UTC),
            )
            await self.firebase.set_document(
                f"{COLLECTION_USERS}/{uid}", user_model_to_firestore(user))
            logger.info(f"Created Users document for first sign-in of {uid}")

        tokens = create_token_pair(
            user_id=user.uid, email=user.email, role=user.role.value
        )
        return {"user": user, "tokens": tokens}

    async def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        """
        Generate new token pair from refresh token

        Raises:
            JWTError: If refresh token is invalid
        """
        try:
            payload = verify_refresh_token(refresh_token)
            user_id = payload.get("sub")
            if not user_id:
                raise JWTError("Invalid token payload")

            user = await self.firebase.get_user_by_uid(user_id)
            if not user:
                raise JWTError("User not found")

            return create_token_pair(
                user_id=user.uid, email=user.email, role=user.role.value
            )
        except JWTError as e:
            raise JWTError(f"Token refresh failed: {str(e)}")

    async def register_member(self, data: MemberRegister) -> User:
        """
        Create a member account: Firebase Auth user, member profile and
        Users document.

        Raises:
            ValueError: the email is already registered
        """
        existing, _ = await self.firebase.query_collection(
            COLLECTION_MEMBER_PROFILES, filters=[("email", "==", data.email)], limit=1
        )
        if existing:
            raise ValueError("A member with this email already exists")

        full_name = f"{data.first_name} {data.last_name}"
        uid = await self.firebase.create_auth_user(
            email=data.email, password=data.password, display_name=full_name
        )

        profile = MemberProfile(
            member_id=uuid.uuid4().hex,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            full_name=full_name,
            course=data.course,
            year_level=data.year_level,
            contact_number=data.contact_number,
        )
        await self.firebase.set_document(
            f"{COLLECTION_MEMBER_PROFILES}/{profile.member_id}",
            member_profile_to_firestore(profile),
        )

        user = User(
            uid=uid,
            email=data.email,
            role=UserRole.MEMBER,
            member_id=profile.member_id,
            full_name=full_name,
            course=data.course,
            year_level=data.year_level,
            contact_number=data.contact_number,
            liked_events=[],
            interested_events=[],
        )
        await self.firebase.set_document(
            f"{COLLECTION_USERS}/{uid}", user_model_to_firestore(user))
        logger.info(f"Registered member {uid} ({profile.member_id})")
        return user

    async def register_organization(self, data: OrganizationRegister) -> User:
        """
        Create an organization account. The organization starts as pending
        and waits for an admin decision.

        Raises:
            ValueError: the organization name is taken (checked here), or
                Firebase Auth already has an account for the email
                (raised by create_auth_user)
        """
        if await organization_service.is_name_taken(data.name):
            raise ValueError("Organization name already exists")

        uid = await self.firebase.create_auth_user(
            email=data.email, password=data.password, display_name=data.name
        )

        organization = Organization(
            id=str(uuid.uuid4()),
            name=data.name,
            email=data.email,
            photo="",
            description=data.description,
            members=[uid],
            officers=[uid],
            created_at=datetime.now(UTC),
            status=OrganizationStatus.PENDING,
            tags=data.tags,
            has_seen_acceptance=False,
        )
        await self.firebase.set_document(
            f"{COLLECTION_ORGANIZATIONS}/{organization.id}",
            organization_model_to_firestore(organization),
        )

        user = User(
            uid=uid,
            email=data.email,
            role=UserRole.ORGANIZATION,
            organization_id=organization.id,
        )
        await self.firebase.set_document(
            f"{COLLECTION_USERS}/{uid}", user_model_to_firestore(user))
        logger.info(f"Registered organization {organization.id} for {uid}")
        return user

    async def get_current_user(self, user_id: str) -> Optional[User]:
        """
        Get current authenticated user

        Args:
            user_id: User's unique identifier

        Returns:
            User object or None
        """
        return await self.firebase.get_user_by_uid(user_id)


# Global auth service instance
auth_service = AuthService()
