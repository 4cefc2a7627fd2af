"""
FastAPI dependency injection for authentication and role checks
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from typing import Optional

from app.utils.security import verify_access_token
import app.services.auth_service as auth_module
from app.models.organization import Organization
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

# Security scheme for Bearer tokens
security = HTTPBearer()
# optional bearer that doesn't raise when missing
security_optional = HTTPBearer(auto_error=False)


async def _user_from_token(token: str) -> Optional[User]:
    """Resolve a Firebase ID token, or failing that an internal access token"""
    try:
        decoded_token = await auth_module.verify_id_token(token)
        firebase_uid = decoded_token.get("uid")
        if firebase_uid:
            return await auth_module.auth_service.get_current_user(firebase_uid)
    except ValueError as e:
        logger.debug(f"Firebase ID token verification failed: {e}. Trying internal token next.")

    try:
        payload = verify_access_token(token)
    except JWTError as e:
        logger.debug(f"Internal token verification failed: {e}")
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    return await auth_module.auth_service.get_current_user(user_id)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> User:
    """
    Dependency to get the current authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = credentials.credentials
    if not token:
        raise credentials_exception

    user = await _user_from_token(token)
    if user is None:
        raise credentials_exception
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(
        security_optional),
) -> Optional[User]:
    """
    Dependency to optionally get current user (doesn't raise error if not authenticated)
    """
    if not credentials or not credentials.credentials:
        return None
    return await _user_from_token(credentials.credentials)


def require_role(required_role: UserRole):
    """
    Dependency factory to require specific user role

    Args:
        required_role: The role required to access the endpoint
    """

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != required_role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role.value}",
            )
        return current_user

    return role_checker


# Convenience dependencies for specific roles
async def require_member(
    current_user: User = Depends(require_role(UserRole.MEMBER)),
) -> User:
    """Require user to be a member"""
    return current_user


async def require_officer(
    current_user: User = Depends(require_role(UserRole.ORGANIZATION)),
) -> User:
    """Require user to be an organization officer"""
    return current_user


async def require_admin(
    current_user: User = Depends(require_role(UserRole.ADMIN)),
) -> User:
    """Require user to be an admin"""
    return current_user


def ensure_officer_of(user: User, organization: Organization) -> None:
    """
    Raise 403 unless ``user`` acts for ``organization``.

    Admins pass; officers pass for the organization on their account or one
    listing them as an officer.
    """
    if user.role == UserRole.ADMIN:
        return
    if user.role == UserRole.ORGANIZATION and (
        user.organization_id == organization.id or user.uid in organization.officers
    ):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Not an officer of this organization",
    )
