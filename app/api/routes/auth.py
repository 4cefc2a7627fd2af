"""
Authentication API endpoints
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends

from app.schemas.auth import (
    AuthTokenRequest,
    Token,
    TokenRefresh,
    UserResponse,
    AuthResponse,
    MemberRegister,
    OrganizationRegister,
    RegisterResponse,
    user_response,
)
from app.services.auth_service import auth_service
from app.dependencies import get_current_user
from app.models.user import User

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/verify-token", response_model=AuthResponse)
async def verify_token(payload: AuthTokenRequest):
    """
    Verify Firebase ID Token and sync/create user in backend

    Email/password and Google sign-in both happen in the Firebase client SDK;
    the resulting ID token is exchanged here for backend tokens.

    - **idToken**: valid Firebase ID token from client
    """
    try:
        result = await auth_service.login_user(payload.id_token)
        return AuthResponse(
            user=user_response(result["user"]), tokens=Token(**result["tokens"])
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except Exception as e:
        logger.error(f"Token verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Firebase authentication failed",
        )


@router.post("/refresh", response_model=Token)
async def refresh_token(token_data: TokenRefresh):
    """
    Refresh access token using refresh token

    - **refresh_token**: Valid refresh token
    """
    try:
        tokens = await auth_service.refresh_access_token(token_data.refresh_token)
        return Token(**tokens)
    except Exception as e:
        logger.info(f"Refresh rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return user_response(current_user)


@router.post("/register/member", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_member(data: MemberRegister):
    """Create a member account with its profile"""
    try:
        user = await auth_service.register_member(data)
        return RegisterResponse(uid=user.uid, role=user.role.value, member_id=user.member_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Member registration failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed",
        )


@router.post("/register/organization", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_organization(data: OrganizationRegister):
    """Submit an organization application; it stays pending until an admin decides"""
    try:
        user = await auth_service.register_organization(data)
        return RegisterResponse(
            uid=user.uid, role=user.role.value, organization_id=user.organization_id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Organization registration failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed",
        )
