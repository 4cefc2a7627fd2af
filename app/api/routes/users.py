"""
User profile settings API endpoints
"""

import logging

from fastapi import APIRouter, HTTPException, status, Depends

from app.models.collections import COLLECTION_USERS, COLLECTION_MEMBER_PROFILES
from app.schemas.auth import UserResponse, ProfileUpdate, user_response
from app.services.firebase_service import firebase_service
from app.dependencies import get_current_user
from app.models.user import User

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_user_profile(current_user: User = Depends(get_current_user)):
    """Get current user's profile"""
    return user_response(current_user)


@router.put("/me", response_model=UserResponse)
async def update_user_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
):
    """
    Update current user's profile

    The same fields are mirrored onto the member profile document when the
    account has one.
    """
    update_dict = profile_data.model_dump(by_alias=True, exclude_none=True)
    if not update_dict:
        return user_response(current_user)

    try:
        await firebase_service.update_document(
            f"{COLLECTION_USERS}/{current_user.uid}", update_dict)
        if current_user.member_id:
            await firebase_service.set_document(
                f"{COLLECTION_MEMBER_PROFILES}/{current_user.member_id}",
                update_dict,
                merge=True,
            )
        logger.info(f"Profile of {current_user.uid} updated: {sorted(update_dict)}")
        return user_response(current_user.model_copy(
            update=profile_data.model_dump(exclude_none=True)))
    except Exception as e:
        logger.error(f"Failed to update profile of {current_user.uid}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
        )
