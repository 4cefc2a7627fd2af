"""
JWT token management for internal session tokens
"""

from datetime import datetime, timedelta, UTC
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from app.config import settings


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token

    Args:
        data: Data to encode in the token
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire, "iat": datetime.now(UTC), "type": "access"})

    return jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def create_refresh_token(data: Dict[str, Any]) -> str:
    """Create a JWT refresh token"""
    to_encode = data.copy()
    expire = datetime.now(UTC) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    to_encode.update({"exp": expire, "iat": datetime.now(UTC), "type": "refresh"})

    return jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a JWT token

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise JWTError(f"Invalid token: {str(e)}")


def _verify_type(token: str, token_type: str) -> Dict[str, Any]:
    payload = decode_token(token)
    if payload.get("type") != token_type:
        raise JWTError("Invalid token type")
    return payload


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token

    Raises:
        JWTError: If token is invalid, expired, or not an access token
    """
    return _verify_type(token, "access")


def verify_refresh_token(token: str) -> Dict[str, Any]:
    """
    Verify a refresh token

    Raises:
        JWTError: If token is invalid, expired, or not a refresh token
    """
    return _verify_type(token, "refresh")


def create_token_pair(user_id: str, email: str, role: str) -> Dict[str, Any]:
    """
    Create both access and refresh tokens for a user

    Returns:
        Dictionary containing access_token, refresh_token, and expiration info
    """
    token_data = {"sub": user_id, "email": email, "role": role}

    return {
        "access_token": create_access_token(token_data),
        "refresh_token": create_refresh_token({"sub": user_id}),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,  # Convert to seconds
    }
