"""
JWT Token Utilities

Access tokens carry the subject ID and role, signed with HS256.

This module is part of DocVault.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from ..constants import DEFAULT_ACCESS_TOKEN_TTL, JWT_ALGORITHM
from ..exceptions import AuthenticationError
from .users import User

logger = logging.getLogger(__name__)


def encode_access_token(
    user: User, secret_key: str, expires_in: int = DEFAULT_ACCESS_TOKEN_TTL
) -> str:
    """
    Encode an access token for a user.

    Args:
        user: Authenticated user
        secret_key: Secret key for signing
        expires_in: Lifetime in seconds

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "role": user.role.value,
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(seconds=expires_in),
        "jti": str(uuid.uuid4()),
        "type": "access",
    }
    return jwt.encode(payload, secret_key, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        AuthenticationError: If the token is expired, invalid or not an access token
    """
    try:
        payload = jwt.decode(
            token, secret_key, algorithms=[JWT_ALGORITHM], options={"require": ["sub", "exp"]}
        )
    except jwt.ExpiredSignatureError as e:
        logger.info("Access token has expired")
        raise AuthenticationError("Access token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid access token: {e}")
        raise AuthenticationError("Invalid access token") from e

    if payload.get("type") != "access":
        raise AuthenticationError("Token is not an access token")
    return payload
