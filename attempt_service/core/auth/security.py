"""
Security utilities for JWT token management.
"""
from datetime import timedelta
import uuid

from attempt_service.core.datetime_utils import utc_now
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from attempt_service.core.config import settings


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    *,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> str:
    """
    Create a signed JWT access token.

    The service itself only verifies tokens; issuance lives with the
    identity provider. This helper is used by operator tooling and tests.

    Args:
        data: Dictionary of claims to encode (typically {"id": user_id})
        expires_delta: Optional custom expiration time delta. Negative deltas
            produce already-expired tokens.
        secret_key: Signing key, defaults to settings.JWT_SECRET_KEY
        algorithm: Signing algorithm, defaults to settings.JWT_ALGORITHM

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    now = utc_now()
    expire = now + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update(
        {
            "exp": int(expire.timestamp()),
            "iat": int(now.timestamp()),
            "jti": str(uuid.uuid4()),
        }
    )
    return jwt.encode(
        to_encode,
        secret_key or settings.JWT_SECRET_KEY,
        algorithm=algorithm or settings.JWT_ALGORITHM,
    )


def decode_token(
    token: str,
    secret_key: str,
    algorithm: str,
) -> Optional[Dict[str, Any]]:
    """
    Decode a JWT token and verify its signature.

    Time-based claims (exp, nbf) are NOT checked here; the caller compares
    them against its own clock.

    Args:
        token: JWT token string to decode
        secret_key: Key the token must be signed with
        algorithm: Accepted signing algorithm

    Returns:
        Decoded token payload if the signature is valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"verify_exp": False, "verify_nbf": False, "verify_aud": False},
        )
        return payload
    except JWTError:
        return None
