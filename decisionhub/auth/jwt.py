"""
Access tokens.

HS256 JWTs identifying the caller by user id and email. Tokens issued by
the hosted auth provider carry the id in ``sub`` and an ``aud`` claim we
do not check; tokens minted here carry both ``sub`` and ``user_id``.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from decisionhub.config import settings


class TokenError(Exception):
    """The token is malformed, expired, badly signed or lacks a user id."""


def create_access_token(
    user_id: str,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "user_id": str(user_id),
        "email": email,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Verified claims, with ``user_id`` filled from ``sub`` when absent."""
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as exc:
        raise TokenError(f"Invalid token: {exc}") from exc

    user_id = claims.get("user_id") or claims.get("sub")
    if not user_id:
        raise TokenError("Token missing user id")
    claims["user_id"] = str(user_id)
    return claims
