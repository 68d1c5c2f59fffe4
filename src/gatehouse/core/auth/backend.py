"""Password hashing and access tokens.

Tokens are HS256 JWTs whose ``sub`` is the user id. They carry identity
only: what the bearer may do is always resolved from the grant tables at
request time, so revoking a grant takes effect without reissuing tokens.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from gatehouse.config import settings
from gatehouse.core.auth.schemas import TokenData
from gatehouse.core.constants import ACCESS_TOKEN_JTI_LENGTH, BCRYPT_ROUNDS


ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Issue a signed access token for ``user_id``.

    Args:
        user_id: Becomes the ``sub`` claim
        expires_delta: Lifetime; defaults to ``access_token_expire_minutes``
        additional_claims: Extra claims; they cannot replace the
            subject, expiry or token id

    Returns:
        The encoded JWT
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    claims: dict[str, Any] = dict(additional_claims or {})
    claims.update(
        sub=str(user_id),
        type=ACCESS_TOKEN_TYPE,
        iat=issued_at,
        exp=issued_at + lifetime,
        jti=secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
    )
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData | None:
    """Verify ``token`` and extract the caller's identity.

    Returns ``None`` for a bad signature, an expired token, or a subject
    that is not an integer user id.
    """
    try:
        claims = jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

    subject, expires = claims.get("sub"), claims.get("exp")
    if not subject or expires is None:
        return None
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return None

    return TokenData(
        user_id=user_id,
        exp=datetime.fromtimestamp(expires, tz=UTC),
        type=claims.get("type", ACCESS_TOKEN_TYPE),
        jti=claims.get("jti"),
    )
