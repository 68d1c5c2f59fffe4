"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Attributes:
        user_id: The authenticated user's ID
        exp: Token expiration time
        type: Token type
        jti: Unique token ID
    """

    user_id: int
    exp: datetime
    type: str = "access"
    jti: str | None = None
