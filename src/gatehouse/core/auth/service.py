"""Authentication service for login and registration."""

from typing import Annotated

import structlog
from fastapi import Depends

from gatehouse.api.dependencies import DBSession
from gatehouse.config import settings
from gatehouse.core.auth.backend import (
    create_access_token,
    hash_password,
    verify_password,
)
from gatehouse.core.errors import AuthenticationError
from gatehouse.core.permissions.resolver import (
    AuthorizationResolver,
    AuthorizationSummary,
)
from gatehouse.modules.users.models import User
from gatehouse.modules.users.repos import UserRepository
from gatehouse.modules.users.services import UserService


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Handles user registration and login.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.user_service = UserService(db)
        self.resolver = AuthorizationResolver(db)

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return settings.access_token_expire_minutes * 60

    async def register(self, name: str, email: str, password: str) -> tuple[User, str]:
        """Register a new user account.

        Args:
            name: User's display name
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user, access_token)

        Raises:
            ConflictError: If email already exists
        """
        user = await self.user_service.register_account(
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
        return user, create_access_token(user.id)

    async def login(
        self, email: str, password: str
    ) -> tuple[User, str, AuthorizationSummary]:
        """Authenticate a user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user, access_token, authorization summary)

        Raises:
            AuthenticationError: If credentials are invalid
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed", email=email)
            raise AuthenticationError(
                "Invalid email or password",
                error_code="invalid_credentials",
            )

        summary = await self.resolver.find_authorization_summary(user.id)
        logger.info("login_succeeded", user_id=user.id)
        return user, create_access_token(user.id), summary


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
