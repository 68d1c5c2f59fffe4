"""User service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from gatehouse.api.dependencies import DBSession
from gatehouse.core.errors import ConflictError, NotFoundError
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.grants import UserPermissionRepository
from gatehouse.core.permissions.types import EntitySet, PermissionType
from gatehouse.modules.users.models import User
from gatehouse.modules.users.repos import UserRepository
from gatehouse.modules.users.schemas import UserUpdate


logger = structlog.get_logger()

# Permissions a user holds on their own account
SELF_PERMISSION_TYPES = (PermissionType.READ, PermissionType.UPDATE)


class UserService:
    """Service for user management operations.

    Registration provisions the account's instance permissions and grants
    the user read and update on their own account through a direct grant.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.repo = UserRepository(db)
        self.catalog = PermissionCatalog(db)
        self.user_permissions = UserPermissionRepository(db)

    async def register_account(self, name: str, email: str, password_hash: str) -> User:
        """Create a user and provision their account permissions.

        Args:
            name: Display name
            email: Login email
            password_hash: Pre-hashed password

        Returns:
            The created user

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.repo.get_by_email(email):
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": email},
            )

        user = await self.repo.create(
            User(name=name, email=email, password_hash=password_hash)
        )

        permissions = await self.catalog.generate_entity_permissions(
            EntitySet.USER, user.id
        )
        await self.user_permissions.grant_all(
            user.id,
            [p for p in permissions if p.permission_type in SELF_PERMISSION_TYPES],
        )

        logger.info("user_registered", user_id=user.id)
        return user

    async def get_user(self, user_id: int) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=user_id,
            )
        return user

    async def list_users(self, user_ids: list[int] | None = None) -> list[User]:
        """List users, restricted to ``user_ids`` when given."""
        return await self.repo.find_all(user_ids)

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        """Update a user's profile.

        Raises:
            NotFoundError: If user not found
            ConflictError: If the new email is already taken
        """
        user = await self.get_user(user_id)

        if data.email and data.email != user.email:
            if await self.repo.get_by_email(data.email):
                raise ConflictError(
                    "Email already registered",
                    error_code="email_exists",
                    details={"email": data.email},
                )
            user.email = data.email

        if data.name is not None:
            user.name = data.name

        await self.db.flush()
        return user


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
