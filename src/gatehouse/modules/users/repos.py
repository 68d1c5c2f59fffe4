"""User repository for database operations."""

from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends
from sqlalchemy import select

from gatehouse.api.dependencies import DBSession
from gatehouse.modules.users.models import User


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's ID

        Returns:
            User if found, None otherwise
        """
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_all(self, user_ids: Sequence[int] | None = None) -> list[User]:
        """List users ordered by ID.

        Args:
            user_ids: Restrict the listing to these IDs; None lists everyone

        Returns:
            Matching users
        """
        stmt = select(User).order_by(User.id)
        if user_ids is not None:
            stmt = stmt.where(User.id.in_(sorted(set(user_ids))))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
