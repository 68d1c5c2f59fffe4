"""Role repository for database operations."""

from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends
from sqlalchemy import select

from gatehouse.api.dependencies import DBSession
from gatehouse.core.permissions.models import Role


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, role: Role) -> Role:
        """Create a new role.

        Args:
            role: Role instance to create

        Returns:
            The created role with ID populated
        """
        self.session.add(role)
        await self.session.flush()
        return role

    async def get_by_id(self, role_id: int) -> Role | None:
        """Get a role by ID."""
        return await self.session.get(Role, role_id)

    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by its unique name."""
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def find_all(self, role_ids: Sequence[int] | None = None) -> list[Role]:
        """List roles ordered by ID.

        Args:
            role_ids: Restrict the listing to these IDs; None lists every role

        Returns:
            Matching roles
        """
        stmt = select(Role).order_by(Role.id)
        if role_ids is not None:
            stmt = stmt.where(Role.id.in_(sorted(set(role_ids))))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, role: Role) -> None:
        """Delete a role; its grants and memberships cascade."""
        await self.session.delete(role)
        await self.session.flush()


# Type alias for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
