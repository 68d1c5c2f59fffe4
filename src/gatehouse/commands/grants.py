"""Command group: gatehouse grants - grant and revoke access."""

import typer
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.commands.common import console, run
from gatehouse.core.permissions.grants import (
    RolePermissionRepository,
    UserPermissionRepository,
)
from gatehouse.core.permissions.membership import UserRoleRepository


app = typer.Typer(help="Grant and revoke permissions and roles.", no_args_is_help=True)

RevokeOption = typer.Option(False, "--revoke", help="Remove instead of add")


@app.command(name="role-permission")
def role_permission(
    ctx: typer.Context,
    role_id: int = typer.Argument(..., min=1, help="Role receiving the permission"),
    permission_id: int = typer.Argument(..., min=1, help="Permission to grant"),
    revoke: bool = RevokeOption,
) -> None:
    """Grant a permission to a role."""

    async def _apply(session: AsyncSession) -> None:
        repo = RolePermissionRepository(session)
        if revoke:
            await repo.delete(role_id, permission_id)
        else:
            await repo.create(role_id, permission_id)

    run(ctx, _apply)
    action = "Revoked" if revoke else "Granted"
    console.print(
        f"[green]✓[/green] {action} permission {permission_id} for role {role_id}"
    )


@app.command(name="user-permission")
def user_permission(
    ctx: typer.Context,
    user_id: int = typer.Argument(..., min=1, help="User receiving the permission"),
    permission_id: int = typer.Argument(..., min=1, help="Permission to grant"),
    revoke: bool = RevokeOption,
) -> None:
    """Grant a permission directly to a user."""

    async def _apply(session: AsyncSession) -> None:
        repo = UserPermissionRepository(session)
        if revoke:
            await repo.delete(user_id, permission_id)
        else:
            await repo.create(user_id, permission_id)

    run(ctx, _apply)
    action = "Revoked" if revoke else "Granted"
    console.print(
        f"[green]✓[/green] {action} permission {permission_id} for user {user_id}"
    )


@app.command(name="user-role")
def user_role(
    ctx: typer.Context,
    user_id: int = typer.Argument(..., min=1, help="User joining the role"),
    role_id: int = typer.Argument(..., min=1, help="Role to join"),
    revoke: bool = RevokeOption,
) -> None:
    """Add a user to a role."""

    async def _apply(session: AsyncSession) -> None:
        repo = UserRoleRepository(session)
        if revoke:
            await repo.delete(user_id, role_id)
        else:
            await repo.create(user_id, role_id)

    run(ctx, _apply)
    action = "Removed" if revoke else "Added"
    preposition = "from" if revoke else "to"
    console.print(f"[green]✓[/green] {action} user {user_id} {preposition} role {role_id}")
