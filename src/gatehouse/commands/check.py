"""Command: gatehouse check - decide access for a user."""

import typer
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.commands.common import console, run
from gatehouse.core.permissions.resolver import AuthorizationResolver
from gatehouse.core.permissions.types import EntitySet, PermissionType


def check(
    ctx: typer.Context,
    user_id: int = typer.Argument(..., min=1, help="User to check"),
    entity_set: EntitySet = typer.Argument(..., help="Entity set being accessed"),
    permission_type: PermissionType = typer.Argument(..., help="Action being performed"),
    entities: list[int] | None = typer.Option(
        None, "--entity", "-e", help="Entity ID; repeat for a batch check"
    ),
) -> None:
    """Print whether a user may act on a set or on entities.

    Without --entity the set-level grant is checked. Exits with 1 on deny.
    """

    async def _check(session: AsyncSession) -> bool:
        resolver = AuthorizationResolver(session)
        if not entities:
            return await resolver.check_access(user_id, entity_set, permission_type)
        return await resolver.check_access_many(
            user_id, entity_set, permission_type, entities
        )

    granted = run(ctx, _check)
    target = (
        f"{entity_set} {', '.join(map(str, entities))}"
        if entities
        else f"{entity_set} (set)"
    )

    if granted:
        console.print(f"[green]GRANTED[/green] {permission_type} on {target}")
        return
    console.print(f"[red]DENIED[/red] {permission_type} on {target}")
    raise typer.Exit(1)
