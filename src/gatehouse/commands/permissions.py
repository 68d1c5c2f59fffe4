"""Command group: gatehouse permissions - manage the permission catalog."""

import typer
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from gatehouse.commands.common import console, run
from gatehouse.core.permissions.catalog import PermissionCatalog
from gatehouse.core.permissions.models import Permission
from gatehouse.core.permissions.types import EntitySet


app = typer.Typer(help="Manage the permission catalog.", no_args_is_help=True)


def _print_permissions(title: str, permissions: list[Permission]) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Entity set")
    table.add_column("Type", style="green")
    table.add_column("Entity", no_wrap=True)

    for p in permissions:
        entity = "[dim]set[/dim]" if p.entity is None else str(p.entity)
        table.add_row(str(p.id), str(p.entity_set), str(p.permission_type), entity)

    console.print()
    console.print(table)
    console.print()


@app.command(name="generate-set")
def generate_set(
    ctx: typer.Context,
    entity_set: EntitySet = typer.Argument(..., help="Entity set to provision"),
) -> None:
    """Create the set-level permissions of an entity set.

    Nothing is written if any of them already exists.
    """

    async def _generate(session: AsyncSession) -> list[Permission]:
        return await PermissionCatalog(session).generate_set_permissions(entity_set)

    permissions = run(ctx, _generate)
    _print_permissions(f"Generated {len(permissions)} permissions", permissions)


@app.command(name="generate-entity")
def generate_entity(
    ctx: typer.Context,
    entity_set: EntitySet = typer.Argument(..., help="Entity set of the instance"),
    entity_id: int = typer.Argument(..., min=1, help="ID of the instance"),
) -> None:
    """Create the instance-level permissions of one entity."""

    async def _generate(session: AsyncSession) -> list[Permission]:
        return await PermissionCatalog(session).generate_entity_permissions(
            entity_set, entity_id
        )

    permissions = run(ctx, _generate)
    _print_permissions(f"Generated {len(permissions)} permissions", permissions)


@app.command(name="list")
def list_permissions(
    ctx: typer.Context,
    entity_set: EntitySet | None = typer.Option(
        None, "--entity-set", "-s", help="Only show this entity set"
    ),
) -> None:
    """List the permission catalog."""

    async def _list(session: AsyncSession) -> list[Permission]:
        return await PermissionCatalog(session).find_all(entity_set)

    permissions = run(ctx, _list)
    if not permissions:
        console.print("[yellow]No permissions found.[/yellow]")
        return
    _print_permissions("Permissions", permissions)
