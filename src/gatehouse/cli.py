"""Main gatehouse CLI application."""

import typer
from rich.console import Console

from gatehouse import __version__
from gatehouse.commands import check, grants, permissions


console = Console()

app = typer.Typer(
    name="gatehouse",
    help="Administer permissions, grants and access checks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.add_typer(permissions.app, name="permissions")
app.add_typer(grants.app, name="grants")
app.command(name="check")(check.check)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None,
        "--database-url",
        help="Async SQLAlchemy URL; defaults to the configured database.",
    ),
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Gatehouse CLI - administer access control."""
    if version:
        console.print(f"[bold cyan]gatehouse[/bold cyan] version {__version__}")
        raise typer.Exit()
    ctx.obj = {"database_url": database_url}


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
