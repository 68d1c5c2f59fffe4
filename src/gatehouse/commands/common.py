"""Helpers shared by the CLI commands."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import gatehouse.models  # noqa: F401  # registers every mapper
from gatehouse.config import settings
from gatehouse.core.database import build_engine
from gatehouse.core.errors import AppException


T = TypeVar("T")

console = Console()


def database_url(ctx: typer.Context) -> str:
    """Database URL chosen on the command line, or the configured one."""
    if ctx.obj and ctx.obj.get("database_url"):
        return ctx.obj["database_url"]
    return settings.async_database_url


@asynccontextmanager
async def session_scope(url: str) -> AsyncIterator[AsyncSession]:
    """Open a session on a short-lived engine; commit on success.

    Each command runs in its own event loop, so the engine is created and
    disposed inside it instead of reusing the application's pool.
    """
    engine = build_engine(url)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    try:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    finally:
        await engine.dispose()


def run(ctx: typer.Context, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``operation`` in a fresh session, exiting with 1 on domain errors."""

    async def _main() -> T:
        async with session_scope(database_url(ctx)) as session:
            return await operation(session)

    try:
        return asyncio.run(_main())
    except AppException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from None
