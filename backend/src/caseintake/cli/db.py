"""CLI commands for database setup."""

import asyncio

import click

from ..db import create_engine, create_schema


@click.group("db")
def db_group() -> None:
    """Manage the case database."""
    pass


@db_group.command("init")
@click.option("--url", default=None, help="Database URL (defaults to settings)")
def init_db(url: str | None) -> None:
    """Create missing tables directly from the table definitions.

    Production databases should be migrated with Alembic instead.
    """

    async def _init() -> None:
        engine = create_engine(url=url)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    click.echo("Schema created.")
