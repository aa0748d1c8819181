#!/usr/bin/env python3
"""
Inkwell maintenance CLI.

Usage:
    python cli.py init-db
    python cli.py recompute-trending
    python cli.py show-config
"""

import asyncio
from datetime import datetime, timezone

import click
from rich.console import Console
from rich.table import Table

from inkwell.application.handlers.article_command_handler import ArticleCommandHandler
from inkwell.application.services.article_service import ArticleService
from inkwell.infrastructure.config.database import get_engine, get_session_factory
from inkwell.infrastructure.config.logging_config import configure_logging
from inkwell.infrastructure.config.settings import get_settings
from inkwell.infrastructure.persistence.article_repository_impl import ArticleRepositoryImpl
from inkwell.infrastructure.persistence.models import Base

console = Console()


@click.group()
def cli():
    """Inkwell CLI."""
    configure_logging(get_settings().log_level)


async def _create_tables() -> None:
    async with get_engine().begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def _sweep_trending() -> int:
    settings = get_settings()
    async with get_session_factory()() as session:
        repository = ArticleRepositoryImpl(session)
        handler = ArticleCommandHandler(
            repository,
            moderator_roles=settings.moderator_roles,
            slug_max_attempts=settings.slug_max_attempts,
            recompute_on_write=settings.recompute_on_write(),
        )
        service = ArticleService(repository, handler, moderator_roles=settings.moderator_roles)
        return await service.recompute_trending(datetime.now(timezone.utc))


@cli.command("init-db")
def init_db():
    """Create the articles table and its indexes."""
    asyncio.run(_create_tables())
    console.print("[bold green]Database schema is ready[/bold green]")


@cli.command("recompute-trending")
def recompute_trending():
    """
    Refresh trending scores of every published article.

    Schedule this when TRENDING_RECOMPUTE_POLICY=sweep.
    """
    refreshed = asyncio.run(_sweep_trending())
    console.print(f"[bold green]Refreshed:[/bold green] {refreshed} articles")


@cli.command("show-config")
def show_config():
    """Print the effective settings."""
    settings = get_settings()
    table = Table(title="Inkwell settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        if key == "database_url":
            value = value.split("@")[-1]
        table.add_row(key, str(value))
    console.print(table)


if __name__ == '__main__':
    cli()
