#!/usr/bin/env python3
"""
usergraph-migrate: apply the bundled Alembic migrations.

The migration scripts ship inside the package (``usergraph/migrations``), so
the command works from a plain wheel install without an ``alembic.ini``.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from usergraph import __version__
from usergraph.config import get_database_url
from usergraph.logging import configure_logging, get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def get_alembic_config(database_url: str | None = None) -> Config:
    """Build an Alembic config pointing at the bundled migrations."""
    config = Config(stdout=sys.stdout)
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats % specially (url-encoded passwords)
    url = database_url or get_database_url()
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


def _run(ctx: click.Context, action: str, fn: Callable[[Config], None], **log_fields) -> None:
    """Run one Alembic command, logging it and exiting 1 on failure."""
    config = get_alembic_config(ctx.obj["database_url"])
    logger.info(f"Database {action} started", **log_fields)
    try:
        fn(config)
    except Exception as e:
        logger.error(f"Database {action} failed", error=str(e), **log_fields)
        click.echo(f"✗ {action.capitalize()} failed: {e}", err=True)
        sys.exit(1)
    logger.info(f"Database {action} finished", **log_fields)


@click.group()
@click.option(
    "--database-url",
    envvar="USERGRAPH_DATABASE_URL",
    default=None,
    help="Database to migrate (default: USERGRAPH_DATABASE_URL or settings)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="usergraph-migrate")
@click.pass_context
def main(ctx: click.Context, database_url: str | None, log_level: str) -> None:
    """Manage the usergraph database schema."""
    configure_logging(debug=(log_level == "debug"))
    ctx.obj = {"database_url": database_url}


@main.command()
@click.argument("revision", default="head")
@click.pass_context
def upgrade(ctx: click.Context, revision: str) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    _run(ctx, "upgrade", lambda cfg: command.upgrade(cfg, revision), revision=revision)


@main.command()
@click.argument("revision", default="-1")
@click.pass_context
def downgrade(ctx: click.Context, revision: str) -> None:
    """Downgrade the schema to REVISION (default: one step back)."""
    _run(ctx, "downgrade", lambda cfg: command.downgrade(cfg, revision), revision=revision)


@main.command()
@click.pass_context
def current(ctx: click.Context) -> None:
    """Show the revision the database is at."""
    _run(ctx, "current", lambda cfg: command.current(cfg, verbose=False))


@main.command()
@click.pass_context
def history(ctx: click.Context) -> None:
    """List the bundled migrations."""
    _run(ctx, "history", lambda cfg: command.history(cfg))


if __name__ == "__main__":
    main()
