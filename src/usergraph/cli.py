#!/usr/bin/env python3
"""
Main CLI entry point for the usergraph server.
"""

import asyncio
import json
import os
import sys

import click
import uvicorn

from usergraph import __version__
from usergraph.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="usergraph")
def cli() -> None:
    """usergraph CLI - run the server and manage users."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=8088,
    type=int,
    help="Port to bind to (default: 8088)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str,
    port: int,
    reload: bool,
    workers: int,
    log_level: str,
) -> None:
    """Start the usergraph API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting usergraph API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Worker and reload processes re-import the app, so pass settings via env
    if log_level == "debug":
        os.environ["USERGRAPH_DEBUG"] = "true"
        os.environ["USERGRAPH_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("USERGRAPH_DEBUG", "false")
        os.environ.setdefault("USERGRAPH_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "usergraph.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from usergraph.api.app import app

            uvicorn.run(
                app,
                host=host,
                port=port,
                log_level=log_level,
                access_log=True,
            )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def user() -> None:
    """Manage users in the database."""
    pass


def _run_with_service(action):
    """Run ``action(service)`` against the configured database."""
    from usergraph.database.connection import (
        dispose_database,
        get_async_sessionmaker,
        init_database,
    )
    from usergraph.services.user import UserService

    async def runner():
        init_database()
        try:
            return await action(UserService(get_async_sessionmaker()))
        finally:
            await dispose_database()

    return asyncio.run(runner())


@user.command("create")
@click.option("--name", required=True, help="Display name for the user")
@click.option("--email", required=True, help="Email address for the user")
def create_user(name: str, email: str) -> None:
    """Create a new user."""
    from usergraph.graphql.types.user import CreateUserInput

    configure_logging()

    try:
        created = _run_with_service(
            lambda service: service.create(CreateUserInput(name=name, email=email))
        )
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        click.echo(f"✗ Error creating user: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ User created: {created.id}")
    click.echo(f"  Name: {created.name}")
    click.echo(f"  Email: {created.email}")


@user.command("list")
@click.option(
    "--output-format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format (default: table)",
)
def list_users(output_format: str) -> None:
    """List all users in the database."""
    configure_logging()

    try:
        users = _run_with_service(lambda service: service.find_all())
    except Exception as e:
        logger.error("Failed to list users", error=str(e))
        click.echo(f"✗ Error listing users: {e}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps([{"id": u.id, "name": u.name, "email": u.email} for u in users]))
        return

    if not users:
        click.echo("No users found.")
        return

    click.echo(f"Found {len(users)} user(s):")
    for u in users:
        click.echo(f"  {u.id}\t{u.name}\t{u.email}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
