"""Command-line interface for UserHub.

This module provides the CLI commands for running and managing
the UserHub application.
"""

import asyncio
import sys
from typing import NoReturn

import click

from userhub.core.config import get_settings
from userhub.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="UserHub")
def cli() -> None:
    """UserHub - User management backend."""


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Enable auto-reload (defaults to on in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Start the UserHub server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers
    if reload is None:
        reload = settings.is_development

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting UserHub server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "userhub.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create the database tables.

    Use this only in development. In production, run the Alembic migrations.
    """
    from userhub.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--first-name", prompt=True, help="Given name")
@click.option("--last-name", prompt=True, help="Family name")
@click.option("--email", prompt=True, help="Email address")
@click.option("--team-id", type=int, default=None, help="Optional team ID")
@click.password_option(help="Password (prompts if not provided)")
def create_user(
    first_name: str,
    last_name: str,
    email: str,
    team_id: int | None,
    password: str,
) -> None:
    """Create a user with the default role."""
    from pydantic import ValidationError

    from userhub.domain.exceptions import DuplicateEmailError, UserHubError
    from userhub.domain.services import UserService
    from userhub.infrastructure.api.schemas import CreateUserRequest
    from userhub.infrastructure.persistence.database import get_db_manager
    from userhub.infrastructure.persistence.repositories import SQLAlchemyUserRepository

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    try:
        request = CreateUserRequest(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            team_id=team_id,
        )
    except ValidationError as e:
        for error in e.errors():
            click.echo(f"Error: {'.'.join(str(p) for p in error['loc'])}: {error['msg']}", err=True)
        raise SystemExit(1)

    async def create() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                service = UserService(
                    SQLAlchemyUserRepository(session),
                    default_role_id=settings.default_role_id,
                )
                user = await service.create_user(request)
            click.echo(
                f"\nUser created successfully!\n"
                f"  User ID: {user.user_id}\n"
                f"  Email:   {user.email}\n"
                f"  Role ID: {user.role_id}\n"
            )
            logger.info("User created via CLI", user_id=user.user_id, email=user.email)
        except DuplicateEmailError as e:
            click.echo(f"Error: {e.message}", err=True)
            raise SystemExit(1)
        except UserHubError as e:
            click.echo(f"Error: {e.message}", err=True)
            logger.error("User creation failed", error=e.message)
            raise SystemExit(1)
        finally:
            await db.disconnect()

    asyncio.run(create())


@cli.command()
def info() -> None:
    """Display UserHub configuration."""
    settings = get_settings()

    click.echo(f"""
UserHub v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Users:
  Default Role: {settings.default_role_id}
  Stats Window: {settings.statistics_window_days} days

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `userhub` console script and by `python -m userhub`.
    """
    cli()


def serve_main() -> NoReturn:
    """Entry point for the `userhub-serve` console script."""
    sys.argv[0] = "userhub"
    if len(sys.argv) == 1:
        sys.argv.append("serve")
    main()


if __name__ == "__main__":
    main()
