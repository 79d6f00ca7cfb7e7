"""Command line entry point for the issue tracker service."""

from __future__ import annotations

import os
import sys

import click
import uvicorn

from issuetracker import __version__
from issuetracker.config import ConfigError, Settings
from issuetracker.logging import setup_logging
from issuetracker.store import IssueStore, StoreError


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="issuetracker")
def main() -> None:
    """Issue tracker REST API."""
    pass


@main.command()
@click.option("--host", default=None, help="Interface to bind. Overrides ISSUETRACKER_HOST.")
@click.option("--port", type=int, default=None, help="Port to listen on. Overrides PORT.")
@click.option(
    "--db",
    "db_path",
    default=None,
    help="SQLite database file. Overrides ISSUETRACKER_DB_PATH.",
)
@click.option("--reload", is_flag=True, help="Restart on code changes (development only).")
def serve(
    host: str | None,
    port: int | None,
    db_path: str | None,
    reload: bool,
) -> None:
    """Run the HTTP server."""
    settings = _load_settings()
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    if db_path is not None:
        settings.db_path = db_path

    setup_logging(settings)

    click.echo(f"Serving issue tracker on http://{settings.host}:{settings.port}")
    if reload:
        # The reload worker builds its own app from the environment
        os.environ["ISSUETRACKER_DB_PATH"] = settings.db_path
        uvicorn.run(
            "issuetracker.api.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
        return

    from issuetracker.api.app import create_app  # noqa: PLC0415

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


@main.command("init-db")
@click.option("--db", "db_path", default=None, help="SQLite database file.")
def init_db(db_path: str | None) -> None:
    """Create the issues table if it does not exist."""
    settings = _load_settings()
    path = db_path or settings.db_path
    try:
        store = IssueStore(path)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    store.close()
    click.echo(f"Database ready at {path}")


if __name__ == "__main__":
    main()
