"""
Typer CLI for the quiz server.

Commands:
    quiz-server serve       - Serve quiz sessions over TCP
    quiz-server db init     - Create the quiz table (and seed it when empty)
    quiz-server db seed     - Insert the default quizzes into an empty store

Usage:
    quiz-server --help
    quiz-server serve --port 3030
    nc localhost 3030
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich import print as rprint

from quiz_server import __version__
from quiz_server.config import Settings, get_settings
from quiz_server.db.database import init_db
from quiz_server.db.store import QuizStore, seed_quizzes
from quiz_server.server import QuizServer

app = typer.Typer(
    help="quiz-server: multi-client quiz CLI over TCP",
    no_args_is_help=False,
    invoke_without_command=True,
)

db_app = typer.Typer(help="Quiz store management (init, seed)")
app.add_typer(db_app, name="db")


def configure_logging(settings: Settings) -> None:
    """Route loguru output to stderr and, when configured, a rotating log file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )


async def _prepare_store(settings: Settings) -> QuizStore:
    store = QuizStore.from_url(settings.database_url, echo=settings.log_level == "DEBUG")
    await init_db(store.engine)
    if settings.seed_on_init:
        await seed_quizzes(store)
    return store


async def _serve(settings: Settings, host: str | None, port: int | None) -> None:
    store = await _prepare_store(settings)
    server = QuizServer(store, settings)
    try:
        await server.start(host, port)
        await server.serve_forever()
    finally:
        await server.close()
        await store.close()


@app.callback()
def main_callback(ctx: typer.Context) -> None:
    """Serve quiz sessions when run without a subcommand."""
    if ctx.invoked_subcommand is None:
        serve(host=None, port=None)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", "-H", help="Interface to bind (default: from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="TCP port (default: from config)"),
) -> None:
    """Serve quiz sessions over TCP until interrupted."""
    settings = get_settings()
    configure_logging(settings)
    try:
        asyncio.run(_serve(settings, host, port))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except OSError as exc:
        logger.error("Could not start the quiz server: {}", exc)
        raise typer.Exit(code=1)


@db_app.command("init")
def db_init() -> None:
    """
    Initialize the quiz table from the SQLAlchemy models.

    Safe to run multiple times (idempotent). Seeds the default quizzes when
    seeding is enabled and the table is empty.
    """
    settings = get_settings()
    configure_logging(settings)

    async def _init() -> None:
        store = await _prepare_store(settings)
        await store.close()

    asyncio.run(_init())
    rprint("[green]✓[/green] Database initialized!")


@db_app.command("seed")
def db_seed() -> None:
    """Insert the default quizzes when the store is empty."""
    settings = get_settings()
    configure_logging(settings)

    async def _seed() -> int:
        store = QuizStore.from_url(settings.database_url)
        try:
            await init_db(store.engine)
            return await seed_quizzes(store)
        finally:
            await store.close()

    added = asyncio.run(_seed())
    if added:
        rprint(f"[green]✓[/green] Added {added} quizzes")
    else:
        rprint("[yellow]⚠[/yellow] Store already has quizzes, nothing added")


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]quiz-server[/bold] v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
