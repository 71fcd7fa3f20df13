"""
SQLBot CLI

Command-line interface for SQLBot.

Usage:
    sqlbot ask "How many users signed up this week?"   # Answer one question
    sqlbot index                                       # Describe one batch of tables
    sqlbot index --all                                 # Keep indexing until done
    sqlbot validate "SELECT * FROM users"              # Check SQL against the safety gate
    sqlbot serve                                       # Run the webhook API server
"""

import asyncio
import logging
import sys
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sqlbot import __version__
from sqlbot.config import Settings, get_settings
from sqlbot.container import Services, build_services
from sqlbot.core.validator import validate_sql
from sqlbot.formatting.telegram import format_value
from sqlbot.models.query import IncomingQuestion, QuestionOutcome

console = Console()

CLI_CHAT_ID = 0


def configure_cli_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("sqlbot").setLevel(level)
    for logger_name in ("httpx", "openai", "asyncio", "google", "grpc"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def load_settings() -> Settings:
    """Load settings or exit with a readable error."""
    try:
        return get_settings()
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "settings"
            console.print(f"  [yellow]{location}[/yellow]: {error['msg']}")
        raise click.ClickException("Fix the environment or .env file and retry") from e


async def create_services(with_messenger: bool = False) -> Services:
    settings = load_settings()
    try:
        return await build_services(settings, with_messenger=with_messenger)
    except ValueError as e:
        console.print("[yellow]Hint: Set DATABASE_URL in .env or the environment.[/yellow]")
        raise click.ClickException(str(e)) from e


def print_outcome(outcome: QuestionOutcome, show_sql: bool = True) -> None:
    """Render a question outcome for the terminal."""
    if show_sql and outcome.sql:
        console.print(Panel(outcome.sql, title="SQL", border_style="cyan"))

    if not outcome.success:
        console.print(f"[red]{outcome.error_stage} error:[/red] {outcome.error}")
        return

    if not outcome.rows:
        console.print("[yellow]No results found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    columns = list(outcome.rows[0].keys())
    for column in columns:
        table.add_column(column)
    for row in outcome.rows:
        table.add_row(*(format_value(row.get(column)) for column in columns))
    console.print(table)
    console.print(f"[green]{outcome.row_count} row(s)[/green]")


@click.group()
@click.version_option(version=__version__, prog_name="SQLBot")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs.")
def cli(verbose: bool):
    """SQLBot - answer questions about your database with read-only SQL."""
    configure_cli_logging(verbose)


@cli.command()
@click.argument("question")
@click.option("--sql/--no-sql", "show_sql", default=True, help="Show the generated SQL.")
def ask(question: str, show_sql: bool):
    """Answer a single question and exit."""

    async def run_question() -> QuestionOutcome:
        services = await create_services()
        try:
            with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                return await services.pipeline.process(
                    IncomingQuestion(chat_id=CLI_CHAT_ID, question=question)
                )
        finally:
            await services.close()

    outcome = asyncio.run(run_question())
    print_outcome(outcome, show_sql=show_sql)
    if not outcome.success:
        sys.exit(1)


@cli.command()
@click.option("--all", "run_all", is_flag=True, help="Repeat batches until nothing remains.")
def index(run_all: bool):
    """Describe unindexed tables and save them to the catalog."""

    async def run_index() -> list[dict[str, Any]]:
        services = await create_services()
        batches = []
        try:
            if services.indexer is None:
                raise click.ClickException("Catalog store is unavailable; cannot index")
            while True:
                with console.status("[cyan]Describing tables...[/cyan]", spinner="dots"):
                    outcome = await services.indexer.run()
                batches.append(outcome.model_dump())
                console.print(
                    f"[green]Indexed {outcome.trained} tables[/green], "
                    f"{outcome.remaining} remaining"
                )
                for name in outcome.failed:
                    console.print(f"  [red]failed:[/red] {name}")
                # Stop when a batch makes no progress
                if not run_all or outcome.remaining == 0 or outcome.trained == 0:
                    break
        finally:
            await services.close()
        return batches

    batches = asyncio.run(run_index())
    if batches and batches[-1]["remaining"] == 0:
        console.print("[bold green]All tables are indexed.[/bold green]")


@cli.command()
@click.argument("sql")
def validate(sql: str):
    """Check SQL against the read-only safety rules."""
    verdict = validate_sql(sql)
    if verdict.is_valid:
        console.print("[green]✓ SQL is allowed[/green]")
        return
    console.print(f"[red]✗ {verdict.error}[/red]")
    sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Bind host (default: API_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (default: API_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the webhook API server."""
    import uvicorn

    settings = load_settings()
    bind_host = host or settings.api_host
    bind_port = port or settings.api_port
    console.print(f"[cyan]Serving SQLBot on http://{bind_host}:{bind_port}[/cyan]")
    uvicorn.run(
        "sqlbot.api.main:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.logging.level.lower(),
    )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
