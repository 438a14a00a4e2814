from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .db import connect, init_db, is_empty, populate
from .filters import (
    AnticipatedReleaseEquals,
    CreatedWithinDays,
    DescriptionContains,
    FilteredPage,
    FilterSet,
    PriorityEquals,
    ProductEquals,
    StatusIn,
    parse_statuses,
)
from .logging import setup_logging
from .pager import BoundaryError
from .repositories import SqliteRepository
from .settings import Settings, load_settings
from .tui.router import Router
from .tui.screens.issues import counter, fetch_issues
from .tui.screens.main import main_menu
from .tui.terminal import DATE_FORMAT, Terminal

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="AntTracker: terminal issue tracker for products, releases and requests",
    rich_markup_mode="rich",
)
console = Console()

SOURCES = ("products", "releases", "issues", "contacts", "requests")


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _populate_if_empty(settings: Settings) -> None:
    conn = connect(settings.ANT_DB_PATH)
    try:
        init_db(conn)
        if is_empty(conn):
            populate(conn)
    finally:
        conn.close()


def _interactive_menu(settings: Settings) -> None:
    """Run the screen graph until the user leaves the main menu."""
    log_file = setup_logging(settings)
    if settings.ANT_POPULATE_SAMPLE:
        _populate_if_empty(settings)
    repo = SqliteRepository(settings)
    try:
        logger.info("Interactive session started (log=%s)", log_file)
        Router(Terminal(console=console)).run(main_menu(repo))
    except (KeyboardInterrupt, EOFError):
        logger.info("Session ended by interrupt")
        console.print("\n[dim]Goodbye![/dim]")
    finally:
        repo.close()


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN CALLBACK
# ═══════════════════════════════════════════════════════════════════════════════


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database path (overrides ANT_DB_PATH)"),
):
    """
    [bold]AntTracker[/bold]: track issues, releases, contacts and requests.

    [dim]Run without arguments to launch the interactive menu.[/dim]

    [bold]Quick Commands:[/bold]
      anttracker status               Show configuration and record counts
      anttracker init --populate      Create the database with sample data
      anttracker issues --status Done List issues matching filters
    """
    ctx.obj = {"settings": load_settings(db)}
    if ctx.invoked_subcommand is None:
        _interactive_menu(_settings(ctx))
        raise typer.Exit(code=0)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════════


@app.command("status", help="[bold cyan]S[/bold cyan]how configuration and record counts")
def status(ctx: typer.Context):
    """Show record counts and current configuration."""
    s = _settings(ctx)

    console.print(Panel.fit(
        "\n".join([
            f"[bold]Database:[/bold]      {s.ANT_DB_PATH}",
            f"[bold]Log dir:[/bold]       {s.ANT_LOG_DIR}",
            f"[bold]Log level:[/bold]     {s.ANT_LOG_LEVEL}",
            f"[bold]Sample data:[/bold]   {s.ANT_POPULATE_SAMPLE}",
        ]),
        title="[bold]Configuration[/bold]",
    ))

    repo = SqliteRepository(s)
    try:
        t = Table(title="[bold]Records[/bold]", show_header=False)
        t.add_column("Source", style="bold")
        t.add_column("Count", style="cyan", justify="right")
        for source in SOURCES:
            t.add_row(source.capitalize(), f"{repo.count(source):,}")
        console.print(t)
    finally:
        repo.close()


@app.command("init", help="[bold cyan]I[/bold cyan]nitialize the database")
def init(
    ctx: typer.Context,
    populate_sample: bool = typer.Option(False, "--populate", help="Add sample products, releases and issues"),
):
    """Create the schema, optionally with sample data."""
    s = _settings(ctx)
    conn = connect(s.ANT_DB_PATH)
    try:
        init_db(conn)
        console.print(f"[green]✓[/green] Database ready at: [cyan]{s.ANT_DB_PATH}[/cyan]")
        if populate_sample:
            if not is_empty(conn):
                console.print("[yellow]Database already has products; sample data not added.[/yellow]")
                return
            counts = populate(conn)
            summary = ", ".join(f"{n} {name}" for name, n in counts.items())
            console.print(f"[green]✓[/green] Sample data added: {summary}")
    finally:
        conn.close()


@app.command("issues", help="[bold cyan]L[/bold cyan]ist one page of issues matching filters")
def issues(
    ctx: typer.Context,
    contains: Optional[str] = typer.Option(None, "--contains", help="Description contains text"),
    product: Optional[str] = typer.Option(None, "--product", help="Product name"),
    priority: Optional[int] = typer.Option(None, "--priority", min=1, max=5, help="Priority (1-5)"),
    release: Optional[str] = typer.Option(None, "--release", help="Anticipated release id"),
    status_text: Optional[str] = typer.Option(None, "--status", help='Statuses, e.g. "Assessed, Done"'),
    days: Optional[int] = typer.Option(None, "--days", min=0, help="Created within the last N days"),
    page_no: int = typer.Option(1, "--page", min=1, help="Page number (20 issues per page)"),
):
    """Apply filters the same way the interactive search does and print one page."""
    filters = FilterSet()
    if contains:
        filters = filters.add(DescriptionContains(contains))
    if product:
        filters = filters.add(ProductEquals(product))
    if priority is not None:
        filters = filters.add(PriorityEquals(priority))
    if release:
        filters = filters.add(AnticipatedReleaseEquals(release))
    if status_text:
        statuses = parse_statuses(status_text)
        if not statuses:
            console.print(f"[red]Unknown status in:[/red] {status_text}")
            raise typer.Exit(code=2)
        filters = filters.add(StatusIn(statuses))
    if days is not None:
        filters = filters.add(CreatedWithinDays(days))

    repo = SqliteRepository(_settings(ctx))
    try:
        page = FilteredPage.start(counter(repo), filters)
        for _ in range(page_no - 1):
            try:
                page = page.next()
            except BoundaryError:
                console.print(f"[yellow]No page {page_no}:[/yellow] {page.pager.describe()}")
                raise typer.Exit(code=1)

        found = fetch_issues(repo, page) if not page.pager.is_empty else []
        if not found:
            console.print("[yellow]No issues found.[/yellow]")
            return

        t = Table(title=" AND ".join(filters.labels()) or "All issues")
        for name in ("ID", "Description", "Product", "Priority", "Status", "AntRel", "Created"):
            t.add_column(name)
        for issue in found:
            t.add_row(
                str(issue.id),
                issue.description,
                issue.product_name or "",
                str(issue.priority),
                issue.status.label,
                issue.release_name or "",
                issue.created_at.strftime(DATE_FORMAT) if issue.created_at else "",
            )
        console.print(t)
        console.print(f"[dim]{page.pager.describe()}[/dim]")
    finally:
        repo.close()


def main():
    app()
