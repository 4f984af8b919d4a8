"""Typer-based CLI for ChroniQuill."""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from .config import ChroniQuillConfig
from .documents import create_document
from .errors import ChroniQuillError
from .index import build_index
from .ledger import LedgerWriter, read_ledger_tail
from .models.document import Category
from .models.index import FolderNode
from .paths import HomePaths
from .session import DocumentSession
from .settings import ChroniQuillSettings, init_home

app = typer.Typer(
    name="chroniquill",
    help="ChroniQuill - dated archive of short-form and long-form writing",
    add_completion=False,
)

console = Console()

HOME_HELP = "Path to home directory (default: CHRONIQUILL_HOME env, user config, or auto-discovery)"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Print debug messages"),
):
    """ChroniQuill command-line front end."""
    log_level = os.environ.get("CHRONIQUILL_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=(logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.WARNING)),
        format="[%(levelname).1s] %(name)s: %(message)s",
    )


def _load_config(home: Optional[str], mode: str = "use_existing") -> ChroniQuillConfig:
    try:
        return ChroniQuillConfig.from_env(cli_home=home, mode=mode)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def _ledger(config: ChroniQuillConfig) -> LedgerWriter:
    paths = HomePaths.from_config(config)
    return LedgerWriter(paths.ledger_file, home_root=paths.root)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Error: Invalid date {value!r}, expected YYYY-MM-DD[/red]")
        raise typer.Exit(code=1)


def _add_node(branch: Tree, node: FolderNode) -> None:
    for child in node.children:
        _add_node(branch.add(f"[bold]{child.name}[/bold]"), child)
    for document in node.documents:
        branch.add(document.name)
    if not node.documents and not node.children:
        branch.add("[dim]No files[/dim]")


@app.command()
def init(
    home: str = typer.Option(None, "--home", "-H", help=HOME_HELP),
    site_url: str = typer.Option(None, "--site-url", help="Public URL of the generated site"),
):
    """Initialize a home directory with settings.json and the archive folders.

    This command is idempotent - it will not overwrite existing data.
    """
    config = _load_config(home, mode="create_ok")
    paths = HomePaths.from_config(config)

    if paths.settings_file.exists():
        console.print(f"[yellow]Home already exists at:[/yellow] {paths.root}")
        console.print("[yellow]Running in idempotent mode - will only create missing items[/yellow]")
    else:
        console.print(f"[green]Initializing new ChroniQuill home at:[/green] {paths.root}")

    settings = ChroniQuillSettings.load(paths.settings_file)
    if site_url is not None:
        settings.site_url = site_url

    created = init_home(config, settings, ledger_writer=_ledger(config))
    if created:
        console.print(f"[green]+[/green] Created {len(created)} directories")
    else:
        console.print("[dim]All directories already exist[/dim]")

    console.print()
    console.print("[bold green]Home initialization complete![/bold green]")


@app.command()
def tree(
    home: str = typer.Option(None, "--home", "-H", help=HOME_HELP),
):
    """Show the archive as a folder tree."""
    config = _load_config(home)
    index = build_index(config)

    if not index.roots:
        console.print("[yellow]No archive folders found[/yellow]")
        return

    for category, root in zip(index.categories, index.roots):
        branch = Tree(f"[bold cyan]{category.value}[/bold cyan]")
        _add_node(branch, root)
        console.print(branch)

    for directory in index.unreadable:
        console.print(f"[yellow]Warning: could not read {directory}[/yellow]")


@app.command()
def new(
    category: Category = typer.Argument(..., help="short-form or long-form"),
    title: str = typer.Argument(..., help="Document title, turned into the file name"),
    on_date: str = typer.Option(None, "--date", "-d", help="Date folder (YYYY-MM-DD, default: today)"),
    text: str = typer.Option("", "--text", "-t", help="Initial content"),
    home: str = typer.Option(None, "--home", "-H", help=HOME_HELP),
):
    """Create a new document in the dated archive."""
    config = _load_config(home)
    paths = HomePaths.from_config(config)
    settings = ChroniQuillSettings.load(paths.settings_file)

    try:
        document_path = create_document(
            config,
            settings,
            category,
            title,
            on_date=_parse_date(on_date) if on_date else None,
            text=text,
            ledger_writer=_ledger(config),
        )
    except ChroniQuillError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]+[/green] Created {document_path.relative_to(paths.root)}")


@app.command()
def edit(
    document: str = typer.Argument(..., help="Document path (absolute or relative to home)"),
    text: str = typer.Option(None, "--text", "-t", help="Replace the content with this text"),
    file: str = typer.Option(None, "--file", "-f", help="Replace the content with this file's text"),
    name: str = typer.Option(None, "--name", "-n", help="New document name"),
    on_date: str = typer.Option(None, "--date", "-d", help="New date (YYYY-MM-DD)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change without saving"),
    home: str = typer.Option(None, "--home", "-H", help=HOME_HELP),
):
    """Edit a document's content, name or date and save it."""
    if text is not None and file is not None:
        console.print("[red]Error: Cannot provide both --text and --file[/red]")
        raise typer.Exit(code=1)

    config = _load_config(home)
    document_path = Path(document)
    if not document_path.is_absolute():
        document_path = config.home_path / document_path

    new_date = _parse_date(on_date) if on_date else None
    if file is not None:
        source = Path(file)
        if not source.is_file():
            console.print(f"[red]Error: File not found: {source}[/red]")
            raise typer.Exit(code=1)
        text = source.read_text(encoding="utf-8")

    session = DocumentSession(config, ledger_writer=_ledger(config))
    try:
        session.open(document_path)
    except (FileNotFoundError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    try:
        for warning in session.warnings:
            console.print(f"[yellow]Warning: {warning}[/yellow]")

        if text is not None:
            session.edit_content(text)
        if name is not None:
            session.edit_name(name)
        if new_date is not None:
            session.edit_date(new_date)

        flags = session.flags
        table = Table(title=document_path.name)
        table.add_column("Change")
        table.add_column("Pending", justify="center")
        table.add_row("content", "yes" if flags.content_changed else "no")
        table.add_row("name", "yes" if flags.name_changed else "no")
        table.add_row("date", "yes" if flags.date_changed else "no")
        console.print(table)

        if not flags.dirty:
            console.print("[dim]No changes to save[/dim]")
            return
        if dry_run:
            console.print(
                f"[yellow]Dry run: would save as[/yellow] "
                f"{session.effective_name}{config.document_suffix} "
                f"on {session.effective_date.isoformat()}"
            )
            return

        try:
            result = session.save()
        except ChroniQuillError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)

        console.print(f"[green]Saved[/green] {result.final_path.relative_to(config.home_path)}")
    finally:
        session.close()


@app.command()
def settings(
    short_form: Optional[bool] = typer.Option(
        None, "--short-form/--no-short-form", help="Enable or disable short-form documents"
    ),
    long_form: Optional[bool] = typer.Option(
        None, "--long-form/--no-long-form", help="Enable or disable long-form documents"
    ),
    site_url: str = typer.Option(None, "--site-url", help="Public URL of the generated site"),
    home: str = typer.Option(None, "--home", "-H", help=HOME_HELP),
):
    """Show or change the home's settings."""
    config = _load_config(home)
    paths = HomePaths.from_config(config)
    current = ChroniQuillSettings.load(paths.settings_file)

    changed = False
    if short_form is not None:
        current.set_enabled(Category.SHORT_FORM, short_form)
        changed = True
    if long_form is not None:
        current.set_enabled(Category.LONG_FORM, long_form)
        changed = True
    if site_url is not None:
        current.site_url = site_url
        changed = True
    if changed:
        current.save(paths.settings_file)

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("home", current.home_directory or str(paths.root))
    table.add_row("site URL", current.site_url or "-")
    table.add_row("short-form", "enabled" if current.short_form_enabled else "disabled")
    table.add_row("long-form", "enabled" if current.long_form_enabled else "disabled")
    console.print(table)


@app.command()
def log(
    n: int = typer.Option(20, "-n", help="Number of events to show"),
    home: str = typer.Option(None, "--home", "-H", help=HOME_HELP),
):
    """Show the most recent activity ledger events."""
    config = _load_config(home)
    paths = HomePaths.from_config(config)
    events = read_ledger_tail(paths.ledger_file, n=n)

    if not events:
        console.print("[dim]No events recorded[/dim]")
        return

    table = Table(title=f"Last {len(events)} event(s)")
    table.add_column("Time", style="dim")
    table.add_column("Event", style="cyan", no_wrap=True)
    table.add_column("Document")
    for event in events:
        table.add_row(
            event.ts.strftime("%Y-%m-%d %H:%M:%S"),
            event.event_type,
            event.document or "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
