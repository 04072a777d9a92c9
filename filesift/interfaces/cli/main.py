"""
CLI Main - Typer-based command-line interface.

Usage:
    filesift search "report" --type documents
    filesift page "report" --offset 1000
    filesift note set "C:\\docs\\budget.xlsx" "Q3 numbers"
    filesift history
    filesift serve
"""

from __future__ import annotations

import asyncio
from datetime import datetime

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from filesift.config import FileSiftError, get_settings, setup_logging
from filesift.domains.filtering import (
    AudioDurationFilter,
    DateRangeFilter,
    FileTypeFilter,
    ImageDimensionFilter,
    PathRangeFilter,
    SizeRangeFilter,
)
from filesift.domains.history import HistoryType
from filesift.domains.search import (
    ResultEntry,
    SearchMode,
    SearchOptions,
    SearchResult,
    Taxonomy,
    notes_snippet,
)
from filesift.domains.search.grouper import GROUP_ORDER
from filesift.interfaces import wiring

app = typer.Typer(
    name="filesift",
    help="FileSift - Filename and notes search over an Everything index",
    add_completion=False,
)
note_app = typer.Typer(help="Read and write file notes")
app.add_typer(note_app, name="note")
console = Console()

_GROUP_TITLES = {
    Taxonomy.NOTES: "Notes matches",
    Taxonomy.FOLDER: "Folders",
    Taxonomy.FILE: "Files",
    Taxonomy.OTHER: "Other",
}


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """FileSift command-line tools."""
    setup_logging("DEBUG" if verbose else get_settings().log_level)


@app.command()
def search(
    keyword: str = typer.Argument(..., help="Search keyword; * and ? wildcards allowed"),
    file_type: FileTypeFilter = typer.Option(FileTypeFilter.ALL, "--type", "-t"),
    scope: PathRangeFilter = typer.Option(PathRangeFilter.ALL_DRIVES, "--scope", "-s"),
    path: str | None = typer.Option(None, "--path", "-p", help="Folder being browsed"),
    date: DateRangeFilter = typer.Option(DateRangeFilter.ALL, "--date"),
    date_from: datetime | None = typer.Option(None, "--from", help="Custom date start"),
    date_to: datetime | None = typer.Option(None, "--to", help="Custom date end"),
    size: SizeRangeFilter = typer.Option(SizeRangeFilter.ALL, "--size"),
    size_min: int | None = typer.Option(None, "--min-bytes", min=0),
    size_max: int | None = typer.Option(None, "--max-bytes", min=0),
    image_size: ImageDimensionFilter = typer.Option(ImageDimensionFilter.ALL, "--image-size"),
    duration: AudioDurationFilter = typer.Option(AudioDurationFilter.ALL, "--duration"),
    mode: SearchMode = typer.Option(SearchMode.FILE_NAME, "--mode", "-m"),
    notes: bool = typer.Option(True, "--notes/--no-notes", help="Also match notes"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Search file names and notes."""
    options = SearchOptions(
        file_type=file_type,
        path_range=scope,
        date_range=date,
        date_from=date_from,
        date_to=date_to,
        size_range=size,
        size_min=size_min,
        size_max=size_max,
        image_size=image_size,
        duration=duration,
        mode=mode,
        search_notes=notes,
    )
    asyncio.run(_search_async(keyword, options, path, as_json))


async def _search_async(
    keyword: str, options: SearchOptions, current_path: str | None, as_json: bool
) -> None:
    """Async search implementation."""
    settings = get_settings()
    index = wiring.build_index_client(settings)
    annotations = wiring.build_annotation_repository(settings)
    orchestrator = wiring.build_orchestrator(settings, index, annotations)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Connecting to Everything...", total=None)
            if not await index.initialize():
                console.print(
                    f"[red]Error:[/red] Everything is not answering at {settings.everything_url}"
                )
                raise typer.Exit(1)

            found = 0

            def on_page(page: SearchResult) -> None:
                nonlocal found
                found += len(page.items)
                progress.update(task, description=f"Searching... {found} matches")

            progress.update(task, description="Searching...")
            result = await orchestrator.perform_search(
                keyword,
                options,
                current_path,
                search_names=options.search_names,
                search_notes=options.search_notes,
                annotation_lookup=wiring.notes_lookup(annotations),
                progress_callback=on_page,
            )

    except FileSiftError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await index.close()

    if result.keyword:
        wiring.build_history(settings).add(result.keyword, HistoryType.SEARCH)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return
    _print_grouped(result)


@app.command()
def page(
    keyword: str = typer.Argument(..., help="Search keyword"),
    offset: int = typer.Option(..., "--offset", "-o", min=0, help="Raw index offset"),
    file_type: FileTypeFilter = typer.Option(FileTypeFilter.ALL, "--type", "-t"),
    scope: PathRangeFilter = typer.Option(PathRangeFilter.ALL_DRIVES, "--scope", "-s"),
    path: str | None = typer.Option(None, "--path", "-p", help="Folder being browsed"),
) -> None:
    """Fetch one further page of filename matches."""
    options = SearchOptions(file_type=file_type, path_range=scope)
    asyncio.run(_page_async(keyword, offset, options, path))


async def _page_async(
    keyword: str, offset: int, options: SearchOptions, current_path: str | None
) -> None:
    settings = get_settings()
    index = wiring.build_index_client(settings)
    orchestrator = wiring.build_orchestrator(
        settings, index, wiring.build_annotation_repository(settings)
    )

    try:
        if not await index.initialize():
            console.print("[red]Error:[/red] Everything is not running")
            raise typer.Exit(1)
        result = await orchestrator.load_more(keyword, offset, options, current_path)
    finally:
        await index.close()

    _print_grouped(result)
    if result.has_more:
        console.print(
            f"[dim]More available: filesift page {result.keyword!r} "
            f"--offset {result.offset}[/dim]"
        )


@note_app.command("set")
def note_set(
    path: str = typer.Argument(..., help="File or folder path"),
    text: str = typer.Argument(..., help="Note text; empty clears the note"),
) -> None:
    """Attach a note to a path."""
    repo = wiring.build_annotation_repository(get_settings())
    try:
        repo.set_notes(path, text)
    except FileSiftError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    if text.strip():
        console.print(f"[green]Saved note for[/green] {path}")
    else:
        console.print(f"[yellow]Cleared note for[/yellow] {path}")


@note_app.command("show")
def note_show(path: str = typer.Argument(..., help="File or folder path")) -> None:
    """Print the note attached to a path."""
    notes = wiring.build_annotation_repository(get_settings()).get_notes(path)
    if not notes:
        console.print(f"[dim]No note for {path}[/dim]")
        raise typer.Exit(1)
    console.print(notes)


@app.command()
def history(
    clear: bool = typer.Option(False, "--clear", help="Forget all entries"),
) -> None:
    """Show recent searches."""
    store = wiring.build_history(get_settings())
    if clear:
        store.clear()
        console.print("[green]History cleared[/green]")
        return

    items = store.get_recent()
    if not items:
        console.print("[dim]No search history[/dim]")
        return

    table = Table(title="Recent searches")
    table.add_column("When", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Query")
    for item in items:
        table.add_row(item.timestamp.strftime("%Y-%m-%d %H:%M"), item.type.value, item.content)
    console.print(table)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting FileSift API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "filesift.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from filesift import __version__

    console.print(f"FileSift v{__version__}")


def _print_grouped(result: SearchResult) -> None:
    if not result.items:
        console.print(f"[yellow]No results for[/yellow] {result.keyword!r}")
        return

    groups = result.grouped_items or {Taxonomy.FILE: result.items}
    for taxonomy in (*GROUP_ORDER, Taxonomy.OTHER):
        entries = groups.get(taxonomy)
        if entries:
            console.print(_entries_table(_GROUP_TITLES[taxonomy], entries))

    console.print(f"[dim]{len(result.items)} result(s) for {result.keyword!r}[/dim]")


def _entries_table(title: str, entries: list[ResultEntry]) -> Table:
    table = Table(title=f"{title} ({len(entries)})", title_justify="left")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Modified", style="dim")
    table.add_column("Notes", style="green")
    table.add_column("Path", style="dim", overflow="fold")

    for entry in entries:
        table.add_row(
            entry.name,
            entry.type_label,
            _format_size(entry.size_bytes),
            entry.modified_at.strftime("%Y-%m-%d %H:%M") if entry.modified_at else "",
            notes_snippet(entry.notes),
            entry.path,
        )
    return table


def _format_size(size_bytes: int) -> str:
    """Human-readable size; unknown sizes render blank."""
    if size_bytes < 0:
        return ""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
