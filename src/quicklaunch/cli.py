"""Typer-based CLI for quicklaunch."""

import asyncio
import logging
from typing import Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .config import LauncherConfig, StaticConfigProvider, load_config
from .models.search import Payload, RankedResults, SearchResult
from .orchestrator import QueryOrchestrator
from .search.engine import SearchEngine
from .search.sources import (
    ApplicationSource,
    ClipboardHistory,
    CommandSource,
    FileSource,
    RecentFiles,
)

app = typer.Typer(
    name="quicklaunch",
    help="quicklaunch - keystroke-driven launcher query engine",
    add_completion=False,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(config_path: Optional[str]) -> LauncherConfig:
    try:
        return load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _build_engine(
    config: LauncherConfig,
    include_apps: bool,
    include_files: bool,
    clipboard_entries: Sequence[str] = (),
    recent_paths: Sequence[str] = (),
) -> SearchEngine:
    command_source = CommandSource()
    clipboard = ClipboardHistory()
    for text in reversed(list(clipboard_entries)):
        clipboard.add(text)
    recent_files = RecentFiles(recent_paths)

    sources = [command_source]
    if include_apps:
        sources.append(ApplicationSource())
    if include_files:
        sources.append(FileSource())
    sources.extend([recent_files, clipboard])
    return SearchEngine(
        StaticConfigProvider(config),
        sources=sources,
        command_source=command_source,
        clipboard=clipboard,
        recent_files=recent_files,
    )


def _highlight(result: SearchResult) -> Text:
    title = Text(result.title)
    for index in result.matched_indices:
        title.stylize("bold underline", index, index + 1)
    return title


def _render(ranked: RankedResults, query: str) -> None:
    for warning in ranked.warnings:
        console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")

    if not ranked.results:
        console.print(f"[dim]No results for {query!r}[/dim]")
        return

    for group in ranked.groups:
        table = Table(title=group.label or None, show_header=False, title_justify="left")
        table.add_column("Title", style="cyan")
        table.add_column("Detail", style="dim")
        table.add_column("Type", style="magenta")
        table.add_column("Score", style="yellow", justify="right")
        for result in group.results:
            table.add_row(
                _highlight(result),
                result.subtitle,
                result.result_type.value,
                f"{result.score:.2f}",
            )
        console.print(table)


class ConsoleSink:
    """Execution sink that prints payloads instead of launching them."""

    def __init__(self):
        self.executed: list[Payload] = []

    def execute(self, payload: Payload) -> None:
        self.executed.append(payload)
        detail = f"{payload.target} {payload.args}".rstrip()
        console.print(f"[green]{payload.action.value}[/green] {escape(detail)}")


@app.command()
def search(
    query: str = typer.Argument(..., help="Text as typed into the launcher"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Override max results"),
    apps: bool = typer.Option(True, "--apps/--no-apps", help="Include installed applications"),
    files: bool = typer.Option(True, "--files/--no-files", help="Include files from configured directories"),
    clip: Optional[list[str]] = typer.Option(None, "--clip", help="Clipboard history entry, most recent first (repeatable)"),
    recent: Optional[list[str]] = typer.Option(None, "--recent", help="Recently opened file, most recent first (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Run one query and print the ranked, grouped results."""
    configure_logging(verbose)
    config = _load(config_path)
    if limit is not None:
        if limit <= 0:
            console.print("[red]Error: --limit must be positive[/red]")
            raise typer.Exit(code=1)
        settings = config.settings.model_copy(update={"max_results": limit})
        config = config.model_copy(update={"settings": settings})

    engine = _build_engine(config, apps, files, clip or (), recent or ())
    ranked = asyncio.run(engine.search(query))
    _render(ranked, query)


@app.command()
def run(
    keyword: str = typer.Argument(..., help="Command keyword"),
    param: Optional[str] = typer.Argument(None, help="Parameter for commands that take one"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Resolve a command (optionally with a parameter) and print its payload."""
    configure_logging(verbose)
    config = _load(config_path)
    engine = _build_engine(config, include_apps=False, include_files=False)
    sink = ConsoleSink()

    async def _drive() -> Optional[Payload]:
        orchestrator = QueryOrchestrator(engine, sink, debounce_seconds=0)
        orchestrator.submit(keyword)
        await orchestrator.wait()
        best = orchestrator.results.best
        if best is None or best.command is None or best.command.keyword.lower() != keyword.lower():
            return None
        if param is not None and orchestrator.tab():
            orchestrator.update_param(param)
        return orchestrator.enter()

    payload = asyncio.run(_drive())
    if payload is None:
        console.print(f"[red]Error: no command with keyword {keyword!r}[/red]")
        raise typer.Exit(code=1)


@app.command()
def commands(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
):
    """List configured and built-in commands."""
    config = _load(config_path)
    source = CommandSource()

    table = Table(title="Commands")
    table.add_column("Keyword", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Type", style="magenta")
    table.add_column("Group", style="green")
    table.add_column("Template", style="dim")

    for command in source.commands(config):
        candidate = source.candidate_for(config, command)
        table.add_row(
            command.keyword,
            command.display_name,
            command.type.value,
            candidate.group_label,
            command.path_template,
        )
    console.print(table)


@app.command()
def version():
    """Show quicklaunch version."""
    from . import __version__
    console.print(f"quicklaunch v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
