"""CLI for dirwatch."""

import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import apply_env_overrides, find_config, load_watch_config
from .core import ChangeSet, FingerprintMode, WatchConfig
from .errors import ConfigError, WatchRootError
from .snapshot import DirSnapshot
from .utils import format_fingerprint, humanize_size
from .watcher import Watcher


app = typer.Typer(help="""\
Poll directories and report files that were added, deleted or modified
between scans.""")

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_config(
    paths: Optional[List[str]],
    config_file: Optional[Path] = None,
    pattern: Optional[str] = None,
    mtime: Optional[bool] = None,
    interval: Optional[float] = None,
    recursive: Optional[bool] = None,
    all_files: Optional[bool] = None,
) -> WatchConfig:
    """Merge the configuration file (if any) with command-line overrides.

    Command-line values win over DIRWATCH_INTERVAL, which wins over the file.

    Raises:
        ConfigError: If the file is invalid or no roots are given anywhere
    """
    if config_file is None:
        config_file = find_config()
    data = load_watch_config(config_file).model_dump() if config_file else {}

    if paths:
        data["roots"] = list(paths)
    if not data.get("roots"):
        raise ConfigError("No directories to watch; pass PATH or set roots in the config file")

    if pattern is not None:
        data["pattern"] = pattern
    if mtime is not None:
        data["mode"] = FingerprintMode.MTIME if mtime else FingerprintMode.HASH
    if recursive is not None:
        data["recursive"] = recursive
    if all_files:
        data["all_files"] = True

    try:
        config = apply_env_overrides(WatchConfig(**data))
        if interval is not None:
            config = WatchConfig(**{**config.model_dump(), "interval": interval})
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return config


def render_changes(changes: ChangeSet) -> Table:
    """Build a table listing one change per row."""
    table = Table(title=changes.summary(), show_header=True, header_style="bold")
    table.add_column("Change", no_wrap=True)
    table.add_column("Path")

    added, deleted, modified = changes.as_lists()
    for path in added:
        table.add_row("[green]added[/green]", escape(path))
    for path in deleted:
        table.add_row("[red]deleted[/red]", escape(path))
    for path in modified:
        table.add_row("[yellow]modified[/yellow]", escape(path))
    return table


@app.command()
def snapshot(
    paths: Optional[List[str]] = typer.Argument(None, help="Directories to scan"),
    pattern: Optional[str] = typer.Option(None, "--pattern", "-p", help="Regex matched against file names"),
    mtime: Optional[bool] = typer.Option(None, "--mtime/--hash", help="Fingerprint by modification time instead of content"),
    recursive: Optional[bool] = typer.Option(None, "--recursive/--flat", "-r", help="Scan subdirectories"),
    no_ignore: bool = typer.Option(False, "--no-ignore", help="Don't apply ignore rules"),
    all_files: bool = typer.Option(False, "--all", "-a", help="Include names starting with '.'"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a .dirwatch.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Show the current fingerprint of every watched file.

    Examples:
        dirwatch snapshot src tests              # Content digests
        dirwatch snapshot src --mtime -p '\\.py$'  # Timestamps of Python files
    """
    _setup_logging(verbose)
    try:
        config = resolve_config(paths, config_file, pattern, mtime, None, recursive, all_files)
        snap = DirSnapshot.scan(
            config.roots,
            pattern=config.pattern,
            mode=config.mode,
            recursive=config.recursive,
            ignore=None if no_ignore else config.ignore,
            all_files=config.all_files,
        )
    except (ConfigError, WatchRootError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not len(snap):
        console.print("[dim]No files matched[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Fingerprint", no_wrap=True)
    table.add_column("Size", justify="right")
    for path in snap.paths:
        try:
            size = humanize_size(os.stat(path).st_size)
        except OSError:
            size = "-"
        table.add_row(escape(path), format_fingerprint(snap.files[path]), size)

    console.print(table)
    console.print(f"[dim]{len(snap)} files ({config.mode.value})[/dim]")


@app.command()
def watch(
    paths: Optional[List[str]] = typer.Argument(None, help="Directories to watch"),
    pattern: Optional[str] = typer.Option(None, "--pattern", "-p", help="Regex matched against file names"),
    mtime: Optional[bool] = typer.Option(None, "--mtime/--hash", help="Fingerprint by modification time instead of content"),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", min=0, help="Seconds between scans"),
    recursive: Optional[bool] = typer.Option(None, "--recursive/--flat", "-r", help="Watch subdirectories"),
    no_ignore: bool = typer.Option(False, "--no-ignore", help="Don't apply ignore rules"),
    all_files: bool = typer.Option(False, "--all", "-a", help="Include names starting with '.'"),
    once: bool = typer.Option(False, "--once", help="Exit after the first batch of changes"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a .dirwatch.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Watch directories and print changes as they happen.

    Press Ctrl+C to stop.

    Examples:
        dirwatch watch src tests                 # Poll every second
        dirwatch watch src -i 0.5 -p '\\.py$'     # Python files, twice a second
        dirwatch watch data --mtime --once       # Wait for the next change
    """
    _setup_logging(verbose)
    try:
        config = resolve_config(paths, config_file, pattern, mtime, interval, recursive, all_files)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    def on_change(added: List[str], deleted: List[str], modified: List[str]) -> bool:
        changes = ChangeSet(
            added=frozenset(added),
            deleted=frozenset(deleted),
            modified=frozenset(modified),
        )
        console.print(render_changes(changes))
        return not once

    watcher = Watcher.from_config(config, on_change, use_ignore=not no_ignore)
    console.print(
        f"[cyan]Watching[/cyan] {escape(', '.join(config.roots))} "
        f"[dim]({config.mode.value}, every {config.interval}s, Ctrl+C to stop)[/dim]"
    )
    try:
        watcher.run()
    except WatchRootError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("[dim]Stopped watching[/dim]")
        return

    console.print(f"[dim]Stopped after {watcher.iterations} scans[/dim]")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
