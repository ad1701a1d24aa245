"""CLI interface for tidymac."""

import logging
from typing import Optional

import typer

from tidymac import __version__
from tidymac.cleaner import Cleaner
from tidymac.config import DEFAULT_SETTINGS, MB
from tidymac.display import (
    confirm_action,
    console,
    show_big_files,
    show_catalog,
    show_clean_result,
    show_clean_summary,
    show_duplicates,
    show_old_files,
    show_scanning_status,
    show_targets,
)
from tidymac.scanner import Scanner
from tidymac.sudo import ElevationError, SudoSession
from tidymac.targets import get_default_targets, get_target
from tidymac.utils import format_bytes

# Create Typer app
app = typer.Typer(
    name="tidymac",
    help="Interactive Mac disk cleanup - caches, big files, duplicates, old files",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tidymac version {__version__}")
        raise typer.Exit()


def setup_logging(verbosity: int) -> None:
    """Configure logging from the -V count."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")


def _new_session() -> SudoSession:
    return SudoSession(
        timeout=DEFAULT_SETTINGS.sudo_timeout,
        keepalive_interval=DEFAULT_SETTINGS.sudo_keepalive_interval,
        console=console,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-V",
        count=True,
        help="Increase log verbosity (-V info, -VV debug).",
    ),
) -> None:
    """tidymac - interactive Mac disk cleanup."""
    setup_logging(verbose)
    # If no command specified, launch menu
    if ctx.invoked_subcommand is None:
        ctx.invoke(menu)


@app.command()
def menu() -> None:
    """Interactive menu-driven cleanup (default)."""
    from tidymac.menu import start_menu

    start_menu(console=console)


@app.command(name="list")
def list_targets() -> None:
    """List all cleanup targets."""
    console.print("[bold]Available Targets[/bold]\n")
    show_catalog(get_default_targets())
    console.print("[dim]Run [bold]tidymac scan -t <target>[/bold] to measure a target[/dim]")


def _select_targets(target_ids: Optional[list[str]], select_all: bool):
    targets = get_default_targets()
    if select_all or not target_ids:
        for target in targets:
            target.selected = True
        return targets

    for target_id in target_ids:
        target = get_target(targets, target_id)
        if target is None:
            console.print(f"[red]Unknown target: {target_id}[/red]")
            console.print("[dim]Run [bold]tidymac list[/bold] to see available targets[/dim]")
            raise typer.Exit(1)
        target.selected = True
    return targets


@app.command()
def scan(
    target: Optional[list[str]] = typer.Option(
        None, "--target", "-t", help="Target to measure (repeatable, default: all)"
    ),
) -> None:
    """Measure how much space cleanup targets use."""
    targets = _select_targets(target, select_all=False)

    with _new_session() as session:
        scanner = Scanner(session)
        with show_scanning_status("Calculating sizes...") as status:
            scanner.scan_targets(targets, progress=status.update)

    show_targets([t for t in targets if t.selected], show_size=True)


@app.command()
def clean(
    target: Optional[list[str]] = typer.Option(
        None, "--target", "-t", help="Target to clean (repeatable)"
    ),
    all_targets: bool = typer.Option(False, "--all", help="Clean every target"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Clean targets and report the space actually freed."""
    if not target and not all_targets:
        console.print("[red]Error: Specify --target or --all[/red]")
        console.print("  tidymac clean --target npm_cache   # Clean one target")
        console.print("  tidymac clean --all                # Clean every target")
        raise typer.Exit(1)

    targets = _select_targets(target, all_targets)

    with _new_session() as session:
        scanner = Scanner(session)
        cleaner = Cleaner(session)

        with show_scanning_status("Calculating sizes...") as status:
            scanner.scan_targets(targets, progress=status.update)

        selected = [t for t in targets if t.selected]
        show_targets(selected, show_size=True)

        if not yes:
            console.print()
            if not confirm_action("Proceed with cleanup?"):
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0)

        try:
            with show_scanning_status("Starting cleanup...") as status:
                results, total_saved = cleaner.clean_targets(targets, progress=status.update)
        except ElevationError as e:
            console.print(f"[red]Cleanup aborted: {e}[/red]")
            raise typer.Exit(1)

    for result in results:
        show_clean_result(result)
    show_clean_summary(results, total_saved)


@app.command(name="big-files")
def big_files(
    min_size_mb: int = typer.Option(500, "--min-size-mb", help="Minimum file size in MB"),
) -> None:
    """Find large files (report only)."""
    min_size = min_size_mb * MB
    with _new_session() as session, show_scanning_status("Scanning for large files...") as status:
        files = Scanner(session).scan_big_files(min_size, progress=status.update)

    if not files:
        console.print("[yellow]No large files found.[/yellow]")
        return
    show_big_files(files, set(), min_size)


@app.command()
def duplicates() -> None:
    """Find duplicate files (report only)."""
    with _new_session() as session, show_scanning_status("Scanning for duplicates...") as status:
        groups, total = Scanner(session).scan_duplicates(progress=status.update)

    if not groups:
        console.print("[yellow]No duplicate files found.[/yellow]")
        return
    show_duplicates(groups, set(), total)
    console.print(f"[dim]{len(groups)} groups, {format_bytes(total)} reclaimable[/dim]")


@app.command(name="old-files")
def old_files(
    days: int = typer.Option(180, "--days", help="Days since last modification"),
) -> None:
    """Find files not modified in a long time (report only)."""
    with _new_session() as session, show_scanning_status("Scanning for old files...") as status:
        files = Scanner(session).scan_old_files(days, progress=status.update)

    if not files:
        console.print("[yellow]No old files found.[/yellow]")
        return
    show_old_files(files, set(), days)


if __name__ == "__main__":
    app()
