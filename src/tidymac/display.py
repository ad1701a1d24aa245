"""Rich terminal display for tidymac."""

from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.table import Table

from tidymac.models import BigFile, CleanResult, CleanupTarget, DuplicateGroup, OldFile
from tidymac.targets import group_by_category
from tidymac.utils import format_bytes, shorten_path

console = Console()

# Longest path shown in result tables
PATH_WIDTH = 60


def check_mark(selected: bool) -> str:
    """Get a selection marker."""
    return "[green]✓[/green]" if selected else " "


def show_targets(
    targets: list[CleanupTarget],
    show_size: bool = False,
    out: Console | None = None,
) -> None:
    """Display the target list, numbered in display order."""
    out = out or console
    table = Table(title="Cleanup Targets", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=3)
    table.add_column("Target")
    table.add_column("Description", style="dim")
    if show_size:
        table.add_column("Size", justify="right")

    for i, target in enumerate(ordered_targets(targets), 1):
        name = target.name
        if target.requires_sudo:
            name += " [yellow](sudo)[/yellow]"
        row = [str(i), check_mark(target.selected), name, target.description]
        if show_size:
            row.append(format_bytes(target.size) if target.selected else "")
        table.add_row(*row)

    out.print(table)

    if show_size:
        total = sum(t.size for t in targets if t.selected)
        out.print(f"[bold]Selected total: {format_bytes(total)}[/bold]")


def ordered_targets(targets: list[CleanupTarget]) -> list[CleanupTarget]:
    """Targets in the order they are listed on screen."""
    return [t for group in group_by_category(targets).values() for t in group]


def show_catalog(targets: list[CleanupTarget]) -> None:
    """Display the catalog grouped by category."""
    for category, members in group_by_category(targets).items():
        console.print(f"[bold cyan]{category}:[/bold cyan]")
        for target in members:
            sudo = " [yellow](sudo)[/yellow]" if target.requires_sudo else ""
            console.print(f"  • [bold]{target.id}[/bold] - {target.name}{sudo}")
        console.print()


def show_big_files(
    files: list[BigFile],
    selected: set[str],
    min_size: int,
    out: Console | None = None,
) -> None:
    """Display big-file scan results."""
    out = out or console
    table = Table(title=f"Files larger than {format_bytes(min_size)}", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=3)
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Modified")

    for i, f in enumerate(files, 1):
        table.add_row(
            str(i),
            check_mark(f.path in selected),
            shorten_path(f.path, PATH_WIDTH),
            format_bytes(f.size),
            f.mod_time.strftime("%Y-%m-%d"),
        )

    out.print(table)
    total = sum(f.size for f in files if f.path in selected)
    out.print(f"[bold]{len(selected)} selected ({format_bytes(total)})[/bold]")


def show_duplicates(
    groups: list[DuplicateGroup],
    selected: set[str],
    total: int,
    out: Console | None = None,
) -> None:
    """Display duplicate groups with the copy that will be kept."""
    out = out or console
    table = Table(title="Duplicate Files", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=3)
    table.add_column("Copies", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Reclaimable", justify="right")
    table.add_column("Keep / [red]delete[/red]")

    for i, group in enumerate(groups, 1):
        paths = [f"[green]{shorten_path(group.keep, PATH_WIDTH)}[/green]"]
        paths += [f"[red]{shorten_path(p, PATH_WIDTH)}[/red]" for p in group.extras]
        table.add_row(
            str(i),
            check_mark(group.key in selected),
            str(len(group.files)),
            format_bytes(group.size),
            format_bytes(group.reclaimable),
            "\n".join(paths),
        )

    out.print(table)
    picked = sum(g.reclaimable for g in groups if g.key in selected)
    out.print(
        f"[bold]Reclaimable: {format_bytes(total)}, selected: {format_bytes(picked)}[/bold]"
    )


def show_old_files(
    files: list[OldFile],
    selected: set[str],
    days: int,
    out: Console | None = None,
) -> None:
    """Display old-file scan results."""
    out = out or console
    table = Table(title=f"Files not modified in {days} days", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=3)
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Last modified")

    for i, f in enumerate(files, 1):
        table.add_row(
            str(i),
            check_mark(f.path in selected),
            shorten_path(f.path, PATH_WIDTH),
            format_bytes(f.size),
            f.last_access.strftime("%Y-%m-%d"),
        )

    out.print(table)
    total = sum(f.size for f in files if f.path in selected)
    out.print(f"[bold]{len(selected)} selected ({format_bytes(total)})[/bold]")


def show_clean_result(result: CleanResult) -> None:
    """Display result of a single cleanup operation."""
    if result.success:
        console.print(f"  [green]✓[/green] {result.target}: {format_bytes(result.actual)} freed")
    else:
        console.print(f"  [red]✗[/red] {result.target}: {result.error}")


def show_clean_summary(
    results: list[CleanResult],
    total_saved: int,
    out: Console | None = None,
) -> None:
    """Display the end-of-run report."""
    out = out or console
    success_count = sum(1 for r in results if r.success)
    failures = [r for r in results if not r.success]

    out.print()
    out.print("[bold green]Cleanup Complete![/bold green]")
    out.print()

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Space freed", f"[bold green]{format_bytes(total_saved)}[/bold green]")
    table.add_row("Requested", format_bytes(sum(r.requested for r in results)))
    table.add_row("Targets cleaned", str(success_count))
    if failures:
        table.add_row("[red]Failed[/red]", str(len(failures)))
    out.print(table)

    if failures:
        out.print(
            Panel(
                "\n".join(f"{r.target}: {r.error}" for r in failures),
                title="[bold red]Errors[/bold red]",
                border_style="red",
            )
        )


def show_freed(total_deleted: int, out: Console | None = None) -> None:
    """Display bytes freed by a file deletion pass."""
    out = out or console
    out.print()
    out.print(
        Panel(
            f"[bold green]Freed {format_bytes(total_deleted)}[/bold green]",
            border_style="green",
            expand=False,
        )
    )


def show_scanning_status(message: str = "Scanning...") -> Status:
    """Create a spinner whose text follows scan progress."""
    return console.status(message)


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
