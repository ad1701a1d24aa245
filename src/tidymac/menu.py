"""Menu-driven interactive interface."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable

from rich.console import Console
from rich.panel import Panel

from tidymac.cleaner import Cleaner
from tidymac.config import BIG_FILE_PRESETS, DEFAULT_SETTINGS, OLD_FILE_PRESETS, Settings
from tidymac.display import (
    ordered_targets,
    show_big_files,
    show_clean_summary,
    show_duplicates,
    show_freed,
    show_old_files,
    show_targets,
)
from tidymac.models import BigFile, CleanupTarget, DuplicateGroup, OldFile
from tidymac.scanner import Scanner
from tidymac.sudo import ElevationError, SudoSession
from tidymac.targets import get_default_targets, has_selection
from tidymac.utils import format_bytes


class MenuState(Enum):
    """States for the menu state machine."""

    MAIN = auto()
    CLEANUP = auto()
    SCAN_RESULTS = auto()
    BIG_FILES = auto()
    DUPLICATES = auto()
    OLD_FILES = auto()


def parse_selection(text: str, count: int) -> list[int]:
    """
    Parse "3", "1,4,7" or "2-5" into zero-based indices below ``count``.

    Out-of-range and malformed parts are ignored.
    """
    indices: list[int] = []
    for part in text.replace(" ", "").split(","):
        if not part:
            continue
        if "-" in part:
            start, _, end = part.partition("-")
            if not (start.isdigit() and end.isdigit()):
                continue
            numbers = range(int(start), int(end) + 1)
        elif part.isdigit():
            numbers = [int(part)]
        else:
            continue
        indices.extend(n - 1 for n in numbers if 1 <= n <= count)
    return indices


@dataclass
class MenuSession:
    """Interactive cleanup session."""

    console: Console
    settings: Settings = field(default_factory=lambda: DEFAULT_SETTINGS)
    state: MenuState = MenuState.MAIN
    targets: list[CleanupTarget] = field(default_factory=get_default_targets)
    big_files: list[BigFile] = field(default_factory=list)
    big_file_min_size: int = 0
    duplicate_groups: list[DuplicateGroup] = field(default_factory=list)
    duplicate_total: int = 0
    old_files: list[OldFile] = field(default_factory=list)
    old_file_days: int = 0
    # Selection keyed by path (files) or group key (duplicates)
    selected: set[str] = field(default_factory=set)

    def __post_init__(self):
        """Create the shared sudo session, scanner and cleaner."""
        self.session = SudoSession(
            timeout=self.settings.sudo_timeout,
            keepalive_interval=self.settings.sudo_keepalive_interval,
            console=self.console,
        )
        self.scanner = Scanner(self.session, self.settings)
        self.cleaner = Cleaner(self.session, self.settings)

    def run(self) -> None:
        """Main menu loop."""
        self.console.print(
            Panel("[bold blue]tidymac[/bold blue]\n[dim]Mac Disk Cleanup[/dim]", expand=False)
        )

        try:
            while True:
                try:
                    if not self._handle_state():
                        break
                except KeyboardInterrupt:
                    self.console.print("\n[dim]Goodbye![/dim]")
                    break
        finally:
            self.session.close()

    def _handle_state(self) -> bool:
        """Handle current state, return False to exit."""
        if self.state == MenuState.MAIN:
            return self._main_menu()
        elif self.state == MenuState.CLEANUP:
            return self._cleanup_menu()
        elif self.state == MenuState.SCAN_RESULTS:
            return self._scan_results_menu()
        elif self.state == MenuState.BIG_FILES:
            return self._big_files_menu()
        elif self.state == MenuState.DUPLICATES:
            return self._duplicates_menu()
        elif self.state == MenuState.OLD_FILES:
            return self._old_files_menu()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Main Menu
    # ─────────────────────────────────────────────────────────────────────────

    def _main_menu(self) -> bool:
        """Display and handle main menu."""
        self.console.print("\n[bold]Main Menu[/bold]\n")
        self.console.print("1. Clean caches, logs and temp files")
        self.console.print("2. Find large files")
        self.console.print("3. Find duplicate files")
        self.console.print("4. Find old files")
        self.console.print("0. Exit")

        choice = self._get_choice(4)

        if choice == 0:
            self.console.print("\n[dim]Goodbye![/dim]")
            return False
        elif choice == 1:
            self.state = MenuState.CLEANUP
        elif choice == 2:
            self.state = MenuState.BIG_FILES
        elif choice == 3:
            self.state = MenuState.DUPLICATES
        elif choice == 4:
            self.state = MenuState.OLD_FILES

        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Cleanup Targets
    # ─────────────────────────────────────────────────────────────────────────

    def _cleanup_menu(self) -> bool:
        """Select targets, then scan them."""
        show_targets(self.targets, out=self.console)
        self.console.print(
            "[dim]Numbers toggle (e.g. 1,3 or 2-5), a=all, n=none, s=scan selected, b=back[/dim]"
        )
        command = self.console.input("\n[bold cyan]Select:[/bold cyan] ").strip().lower()

        if command == "b":
            self.state = MenuState.MAIN
        elif command == "s":
            if not has_selection(self.targets):
                self.console.print("[yellow]Nothing selected.[/yellow]")
                return True
            with self.console.status("Calculating sizes...") as status:
                self.scanner.scan_targets(self.targets, progress=status.update)
            self.state = MenuState.SCAN_RESULTS
        else:
            self._toggle_targets(command)
        return True

    def _scan_results_menu(self) -> bool:
        """Review measured sizes, adjust the selection and clean."""
        show_targets(self.targets, show_size=True, out=self.console)
        self.console.print("[dim]Numbers toggle, r=rescan, c=clean selected, b=back[/dim]")
        command = self.console.input("\n[bold cyan]Select:[/bold cyan] ").strip().lower()

        if command == "b":
            self.state = MenuState.CLEANUP
        elif command == "r":
            with self.console.status("Calculating sizes...") as status:
                self.scanner.scan_targets(self.targets, progress=status.update)
        elif command == "c":
            if has_selection(self.targets):
                self._do_clean_targets()
        else:
            self._toggle_targets(command)
        return True

    def _toggle_targets(self, command: str) -> None:
        ordered = ordered_targets(self.targets)
        if command == "a":
            for target in ordered:
                target.selected = True
        elif command == "n":
            for target in ordered:
                target.selected = False
        else:
            for i in parse_selection(command, len(ordered)):
                ordered[i].selected = not ordered[i].selected

    def _do_clean_targets(self) -> None:
        selected = [t for t in self.targets if t.selected]
        total = sum(t.size for t in selected)
        self.console.print(f"\n[bold]About to clean {len(selected)} targets ({format_bytes(total)}):[/bold]")
        for target in selected:
            self.console.print(f"  • {target.name} ({format_bytes(target.size)})")

        if not self._confirm("Proceed with cleanup?"):
            return

        try:
            with self.console.status("Starting cleanup...") as status:
                results, total_saved = self.cleaner.clean_targets(self.targets, progress=status.update)
        except ElevationError as e:
            self.console.print(f"[red]Cleanup aborted: {e}[/red]")
            self._pause()
            return

        show_clean_summary(results, total_saved, out=self.console)
        self._pause()
        self.state = MenuState.MAIN

    # ─────────────────────────────────────────────────────────────────────────
    # Big Files
    # ─────────────────────────────────────────────────────────────────────────

    def _big_files_menu(self) -> bool:
        """Pick a threshold, scan, select and delete."""
        self.console.print("\n[bold]Find Large Files[/bold]\n")
        for i, size in enumerate(BIG_FILE_PRESETS, 1):
            self.console.print(f"{i}. Larger than {format_bytes(size)}")
        self.console.print("0. Back")

        choice = self._get_choice(len(BIG_FILE_PRESETS))
        if choice == 0:
            self.state = MenuState.MAIN
            return True

        self.big_file_min_size = BIG_FILE_PRESETS[choice - 1]
        with self.console.status("Scanning for large files...") as status:
            self.big_files = self.scanner.scan_big_files(self.big_file_min_size, progress=status.update)

        if not self.big_files:
            self.console.print("[yellow]No large files found.[/yellow]")
            self._pause()
            self.state = MenuState.MAIN
            return True

        self.selected = set()
        keys = [f.path for f in self.big_files]
        if self._select_items(
            keys,
            lambda: show_big_files(self.big_files, self.selected, self.big_file_min_size, out=self.console),
        ):
            deleted = self.cleaner.delete_big_files(self.big_files, self.selected, progress=self._progress)
            show_freed(deleted, out=self.console)
            self._pause()

        self.big_files = []
        self.state = MenuState.MAIN
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Duplicates
    # ─────────────────────────────────────────────────────────────────────────

    def _duplicates_menu(self) -> bool:
        """Scan for duplicates, select groups and delete extra copies."""
        self.console.print("\n[bold]Find Duplicate Files[/bold]\n")
        self.console.print("Searches: " + ", ".join(self.settings.duplicate_roots))
        self.console.print("[dim]Only files larger than 1 MB are compared.[/dim]")
        self.console.print("1. Start scan")
        self.console.print("0. Back")

        if self._get_choice(1) == 0:
            self.state = MenuState.MAIN
            return True

        with self.console.status("Scanning for duplicates...") as status:
            self.duplicate_groups, self.duplicate_total = self.scanner.scan_duplicates(progress=status.update)

        if not self.duplicate_groups:
            self.console.print("[yellow]No duplicate files found.[/yellow]")
            self._pause()
            self.state = MenuState.MAIN
            return True

        self.selected = set()
        keys = [g.key for g in self.duplicate_groups]
        if self._select_items(
            keys,
            lambda: show_duplicates(
                self.duplicate_groups, self.selected, self.duplicate_total, out=self.console
            ),
        ):
            deleted = self.cleaner.delete_duplicates(self.duplicate_groups, self.selected, progress=self._progress)
            show_freed(deleted, out=self.console)
            self._pause()

        self.duplicate_groups = []
        self.state = MenuState.MAIN
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Old Files
    # ─────────────────────────────────────────────────────────────────────────

    def _old_files_menu(self) -> bool:
        """Pick an age, scan, select and delete."""
        self.console.print("\n[bold]Find Old Files[/bold]\n")
        for i, days in enumerate(OLD_FILE_PRESETS, 1):
            self.console.print(f"{i}. Not modified in {days} days")
        self.console.print("0. Back")

        choice = self._get_choice(len(OLD_FILE_PRESETS))
        if choice == 0:
            self.state = MenuState.MAIN
            return True

        self.old_file_days = OLD_FILE_PRESETS[choice - 1]
        with self.console.status("Scanning for old files...") as status:
            self.old_files = self.scanner.scan_old_files(self.old_file_days, progress=status.update)

        if not self.old_files:
            self.console.print("[yellow]No old files found.[/yellow]")
            self._pause()
            self.state = MenuState.MAIN
            return True

        self.selected = set()
        keys = [f.path for f in self.old_files]
        if self._select_items(
            keys,
            lambda: show_old_files(self.old_files, self.selected, self.old_file_days, out=self.console),
        ):
            deleted = self.cleaner.delete_old_files(self.old_files, self.selected, progress=self._progress)
            show_freed(deleted, out=self.console)
            self._pause()

        self.old_files = []
        self.state = MenuState.MAIN
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Input Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _select_items(self, keys: list[str], render: Callable[[], None]) -> bool:
        """
        Let the user toggle items in ``self.selected`` by number.

        Returns:
            True if the user confirmed deletion of a non-empty selection
        """
        while True:
            render()
            self.console.print("[dim]Numbers toggle (e.g. 1,3 or 2-5), a=all, n=none, d=delete selected, b=back[/dim]")
            command = self.console.input("\n[bold cyan]Select:[/bold cyan] ").strip().lower()

            if command == "b":
                return False
            elif command == "a":
                self.selected = set(keys)
            elif command == "n":
                self.selected = set()
            elif command == "d":
                if not self.selected:
                    self.console.print("[yellow]Nothing selected.[/yellow]")
                    continue
                if self._confirm(f"Delete {len(self.selected)} selected item(s)?"):
                    return True
            else:
                for i in parse_selection(command, len(keys)):
                    self.selected ^= {keys[i]}

    def _get_choice(self, max_choice: int) -> int:
        """Get menu choice from user."""
        while True:
            try:
                choice = self.console.input("\n[bold cyan]Select:[/bold cyan] ").strip()
                if not choice:
                    continue
                num = int(choice)
                if 0 <= num <= max_choice:
                    return num
                self.console.print(f"[yellow]Please enter 0-{max_choice}[/yellow]")
            except ValueError:
                self.console.print("[yellow]Please enter a number[/yellow]")

    def _confirm(self, message: str) -> bool:
        """Ask for confirmation."""
        response = self.console.input(f"\n[yellow]{message}[/yellow] [dim](y/N)[/dim] ").strip().lower()
        return response in ("y", "yes")

    def _pause(self) -> None:
        """Pause for user to read output."""
        self.console.input("\n[dim]Press Enter to continue...[/dim]")

    def _progress(self, status: str) -> None:
        self.console.print(f"[dim]{status}[/dim]")


def start_menu(console: Console | None = None, settings: Settings = DEFAULT_SETTINGS) -> None:
    """Start the menu-driven interface.

    Args:
        console: Rich console for output
        settings: Scan and deletion settings
    """
    if console is None:
        console = Console()

    session = MenuSession(console=console, settings=settings)
    session.run()
