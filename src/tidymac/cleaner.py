"""Cleanup execution with measured space savings for tidymac."""

import glob
import logging
import os
import shlex
import shutil
import stat
import subprocess
import time
from pathlib import Path
from typing import Callable, Iterable

from tidymac.config import DEFAULT_SETTINGS, Settings
from tidymac.models import BigFile, CleanResult, CleanupTarget, DuplicateGroup, OldFile
from tidymac.sudo import ElevationError, PrivilegedCommandError, SudoSession
from tidymac.utils import (
    dir_size,
    expand_path,
    has_wildcard,
    literal_base,
    match_pattern,
    safe_glob,
    shorten_path,
)

log = logging.getLogger(__name__)

Progress = Callable[[str], None]

# Timeout for external cleanup commands (seconds)
COMMAND_TIMEOUT = 300


def _no_progress(status: str) -> None:
    pass


class Cleaner:
    """
    Deletes cleanup targets and selected files.

    Space freed by a path target is measured on disk before and after the
    deletion, so wildcards, permission failures and partial deletions are
    reflected in the reported figure.
    """

    def __init__(self, session: SudoSession | None = None, settings: Settings = DEFAULT_SETTINGS):
        self.session = session or SudoSession(
            timeout=settings.sudo_timeout,
            keepalive_interval=settings.sudo_keepalive_interval,
        )
        self.settings = settings

    # =========================================================================
    # Usage measurement
    # =========================================================================

    def measure(self, pattern: str) -> int:
        """
        Bytes of regular-file content a path or pattern currently occupies.

        A directory counts every regular file beneath it. A pattern counts
        every regular file that matches it or lies under a matching
        directory. Missing paths measure zero.
        """
        path = expand_path(pattern)
        if has_wildcard(path):
            return self._measure_pattern(path)

        try:
            st = os.lstat(path)
        except OSError:
            return 0
        if stat.S_ISDIR(st.st_mode):
            return dir_size(path)
        if stat.S_ISREG(st.st_mode):
            return st.st_size
        return 0

    def _measure_pattern(self, pattern: str) -> int:
        base = literal_base(pattern)
        if not os.path.isdir(base):
            return 0

        try:
            result = subprocess.run(
                ["find", base, "-type", "f", "-print0"],
                capture_output=True,
            )
        except OSError as e:
            log.debug("find unavailable (%s), walking %s in-process", e, base)
            return self._walk_measure(base, pattern)

        if result.returncode != 0:
            log.debug("find exited %d for %s, walking in-process", result.returncode, base)
            return self._walk_measure(base, pattern)

        total = 0
        for raw in result.stdout.split(b"\0"):
            if not raw:
                continue
            path = os.fsdecode(raw)
            if match_pattern(pattern, path):
                total += _regular_file_size(path)
        return total

    def _walk_measure(self, base: str, pattern: str) -> int:
        total = 0
        for dirpath, _, filenames in os.walk(base):
            for name in filenames:
                path = os.path.join(dirpath, name)
                if match_pattern(pattern, path):
                    total += _regular_file_size(path)
        return total

    def delete_and_measure(
        self,
        pattern: str,
        uses_sudo: bool = False,
        target: str | None = None,
        requested: int = 0,
    ) -> CleanResult:
        """
        Delete a path or pattern and report the space actually freed.

        Args:
            pattern: Path or glob pattern (supports ~)
            uses_sudo: Delete through the elevated session
            target: Name recorded on the result (defaults to the pattern)
            requested: Bytes the caller expected to free

        Returns:
            CleanResult with ``actual`` = usage before minus usage after
        """
        name = target or pattern
        before = self.measure(pattern)

        error = self.delete_path(pattern, uses_sudo)
        if error:
            log.warning("Failed to clean %s: %s", name, error)
            return CleanResult(target=name, requested=requested, error=f"failed to delete {pattern}: {error}")

        if self.settings.settle_delay > 0:
            time.sleep(self.settings.settle_delay)

        after = self.measure(pattern)
        return CleanResult(target=name, requested=requested, actual=max(before - after, 0))

    # =========================================================================
    # Deletion
    # =========================================================================

    def delete_path(self, pattern: str, uses_sudo: bool = False) -> str | None:
        """
        Delete a path, or every match of a pattern.

        Each match is attempted independently. A pattern fails only if
        every match failed; a path that no longer exists is already clean.

        Returns:
            Error message, or None on success
        """
        path = expand_path(pattern)
        if not has_wildcard(path):
            return self._delete_single(path, uses_sudo)

        matches = sorted(glob.glob(path, include_hidden=True))
        if not matches:
            return None

        last_error = None
        deleted = 0
        for match in matches:
            error = self._delete_single(match, uses_sudo)
            if error:
                log.debug("Could not delete %s: %s", match, error)
                last_error = error
                continue
            deleted += 1

        if last_error and deleted == 0:
            return f"failed to delete any files: {last_error}"
        return None

    def _delete_single(self, path: str, uses_sudo: bool) -> str | None:
        if not os.path.lexists(path):
            return None

        if uses_sudo:
            try:
                self.session.run("rm", "-rf", path)
            except (ElevationError, PrivilegedCommandError) as e:
                return f"sudo rm failed: {e}"
            return None

        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.remove(path)
        except PermissionError as e:
            return f"Permission denied: {e}"
        except OSError as e:
            return f"OS error: {e}"
        return None

    # =========================================================================
    # Cleanup targets
    # =========================================================================

    def clean_target(self, target: CleanupTarget) -> CleanResult:
        """Clean one target and report the space actually freed."""
        if target.is_command and target.command:
            error = self._run_command(target.command, target.requires_sudo)
            # Command output carries no reliable size, so trust the estimate.
            return CleanResult(
                target=target.name,
                requested=target.size,
                actual=target.size,
                error=f"command failed: {error}" if error else None,
            )

        if not safe_glob(target.path):
            return CleanResult(target=target.name, requested=target.size, actual=0)

        return self.delete_and_measure(
            target.path,
            uses_sudo=target.requires_sudo,
            target=target.name,
            requested=target.size,
        )

    def clean_targets(
        self,
        targets: list[CleanupTarget],
        progress: Progress = _no_progress,
    ) -> tuple[list[CleanResult], int]:
        """
        Clean every selected target.

        Administrator access is requested once up front when any selected
        target needs it.

        Returns:
            Tuple of (per-target results, total bytes actually freed)

        Raises:
            ElevationError: If access is needed and cannot be obtained;
                nothing is deleted in that case
        """
        selected = [t for t in targets if t.selected]
        if any(t.requires_sudo for t in selected):
            self.session.ensure_access()

        results: list[CleanResult] = []
        total_saved = 0
        for target in selected:
            progress(f"Cleaning: {target.name}")
            result = self.clean_target(target)
            results.append(result)
            if result.success:
                total_saved += result.actual
                target.size = 0

        return results, total_saved

    def _run_command(self, command: str, uses_sudo: bool) -> str | None:
        argv = shlex.split(command)
        if not argv:
            return "empty command"

        if uses_sudo:
            try:
                self.session.run(*argv)
            except (ElevationError, PrivilegedCommandError) as e:
                return str(e)
            return None

        try:
            result = subprocess.run(argv, capture_output=True, text=True, timeout=COMMAND_TIMEOUT)
        except subprocess.TimeoutExpired:
            return "command timed out"
        except OSError as e:
            return str(e)

        if result.returncode != 0:
            output = (result.stdout + result.stderr).strip()
            return f"exit status {result.returncode}: {output}"
        return None

    # =========================================================================
    # Selected files
    # =========================================================================

    def delete_files(self, paths: Iterable[str], progress: Progress = _no_progress) -> int:
        """
        Delete individual files and return the bytes freed.

        Files outside the home directory are retried through sudo when a
        plain removal fails. Files that vanished or cannot be removed are
        skipped.
        """
        home = str(Path.home())
        total_deleted = 0

        for path in paths:
            progress(f"Deleting: {shorten_path(path, 40)}")

            try:
                size = os.lstat(path).st_size
            except OSError:
                continue

            try:
                os.remove(path)
            except OSError as e:
                if path.startswith(home + os.sep):
                    log.warning("Could not delete %s: %s", path, e)
                    continue
                try:
                    self.session.run("rm", "-f", path)
                except (ElevationError, PrivilegedCommandError) as sudo_error:
                    log.warning("Could not delete %s: %s", path, sudo_error)
                    continue

            total_deleted += size

        return total_deleted

    def delete_big_files(
        self,
        files: list[BigFile],
        selected: set[str],
        progress: Progress = _no_progress,
    ) -> int:
        """Delete the big files whose paths are selected."""
        return self.delete_files([f.path for f in files if f.path in selected], progress)

    def delete_old_files(
        self,
        files: list[OldFile],
        selected: set[str],
        progress: Progress = _no_progress,
    ) -> int:
        """Delete the old files whose paths are selected."""
        return self.delete_files([f.path for f in files if f.path in selected], progress)

    def delete_duplicates(
        self,
        groups: list[DuplicateGroup],
        selected: set[str],
        progress: Progress = _no_progress,
    ) -> int:
        """Delete every copy but the keeper in each selected group."""
        to_delete = []
        for group in groups:
            if group.key in selected:
                to_delete.extend(group.extras)
        return self.delete_files(to_delete, progress)


def _regular_file_size(path: str) -> int:
    try:
        st = os.lstat(path)
    except OSError:
        return 0
    return st.st_size if stat.S_ISREG(st.st_mode) else 0
