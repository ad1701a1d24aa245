"""Disk scanning functionality for tidymac."""

import logging
import os
import stat
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Callable

from tidymac.config import DEFAULT_SETTINGS, Settings
from tidymac.estimators import SizeEstimator, default_estimators, estimate_command_size
from tidymac.models import BigFile, CleanupTarget, DuplicateGroup, OldFile
from tidymac.sudo import SudoSession
from tidymac.utils import dir_size, expand_path, file_hash, format_bytes, safe_glob, shorten_path

log = logging.getLogger(__name__)

Progress = Callable[[str], None]


def _no_progress(status: str) -> None:
    pass


def walk_files(root: str, skip_names: frozenset[str], skip_hidden: bool = True):
    """
    Walk a directory tree yielding (path, stat_result) for regular files.

    Directories named in ``skip_names``, and hidden directories when
    ``skip_hidden`` is set, are pruned with everything beneath them.
    Unreadable entries are skipped.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in skip_names and not (skip_hidden and d.startswith("."))
        )
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            try:
                st = os.lstat(path)
            except OSError:
                continue
            if not _is_regular(st):
                continue
            yield path, st


def _is_regular(st: os.stat_result) -> bool:
    return stat.S_ISREG(st.st_mode)


class Scanner:
    """Finds cleanable space: target sizes, big files, duplicates, old files."""

    def __init__(
        self,
        session: SudoSession | None = None,
        settings: Settings = DEFAULT_SETTINGS,
        estimators: list[SizeEstimator] | None = None,
    ):
        self.session = session or SudoSession(
            timeout=settings.sudo_timeout,
            keepalive_interval=settings.sudo_keepalive_interval,
        )
        self.settings = settings
        self.estimators = estimators if estimators is not None else default_estimators(self.session)

    # =========================================================================
    # Cleanup targets
    # =========================================================================

    def calculate_size(self, pattern: str) -> int:
        """Total size of everything a path or pattern currently names."""
        total = 0
        for match in safe_glob(pattern):
            try:
                st = os.lstat(match)
            except OSError:
                continue
            if os.path.isdir(match) and not os.path.islink(match):
                total += dir_size(match)
            elif _is_regular(st):
                total += st.st_size
        return total

    def calculate_size_for_target(self, target: CleanupTarget) -> int:
        """Measure a path target, or estimate a command target."""
        if target.is_command:
            return estimate_command_size(target.command, self.estimators)
        return self.calculate_size(target.path)

    def scan_targets(self, targets: list[CleanupTarget], progress: Progress = _no_progress) -> None:
        """Set ``size`` on every selected target."""
        for target in targets:
            if not target.selected:
                continue
            progress(f"Scanning: {target.name}")
            target.size = self.calculate_size_for_target(target)

    # =========================================================================
    # Big files
    # =========================================================================

    def scan_big_files(
        self,
        min_size: int,
        progress: Progress = _no_progress,
        roots: list[str] | None = None,
    ) -> list[BigFile]:
        """
        Find files of at least ``min_size`` bytes under the big-file roots.

        Returns:
            BigFiles sorted by size, largest first
        """
        files: list[BigFile] = []
        scanned = 0

        for root in self._existing_roots(roots or self.settings.big_file_roots):
            for path, st in walk_files(root, self.settings.skip_names):
                scanned += 1
                if scanned % self.settings.walk_progress_every == 0:
                    progress(f"Scanned {scanned} files...")

                if st.st_size >= min_size:
                    files.append(
                        BigFile(
                            path=path,
                            size=st.st_size,
                            mod_time=datetime.fromtimestamp(st.st_mtime),
                        )
                    )
                    progress(
                        f"Found: {shorten_path(os.path.basename(path), 30)} ({format_bytes(st.st_size)})"
                    )

        files.sort(key=lambda f: (-f.size, f.path))
        return files

    # =========================================================================
    # Duplicates
    # =========================================================================

    def scan_duplicates(
        self,
        progress: Progress = _no_progress,
        roots: list[str] | None = None,
    ) -> tuple[list[DuplicateGroup], int]:
        """
        Find duplicate files under the duplicate roots.

        Files are bucketed by exact size, then every file sharing its size
        with another is fingerprinted by hashing its first bytes. Files with
        the same size and fingerprint form a group. Members are ordered by
        path; the first one is the copy to keep.

        Returns:
            Tuple of (groups sorted by reclaimable bytes, total reclaimable bytes)
        """
        if roots is None:
            roots = self.settings.duplicate_roots

        size_map = self.bucket_by_size(roots, progress)
        groups = self.group_by_fingerprint(size_map, progress)
        total = sum(g.reclaimable for g in groups)
        return groups, total

    def bucket_by_size(self, roots: list[str], progress: Progress = _no_progress) -> dict[int, list[str]]:
        """Map byte size to the paths of files larger than the duplicate minimum."""
        settings = self.settings
        size_map: dict[int, list[str]] = defaultdict(list)
        scanned = 0

        for root in self._existing_roots(roots):
            for path, st in walk_files(root, settings.skip_names):
                scanned += 1
                if scanned % settings.walk_progress_every == 0:
                    progress(f"Scanned {scanned} files...")
                if st.st_size > settings.duplicate_min_size:
                    size_map[st.st_size].append(path)

        shared = sum(len(paths) for paths in size_map.values() if len(paths) >= 2)
        progress(f"Scanned {scanned} files, {shared} share a size with another file, checking for duplicates...")
        return dict(size_map)

    def group_by_fingerprint(
        self,
        size_map: dict[int, list[str]],
        progress: Progress = _no_progress,
    ) -> list[DuplicateGroup]:
        """Fingerprint same-size files and group the matches."""
        candidates = {size: paths for size, paths in size_map.items() if len(paths) >= 2}
        total_candidates = sum(len(paths) for paths in candidates.values())

        hash_map: dict[tuple[int, str], list[str]] = defaultdict(list)
        hashed = 0
        for size in sorted(candidates):
            for path in candidates[size]:
                digest = file_hash(path, self.settings.hash_prefix_bytes)
                if digest is not None:
                    hash_map[(size, digest)].append(path)
                hashed += 1
                if hashed % self.settings.hash_progress_every == 0:
                    progress(f"Hashed {hashed} of {total_candidates} files...")

        groups: list[DuplicateGroup] = []
        for (size, digest), paths in hash_map.items():
            if len(paths) < 2:
                continue
            paths = sorted(paths)
            try:
                current_size = os.stat(paths[0]).st_size
            except OSError:
                log.debug("Keeper %s vanished, dropping its group", paths[0])
                continue
            groups.append(DuplicateGroup(hash=digest, size=current_size, files=paths))

        groups.sort(key=lambda g: (-g.reclaimable, g.keep))
        return groups

    # =========================================================================
    # Old files
    # =========================================================================

    def scan_old_files(
        self,
        days: int,
        progress: Progress = _no_progress,
        roots: list[str] | None = None,
    ) -> list[OldFile]:
        """
        Find files not modified in the last ``days`` days.

        Returns:
            OldFiles sorted by size, largest first
        """
        cutoff = datetime.now() - timedelta(days=days)
        files: list[OldFile] = []
        scanned = 0

        for root in self._existing_roots(roots or self.settings.old_file_roots):
            for path, st in walk_files(root, self.settings.old_file_skip_names, skip_hidden=False):
                scanned += 1
                if scanned % self.settings.walk_progress_every == 0:
                    progress(f"Scanned {scanned} files...")

                modified = datetime.fromtimestamp(st.st_mtime)
                if modified < cutoff:
                    files.append(OldFile(path=path, size=st.st_size, last_access=modified))

        files.sort(key=lambda f: (-f.size, f.path))
        return files

    def _existing_roots(self, roots: list[str]) -> list[str]:
        existing = []
        for root in roots:
            expanded = expand_path(root)
            if os.path.isdir(expanded):
                existing.append(expanded)
            else:
                log.debug("Scan root %s does not exist, skipping", expanded)
        return existing
