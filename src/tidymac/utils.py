"""Path, size and hashing helpers shared by the scanner and cleaner."""

import glob
import hashlib
import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path

log = logging.getLogger(__name__)

WILDCARD_CHARS = "*?["

SIZE_UNITS = ["KB", "MB", "GB", "TB", "PB"]


def expand_path(path: str) -> str:
    """Expand a leading ~ to the home directory. Other paths pass through."""
    if path == "~" or path.startswith("~/"):
        return str(Path.home()) + path[1:]
    return path


def format_bytes(size_bytes: int) -> str:
    """
    Format bytes using binary units with one decimal place.

    Values under 1024 render as a bare "B" with no number.
    """
    if size_bytes < 1024:
        return "B"
    value = float(size_bytes)
    unit = SIZE_UNITS[0]
    for unit in SIZE_UNITS:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit}"


def dir_size(path: str | Path) -> int:
    """
    Sum the sizes of regular files under a directory.

    Symlinks are not followed and directory entries are not counted.
    Entries that cannot be read are skipped.
    """
    total = 0
    stack = [os.fspath(path)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError:
                        continue
        except OSError as e:
            log.debug("Skipping unreadable directory %s: %s", current, e)
    return total


def file_hash(path: str | Path, prefix_bytes: int = 4096) -> str | None:
    """
    Fingerprint a file by hashing only its first bytes.

    Files that share a size and the same first ``prefix_bytes`` collide
    even when they differ later on.

    Returns:
        Hex digest, or None if the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            chunk = f.read(prefix_bytes)
    except OSError as e:
        log.debug("Cannot hash %s: %s", path, e)
        return None
    return hashlib.md5(chunk).hexdigest()


def shorten_path(path: str, max_len: int) -> str:
    """Shorten a path for display, keeping its tail."""
    if len(path) <= max_len:
        return path
    if max_len <= 3:
        return "..."
    return "..." + path[len(path) - max_len + 3 :]


def has_wildcard(pattern: str) -> bool:
    """Check if a pattern contains glob wildcard characters."""
    return any(c in pattern for c in WILDCARD_CHARS)


def literal_base(pattern: str) -> str:
    """
    Return the deepest directory of a pattern that contains no wildcard.

    ``/a/b/*`` and ``/a/b/c*`` both give ``/a/b``.
    """
    cut = min((pattern.find(c) for c in WILDCARD_CHARS if c in pattern), default=len(pattern))
    prefix = pattern[:cut]
    if cut == len(pattern):
        return prefix
    if prefix.endswith(os.sep):
        return prefix.rstrip(os.sep) or os.sep
    return os.path.dirname(prefix) or "."


def match_pattern(pattern: str, path: str) -> bool:
    """
    Shell-style match of a path against a pattern.

    ``*`` and ``?`` never cross a ``/``. A path also matches when one of its
    ancestor directories matches, since deleting that directory removes it.
    """
    pattern_parts = pattern.rstrip(os.sep).split(os.sep)
    path_parts = path.rstrip(os.sep).split(os.sep)
    if len(path_parts) < len(pattern_parts):
        return False
    return all(
        fnmatchcase(part, pat) for part, pat in zip(path_parts, pattern_parts)
    )


def safe_glob(pattern: str) -> list[str]:
    """
    Expand a pattern to the paths it names.

    Hidden entries match wildcards and unreadable directories are skipped.
    A plain path gives itself if it exists.
    """
    expanded = expand_path(pattern)
    if not has_wildcard(expanded):
        return [expanded] if os.path.lexists(expanded) else []
    return sorted(glob.glob(expanded, include_hidden=True))
