"""Size estimates for command-based cleanup targets.

External maintenance tools do not expose their reclaimable size directly,
so each estimator runs a read-only diagnostic subcommand and parses its
text output. Results are best-effort and may drift across tool versions.
"""

import logging
import re
import subprocess
from abc import ABC, abstractmethod

from tidymac.sudo import ElevationError, PrivilegedCommandError, SudoSession

log = logging.getLogger(__name__)

SIZE_ANNOTATION = re.compile(r"\(([^()]*)\)\s*$")

SIZE_MULTIPLIERS = {
    "": 1,
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
    "T": 1024**4,
    "TB": 1024**4,
}

# Local snapshots report no size, so each one is assumed to hold this much.
SNAPSHOT_ESTIMATE_BYTES = 1024**3


def parse_size(size_str: str) -> int:
    """Parse a size such as "1.2MB", "500 KB" or "3G" into bytes."""
    if not size_str:
        return 0

    match = re.match(r"\s*([\d.]+)\s*([KMGT]?B?)\s*$", size_str, re.IGNORECASE)
    if not match:
        return 0

    try:
        num = float(match.group(1))
    except ValueError:
        return 0
    unit = match.group(2).upper()
    return int(num * SIZE_MULTIPLIERS.get(unit, 1))


class SizeEstimator(ABC):
    """Estimates reclaimable bytes for one external cleanup tool."""

    name = "base"

    @abstractmethod
    def handles(self, command: str) -> bool:
        """Whether this estimator covers the given cleanup command."""

    @abstractmethod
    def estimate(self) -> int:
        """Reclaimable bytes, or 0 if the tool is unavailable."""


class HomebrewEstimator(SizeEstimator):
    """Sums the sizes `brew cleanup -n` says it would remove."""

    name = "homebrew"

    def handles(self, command: str) -> bool:
        return "brew cleanup" in command

    def estimate(self) -> int:
        try:
            result = subprocess.run(
                ["brew", "cleanup", "-n"],
                capture_output=True,
                text=True,
                timeout=120,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            log.debug("brew cleanup -n failed: %s", e)
            return 0
        if result.returncode != 0:
            return 0
        return parse_cleanup_output(result.stdout)


class TimeMachineEstimator(SizeEstimator):
    """Counts local Time Machine snapshots."""

    name = "time_machine"

    def __init__(self, session: SudoSession):
        self.session = session

    def handles(self, command: str) -> bool:
        return "tmutil deletelocalsnapshots" in command

    def estimate(self) -> int:
        try:
            output = self.session.run_with_output("tmutil", "listlocalsnapshots", "/")
        except (ElevationError, PrivilegedCommandError) as e:
            log.debug("tmutil listlocalsnapshots failed: %s", e)
            return 0
        count = sum(1 for line in output.splitlines() if "com.apple.TimeMachine" in line)
        return count * SNAPSHOT_ESTIMATE_BYTES


def parse_cleanup_output(output: str) -> int:
    """
    Sum trailing size annotations in cleanup dry-run output.

    Lines look like ``Would remove: /path/to/file (1.2MB)``.
    """
    total = 0
    for line in output.splitlines():
        match = SIZE_ANNOTATION.search(line.rstrip())
        if match:
            total += parse_size(match.group(1))
    return total


def default_estimators(session: SudoSession) -> list[SizeEstimator]:
    """The built-in estimators."""
    return [HomebrewEstimator(), TimeMachineEstimator(session)]


def estimate_command_size(command: str, estimators: list[SizeEstimator]) -> int:
    """Estimate reclaimable bytes for a command-based target, or 0 if unknown."""
    for estimator in estimators:
        if estimator.handles(command):
            return estimator.estimate()
    return 0
