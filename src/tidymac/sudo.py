"""Elevated-privilege session management via sudo."""

import logging
import subprocess
import threading
import time

from rich.console import Console

log = logging.getLogger(__name__)


class ElevationError(Exception):
    """Raised when administrator access cannot be obtained."""


class PrivilegedCommandError(Exception):
    """Raised when a command run through sudo fails."""


class SudoSession:
    """
    A time-boxed sudo grant owned by the caller.

    Once access is granted a background thread refreshes the sudo
    timestamp every ``keepalive_interval`` seconds until the grant lapses
    or the session is closed. Use as a context manager, or call close().
    """

    def __init__(
        self,
        timeout: float = 5 * 60,
        keepalive_interval: float = 2 * 60,
        console: Console | None = None,
    ):
        self.timeout = timeout
        self.keepalive_interval = keepalive_interval
        self.console = console
        self._lock = threading.Lock()
        self._valid = False
        self._last_auth = 0.0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def __enter__(self) -> "SudoSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def has_access(self) -> bool:
        """Whether the session currently holds a trusted grant."""
        with self._lock:
            return self._valid and time.monotonic() - self._last_auth < self.timeout

    @property
    def last_auth(self) -> float:
        """Monotonic time of the last successful validation."""
        with self._lock:
            return self._last_auth

    def ensure_access(self) -> None:
        """
        Make sure sudo credentials are valid, prompting for a password if needed.

        Raises:
            ElevationError: If authentication fails or sudo is unavailable
        """
        with self._lock:
            if self._valid and time.monotonic() - self._last_auth < self.timeout:
                if _sudo_ok():
                    self._last_auth = time.monotonic()
                    return

            if self.console is not None:
                self.console.print("\n[bold]Some operations require administrator privileges.[/bold]")
                self.console.print("[dim]Please enter your password (cached for 5 minutes):[/dim]")

            try:
                result = subprocess.run(["sudo", "-v"])
            except OSError as e:
                self._valid = False
                raise ElevationError(f"sudo unavailable: {e}") from e

            if result.returncode != 0:
                self._valid = False
                log.warning("sudo authentication failed (exit %d)", result.returncode)
                raise ElevationError("sudo authentication failed")

            self._valid = True
            self._last_auth = time.monotonic()

        self._start_keep_alive()

    def run(self, *argv: str) -> None:
        """
        Run a command with sudo.

        Raises:
            ElevationError: If access cannot be obtained
            PrivilegedCommandError: If the command exits non-zero
        """
        self.run_with_output(*argv)

    def run_with_output(self, *argv: str) -> str:
        """Run a command with sudo and return its stdout."""
        self.ensure_access()
        try:
            result = subprocess.run(["sudo", *argv], capture_output=True, text=True)
        except OSError as e:
            raise PrivilegedCommandError(str(e)) from e
        if result.returncode != 0:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise PrivilegedCommandError(f"sudo {' '.join(argv)}: {message}")
        return result.stdout

    def close(self) -> None:
        """Stop the keep-alive thread."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def _start_keep_alive(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._keep_alive, args=(self._stop,), name="sudo-keepalive", daemon=True
        )
        self._thread.start()

    def _keep_alive(self, stop: threading.Event) -> None:
        while not stop.wait(self.keepalive_interval):
            ok = _sudo_ok()
            with self._lock:
                if not ok:
                    log.info("sudo grant expired, stopping keep-alive")
                    self._valid = False
                    return
                self._last_auth = time.monotonic()


def _sudo_ok() -> bool:
    """Check for a cached sudo grant without prompting."""
    try:
        return subprocess.run(["sudo", "-n", "true"], capture_output=True).returncode == 0
    except OSError:
        return False
