"""Interim gateway process lifecycle: spawn, health wait, restore, stop."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from ignition_entrypoint.client.errors import HealthTimeoutError, ProcessSupervisionError
from ignition_entrypoint.client.health import HealthGate
from ignition_entrypoint.config.constants import AUTOACCEPT_COMMAND, RESTORE_COMMAND


class ProcessSupervisor:
    """Owns the interim gateway process for the duration of provisioning.

    A single spawn attempt, no restart on crash, and a single graceful
    SIGTERM on shutdown with no escalation.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def spawn(
        self,
        command: Sequence[str],
        log_path: Path,
        *,
        cwd: Path | None = None,
    ) -> subprocess.Popen[bytes]:
        """Start ``command`` in the background with output sent to ``log_path``."""
        self.console.print(f"Provisioning will be logged here: {log_path}")
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "wb") as log:
                return subprocess.Popen(
                    list(command),
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    stdin=subprocess.DEVNULL,
                    cwd=cwd,
                )
        except OSError as exc:
            raise ProcessSupervisionError(
                f"Cannot start interim gateway {command[0]}: {exc}"
            ) from exc

    def await_health(
        self,
        proc: subprocess.Popen[bytes],
        gate: HealthGate,
        *,
        phase: str,
        path: str,
        max_seconds: int,
    ) -> None:
        """Wait for RUNNING; on timeout signal the interim process, then re-raise."""
        try:
            gate.wait(phase, path, max_seconds)
        except HealthTimeoutError:
            self.abandon(proc)
            raise

    def abandon(self, proc: subprocess.Popen[bytes]) -> None:
        """Best-effort SIGTERM without waiting, used only on the fatal path."""
        if proc.poll() is not None:
            return
        self.console.print("Signalling unhealthy interim gateway to stop...")
        try:
            proc.send_signal(signal.SIGTERM)
        except OSError as exc:
            self.console.print(f"[yellow]Warning: could not signal interim gateway: {exc}[/]")

    def terminate(self, proc: subprocess.Popen[bytes]) -> int:
        """Send SIGTERM and block until the process exits cleanly."""
        self.console.print("Shutting down interim provisioning gateway...")
        try:
            proc.send_signal(signal.SIGTERM)
            returncode = proc.wait()
        except OSError as exc:
            raise ProcessSupervisionError(
                f"Ignition initialization process failed: {exc}"
            ) from exc
        if returncode != 0:
            raise ProcessSupervisionError(
                f"Ignition initialization process failed with exit status {returncode}"
            )
        return returncode

    def restore(self, archive: Path, *, cwd: Path | None = None) -> None:
        """Stage a gateway backup for restore on the next startup."""
        self.console.print("Restoring Gateway Backup...")
        returncode = self.run(
            [RESTORE_COMMAND, "--restore", str(archive), "-y"], cwd=cwd, input=b"\n",
        )
        if returncode != 0:
            raise ProcessSupervisionError(
                f"Gateway restore of {archive} failed with exit status {returncode}"
            )

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        input: bytes | None = None,
    ) -> int:
        """Run a tool to completion and return its exit status."""
        try:
            completed = subprocess.run(list(command), cwd=cwd, input=input, check=False)
        except OSError as exc:
            raise ProcessSupervisionError(f"Cannot run {command[0]}: {exc}") from exc
        return completed.returncode

    def launch_autoaccept(self, delay: int) -> subprocess.Popen[bytes] | None:
        """Start the certificate auto-accept helper in its own session.

        The helper is never joined; it outlives the entrypoint once the
        gateway command is exec'd.
        """
        try:
            return subprocess.Popen(
                [AUTOACCEPT_COMMAND, str(delay)],
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            self.console.print(
                f"[yellow]Warning: could not start {AUTOACCEPT_COMMAND}: {exc}[/]"
            )
            return None


def exec_foreground(command: Sequence[str]) -> None:
    """Replace the current process with ``command``. Does not return."""
    if not command:
        raise ProcessSupervisionError("No command given to exec")
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execvp(command[0], list(command))
    except OSError as exc:
        raise ProcessSupervisionError(f"Cannot exec {command[0]}: {exc}") from exc
