"""Shared utility functions for create-thing.

Provides async command execution, Rich-based console output and a small
helper for racing an awaitable against a timeout.  Everything that talks to
the outside world through a subprocess goes through :func:`run_command` or
:func:`sh`.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable
from pathlib import Path
from typing import TypeVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

console = Console()

T = TypeVar("T")


class CommandError(Exception):
    """Raised by :func:`sh` when a command exits with a non-zero code."""

    def __init__(self, message: str, command: str = "", returncode: int = -1, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float = 30,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Shell command string or list of arguments.  Strings are run
            through the shell, lists are executed directly.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        if isinstance(cmd, list):
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
        else:
            process = await asyncio.create_subprocess_shell(
                cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
    except (FileNotFoundError, NotADirectoryError) as exc:
        return (127, "", str(exc))

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (
            -1,
            "",
            f"Command timed out after {timeout}s: {_format_command(cmd)}",
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def sh(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float = 30,
    env: dict[str, str] | None = None,
) -> tuple[str, str]:
    """Run a command and return ``(stdout, stderr)``.

    Raises:
        CommandError: If the command exits with a non-zero code or times out.
    """
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=timeout, env=env)
    if returncode != 0:
        cmd_str = _format_command(cmd)
        raise CommandError(
            f"Command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            returncode=returncode,
            stderr=stderr,
        )
    return stdout, stderr


def _format_command(cmd: str | list[str]) -> str:
    return cmd if isinstance(cmd, str) else " ".join(cmd)


# ---------------------------------------------------------------------------
# Awaiting with a deadline
# ---------------------------------------------------------------------------


async def await_with_timeout(awaitable: Awaitable[T], timeout: float, default: T) -> T:
    """Wait at most *timeout* seconds for *awaitable*, else return *default*.

    The awaitable is shielded, so a task passed in keeps running after the
    timeout and can still be awaited later for its real result.
    """
    try:
        return await asyncio.wait_for(asyncio.shield(awaitable), timeout=timeout)
    except asyncio.TimeoutError:
        return default


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str | None], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Empty values are shown as a dim dash.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value) if value not in (None, "") else "[dim]-[/dim]")

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_note(message: str) -> None:
    """Print a dim informational note."""
    console.print(f"[dim]{message}[/dim]")


def create_progress() -> Progress:
    """Create a Rich spinner display for long-running generator work.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
    )
