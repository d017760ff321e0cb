"""Shared utility functions for create-destino.

Provides async command execution and the Rich-based console helpers used for
every user-visible message.  Nothing here knows about project configuration.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

# Exit code reported when the executable itself cannot be found.
COMMAND_NOT_FOUND = 127


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = 120,
    capture: bool = True,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed, or
            ``None`` to wait indefinitely.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        return (COMMAND_NOT_FOUND, "", f"Command not found: {cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_command_streaming(
    cmd: list[str],
    on_line: Callable[[str], None],
    cwd: str | Path | None = None,
    timeout: float | None = 600,
) -> tuple[int, str, str]:
    """Run a command, passing each stdout line to *on_line* as it arrives.

    Stdout is also accumulated so the caller gets the same
    ``(returncode, stdout, stderr)`` tuple as :func:`run_command`.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        return (COMMAND_NOT_FOUND, "", f"Command not found: {cmd[0]}")

    assert process.stdout is not None  # guaranteed by PIPE
    assert process.stderr is not None
    lines: list[str] = []

    async def _pump_stdout() -> None:
        while True:
            line_bytes = await process.stdout.readline()
            if not line_bytes:
                break
            line = line_bytes.decode("utf-8", errors="replace").rstrip("\n")
            lines.append(line)
            on_line(line)

    # stderr must be read concurrently or a chatty child can block on a full pipe.
    stderr_task = asyncio.ensure_future(process.stderr.read())

    async def _drain() -> bytes:
        await _pump_stdout()
        stderr_bytes = await stderr_task
        await process.wait()
        return stderr_bytes

    try:
        stderr_bytes = await asyncio.wait_for(_drain(), timeout=timeout)
    except asyncio.TimeoutError:
        stderr_task.cancel()
        process.kill()
        await process.wait()
        await asyncio.gather(stderr_task, return_exceptions=True)
        return (
            -1,
            "\n".join(lines).strip(),
            f"Command timed out after {timeout}s: {' '.join(cmd)}",
        )

    stderr_str = stderr_bytes.decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, "\n".join(lines).strip(), stderr_str)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(title: str, body: str = "") -> None:
    """Print the welcome panel shown at the start of a run."""
    console.print(
        Panel(
            body or f"[bold bright_green]{title}[/bold bright_green]",
            title=f"[bold]{title}[/bold]" if body else None,
            border_style="bright_green",
        )
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_step(message: str) -> None:
    """Print a dim progress line."""
    console.print(f"[dim]{message}[/dim]")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
