"""Shared utility functions for wc-scaffold.

Provides async command execution, Rich-based console reporting, port probing
and HTTP readiness polling for the scaffold pipeline.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator
from pathlib import Path

import httpx
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def _spawn(
    cmd: str | list[str],
    cwd: str | Path | None,
    stderr: int,
) -> asyncio.subprocess.Process:
    """Start *cmd* with piped stdout; a string goes through the shell."""
    options = {
        "stdout": asyncio.subprocess.PIPE,
        "stderr": stderr,
        "cwd": str(cwd) if cwd else None,
    }
    if isinstance(cmd, list):
        return await asyncio.create_subprocess_exec(*cmd, **options)
    return await asyncio.create_subprocess_shell(cmd, **options)


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace").strip()


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Seconds before the process is killed.  ``None`` waits for
            as long as the process runs.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timed-out process
        reports ``-1``.

    Raises:
        OSError: If the process cannot be started at all.
    """
    process = await _spawn(cmd, cwd, asyncio.subprocess.PIPE)

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        shown = cmd if isinstance(cmd, str) else " ".join(cmd)
        return -1, "", f"{shown} timed out after {timeout}s"
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
        raise

    return process.returncode or 0, _decode(out), _decode(err)


async def run_command_streaming(
    cmd: str,
    cwd: str | Path | None = None,
) -> AsyncIterator[str]:
    """Run a long-lived command and yield its output lines as they arrive.

    Stderr is merged into stdout so both streams reach the caller in the
    order the child wrote them.  The generator ends when the process closes
    its output; the process is killed if the consumer stops early.
    """
    process = await _spawn(cmd, cwd, asyncio.subprocess.STDOUT)
    assert process.stdout is not None

    try:
        async for raw in process.stdout:
            yield raw.decode("utf-8", errors="replace").rstrip("\r\n")
    finally:
        if process.returncode is None:
            process.kill()
        await process.wait()


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create *path* with its parents and return it resolved."""
    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration for stage timings.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    seconds = max(seconds, 0.0)
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_NAMES: dict[int, str] = {
    1: "COLLECT",
    2: "GUARD",
    3: "MATERIALIZE",
    4: "INSTALL",
    5: "BUILD",
    6: "SERVE",
}

STAGE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_green",
    3: "bright_yellow",
    4: "bright_magenta",
    5: "bright_red",
    6: "bright_blue",
}


def print_stage_header(stage: int, name: str) -> None:
    """Print a full-width rule announcing a pipeline stage."""
    color = STAGE_COLORS.get(stage, "white")
    console.print()
    console.print(Rule(f"[bold]Stage {stage}: {name.upper()}[/bold]", style=color))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column path/detail table."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Path", style="dim", no_wrap=True)
    table.add_column("Detail", justify="right")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]{message}[/bold yellow]")


def forward_output(stdout: str, stderr: str = "") -> None:
    """Write captured child-process output verbatim (no Rich markup)."""
    if stdout:
        console.out(stdout, highlight=False)
    if stderr:
        err_console.out(stderr, highlight=False)


# ---------------------------------------------------------------------------
# Network helpers
# ---------------------------------------------------------------------------


async def check_port_available(port: int, host: str = "127.0.0.1") -> bool:
    """Return ``False`` when something already accepts connections on *port*."""
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=1)
    except (OSError, asyncio.TimeoutError):
        return True
    writer.close()
    await writer.wait_closed()
    return False


async def wait_for_health(
    url: str,
    timeout: float = 30,
    interval: float = 0.5,
) -> bool:
    """Poll *url* until it answers HTTP 200 or *timeout* seconds pass.

    Transport failures (refused or reset connections, protocol errors and
    timeouts) count as "not ready yet".
    """
    deadline = time.monotonic() + timeout

    async with httpx.AsyncClient(timeout=httpx.Timeout(5.0, connect=3.0)) as client:
        while True:
            try:
                response = await client.get(url)
            except httpx.TransportError:
                pass
            else:
                if response.status_code == 200:
                    return True

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(interval, remaining))
