"""Shared pytest fixtures for the wc-scaffold test suite.

Provides reusable fixtures for:
- A ``Config`` rooted in a temporary directory with no browser delay
- Mocked blocking commands (``run_command``)
- Mocked long-running server output (``run_command_streaming``)
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from wc_scaffold.config import Config, ServeConfig


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config writing projects into ``tmp_path`` and opening the browser at once."""
    return Config(output_dir=tmp_path, serve=ServeConfig(open_delay=0))


@pytest.fixture
def expected_files() -> set[str]:
    """The fixed relative paths of a freshly scaffolded project."""
    return {
        "public/index.html",
        "src/Events.ts",
        "src/Component.ts",
        "src/Components/App.ts",
        "src/config.ts",
        "src/index.ts",
        "README.md",
        ".gitignore",
        "webpack.config.js",
        "package.json",
        "tsconfig.json",
    }


# ---------------------------------------------------------------------------
# Mock external processes
# ---------------------------------------------------------------------------

def make_server_output(lines: list[str] | None = None) -> Callable[..., AsyncIterator[str]]:
    """Build a stand-in for ``run_command_streaming`` yielding *lines*."""
    output = lines if lines is not None else ["Serving!", "- Local: http://localhost:3000"]

    async def _stream(cmd: str, cwd: Any = None) -> AsyncIterator[str]:
        for line in output:
            yield line

    return _stream


@pytest.fixture
def mock_toolchain():
    """Patch every external process the pipeline starts.

    Yields a namespace-like dict with the ``run_command`` mock, the
    ``run_command_streaming`` mock and the ``check_port_available`` mock.
    Blocking commands succeed by default; set ``side_effect`` on
    ``run_command`` to script failures.

    Usage:
        async def test_something(config, mock_toolchain):
            mock_toolchain["run_command"].side_effect = [(0, "", ""), (1, "", "boom")]
            ...
    """
    run_command = AsyncMock(return_value=(0, "", ""))
    streaming = MagicMock(side_effect=make_server_output())
    port_check = AsyncMock(return_value=True)

    with patch("wc_scaffold.pipeline.run_command", run_command), \
         patch("wc_scaffold.pipeline.run_command_streaming", streaming), \
         patch("wc_scaffold.pipeline.check_port_available", port_check):
        yield {
            "run_command": run_command,
            "run_command_streaming": streaming,
            "check_port_available": port_check,
        }
