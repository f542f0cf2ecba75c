"""wc-scaffold pipeline orchestrator.

Creates a new event-driven web-components project and brings up a preview:

Stage 1: COLLECT      -- Ask for the project name.
Stage 2: GUARD        -- Refuse to touch an existing directory.
Stage 3: MATERIALIZE  -- Render and write every project file.
Stage 4: INSTALL      -- ``npm install serve open`` (best effort).
Stage 5: BUILD        -- ``npx webpack`` (fatal on failure).
Stage 6: SERVE        -- ``npx serve public -l 3000``, then open a browser.

Usage::

    wc-scaffold
    wc-scaffold --name my-app
    wc-scaffold component TodoList --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.markup import escape
from rich.prompt import Prompt

from wc_scaffold.config import Config, ServeConfig
from wc_scaffold.scaffolder import ProjectGenerator, ScaffoldRequest, render_component_template
from wc_scaffold.utils import (
    STAGE_NAMES,
    check_port_available,
    console,
    ensure_dir,
    format_duration,
    forward_output,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    run_command_streaming,
    wait_for_health,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Raised when a pipeline stage fails irrecoverably."""

    def __init__(self, stage: int, message: str) -> None:
        self.stage = stage
        super().__init__(f"Stage {stage} ({STAGE_NAMES.get(stage, '?')}): {message}")


# ---------------------------------------------------------------------------
# Stage declarations
# ---------------------------------------------------------------------------


class FailurePolicy(str, Enum):
    """What a failing external stage does to the rest of the pipeline."""

    IGNORE = "ignore"
    LOG_AND_CONTINUE = "log_and_continue"
    ABORT = "abort"


@dataclass(frozen=True)
class PipelineStage:
    """One external command run by the pipeline."""

    number: int
    name: str
    command: str
    policy: FailurePolicy
    cwd: Path | None = None
    delay: float = 0.0


@dataclass
class StageResult:
    """Outcome of a finished blocking stage."""

    name: str
    returncode: int
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.returncode == 0


def ask_project_name(default: str) -> str:
    """Interactive prompt for the project name."""
    return Prompt.ask("🛠  What is your project called?", default=default, console=console)


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives the six scaffold stages in order.

    Attributes:
        config: Global configuration.
        project_name: Name given up front; when ``None`` the user is prompted.
        prompt: Callable receiving the default name and returning the answer.
        state: Project path and the results of the blocking stages.
    """

    def __init__(
        self,
        config: Config,
        project_name: str | None = None,
        prompt: Callable[[str], str] = ask_project_name,
    ) -> None:
        self.config = config
        self.project_name = project_name
        self.prompt = prompt
        self.state: dict[str, Any] = {"project_path": None, "results": []}
        self._background: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, request: ScaffoldRequest | None = None) -> None:
        """Run every stage.  Returns only once the preview server exits.

        Raises:
            ScaffoldError: On prompt abort, an existing target directory or a
                failed build.
        """
        if request is None:
            request = self.collect()
        project_root = self.guard(request)
        await self._preflight()
        await self.materialize(request, project_root)

        await self.run_stage(self.install_stage(project_root))
        await self.run_stage(self.build_stage(project_root))
        await self.serve_and_open(self.serve_stage(project_root), self.open_stage())

    # ------------------------------------------------------------------
    # Stage 1: COLLECT
    # ------------------------------------------------------------------

    def collect(self) -> ScaffoldRequest:
        """Build the request from ``project_name`` or the interactive prompt."""
        print_stage_header(1, STAGE_NAMES[1])
        name = self.project_name
        if name is None:
            try:
                name = self.prompt(self.config.default_project_name)
            except (EOFError, KeyboardInterrupt) as exc:
                raise ScaffoldError(1, "Prompt aborted before a project name was given.") from exc

        try:
            return ScaffoldRequest(project_name=name, verbose=self.config.verbose)
        except ValidationError as exc:
            raise ScaffoldError(1, f"Invalid project name: {name!r}") from exc

    # ------------------------------------------------------------------
    # Stage 2: GUARD
    # ------------------------------------------------------------------

    def guard(self, request: ScaffoldRequest) -> Path:
        """Return the target directory, refusing any existing entry there."""
        print_stage_header(2, STAGE_NAMES[2])
        project_root = self.config.project_path(request.project_name)
        if project_root.exists() or project_root.is_symlink():
            raise ScaffoldError(2, f'Directory "{request.project_name}" already exists.')
        self.state["project_path"] = project_root
        return project_root

    async def _preflight(self) -> None:
        """Warn early when the preview port is already taken."""
        port = self.config.serve.port
        if not await check_port_available(port):
            print_warning(
                f"  Port {port} is already in use -- the preview server may fail to start."
            )

    # ------------------------------------------------------------------
    # Stage 3: MATERIALIZE
    # ------------------------------------------------------------------

    async def materialize(self, request: ScaffoldRequest, project_root: Path) -> list[Path]:
        """Create *project_root* and write every generated file into it."""
        print_stage_header(3, STAGE_NAMES[3])
        ensure_dir(project_root)
        console.print(f"  Creating project in [bold]{escape(str(project_root))}[/bold]")

        written = await ProjectGenerator(request).write(project_root)

        print_summary_table(
            {
                path.relative_to(project_root).as_posix(): f"{path.stat().st_size} bytes"
                for path in written
            },
            title="Files created",
        )
        return written

    # ------------------------------------------------------------------
    # Stages 4-6: external toolchain
    # ------------------------------------------------------------------

    def install_stage(self, project_root: Path) -> PipelineStage:
        return PipelineStage(
            4,
            "install",
            self.config.toolchain.install_command(),
            FailurePolicy.LOG_AND_CONTINUE,
            cwd=project_root,
        )

    def build_stage(self, project_root: Path) -> PipelineStage:
        return PipelineStage(
            5,
            "build",
            self.config.toolchain.build_command(),
            FailurePolicy.ABORT,
            cwd=project_root,
        )

    def serve_stage(self, project_root: Path) -> PipelineStage:
        return PipelineStage(
            6,
            "serve",
            self.config.toolchain.serve_command(self.config.serve),
            FailurePolicy.ABORT,
            cwd=project_root,
        )

    def open_stage(self) -> PipelineStage:
        serve: ServeConfig = self.config.serve
        return PipelineStage(
            6,
            "open",
            self.config.toolchain.open_command(serve.url),
            FailurePolicy.LOG_AND_CONTINUE,
            delay=serve.open_delay,
        )

    async def run_stage(self, stage: PipelineStage) -> StageResult:
        """Run a blocking stage to completion and apply its failure policy."""
        print_stage_header(stage.number, stage.name)
        console.print(f"  Running [bold]{escape(stage.command)}[/bold]")

        start = time.monotonic()
        try:
            returncode, stdout, stderr = await run_command(stage.command, cwd=stage.cwd)
        except OSError as exc:
            returncode, stdout, stderr = -1, "", str(exc)
        forward_output(stdout, stderr)

        result = StageResult(stage.name, returncode, time.monotonic() - start)
        self.state["results"].append(result)

        if result.success:
            print_success(
                f"Stage {stage.number} ({stage.name}) completed in "
                f"{format_duration(result.duration_seconds)}"
            )
        else:
            self._handle_failure(stage, f"{stage.command!r} exited with status {returncode}")
        return result

    async def serve_and_open(self, serve: PipelineStage, launch: PipelineStage) -> None:
        """Stream the preview server's output and launch a browser alongside.

        The browser launch is scheduled independently of the server.  When
        the server exits on its own a pending launch still runs to completion;
        it is only cancelled when the server stage fails or is interrupted.
        """
        print_stage_header(serve.number, serve.name)
        console.print(f"  Serving at [bold]{escape(self.config.serve.url)}[/bold]")

        task = asyncio.create_task(self._launch_browser(launch))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

        try:
            async for line in run_command_streaming(serve.command, cwd=serve.cwd):
                console.out(line, highlight=False)
        except OSError as exc:
            self._cancel_background()
            self._handle_failure(serve, str(exc))
        except BaseException:
            self._cancel_background()
            raise
        else:
            if self._background:
                await asyncio.gather(*self._background)

    def _cancel_background(self) -> None:
        for pending in list(self._background):
            pending.cancel()

    async def _launch_browser(self, stage: PipelineStage) -> None:
        serve = self.config.serve
        if serve.wait_until_ready:
            if not await wait_for_health(serve.url, timeout=serve.ready_timeout):
                print_warning(f"  {serve.url} did not answer within {serve.ready_timeout}s.")
        else:
            await asyncio.sleep(stage.delay)

        try:
            returncode, _, stderr = await run_command(stage.command)
        except OSError as exc:
            returncode, stderr = -1, str(exc)
        if returncode != 0:
            self._handle_failure(stage, stderr or f"exited with status {returncode}")

    def _handle_failure(self, stage: PipelineStage, message: str) -> None:
        if stage.policy is FailurePolicy.ABORT:
            raise ScaffoldError(stage.number, f"{stage.name} failed: {message}")
        if stage.policy is FailurePolicy.LOG_AND_CONTINUE:
            print_error(f"{stage.name.capitalize()} failed: {escape(message)}")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wc-scaffold",
        description="Scaffold an event-driven web-components project and preview it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  wc-scaffold\n"
            "  wc-scaffold --name my-app --port 3001\n"
            "  wc-scaffold component TodoList --verbose > src/Components/TodoList.ts\n"
        ),
    )
    parser.add_argument("--name", default=None, help="Project name (prompted for if omitted)")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Listener and lifecycle stubs in component templates",
    )
    parser.add_argument("--output", "-o", default=None, help="Parent directory (default: cwd)")
    parser.add_argument("--port", type=int, default=None, help="Preview server port (default: 3000)")
    parser.add_argument("--config", default=None, help="JSON configuration file")

    subparsers = parser.add_subparsers(dest="command")
    component = subparsers.add_parser(
        "component", help="Print a component template to stdout"
    )
    component.add_argument("class_name", help="Component class name")
    component.add_argument(
        "--verbose", "-v",
        dest="component_verbose",
        action="store_true",
        help="Include listener declarations and lifecycle hooks",
    )
    return parser


def _load_config(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config()
    config = Config.from_env(config)
    if args.output:
        config.output_dir = Path(args.output)
    if args.verbose:
        config.verbose = True
    if args.port is not None:
        config.serve = ServeConfig(**{**config.serve.model_dump(), "port": args.port})
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``wc-scaffold``."""
    args = _build_parser().parse_args(argv)

    if args.command == "component":
        verbose = args.verbose or args.component_verbose
        console.out(render_component_template(args.class_name, verbose), highlight=False)
        return

    try:
        config = _load_config(args)
    except (OSError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {escape(str(exc))}")
        sys.exit(1)

    pipeline = Pipeline(config, project_name=args.name)
    try:
        # Prompt outside the event loop so Ctrl-C reaches it directly.
        request = pipeline.collect()
        asyncio.run(pipeline.run(request))
    except ScaffoldError as exc:
        print_error(escape(str(exc)))
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Interrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
