"""wc-scaffold configuration.

Centralised, typed configuration for the scaffold pipeline. All settings use
Pydantic v2 models so they can be validated at construction time and loaded
from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ServeConfig(BaseModel):
    """Settings for the preview server and the browser launch."""

    port: int = Field(default=3000, ge=1, le=65535)
    directory: str = Field(default="public", description="Directory served, relative to the project")
    open_delay: float = Field(
        default=2.0, ge=0, description="Seconds to wait before launching the browser"
    )
    wait_until_ready: bool = Field(
        default=False,
        description="Poll the server URL instead of sleeping for open_delay",
    )
    ready_timeout: int = Field(default=30, ge=1, description="Readiness polling limit in seconds")

    @property
    def url(self) -> str:
        """Local URL the preview server listens on."""
        return f"http://localhost:{self.port}"


class ToolchainConfig(BaseModel):
    """External executables driven by the pipeline."""

    package_manager: str = Field(default="npm")
    runner: str = Field(default="npx", description="npx-style package runner")
    runtime_packages: list[str] = Field(
        default_factory=lambda: ["serve", "open"],
        description="Packages the generated project's preview needs",
    )
    bundler: str = Field(default="webpack")

    def install_command(self) -> str:
        return f"{self.package_manager} install {' '.join(self.runtime_packages)}"

    def build_command(self) -> str:
        return f"{self.runner} {self.bundler}"

    def serve_command(self, serve: ServeConfig) -> str:
        return f"{self.runner} serve {serve.directory} -l {serve.port}"

    def open_command(self, url: str) -> str:
        return f"{self.runner} open {url}"


class Config(BaseModel):
    """Global wc-scaffold configuration.

    Instances are typically created once by the CLI entry point and then
    passed to ``Pipeline``.
    """

    output_dir: Path = Field(default=Path("."), description="Parent of the new project directory")
    default_project_name: str = Field(default="my-web-component", min_length=1)
    verbose: bool = Field(default=False, description="Emit listener and lifecycle stubs")
    serve: ServeConfig = Field(default_factory=ServeConfig)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)

    def project_path(self, project_name: str) -> Path:
        """Absolute target directory for *project_name*."""
        return self.output_dir.resolve() / project_name

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration from a JSON file.

        Args:
            path: The JSON file to read.

        Returns:
            A validated ``Config`` instance.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Apply environment overrides on top of *base* (or the defaults).

        Recognised variables (all optional):
            WCS_OUTPUT_DIR, WCS_PORT, WCS_OPEN_DELAY, WCS_PACKAGE_MANAGER,
            WCS_RUNNER, WCS_VERBOSE.
        """
        config = base or cls()

        serve_kwargs: dict[str, Any] = {}
        if os.environ.get("WCS_PORT"):
            serve_kwargs["port"] = int(os.environ["WCS_PORT"])
        if os.environ.get("WCS_OPEN_DELAY"):
            serve_kwargs["open_delay"] = float(os.environ["WCS_OPEN_DELAY"])

        toolchain_kwargs: dict[str, Any] = {}
        if os.environ.get("WCS_PACKAGE_MANAGER"):
            toolchain_kwargs["package_manager"] = os.environ["WCS_PACKAGE_MANAGER"]
        if os.environ.get("WCS_RUNNER"):
            toolchain_kwargs["runner"] = os.environ["WCS_RUNNER"]

        updates: dict[str, Any] = {
            "serve": ServeConfig(**{**config.serve.model_dump(), **serve_kwargs}),
            "toolchain": ToolchainConfig(**{**config.toolchain.model_dump(), **toolchain_kwargs}),
        }
        if os.environ.get("WCS_OUTPUT_DIR"):
            updates["output_dir"] = Path(os.environ["WCS_OUTPUT_DIR"])
        if os.environ.get("WCS_VERBOSE"):
            updates["verbose"] = os.environ["WCS_VERBOSE"].lower() in ("1", "true", "yes")

        return config.model_copy(update=updates)
