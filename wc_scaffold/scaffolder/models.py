"""Pydantic v2 models for a scaffold run.

A ``ScaffoldRequest`` is built once from user input and never changes; the
generator turns it into ``FileArtifact`` values that the pipeline writes to
disk.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ScaffoldRequest(BaseModel):
    """Inputs that fully determine the generated file set."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(
        ..., min_length=1, description="Directory name, README heading and manifest name"
    )
    verbose: bool = Field(default=False, description="Add listener and lifecycle stubs")


class FileArtifact(BaseModel):
    """One generated file: its path relative to the project root and its text."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str
