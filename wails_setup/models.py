"""Pydantic v2 models shared by the setup steps.

Describes the static tables the scaffolder works from (marker paths, template
files, tool invocations) and the result reported back to the CLI.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .utils import STEP_NAMES


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class MarkerKind(str, Enum):
    """Whether a marker path must be a regular file or a directory."""
    FILE = "file"
    DIRECTORY = "directory"


# ---------------------------------------------------------------------------
# Static table entries
# ---------------------------------------------------------------------------

class Marker(BaseModel):
    """A path that must already exist for the project root to be accepted."""

    path: str
    kind: MarkerKind
    message: str = Field(description="Error shown when the marker is missing")


class TemplateFile(BaseModel):
    """A fixed-content file written verbatim into the project."""

    path: str = Field(description="Destination, relative to the project root")
    template: str = Field(description="Template name, relative to the template directory")


class ToolInvocation(BaseModel):
    """A single external command run during installation or verification."""

    label: str
    command: list[str]
    required: bool = Field(default=True, description="Non-zero exit aborts the run")
    capture: bool = Field(default=False, description="Capture output instead of streaming it")

    @property
    def display(self) -> str:
        return " ".join(self.command)


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

class SetupResult(BaseModel):
    """Outcome of a setup run."""

    success: bool = False
    project_name: str = ""
    messages: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Every non-fatal warning, in the order raised",
    )
    verification_warnings: list[str] = Field(
        default_factory=list,
        description="The subset of warnings raised by step 5",
    )
    created_dirs: list[str] = Field(default_factory=list)
    existing_dirs: list[str] = Field(default_factory=list)
    written_files: list[str] = Field(default_factory=list)
    steps_completed: list[int] = Field(default_factory=list)
    failed_step: Optional[int] = None
    error: str = ""
    duration_seconds: float = 0.0

    @property
    def degraded(self) -> bool:
        """True when the run succeeded but step 5 raised warnings.

        Warnings from earlier steps (such as a go.mod without Wails) do not
        count.
        """
        return self.success and bool(self.verification_warnings)

    def exit_code(self, strict: bool = False) -> int:
        """Process exit status: 0 success, 1 fatal failure, 2 degraded under *strict*."""
        if not self.success:
            return 1
        if strict and self.degraded:
            return 2
        return 0


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SetupError(Exception):
    """Raised when a setup step fails in a way that must abort the run."""

    def __init__(
        self, step: int, message: str, command: str = "", stderr: str = ""
    ) -> None:
        self.step = step
        self.command = command
        self.stderr = stderr
        super().__init__(f"Step {step} ({STEP_NAMES.get(step, '?')}): {message}")
