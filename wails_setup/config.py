"""Wails + Cursor setup configuration.

Typed configuration for a setup run.  Settings are Pydantic v2 models so they
are validated at construction time.  Nothing is read from the environment:
defaults cover the standard Wails layout and the CLI overrides the rest.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ToolchainConfig(BaseModel):
    """Names of the external binaries and Go modules the setup relies on."""

    go_binary: str = Field(default="go")
    wails_binary: str = Field(default="wails")
    mockery_module: str = Field(default="github.com/vektra/mockery/v2@latest")
    testify_packages: list[str] = Field(
        default=[
            "github.com/stretchr/testify/assert",
            "github.com/stretchr/testify/mock",
            "github.com/stretchr/testify/require",
        ]
    )
    sqlite_module: str = Field(
        default="github.com/mattn/go-sqlite3",
        description="Added with `go get` unless go.mod already references it",
    )
    wails_module: str = Field(
        default="github.com/wailsapp/wails/v2",
        description="Expected in go.mod; its absence only produces a warning",
    )


class Config(BaseModel):
    """Settings for one setup run against a single project root."""

    project_root: Path = Field(default_factory=Path.cwd)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)

    run_install: bool = Field(default=True, description="Run the Go tool installation step")
    run_verify: bool = Field(default=True, description="Run the verification step")
    strict: bool = Field(
        default=False,
        description="Report verification warnings through a non-zero exit code",
    )

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def wails_json_path(self) -> Path:
        """Path to the project's ``wails.json``."""
        return self.project_root / "wails.json"

    @property
    def go_mod_path(self) -> Path:
        """Path to the project's ``go.mod``."""
        return self.project_root / "go.mod"
