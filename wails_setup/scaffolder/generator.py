"""Project scaffolding for an existing Wails project.

Validates that the target directory is a Wails project, creates the fixed
directory layout and writes the fixed template files.  Every operation is
idempotent: directories are only created when missing and template files are
always overwritten with their packaged text.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from ..config import Config
from ..models import Marker, MarkerKind, SetupError, TemplateFile
from ..utils import load_json, print_status
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

MARKERS: tuple[Marker, ...] = (
    Marker(
        path="wails.json",
        kind=MarkerKind.FILE,
        message="wails.json not found. Are you in a Wails project root?",
    ),
    Marker(
        path="go.mod",
        kind=MarkerKind.FILE,
        message="go.mod not found. This doesn't appear to be a Go project.",
    ),
    Marker(
        path="frontend",
        kind=MarkerKind.DIRECTORY,
        message="frontend directory not found. This doesn't appear to be a Wails project.",
    ),
)

DIRECTORIES: tuple[str, ...] = (
    ".cursor/rules",
    "tests/unit",
    "tests/integration",
    "tests/mocks",
    "tests/fixtures",
    "internal/model",
    "internal/service",
    "internal/repository",
    "internal/config",
    "internal/connection",
)

TEMPLATE_FILES: tuple[TemplateFile, ...] = (
    TemplateFile(path=".cursorignore", template="cursorignore.j2"),
    TemplateFile(
        path=".cursor/rules/00-core-architecture.mdc",
        template="cursor/rules/00-core-architecture.mdc.j2",
    ),
    TemplateFile(
        path=".cursor/rules/01-go-backend.mdc",
        template="cursor/rules/01-go-backend.mdc.j2",
    ),
    TemplateFile(
        path=".cursor/rules/02-testing-tdd.mdc",
        template="cursor/rules/02-testing-tdd.mdc.j2",
    ),
    TemplateFile(
        path=".cursor/rules/03-database-sqlite.mdc",
        template="cursor/rules/03-database-sqlite.mdc.j2",
    ),
    TemplateFile(
        path=".cursor/rules/04-service-layer.mdc",
        template="cursor/rules/04-service-layer.mdc.j2",
    ),
    TemplateFile(
        path=".cursor/rules/05-sub-apps.mdc",
        template="cursor/rules/05-sub-apps.mdc.j2",
    ),
    TemplateFile(
        path=".cursor/rules/06-mac-development.mdc",
        template="cursor/rules/06-mac-development.mdc.j2",
    ),
    TemplateFile(path=".vscode/settings.json", template="vscode/settings.json.j2"),
    TemplateFile(
        path="tests/unit/sample_service_test.go",
        template="tests/unit/sample_service_test.go.j2",
    ),
    TemplateFile(
        path="tests/integration/sample_integration_test.go",
        template="tests/integration/sample_integration_test.go.j2",
    ),
    TemplateFile(
        path="tests/fixtures/test_helpers.go",
        template="tests/fixtures/test_helpers.go.j2",
    ),
    TemplateFile(path="Makefile", template="Makefile.j2"),
)

NEXT_STEPS_TEMPLATE = "next_steps.txt.j2"

MAKE_TARGETS: tuple[tuple[str, str], ...] = (
    ("dev", "Start development mode"),
    ("test", "Run all tests"),
    ("test-coverage", "Generate coverage report"),
    ("generate", "Generate mocks"),
    ("help", "See all available commands"),
)

EXAMPLE_PROMPTS: tuple[str, ...] = (
    "Add a new task management sub-app with CRUD operations",
    "Create unit tests for the existing anime prompt service",
    "Add validation to the report service with proper error handling",
    "Create an integration test for the user repository",
    "Add a new migration for a comments table",
)

STRUCTURE: tuple[tuple[str, str], ...] = (
    (".cursor/rules/", "Cursor AI configuration"),
    ("tests/", "Test organization"),
    ("internal/", "Go backend structure"),
    (".cursorignore", "Files to exclude from AI context"),
    (".vscode/settings.json", "Editor configuration"),
    ("Makefile", "Common development tasks"),
)


# ---------------------------------------------------------------------------
# Scaffolder
# ---------------------------------------------------------------------------


class ProjectScaffolder:
    """Materialises the Cursor/testing layout inside a Wails project root."""

    def __init__(
        self,
        config: Config,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.project_root = config.project_root
        self.renderer = renderer or TemplateRenderer()

    # -- Step 1 ------------------------------------------------------------

    def check_project(self) -> None:
        """Verify every marker path exists with the expected kind.

        Raises:
            SetupError: Naming the first missing marker.  Nothing on disk is
                touched before or during this check.
        """
        if not self.project_root.is_dir():
            raise SetupError(1, f"Project root is not a directory: {self.project_root}")

        for marker in MARKERS:
            target = self.project_root / marker.path
            present = target.is_dir() if marker.kind is MarkerKind.DIRECTORY else target.is_file()
            if not present:
                raise SetupError(1, marker.message)

    # -- Step 2 ------------------------------------------------------------

    async def create_directories(self) -> tuple[list[str], list[str]]:
        """Create every directory in :data:`DIRECTORIES` that is missing.

        Returns:
            ``(created, existing)`` lists of relative paths, in table order.
        """
        created: list[str] = []
        existing: list[str] = []
        for rel in DIRECTORIES:
            target = self.project_root / rel
            if target.is_dir():
                existing.append(rel)
                print_status(f"Directory already exists: {rel}")
                continue
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
            created.append(rel)
            print_status(f"Created directory: {rel}")
        return created, existing

    # -- Step 3 ------------------------------------------------------------

    async def write_templates(self) -> list[str]:
        """Write every entry of :data:`TEMPLATE_FILES`, replacing prior content.

        Returns:
            The relative paths written, in table order.
        """
        written: list[str] = []
        for entry in TEMPLATE_FILES:
            await self.renderer.copy_to_file(entry.template, self.project_root / entry.path)
            written.append(entry.path)
            print_status(f"Wrote {entry.path}")
        return written

    # -- Step 6 ------------------------------------------------------------

    def detect_project_name(self) -> str:
        """Return the ``name`` from ``wails.json``, else the directory name."""
        try:
            data = load_json(self.config.wails_json_path)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            data = {}
        name = data.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
        return self.project_root.resolve().name

    def render_next_steps(self, project_name: str, warning_count: int = 0) -> str:
        """Render the closing next-steps report."""
        context: dict[str, Any] = {
            "project_name": project_name,
            "warning_count": warning_count,
            "make_targets": MAKE_TARGETS,
            "example_prompts": EXAMPLE_PROMPTS,
            "structure": STRUCTURE,
        }
        return self.renderer.render(NEXT_STEPS_TEMPLATE, context)
