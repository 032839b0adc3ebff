"""Shared pytest fixtures for the Wails + Cursor setup test suite.

Provides reusable fixtures for:
- Temporary Wails project roots (with and without marker files)
- A faked external toolchain (``go``, ``wails``) so no real binaries run
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from wails_setup.config import Config


GO_MOD_WITH_WAILS = """module example.com/demo

go 1.22

require github.com/wailsapp/wails/v2 v2.8.0
"""

GO_VERSION_OUTPUT = "go version go1.22.0 linux/amd64"


# ---------------------------------------------------------------------------
# Project roots
# ---------------------------------------------------------------------------

@pytest.fixture
def wails_project(tmp_path: Path) -> Path:
    """A minimal valid Wails project: wails.json, go.mod and frontend/."""
    root = tmp_path / "demo-app"
    root.mkdir()
    (root / "wails.json").write_text(json.dumps({"name": "demo"}), encoding="utf-8")
    (root / "go.mod").write_text(GO_MOD_WITH_WAILS, encoding="utf-8")
    (root / "frontend").mkdir()
    yield root


@pytest.fixture
def bare_wails_project(tmp_path: Path) -> Path:
    """Empty marker files only: empty wails.json, empty go.mod, empty frontend/."""
    root = tmp_path / "bare-app"
    root.mkdir()
    (root / "wails.json").write_text("", encoding="utf-8")
    (root / "go.mod").write_text("", encoding="utf-8")
    (root / "frontend").mkdir()
    yield root


@pytest.fixture
def make_config():
    """Factory for a Config pointed at a project root."""

    def _make(root: Path, **overrides: Any) -> Config:
        return Config(project_root=root, **overrides)

    return _make


def _snapshot_tree(root: Path) -> dict[str, bytes | None]:
    return {
        p.relative_to(root).as_posix(): (None if p.is_dir() else p.read_bytes())
        for p in sorted(root.rglob("*"))
    }


@pytest.fixture
def snapshot_tree():
    """Callable mapping every path under a root to its bytes (``None`` for dirs)."""
    return _snapshot_tree


# ---------------------------------------------------------------------------
# Fake toolchain
# ---------------------------------------------------------------------------

class FakeToolchain:
    """Records toolchain commands and returns scripted exit codes.

    ``failures`` maps a command prefix (joined with spaces) to the exit code
    that command should return; everything else exits 0.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.failures: dict[str, int] = {}
        self.missing: set[str] = set()

    async def run_command(self, cmd, cwd=None, capture=True):
        self.calls.append(list(cmd))
        joined = " ".join(cmd)
        for prefix, code in self.failures.items():
            if joined.startswith(prefix):
                return (code, "", f"{prefix} failed")
        if cmd[1:] == ["version"]:
            return (0, GO_VERSION_OUTPUT, "")
        return (0, "", "")

    def which(self, name: str) -> str | None:
        return None if name in self.missing else f"/usr/local/bin/{name}"

    def commands(self) -> list[str]:
        return [" ".join(c) for c in self.calls]


@pytest.fixture
def fake_toolchain():
    """Patch subprocess execution and PATH lookup inside ``wails_setup.toolchain``."""
    fake = FakeToolchain()
    with patch("wails_setup.toolchain.run_command", new=AsyncMock(side_effect=fake.run_command)), \
            patch("wails_setup.toolchain.shutil.which", side_effect=fake.which):
        yield fake
