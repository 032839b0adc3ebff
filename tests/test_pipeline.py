"""Unit tests for the setup pipeline (wails_setup.pipeline).

Tests cover:
- SetupPipeline.run success path and step bookkeeping
- Precondition gating (no mutations, no commands)
- Missing toolchain aborts before mutation
- Fatal install failures vs non-fatal verification failures
- Unexpected exceptions inside a step
- --skip-install / --skip-verify
- main() exit codes
- Running the package with ``python -m wails_setup``
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from wails_setup.pipeline import SetupPipeline, main
from wails_setup.scaffolder import DIRECTORIES, TEMPLATE_FILES


pytestmark = pytest.mark.unit


class TestRunSuccess:
    async def test_full_run(self, wails_project: Path, make_config, fake_toolchain):
        result = await SetupPipeline(make_config(wails_project)).run()

        assert result.success is True
        assert result.failed_step is None
        assert result.steps_completed == [1, 2, 3, 4, 5, 6]
        assert result.created_dirs == list(DIRECTORIES)
        assert result.written_files == [t.path for t in TEMPLATE_FILES]
        assert result.warnings == []
        assert result.project_name == "demo"
        assert result.exit_code() == 0

    async def test_command_sequence(self, wails_project: Path, make_config, fake_toolchain):
        await SetupPipeline(make_config(wails_project)).run()
        commands = fake_toolchain.commands()
        assert commands[0] == "go version"
        assert commands.index("go mod tidy") < commands.index(
            "go test -v ./tests/unit/... ./tests/integration/..."
        )
        assert commands[-1] == "wails doctor"

    async def test_messages_recorded(self, wails_project: Path, make_config, fake_toolchain):
        result = await SetupPipeline(make_config(wails_project)).run()
        assert "Valid Wails project detected" in result.messages
        assert "10 directories created, 0 already present" in result.messages
        assert "13 template files written" in result.messages

    async def test_duration_recorded(self, wails_project: Path, make_config, fake_toolchain):
        result = await SetupPipeline(make_config(wails_project)).run()
        assert result.duration_seconds >= 0


class TestPreconditionGating:
    @pytest.mark.parametrize("missing", ["wails.json", "go.mod", "frontend"])
    async def test_missing_marker_mutates_nothing(
        self, wails_project: Path, make_config, fake_toolchain, snapshot_tree, missing
    ):
        target = wails_project / missing
        if target.is_dir():
            target.rmdir()
        else:
            target.unlink()
        before = snapshot_tree(wails_project)

        result = await SetupPipeline(make_config(wails_project)).run()

        assert result.success is False
        assert result.failed_step == 1
        assert missing in result.error
        assert result.exit_code() == 1
        assert snapshot_tree(wails_project) == before
        assert fake_toolchain.calls == []

    async def test_missing_go_mutates_nothing(
        self, wails_project: Path, make_config, fake_toolchain, snapshot_tree
    ):
        fake_toolchain.missing.add("go")
        before = snapshot_tree(wails_project)

        result = await SetupPipeline(make_config(wails_project)).run()

        assert result.success is False
        assert result.failed_step == 1
        assert "Go is not installed" in result.error
        assert snapshot_tree(wails_project) == before


class TestFatalVsWarning:
    async def test_install_failure_is_fatal(self, wails_project: Path, make_config, fake_toolchain):
        fake_toolchain.failures["go mod tidy"] = 1

        result = await SetupPipeline(make_config(wails_project)).run()

        assert result.success is False
        assert result.failed_step == 4
        assert result.exit_code() == 1
        assert result.steps_completed == [1, 2, 3]
        assert "go test" not in " ".join(fake_toolchain.commands())
        # Earlier steps are not rolled back.
        assert (wails_project / "Makefile").is_file()

    async def test_verify_failure_is_warning(self, wails_project: Path, make_config, fake_toolchain):
        fake_toolchain.failures.update({"go test": 1, "wails doctor": 1})

        result = await SetupPipeline(make_config(wails_project)).run()

        assert result.success is True
        assert result.exit_code() == 0
        assert result.exit_code(strict=True) == 2
        assert len(result.warnings) == 2
        assert result.verification_warnings == result.warnings
        assert 6 in result.steps_completed

    async def test_verify_exception_is_warning(self, wails_project: Path, make_config, fake_toolchain):
        pipeline = SetupPipeline(make_config(wails_project))
        with patch.object(pipeline.toolchain, "verify", new=AsyncMock(side_effect=RuntimeError("boom"))):
            result = await pipeline.run()

        assert result.success is True
        assert result.warnings == ["Verification aborted: boom"]
        assert result.verification_warnings == ["Verification aborted: boom"]

    async def test_install_warning_is_not_a_verification_warning(
        self, bare_wails_project: Path, make_config, fake_toolchain
    ):
        result = await SetupPipeline(make_config(bare_wails_project)).run()

        assert result.warnings == ["Wails v2 not found in go.mod. This might not be a Wails project."]
        assert result.verification_warnings == []
        assert result.degraded is False
        assert result.exit_code(strict=True) == 0

    async def test_unexpected_error_in_step(self, wails_project: Path, make_config, fake_toolchain):
        pipeline = SetupPipeline(make_config(wails_project))
        with patch.object(
            pipeline.scaffolder, "write_templates", new=AsyncMock(side_effect=PermissionError("denied"))
        ):
            result = await pipeline.run()

        assert result.success is False
        assert result.failed_step == 3
        assert "denied" in result.error
        assert fake_toolchain.commands() == ["go version"]


class TestSkipFlags:
    async def test_skip_install(self, wails_project: Path, make_config, fake_toolchain):
        result = await SetupPipeline(make_config(wails_project, run_install=False)).run()
        assert result.success is True
        assert 4 not in result.steps_completed
        assert not any(c.startswith("go get") for c in fake_toolchain.commands())

    async def test_skip_verify(self, wails_project: Path, make_config, fake_toolchain):
        result = await SetupPipeline(make_config(wails_project, run_verify=False)).run()
        assert result.success is True
        assert 5 not in result.steps_completed
        assert "wails doctor" not in fake_toolchain.commands()


class TestMain:
    def test_success_exits_zero(self, wails_project: Path, fake_toolchain):
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-root", str(wails_project)])
        assert exc_info.value.code == 0

    def test_failure_exits_one(self, tmp_path: Path, fake_toolchain):
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-root", str(tmp_path)])
        assert exc_info.value.code == 1

    def test_strict_with_warnings_exits_two(self, wails_project: Path, fake_toolchain):
        fake_toolchain.failures["wails doctor"] = 1
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-root", str(wails_project), "--strict"])
        assert exc_info.value.code == 2

    def test_strict_ignores_install_warnings(self, bare_wails_project: Path, fake_toolchain):
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-root", str(bare_wails_project), "--strict"])
        assert exc_info.value.code == 0

    def test_warnings_without_strict_exit_zero(self, wails_project: Path, fake_toolchain):
        fake_toolchain.failures["go test"] = 1
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-root", str(wails_project)])
        assert exc_info.value.code == 0

    def test_defaults_to_cwd(self, wails_project: Path, fake_toolchain, monkeypatch):
        monkeypatch.chdir(wails_project)
        with pytest.raises(SystemExit) as exc_info:
            main(["--skip-install", "--skip-verify"])
        assert exc_info.value.code == 0
        assert (wails_project / ".cursorignore").is_file()


class TestModuleEntry:
    def test_python_dash_m_help(self):
        repo_root = Path(__file__).resolve().parents[1]
        completed = subprocess.run(
            [sys.executable, "-m", "wails_setup", "--help"],
            cwd=repo_root,
            capture_output=True,
            text=True,
        )
        assert completed.returncode == 0, completed.stderr
        assert "--project-root" in completed.stdout
        assert "--strict" in completed.stdout
