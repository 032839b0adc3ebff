"""Go toolchain invocation for the setup run.

Wraps the external binaries the setup depends on (``go``, ``mockery`` via
``go install``, ``wails``).  Installation commands are required: a non-zero
exit raises :class:`SetupError`.  Verification commands are advisory: their
failures come back as warning strings.
"""

from __future__ import annotations

import shutil

from .config import Config
from .models import SetupError, ToolInvocation
from .utils import print_status, print_success, print_warning, run_command


class Toolchain:
    """Runs Go and Wails commands inside a project root.

    Every command is attempted exactly once and waits for the process to
    exit; there are no retries and no timeouts.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.project_root = config.project_root
        self.tools = config.toolchain

    # -- Availability --------------------------------------------------------

    async def ensure_available(self) -> str:
        """Check the Go binary is on ``PATH`` and return ``go version`` output.

        Raises:
            SetupError: If Go is missing or cannot report its version.
        """
        go = self.tools.go_binary
        if shutil.which(go) is None:
            raise SetupError(1, "Go is not installed. Please install Go first.", command=go)

        returncode, stdout, stderr = await run_command(
            [go, "version"], cwd=self.project_root, capture=True
        )
        if returncode != 0:
            raise SetupError(
                1,
                f"`{go} version` failed (exit {returncode})",
                command=f"{go} version",
                stderr=stderr,
            )
        print_status(f"Go version: {stdout}")
        return stdout

    # -- Installation --------------------------------------------------------

    def install_plan(self) -> list[ToolInvocation]:
        """Build the ordered list of installation commands.

        The SQLite driver is only fetched when ``go.mod`` does not already
        reference it.
        """
        go = self.tools.go_binary
        plan = [
            ToolInvocation(
                label="Installing mockery for mock generation",
                command=[go, "install", self.tools.mockery_module],
            ),
        ]
        for package in self.tools.testify_packages:
            plan.append(
                ToolInvocation(label=f"Fetching {package}", command=[go, "get", package])
            )
        if self.tools.sqlite_module not in self._read_go_mod():
            plan.append(
                ToolInvocation(
                    label="Adding SQLite driver",
                    command=[go, "get", self.tools.sqlite_module],
                )
            )
        plan.append(ToolInvocation(label="Tidying dependencies", command=[go, "mod", "tidy"]))
        return plan

    async def install(self) -> list[str]:
        """Run the installation plan, stopping at the first failure.

        Returns:
            Non-fatal warnings raised while installing.

        Raises:
            SetupError: On the first command that exits non-zero.
        """
        warnings: list[str] = []
        plan = self.install_plan()

        # Checked before `go mod tidy` runs, against go.mod as the operator left it.
        if self.tools.wails_module not in self._read_go_mod():
            warning = "Wails v2 not found in go.mod. This might not be a Wails project."
            print_warning(warning)
            warnings.append(warning)

        for invocation in plan:
            await self._invoke(invocation, step=4)

        print_success("Go tools and dependencies installed")
        return warnings

    # -- Verification --------------------------------------------------------

    def verify_plan(self) -> list[ToolInvocation]:
        """Build the ordered list of advisory verification commands."""
        go = self.tools.go_binary
        return [
            ToolInvocation(
                label="Running sample tests",
                command=[go, "test", "-v", "./tests/unit/...", "./tests/integration/..."],
                required=False,
            ),
            ToolInvocation(
                label="Generating mocks (if any interfaces exist)",
                command=[go, "generate", "./..."],
                required=False,
                capture=True,
            ),
            ToolInvocation(
                label="Checking Wails build",
                command=[self.tools.wails_binary, "doctor"],
                required=False,
                capture=True,
            ),
        ]

    async def verify(self) -> list[str]:
        """Run the verification commands.

        Never raises for a failing command; each failure is reported and
        returned as a warning string.
        """
        warnings: list[str] = []
        sample_tests, generate, doctor = self.verify_plan()

        if await self._invoke(sample_tests, step=5) == 0:
            print_success("Sample tests passed")
        else:
            warnings.append(
                _warn("Some tests failed, but this is expected with sample data")
            )

        if await self._invoke(generate, step=5) != 0:
            warnings.append(_warn("go generate reported errors; run 'go generate ./...' for details."))

        if shutil.which(self.tools.wails_binary) is None:
            warnings.append(
                _warn(f"{self.tools.wails_binary} CLI not found on PATH; skipped 'wails doctor'.")
            )
        elif await self._invoke(doctor, step=5) == 0:
            print_success("Wails is properly configured")
        else:
            warnings.append(
                _warn("Wails doctor found issues. Run 'wails doctor' for details.")
            )

        print_success("Setup verification complete")
        return warnings

    # -- Internals -----------------------------------------------------------

    async def _invoke(self, invocation: ToolInvocation, step: int) -> int:
        """Run one invocation and return its exit code.

        Required invocations raise :class:`SetupError` on a non-zero exit or
        when the binary cannot be started.
        """
        print_status(f"{invocation.label}...")
        try:
            returncode, _stdout, stderr = await run_command(
                invocation.command,
                cwd=self.project_root,
                capture=invocation.capture,
            )
        except OSError as exc:
            if invocation.required:
                raise SetupError(
                    step, f"Could not start `{invocation.display}`: {exc}",
                    command=invocation.display,
                ) from exc
            return 127

        if returncode != 0 and invocation.required:
            raise SetupError(
                step,
                f"`{invocation.display}` failed (exit {returncode})",
                command=invocation.display,
                stderr=stderr,
            )
        return returncode

    def _read_go_mod(self) -> str:
        """Return the text of the configured ``go.mod``.

        Step 1 has already checked the file exists, so a read error here
        propagates as a step failure.
        """
        return self.config.go_mod_path.read_text(encoding="utf-8")


def _warn(message: str) -> str:
    print_warning(message)
    return message
