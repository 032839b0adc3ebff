"""Wails + Cursor setup pipeline.

Implements the six-step setup run against a Wails project root:

Step 1: CHECK     -- Verify the Wails marker files and the Go toolchain.
Step 2: DIRS      -- Create the rules, tests and internal/ directory layout.
Step 3: TEMPLATES -- Write the Cursor rules, editor settings, test stubs, Makefile.
Step 4: INSTALL   -- Install mockery, testify and the SQLite driver; go mod tidy.
Step 5: VERIFY    -- Run sample tests, go generate and wails doctor (warnings only).
Step 6: SUMMARY   -- Print the next-steps report.

Steps 1-4 are fatal on failure and nothing is rolled back; every step is
idempotent, so the recovery is to fix the cause and run again.

Usage::

    python -m wails_setup
    python -m wails_setup --project-root ../my-wails-app --skip-verify
"""

from __future__ import annotations

import asyncio
import sys
import time
import traceback
from pathlib import Path

from rich.panel import Panel

from .config import Config
from .models import SetupError, SetupResult
from .scaffolder import ProjectScaffolder
from .toolchain import Toolchain
from .utils import (
    STEP_NAMES,
    console,
    format_duration,
    print_error,
    print_header,
    print_status,
    print_success,
    print_summary_table,
)


class SetupPipeline:
    """Drives the setup steps in order and collects a :class:`SetupResult`.

    Attributes:
        config: Settings for this run.
        scaffolder: Directory and template writer for the project root.
        toolchain: External Go/Wails command runner.
        result: Accumulated outcome, returned by :meth:`run`.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.scaffolder = ProjectScaffolder(config)
        self.toolchain = Toolchain(config)
        self.result = SetupResult()

    _FATAL_STEPS: dict[int, str] = {
        1: "step1_check",
        2: "step2_directories",
        3: "step3_templates",
        4: "step4_install",
    }

    async def run(self) -> SetupResult:
        """Execute the setup run.

        Returns:
            The :class:`SetupResult`; ``success`` is ``False`` only when one
            of steps 1-4 failed.
        """
        start = time.monotonic()

        console.print(
            Panel(
                f"[bold bright_cyan]Wails + Cursor Setup[/bold bright_cyan]\n"
                f"Project : {self.config.project_root.resolve()}",
                title="[bold]🚀 Setup Start[/bold]",
                border_style="bright_cyan",
            )
        )

        for step, method_name in self._FATAL_STEPS.items():
            if step == 4 and not self.config.run_install:
                self._note(f"Step 4 ({STEP_NAMES[4]}) skipped")
                continue

            print_header(STEP_NAMES[step], step)
            try:
                await getattr(self, method_name)()
                self.result.steps_completed.append(step)

            except SetupError as exc:
                self._fail(step, str(exc))
                if exc.stderr:
                    console.print(f"[dim]{exc.stderr}[/dim]")
                break

            except Exception as exc:
                self._fail(step, f"Step {step} ({STEP_NAMES[step]}): {exc}")
                console.print(f"[dim]{traceback.format_exc()}[/dim]")
                break

        if self.result.failed_step is None:
            if self.config.run_verify:
                print_header(STEP_NAMES[5], 5)
                await self.step5_verify()
                self.result.steps_completed.append(5)
            else:
                self._note(f"Step 5 ({STEP_NAMES[5]}) skipped")

            self.result.success = True
            print_header(f"{STEP_NAMES[6]}! 🚀", 6)
            self.step6_summary()
            self.result.steps_completed.append(6)

        self.result.duration_seconds = time.monotonic() - start
        self._print_final_summary()
        return self.result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def step1_check(self) -> None:
        """Validate the project root, then the Go toolchain.

        Runs before anything is written, so a failure here leaves the
        project untouched.
        """
        self.scaffolder.check_project()
        print_success("Valid Wails project detected")
        await self.toolchain.ensure_available()
        self._note("Valid Wails project detected")

    async def step2_directories(self) -> None:
        created, existing = await self.scaffolder.create_directories()
        self.result.created_dirs.extend(created)
        self.result.existing_dirs.extend(existing)
        print_success("Directory structure created")
        self._note(f"{len(created)} directories created, {len(existing)} already present")

    async def step3_templates(self) -> None:
        written = await self.scaffolder.write_templates()
        self.result.written_files.extend(written)
        print_success("Cursor rules, editor settings, sample tests and Makefile written")
        self._note(f"{len(written)} template files written")

    async def step4_install(self) -> None:
        self.result.warnings.extend(await self.toolchain.install())
        self._note("Go tools and dependencies installed")

    async def step5_verify(self) -> None:
        """Run verification; anything that goes wrong becomes a warning."""
        try:
            warnings = await self.toolchain.verify()
        except Exception as exc:
            warnings = [f"Verification aborted: {exc}"]
            console.print(f"[bold yellow]Verification aborted:[/bold yellow] {exc}")
        self.result.warnings.extend(warnings)
        self.result.verification_warnings.extend(warnings)

    def step6_summary(self) -> None:
        self.result.project_name = self.scaffolder.detect_project_name()
        report = self.scaffolder.render_next_steps(
            self.result.project_name, warning_count=len(self.result.warnings)
        )
        console.print(report)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _note(self, message: str) -> None:
        self.result.messages.append(message)

    def _fail(self, step: int, message: str) -> None:
        self.result.failed_step = step
        self.result.error = message
        self._note(message)
        print_error(message)

    def _print_final_summary(self) -> None:
        data = {
            "Project root": str(self.config.project_root.resolve()),
            "Directories created": str(len(self.result.created_dirs)),
            "Directories existing": str(len(self.result.existing_dirs)),
            "Files written": str(len(self.result.written_files)),
            "Warnings": str(len(self.result.warnings)),
            "Duration": format_duration(self.result.duration_seconds),
            "Status": "SUCCESS" if self.result.success else f"FAILED at step {self.result.failed_step}",
        }
        print_summary_table(data, title="Setup Summary")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``wails-cursor-setup`` / ``python -m wails_setup``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Set up Cursor rules, test layout and Go tooling in a Wails project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  wails-cursor-setup\n"
            "  wails-cursor-setup --project-root ../my-app --skip-verify\n"
            "  wails-cursor-setup --skip-install --strict\n"
        ),
    )
    parser.add_argument(
        "--project-root",
        default=".",
        help="Wails project root (default: current directory)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not install Go tools or dependencies",
    )
    parser.add_argument(
        "--skip-verify",
        action="store_true",
        help="Do not run the sample tests, go generate or wails doctor",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when verification produced warnings",
    )

    args = parser.parse_args(argv)

    config = Config(
        project_root=Path(args.project_root),
        run_install=not args.skip_install,
        run_verify=not args.skip_verify,
        strict=args.strict,
    )

    pipeline = SetupPipeline(config)
    result = asyncio.run(pipeline.run())

    code = result.exit_code(strict=config.strict)
    if code == 0:
        print_status("Setup finished.")
    elif code == 2:
        print_error("Setup finished with verification warnings (--strict).")
    else:
        print_error("Setup failed. Fix the reported problem and run the script again.")
    sys.exit(code)


if __name__ == "__main__":
    main()
