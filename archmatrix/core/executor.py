"""
Sequential execution of a planned invocation list.
"""

from __future__ import annotations

import os
import shlex
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from archmatrix.core.environment import (
    DISABLE_ASSERT_INSTR_VAR,
    FEATURES_VAR,
    FLAGS_VAR,
    OBJDUMP_VAR,
    TEST_EVERYTHING_VAR,
    Toggles,
)
from archmatrix.core.errors import InvocationError
from archmatrix.core.flags import FlagSet
from archmatrix.core.logging import get_logger
from archmatrix.core.planner import Invocation
from archmatrix.utils.command_runner import format_command, run_command

# Shell conventions for commands that could not be started.
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126
SPAWN_FAILED = 1


class ExecutionStatus(Enum):
    """Terminal outcome of a run."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ExecutionResult:
    """Result of executing a plan."""
    status: ExecutionStatus
    message: str
    completed: List[Invocation] = field(default_factory=list)
    failed: Optional[Invocation] = None
    returncode: int = 0
    error: Optional[InvocationError] = None
    duration_sec: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS

    @property
    def skipped(self) -> bool:
        return self.status == ExecutionStatus.SKIPPED

    @property
    def exit_code(self) -> int:
        """Process exit code for this result."""
        if self.status != ExecutionStatus.FAILED:
            return 0
        if self.returncode > 0:
            return self.returncode
        if self.returncode < 0:
            return 128 - self.returncode
        return 1


def passthrough_env(toggles: Toggles) -> dict[str, str]:
    """Toggle values re-exported to the test harnesses."""
    env = {}
    if toggles.features:
        env[FEATURES_VAR] = toggles.features
    if toggles.objdump:
        env[OBJDUMP_VAR] = toggles.objdump
    if toggles.disable_assert_instr:
        env[DISABLE_ASSERT_INSTR_VAR] = "1"
    if toggles.test_everything:
        env[TEST_EVERYTHING_VAR] = "1"
    return env


def invocation_env(
    invocation: Invocation,
    flags: FlagSet,
    toggles: Toggles,
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """
    Child environment for one invocation.

    Layers, later wins: ambient environment, toggle pass-through, RUSTFLAGS
    (run flags plus the invocation's extra flags), the invocation's overlay.
    """
    env = dict(os.environ if environ is None else environ)
    env.update(passthrough_env(toggles))
    env[FLAGS_VAR] = flags.extend(invocation.extra_flags).render()
    env.update(invocation.overlay())
    return env


def shell_line(invocation: Invocation, flags: FlagSet, cargo: str, target: str) -> str:
    """Shell equivalent of one invocation, for dry runs."""
    assignments = {FLAGS_VAR: flags.extend(invocation.extra_flags).render(), **invocation.overlay()}
    parts = [f"{key}={shlex.quote(value)}" for key, value in assignments.items()]
    parts.append(format_command(invocation.command(cargo, target)))
    line = " ".join(parts)
    if invocation.stdin is not None:
        # a here-string adds the trailing newline back
        line += f" <<< {shlex.quote(invocation.stdin.rstrip(chr(10)))}"
    if invocation.cwd:
        line = f"(cd {shlex.quote(invocation.cwd)} && {line})"
    return line


def execute(
    plan: Sequence[Invocation],
    flags: FlagSet,
    toggles: Toggles,
    *,
    target: str,
    cargo: str = "cargo",
    cwd: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    dry_run: bool = False,
    verbosity: int = 0,
    runner: Callable = run_command,
) -> ExecutionResult:
    """
    Run each invocation in order, stopping at the first non-zero exit.

    Args:
        plan: Invocations from the planner, run in the given order
        flags: Run-wide flag set exported as RUSTFLAGS
        toggles: Resolved toggles; pass-through values are exported
        target: Target triple passed to cargo
        cargo: cargo executable
        cwd: Workspace root; invocation directories are relative to it
        environ: Ambient environment (default: os.environ)
        dry_run: Log the commands without running them
        verbosity: Verbosity level (0-3)
        runner: Callable with the run_command signature

    Returns:
        ExecutionResult; on failure it names the failing invocation and status
    """
    logger = get_logger(__name__)
    root = Path(cwd) if cwd is not None else Path.cwd()
    start = time.perf_counter()
    completed: List[Invocation] = []

    if dry_run:
        lines = [shell_line(inv, flags, cargo, target) for inv in plan]
        for line in lines:
            logger.info(f"DRY RUN: {line}")
        return ExecutionResult(
            status=ExecutionStatus.SKIPPED,
            message="DRY RUN: Would run:\n" + "\n".join(lines),
            duration_sec=time.perf_counter() - start,
        )

    total = len(plan)
    for index, invocation in enumerate(plan, start=1):
        cmd = invocation.command(cargo, target)
        env = invocation_env(invocation, flags, toggles, environ)
        run_dir = root / invocation.cwd if invocation.cwd else root

        if verbosity >= 1:
            logger.info(f"[{index}/{total}] {invocation.describe()}")
        logger.debug(f"RUSTFLAGS={env[FLAGS_VAR]}")

        reason = None
        if not run_dir.is_dir():
            returncode = SPAWN_FAILED
            reason = f"working directory not found: {run_dir}"
        else:
            try:
                completed_process = runner(
                    cmd,
                    cwd=run_dir,
                    env=env,
                    input_text=invocation.stdin,
                    verbosity=verbosity,
                )
                returncode = completed_process.returncode
            except FileNotFoundError as e:
                returncode = COMMAND_NOT_FOUND
                reason = f"command not found: {e.filename or cmd[0]}"
            except PermissionError as e:
                returncode = COMMAND_NOT_EXECUTABLE
                reason = f"permission denied: {e.filename or cmd[0]}"
            except OSError as e:
                returncode = SPAWN_FAILED
                reason = str(e)

        if returncode != 0:
            error = InvocationError(invocation, returncode, reason)
            logger.error(f"✗ {error} (RUSTFLAGS={env[FLAGS_VAR]})")
            return ExecutionResult(
                status=ExecutionStatus.FAILED,
                message=str(error),
                completed=completed,
                failed=invocation,
                returncode=returncode,
                error=error,
                duration_sec=time.perf_counter() - start,
            )
        completed.append(invocation)

    duration = time.perf_counter() - start
    if verbosity >= 1:
        logger.info(f"All {total} invocations passed in {duration:.1f} seconds")
    return ExecutionResult(
        status=ExecutionStatus.SUCCESS,
        message=f"All {total} invocations passed",
        completed=completed,
        duration_sec=duration,
    )
