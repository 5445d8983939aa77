"""
Matrix run orchestration.

Threads the resolved environment through flag composition, planning and
execution. Every value handed from one stage to the next is immutable.
"""

from typing import Callable, List, Optional

from archmatrix.core.config import Config
from archmatrix.core.environment import RunEnvironment
from archmatrix.core.executor import ExecutionResult, execute
from archmatrix.core.flags import FlagSet, compose
from archmatrix.core.logging import get_logger
from archmatrix.core.planner import Invocation, plan
from archmatrix.utils.command_runner import format_command, run_command


class MatrixPipeline:
    """Compose, plan and run the test matrix for one target."""

    def __init__(self, config: Config, environment: RunEnvironment, runner: Callable = run_command):
        """
        Args:
            config: Configuration object
            environment: Resolved CI environment (target, base flags, toggles)
            runner: Command runner, replaceable in tests
        """
        self.config = config
        self.environment = environment
        self.runner = runner
        self.logger = get_logger(__name__)
        self._flags: Optional[FlagSet] = None

    @property
    def flags(self) -> FlagSet:
        if self._flags is None:
            self._flags = compose(self.environment.target, self.environment.base_flags)
        return self._flags

    def build_plan(self) -> List[Invocation]:
        """Build the invocation list without executing anything."""
        return plan(self.environment.target, self.environment.toggles, self.config.package_set)

    def summary_lines(self) -> List[str]:
        summary = self.environment.summary()
        summary["RUSTFLAGS"] = self.flags.render()
        return [f"{key}={value}" for key, value in summary.items()]

    def format_plan(self) -> List[str]:
        lines = [f"Plan for {self.environment.target}:"]
        for idx, invocation in enumerate(self.build_plan(), start=1):
            lines.append(f"{idx}. {invocation.describe()}")
            cmd = invocation.command(self.config.cargo, self.environment.target)
            lines.append(f"   cmd: {format_command(cmd)}")
            if invocation.cwd:
                lines.append(f"   cwd: {invocation.cwd}")
            if invocation.stdin is not None:
                lines.append(f"   stdin: {invocation.stdin!r}")
        return lines

    def print_plan(self) -> None:
        """Log a human-readable execution plan."""
        for line in self.format_plan():
            self.logger.info(line)

    def run(self) -> ExecutionResult:
        """
        Run the full matrix.

        Returns:
            ExecutionResult of the first failing invocation, or overall success
        """
        for line in self.summary_lines():
            self.logger.debug(line)

        invocations = self.build_plan()
        if self.config.verbosity >= 1:
            self.logger.info(f"Planned {len(invocations)} invocation(s) for {self.environment.target}")
        if self.config.verbosity >= 2:
            self.print_plan()
        if self.config.dry_run:
            self.logger.warning("DRY RUN MODE - No commands will be run")

        result = execute(
            invocations,
            self.flags,
            self.environment.toggles,
            target=self.environment.target,
            cargo=self.config.cargo,
            cwd=self.config.project_root,
            dry_run=self.config.dry_run,
            verbosity=self.config.verbosity,
            runner=self.runner,
        )
        if result.success:
            self.logger.info(f"Matrix passed in {result.duration_sec:.1f} seconds")
        elif not result.skipped:
            self.logger.error(f"Matrix failed after {result.duration_sec:.1f} seconds: {result.message}")
        return result
