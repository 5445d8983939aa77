import logging
import subprocess
from pathlib import Path

from archmatrix.core.config import Config
from archmatrix.core.environment import resolve_environment
from archmatrix.core.pipeline import MatrixPipeline


def _pipeline(workspace: Path, verbosity: int, calls: list) -> MatrixPipeline:
    def runner(cmd, cwd=None, env=None, input_text=None, verbosity=0):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0)

    config = Config(project_root=workspace, verbosity=verbosity)
    environment = resolve_environment({"TARGET": "x86_64-unknown-linux-gnu"})
    return MatrixPipeline(config, environment, runner=runner)


def test_run_logs_plan_at_verbosity_two(workspace: Path, caplog):
    caplog.set_level(logging.INFO, logger="archmatrix")
    calls = []

    result = _pipeline(workspace, 2, calls).run()

    assert result.success
    assert len(calls) == 13
    assert "Plan for x86_64-unknown-linux-gnu:" in caplog.messages
    assert "13. examples run --release hex" in caplog.messages


def test_run_keeps_plan_quiet_by_default(workspace: Path, caplog):
    caplog.set_level(logging.INFO, logger="archmatrix")
    calls = []

    result = _pipeline(workspace, 0, calls).run()

    assert result.success
    assert not any(message.startswith("Plan for") for message in caplog.messages)
