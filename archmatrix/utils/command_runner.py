"""
Command execution utilities.
"""

import shlex
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from archmatrix.core.logging import get_logger


def format_command(cmd: List[str]) -> str:
    return " ".join(shlex.quote(part) for part in cmd)


def run_command(
    cmd: List[str],
    cwd: Optional[Path] = None,
    check: bool = False,
    capture_output: bool = False,
    verbosity: int = 0,
    env: Optional[dict] = None,
    input_text: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Run a command synchronously and wait for it to exit.

    Output is streamed to the console unless capture_output is set, so cargo's
    own progress and test output appear in order with our log lines.

    Args:
        cmd: Command to run as list of strings
        cwd: Working directory (default: current directory)
        check: Whether to raise exception on non-zero exit code
        capture_output: Whether to capture stdout/stderr
        verbosity: Verbosity level (0=minimal, 1=progress, 2=commands, 3=debug)
        env: Optional environment variables dict
        input_text: Text written to the command's stdin

    Returns:
        CompletedProcess object

    Raises:
        subprocess.CalledProcessError: If command fails and check=True
        FileNotFoundError: If command not found
    """
    logger = get_logger(__name__)

    if verbosity >= 3:
        logger.debug(f"Running: {format_command(cmd)}")
        if cwd:
            logger.debug(f"Directory: {cwd}")
    elif verbosity >= 2:
        logger.info(f"Running: {format_command(cmd)}")
        if cwd:
            logger.info(f"Directory: {cwd}")

    # Flush our own output so it is not interleaved with the child's.
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=check,
            env=env,
            input=input_text,
            capture_output=capture_output,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed with exit code {e.returncode}")
        if capture_output and e.stderr:
            logger.info(f"stderr: {e.stderr}")
        raise
    except FileNotFoundError as e:
        logger.error(f"Command not found: {e}")
        raise

    if result.returncode != 0 and verbosity >= 1:
        logger.debug(f"Exit code {result.returncode}: {format_command(cmd)}")
    return result
