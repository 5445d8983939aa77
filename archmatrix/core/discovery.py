"""
Workspace root discovery utilities.

The workspace root is the directory cargo is invoked from: it holds the
top-level Cargo.toml and the crates/ directory. Discovery walks up from the
current directory so the tool works from anywhere inside the checkout.
"""

import os
from pathlib import Path
from typing import Optional

from archmatrix.core.errors import PathNotFoundError, WorkspaceRootNotFoundError


# Marker files/directories that indicate the workspace root
WORKSPACE_MARKERS = [
    "Cargo.toml",
    "crates",
]

ROOT_ENV_VAR = "ARCHMATRIX_ROOT"


def find_workspace_root(start_path: Optional[Path] = None) -> Path:
    """
    Find the workspace root by walking up from start_path looking for markers.

    Args:
        start_path: Starting directory (default: current working directory)

    Returns:
        Path to the workspace root

    Raises:
        WorkspaceRootNotFoundError: If the workspace root cannot be found
    """
    if start_path is None:
        start_path = Path.cwd()
    else:
        start_path = Path(start_path).resolve()

    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        env_path = Path(env_root).resolve()
        if _is_workspace_root(env_path):
            return env_path
        raise WorkspaceRootNotFoundError(
            f"Environment variable {ROOT_ENV_VAR} points to invalid location: {env_root}"
        )

    current = start_path.resolve()
    while True:
        if _is_workspace_root(current):
            return current
        if current == current.parent:
            break
        current = current.parent

    raise WorkspaceRootNotFoundError(
        f"Could not find workspace root starting from {start_path}. "
        f"Looking for: {', '.join(WORKSPACE_MARKERS)}. "
        f"Set {ROOT_ENV_VAR} environment variable to override."
    )


def _is_workspace_root(path: Path) -> bool:
    """Check if a path looks like the workspace root."""
    if not path.is_dir():
        return False
    return (path / "Cargo.toml").is_file() and (path / "crates").is_dir()


def find_examples_dir(workspace_root: Optional[Path] = None) -> Path:
    """
    Find the examples crate directory.

    Raises:
        WorkspaceRootNotFoundError: If the workspace root cannot be found
        PathNotFoundError: If the examples directory doesn't exist
    """
    root = workspace_root if workspace_root is not None else find_workspace_root()
    examples_dir = root / "examples"
    if not examples_dir.is_dir():
        raise PathNotFoundError(f"Examples directory not found: {examples_dir}")
    return examples_dir
