"""
Core modules for archmatrix.
"""

from archmatrix.core.config import Config
from archmatrix.core.discovery import find_workspace_root, find_examples_dir
from archmatrix.core.environment import RunEnvironment, Toggles, parse_toggle, resolve_environment
from archmatrix.core.errors import (
    ArchMatrixError,
    ConfigurationError,
    WorkspaceRootNotFoundError,
    PathNotFoundError,
    InvocationError,
)
from archmatrix.core.executor import ExecutionResult, ExecutionStatus, execute
from archmatrix.core.flags import FlagSet, compose
from archmatrix.core.planner import Invocation, Mode, Package, PackageSet, plan

__all__ = [
    "Config",
    "find_workspace_root",
    "find_examples_dir",
    "RunEnvironment",
    "Toggles",
    "parse_toggle",
    "resolve_environment",
    "ArchMatrixError",
    "ConfigurationError",
    "WorkspaceRootNotFoundError",
    "PathNotFoundError",
    "InvocationError",
    "ExecutionResult",
    "ExecutionStatus",
    "execute",
    "FlagSet",
    "compose",
    "Invocation",
    "Mode",
    "Package",
    "PackageSet",
    "plan",
]
