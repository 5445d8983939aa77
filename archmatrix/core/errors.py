"""
Custom exceptions for archmatrix.
"""

from typing import Optional


class ArchMatrixError(Exception):
    """Base exception for all archmatrix errors."""
    pass


class ConfigurationError(ArchMatrixError):
    """Raised when the environment or configuration is invalid."""
    pass


class WorkspaceRootNotFoundError(ArchMatrixError):
    """Raised when the cargo workspace root cannot be found."""
    pass


class PathNotFoundError(ArchMatrixError):
    """Raised when a required path does not exist."""
    pass


class InvocationError(ArchMatrixError):
    """Raised when a planned cargo invocation exits non-zero or cannot be started."""

    def __init__(self, invocation, returncode: int, reason: Optional[str] = None):
        self.invocation = invocation
        self.returncode = returncode
        self.reason = reason
        message = f"{invocation.describe()} failed with exit code {returncode}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
