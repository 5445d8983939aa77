"""
archmatrix

Per-target test matrix runner for the SIMD crates workspace.
"""

__version__ = "0.1.0"

from archmatrix.core.config import Config
from archmatrix.core.pipeline import MatrixPipeline

__all__ = [
    "Config",
    "MatrixPipeline",
]
