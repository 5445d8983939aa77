"""
Environment resolution.

Reads the target triple and the CI toggles from the process environment.
Only the literal string "1" turns a toggle on; any other value, including
"true" or "yes", leaves it off.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from archmatrix.core.errors import ConfigurationError


TARGET_VAR = "TARGET"
FLAGS_VAR = "RUSTFLAGS"
NORUN_VAR = "NORUN"
NOSTD_VAR = "NOSTD"
FEATURES_VAR = "FEATURES"
OBJDUMP_VAR = "OBJDUMP"
DISABLE_ASSERT_INSTR_VAR = "STDSIMD_DISABLE_ASSERT_INSTR"
TEST_EVERYTHING_VAR = "STDSIMD_TEST_EVERYTHING"


@dataclass(frozen=True)
class Toggles:
    no_run: bool = False
    no_std: bool = False
    test_everything: bool = False
    disable_assert_instr: bool = False
    features: str = ""
    objdump: str = ""


@dataclass(frozen=True)
class RunEnvironment:
    target: str
    base_flags: str = ""
    toggles: Toggles = Toggles()
    # Raw values as set in the environment; the toggles above only hold "== 1".
    disable_assert_instr_value: str = ""
    test_everything_value: str = ""

    def summary(self) -> dict[str, str]:
        """Settings echoed at the start of a run."""
        return {
            TARGET_VAR: self.target,
            FLAGS_VAR: self.base_flags,
            FEATURES_VAR: self.toggles.features,
            OBJDUMP_VAR: self.toggles.objdump,
            DISABLE_ASSERT_INSTR_VAR: self.disable_assert_instr_value,
            TEST_EVERYTHING_VAR: self.test_everything_value,
        }


def parse_toggle(value: Optional[str]) -> bool:
    return value == "1"


def resolve_environment(environ: Optional[Mapping[str, str]] = None) -> RunEnvironment:
    """
    Build a RunEnvironment from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ). Never modified.

    Raises:
        ConfigurationError: If TARGET is unset or empty
    """
    if environ is None:
        environ = os.environ

    target = environ.get(TARGET_VAR, "")
    if not target:
        raise ConfigurationError(f"The {TARGET_VAR} environment variable must be set.")

    toggles = Toggles(
        no_run=parse_toggle(environ.get(NORUN_VAR)),
        no_std=parse_toggle(environ.get(NOSTD_VAR)),
        test_everything=parse_toggle(environ.get(TEST_EVERYTHING_VAR)),
        disable_assert_instr=parse_toggle(environ.get(DISABLE_ASSERT_INSTR_VAR)),
        features=environ.get(FEATURES_VAR, ""),
        objdump=environ.get(OBJDUMP_VAR, ""),
    )
    return RunEnvironment(
        target=target,
        base_flags=environ.get(FLAGS_VAR, ""),
        toggles=toggles,
        disable_assert_instr_value=environ.get(DISABLE_ASSERT_INSTR_VAR, ""),
        test_everything_value=environ.get(TEST_EVERYTHING_VAR, ""),
    )
