"""
Shared fixtures for archmatrix tests.
"""

import logging
from pathlib import Path

import pytest

CI_VARS = (
    "TARGET",
    "RUSTFLAGS",
    "NORUN",
    "NOSTD",
    "FEATURES",
    "OBJDUMP",
    "STDSIMD_DISABLE_ASSERT_INSTR",
    "STDSIMD_TEST_EVERYTHING",
    "ARCHMATRIX_ROOT",
    "ARCHMATRIX_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Tests start without any CI variables and leave no logger handlers behind."""
    for name in CI_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    logging.getLogger("archmatrix").handlers.clear()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A minimal cargo workspace layout."""
    (tmp_path / "Cargo.toml").write_text("[workspace]\nmembers = [\"crates/*\", \"examples\"]\n")
    for crate in ("core_arch", "std_detect"):
        crate_dir = tmp_path / "crates" / crate
        crate_dir.mkdir(parents=True)
        (crate_dir / "Cargo.toml").write_text(f"[package]\nname = \"{crate}\"\n")
    (tmp_path / "examples").mkdir()
    (tmp_path / "examples" / "Cargo.toml").write_text("[package]\nname = \"stdarch_examples\"\n")
    return tmp_path
