import pytest

from archmatrix.core.environment import Toggles, parse_toggle, resolve_environment
from archmatrix.core.errors import ConfigurationError


def test_missing_target_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="TARGET"):
        resolve_environment({})


def test_empty_target_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="TARGET"):
        resolve_environment({"TARGET": ""})


def test_defaults_when_only_target_is_set():
    env = resolve_environment({"TARGET": "x86_64-unknown-linux-gnu"})
    assert env.target == "x86_64-unknown-linux-gnu"
    assert env.base_flags == ""
    assert env.toggles == Toggles()


@pytest.mark.parametrize("value,expected", [
    ("1", True),
    ("0", False),
    ("true", False),
    ("yes", False),
    (" 1", False),
    ("", False),
    (None, False),
])
def test_only_literal_one_enables_a_toggle(value, expected):
    assert parse_toggle(value) is expected


def test_reads_toggles_and_passthrough_values():
    environ = {
        "TARGET": "mips-unknown-linux-gnu",
        "RUSTFLAGS": "-D warnings",
        "NORUN": "1",
        "NOSTD": "true",
        "FEATURES": "strict",
        "OBJDUMP": "/usr/bin/mips-linux-gnu-objdump",
        "STDSIMD_DISABLE_ASSERT_INSTR": "1",
        "STDSIMD_TEST_EVERYTHING": "1",
    }
    snapshot = dict(environ)

    env = resolve_environment(environ)

    assert env.base_flags == "-D warnings"
    assert env.toggles == Toggles(
        no_run=True,
        no_std=False,
        test_everything=True,
        disable_assert_instr=True,
        features="strict",
        objdump="/usr/bin/mips-linux-gnu-objdump",
    )
    assert environ == snapshot


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.setenv("TARGET", "wasm32-unknown-unknown")
    monkeypatch.setenv("NOSTD", "1")
    env = resolve_environment()
    assert env.target == "wasm32-unknown-unknown"
    assert env.toggles.no_std is True


def test_summary_lists_echoed_settings():
    env = resolve_environment({"TARGET": "i686-unknown-linux-gnu", "FEATURES": "a,b"})
    summary = env.summary()
    assert summary["TARGET"] == "i686-unknown-linux-gnu"
    assert summary["FEATURES"] == "a,b"
    assert summary["STDSIMD_TEST_EVERYTHING"] == ""


def test_summary_echoes_raw_values():
    env = resolve_environment({
        "TARGET": "x86_64-unknown-linux-gnu",
        "STDSIMD_TEST_EVERYTHING": "true",
        "STDSIMD_DISABLE_ASSERT_INSTR": "1",
    })
    summary = env.summary()
    assert summary["STDSIMD_TEST_EVERYTHING"] == "true"
    assert env.toggles.test_everything is False
    assert summary["STDSIMD_DISABLE_ASSERT_INSTR"] == "1"
    assert env.toggles.disable_assert_instr is True
