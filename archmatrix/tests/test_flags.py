import pytest

from archmatrix.core.flags import STRICT_CFG, FlagSet, compose


def test_unmatched_target_only_gets_strict_cfg():
    assert compose("aarch64-unknown-linux-gnu", "").tokens == STRICT_CFG


def test_i686_flags_follow_base_flags():
    flags = compose("i686-unknown-linux-gnu", "-C opt-level=1")
    assert flags.render() == (
        "-C opt-level=1 --cfg stdsimd_strict -C relocation-model=static -Z plt=yes"
    )


def test_mips_disables_fast_isel():
    flags = compose("mipsel-unknown-linux-musl")
    assert flags.tokens[-2:] == ("-C", "llvm-args=-fast-isel=false")


@pytest.mark.parametrize("target", [
    "x86_64-unknown-linux-gnu",
    "i586-unknown-linux-gnu",
    "mips-unknown-linux-gnu",
    "powerpc64-unknown-linux-gnu",
    "wasm32-unknown-unknown",
])
def test_compose_is_deterministic_and_additive(target):
    base = "-C debuginfo=0 -D warnings"
    first = compose(target, base)
    assert first == compose(target, base)
    assert first.tokens[:4] == tuple(base.split())


def test_base_flags_accept_token_sequences():
    assert compose("x86_64-unknown-linux-gnu", ["-D", "warnings"]).tokens[:2] == ("-D", "warnings")


def test_flagset_extend_returns_new_set():
    flags = FlagSet.parse("-D warnings")
    extended = flags.extend("-C target-feature=+avx")
    assert flags.tokens == ("-D", "warnings")
    assert extended.tokens == ("-D", "warnings", "-C", "target-feature=+avx")
    assert flags.extend("") is flags
    assert str(extended) == "-D warnings -C target-feature=+avx"
