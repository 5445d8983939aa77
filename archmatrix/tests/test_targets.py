from archmatrix.core.targets import (
    BASE_FAMILIES,
    EXTRA_FAMILIES,
    I686,
    MIPS,
    MIPS64,
    MIPS_GNU,
    POWERPC64,
    WASM32,
    X86,
    is_browser_target,
    match_family,
)


def test_base_families_match_by_prefix():
    assert match_family("i686-unknown-linux-gnu", BASE_FAMILIES) is I686
    assert match_family("i586-unknown-linux-gnu", BASE_FAMILIES) is I686
    assert match_family("mips-unknown-linux-gnu", BASE_FAMILIES) is MIPS
    assert match_family("mipsel-unknown-linux-musl", BASE_FAMILIES) is MIPS


def test_mips64_is_not_the_32_bit_mips_family():
    assert match_family("mips64-unknown-linux-gnuabi64", BASE_FAMILIES) is None
    assert match_family("mips64-unknown-linux-gnuabi64", EXTRA_FAMILIES) is MIPS64


def test_extra_families():
    assert match_family("x86_64-unknown-linux-gnu", EXTRA_FAMILIES) is X86
    assert match_family("wasm32-unknown-unknown", EXTRA_FAMILIES) is WASM32
    assert match_family("mipsel-unknown-linux-gnu", EXTRA_FAMILIES) is MIPS_GNU
    assert match_family("powerpc64le-unknown-linux-gnu", EXTRA_FAMILIES) is POWERPC64


def test_glob_patterns_need_every_part():
    # mips-*gnu* needs the gnu environment
    assert match_family("mips-unknown-linux-musl", EXTRA_FAMILIES) is None
    assert match_family("i686-unknown-linux-gnu", EXTRA_FAMILIES) is None
    assert match_family("powerpc-unknown-linux-gnu", EXTRA_FAMILIES) is None
    assert match_family("aarch64-unknown-linux-gnu", EXTRA_FAMILIES) is None


def test_browser_target_is_exact():
    assert is_browser_target("wasm32-unknown-unknown")
    assert not is_browser_target("wasm32-wasi")
