"""
Invocation planning.

Turns a target triple and the CI toggles into the ordered list of cargo
invocations for a run. Planning never spawns anything; the returned list is
the complete run, so it can be printed or inspected before execution.

Order matters: core_arch is tested before the crates that depend on it, and
each crate's release pass follows its debug pass.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable, List, Mapping, Optional, Union

from archmatrix.core.environment import DISABLE_ASSERT_INSTR_VAR, Toggles
from archmatrix.core.targets import (
    EXTRA_FAMILIES,
    MIPS64,
    MIPS_GNU,
    POWERPC64,
    WASM32,
    X86,
    ArchFamily,
    is_browser_target,
    match_family,
)


class Mode(Enum):
    """Cargo subcommand used by an invocation."""
    TEST = "test"
    BUILD = "build"
    RUN = "run"


@dataclass(frozen=True)
class Package:
    name: str
    manifest_path: Optional[str] = None

    @property
    def directory(self) -> Optional[str]:
        """Directory holding the manifest, relative to the workspace root."""
        if self.manifest_path is None:
            return None
        return str(PurePosixPath(self.manifest_path).parent)


@dataclass(frozen=True)
class PackageSet:
    core_arch: Package = Package("core_arch", "crates/core_arch/Cargo.toml")
    std_detect: Package = Package("std_detect", "crates/std_detect/Cargo.toml")
    examples: Package = Package("examples", "examples/Cargo.toml")
    workspace: Package = Package("workspace")

    def with_overrides(self, manifests: Optional[Mapping[str, str]]) -> "PackageSet":
        """Return a copy with manifest paths replaced by name."""
        if not manifests:
            return self
        changes = {}
        for name, manifest in manifests.items():
            current = getattr(self, name, None)
            if not isinstance(current, Package):
                raise KeyError(f"Unknown package: {name}")
            changes[name] = replace(current, manifest_path=manifest or None)
        return replace(self, **changes)


DEFAULT_PACKAGES = PackageSet()


# Ordered (name, value) pairs; a tuple keeps invocations hashable and read-only.
EnvOverlay = tuple[tuple[str, str], ...]


def freeze_env(env: Union[Mapping[str, str], Iterable[tuple[str, str]], None]) -> EnvOverlay:
    if not env:
        return ()
    items = env.items() if isinstance(env, Mapping) else env
    return tuple((str(key), str(value)) for key, value in items)


@dataclass(frozen=True)
class Invocation:
    """One planned cargo command."""
    package: Package
    mode: Mode
    args: tuple[str, ...] = ()
    extra_flags: tuple[str, ...] = ()
    env: EnvOverlay = ()
    in_package_dir: bool = False
    stdin: Optional[str] = None
    with_target: bool = True

    def __post_init__(self):
        object.__setattr__(self, "env", freeze_env(self.env))

    def overlay(self) -> dict[str, str]:
        """Environment overlay as a fresh dict."""
        return dict(self.env)

    @property
    def cwd(self) -> Optional[str]:
        """Working directory relative to the workspace root, None for the root."""
        if self.in_package_dir:
            return self.package.directory
        return None

    def command(self, cargo: str, target: str) -> List[str]:
        cmd = [cargo, self.mode.value]
        if self.with_target:
            cmd.append(f"--target={target}")
        if self.package.manifest_path and not self.in_package_dir:
            cmd.append(f"--manifest-path={self.package.manifest_path}")
        cmd.extend(self.args)
        return cmd

    def describe(self) -> str:
        parts = [self.package.name, self.mode.value, *self.args]
        if self.extra_flags:
            parts.append(f"[RUSTFLAGS+={' '.join(self.extra_flags)}]")
        if self.env:
            parts.append("[" + " ".join(f"{k}={v}" for k, v in self.env) + "]")
        return " ".join(parts)


@dataclass(frozen=True)
class ExtraPass:
    """A release pass over the workspace with extra target features."""
    flags: tuple[str, ...]
    env: EnvOverlay = ()
    compile_only: bool = False


STD_DETECT_FEATURE_SETS = (
    (),
    ("--features=std_detect_file_io",),
    ("--features=std_detect_dlsym_getauxval",),
    ("--features=std_detect_dlsym_getauxval,std_detect_file_io",),
)

# node.js only implements part of the SIMD proposal, so the first pass runs
# the node-compatible subset and the second only checks that everything compiles.
WASM_NODE_FLAGS = ("-C", "target-feature=+simd128", "--cfg", "only_node_compatible_functions")

EXTRA_PASSES: Mapping[ArchFamily, tuple[ExtraPass, ...]] = {
    X86: (
        ExtraPass(("-C", "target-feature=+avx"), env=((DISABLE_ASSERT_INSTR_VAR, "1"),)),
    ),
    WASM32: (
        ExtraPass(WASM_NODE_FLAGS),
        ExtraPass(
            WASM_NODE_FLAGS + ("-C", "target-feature=+simd128,+unimplemented-simd128"),
            compile_only=True,
        ),
    ),
    MIPS_GNU: (
        ExtraPass(("-C", "target-feature=+msa,+fp64,+mips32r5")),
    ),
    MIPS64: (
        ExtraPass(("-C", "target-feature=+msa")),
    ),
    # altivec and vsx are tested separately, never together. The 32-bit ppc
    # targets are not matched.
    POWERPC64: (
        ExtraPass(("-C", "target-feature=+altivec")),
        ExtraPass(("-C", "target-feature=+vsx")),
    ),
}

HEX_INPUT = "test\n"


def _test_mode(toggles: Toggles) -> Mode:
    return Mode.BUILD if toggles.no_run else Mode.TEST


def _debug_and_release(package: Package, mode: Mode) -> list[Invocation]:
    return [
        Invocation(package, mode),
        Invocation(package, mode, ("--release",)),
    ]


def extra_passes(target: str) -> tuple[ExtraPass, ...]:
    """Extra-feature passes for the first extra family matching target."""
    family = match_family(target, EXTRA_FAMILIES)
    if family is None:
        return ()
    return EXTRA_PASSES[family]


def _extra_invocation(workspace: Package, extra: ExtraPass, toggles: Toggles) -> Invocation:
    args: tuple[str, ...] = ("--release",)
    mode = _test_mode(toggles)
    # `cargo build` never runs anything, so --no-run is only needed for `cargo test`
    if extra.compile_only and mode is Mode.TEST:
        args += ("--no-run",)
    return Invocation(workspace, mode, args, extra_flags=extra.flags, env=extra.env)


def plan(target: str, toggles: Toggles = Toggles(), packages: PackageSet = DEFAULT_PACKAGES) -> list[Invocation]:
    """
    Plan the ordered invocations for target.

    1. core_arch, debug then release
    2. std_detect, debug, release and the four feature combinations (unless no_std)
    3. examples, debug then release (unless no_std)
    4. extra-feature release passes for the target's family
    5. examples test and `hex` smoke run (unless no_run, no_std or the browser target)
    """
    mode = _test_mode(toggles)
    invocations: list[Invocation] = []

    invocations += _debug_and_release(packages.core_arch, mode)

    if not toggles.no_std:
        invocations += _debug_and_release(packages.std_detect, mode)
        for features in STD_DETECT_FEATURE_SETS:
            invocations.append(
                Invocation(packages.std_detect, mode, ("--no-default-features",) + features)
            )
        invocations += _debug_and_release(packages.examples, mode)

    for extra in extra_passes(target):
        invocations.append(_extra_invocation(packages.workspace, extra, toggles))

    if not toggles.no_run and not toggles.no_std and not is_browser_target(target):
        invocations.append(Invocation(packages.examples, Mode.TEST, in_package_dir=True))
        invocations.append(
            Invocation(
                packages.examples,
                Mode.RUN,
                ("--release", "hex"),
                in_package_dir=True,
                stdin=HEX_INPUT,
                with_target=False,
            )
        )

    return invocations
