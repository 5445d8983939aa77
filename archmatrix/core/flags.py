"""
Toolchain flag composition.

A FlagSet only ever grows: composing starts from the caller's base flags and
appends the strict cfg and then the flags of the first matching base family.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Union

from archmatrix.core.targets import BASE_FAMILIES, I686, MIPS, ArchFamily, match_family


STRICT_CFG = ("--cfg", "stdsimd_strict")

FAMILY_FLAGS: Mapping[ArchFamily, tuple[str, ...]] = {
    # Static relocation keeps the instruction counts of assert_instr checks
    # under the limit on 32-bit x86. `-Z plt=yes` is required by LLVM there.
    I686: ("-C", "relocation-model=static", "-Z", "plt=yes"),
    # fast-isel in unoptimized builds breaks with msa.
    MIPS: ("-C", "llvm-args=-fast-isel=false"),
}


def split_flags(flags: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    """Split a RUSTFLAGS-style string (or pass through a token sequence)."""
    if flags is None:
        return ()
    if isinstance(flags, str):
        return tuple(flags.split())
    return tuple(flags)


@dataclass(frozen=True)
class FlagSet:
    tokens: tuple[str, ...] = ()

    @classmethod
    def parse(cls, flags: Union[str, Iterable[str], None]) -> "FlagSet":
        return cls(split_flags(flags))

    def extend(self, flags: Union[str, Iterable[str], None]) -> "FlagSet":
        """Return a new FlagSet with flags appended."""
        extra = split_flags(flags)
        if not extra:
            return self
        return FlagSet(self.tokens + extra)

    def render(self) -> str:
        return " ".join(self.tokens)

    def __str__(self) -> str:
        return self.render()


def family_flags(target: str) -> tuple[str, ...]:
    """Flags contributed by the first base family matching target."""
    family = match_family(target, BASE_FAMILIES)
    if family is None:
        return ()
    return FAMILY_FLAGS[family]


def compose(target: str, base_flags: Union[str, Iterable[str], None] = "") -> FlagSet:
    """
    Compose the run-wide flag set for target.

    Order: base flags, the strict cfg, then the family flags. Unknown targets
    get no family flags.
    """
    return FlagSet.parse(base_flags).extend(STRICT_CFG).extend(family_flags(target))
