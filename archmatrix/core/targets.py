"""
Target triple matching against architecture families.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable, Optional


BROWSER_TARGET = "wasm32-unknown-unknown"


@dataclass(frozen=True)
class ArchFamily:
    name: str
    patterns: tuple[str, ...]

    def matches(self, target: str) -> bool:
        """Shell-style glob match of the whole triple, as in a `case` arm."""
        return any(fnmatchcase(target, pattern) for pattern in self.patterns)


# Families that change the flags of every invocation in the run.
I686 = ArchFamily("i686", ("i686-*", "i586-*"))
MIPS = ArchFamily("mips", ("mips-*", "mipsel-*"))

BASE_FAMILIES: tuple[ArchFamily, ...] = (I686, MIPS)

# Families that get an extra release pass with additional target features.
X86 = ArchFamily("x86", ("x86*",))
WASM32 = ArchFamily("wasm32", ("wasm32-unknown-unknown*",))
MIPS_GNU = ArchFamily("mips-gnu", ("mips-*gnu*", "mipsel-*gnu*"))
MIPS64 = ArchFamily("mips64", ("mips64*",))
POWERPC64 = ArchFamily("powerpc64", ("powerpc64*",))

EXTRA_FAMILIES: tuple[ArchFamily, ...] = (X86, WASM32, MIPS_GNU, MIPS64, POWERPC64)


def match_family(target: str, families: Iterable[ArchFamily]) -> Optional[ArchFamily]:
    """Return the first family matching target, or None."""
    for family in families:
        if family.matches(target):
            return family
    return None


def is_browser_target(target: str) -> bool:
    return target == BROWSER_TARGET
