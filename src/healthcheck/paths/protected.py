"""Protected system directories and the boundary-safe prefix match against them.

The table is plain data: one ordered tuple of prefixes plus the comparison
rules of the OS family it belongs to. The process table is built once on first
use and never mutated; tests build their own and pass it in.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from .errors import ProtectedDirectoryAccess

logger = logging.getLogger(__name__)

_IS_WINDOWS = sys.platform == "win32"

POSIX_PROTECTED_DIRS: tuple[str, ...] = (
    "/etc",  # system configuration
    "/sys",  # kernel and system information
    "/proc",  # process information
    "/dev",  # device files
    "/boot",  # boot files
    "/bin",
    "/sbin",
    "/lib",
    "/lib64",
    "/usr/bin",
    "/usr/sbin",
    "/usr/lib",
    "/run",  # canonical target of /var/run on most systems
    "/var/run",
    "/var/lock",
    "/root",  # superuser home
)

WINDOWS_PROTECTED_DIRS: tuple[str, ...] = (
    "c:\\windows",
    "c:\\program files",
    "c:\\program files (x86)",
    "c:\\programdata\\microsoft",
    "c:\\system volume information",
)

# Environment variables naming the real system roots when Windows is not on C:
_WINDOWS_ROOT_VARS = ("SystemRoot", "ProgramFiles", "ProgramFiles(x86)")


@dataclass(frozen=True)
class ProtectedDirectoryTable:
    prefixes: tuple[str, ...]
    case_insensitive: bool = False
    separator: str = "/"

    def normalize(self, path: str) -> str:
        if self.case_insensitive:
            path = path.lower()
        if len(path) > 1 and path.endswith(self.separator):
            path = path.rstrip(self.separator) or self.separator
        return path

    def match(self, path: str) -> str | None:
        """Return the protected prefix that *path* equals or is nested under."""
        candidate = self.normalize(path)
        for prefix in self.prefixes:
            if candidate == prefix or candidate.startswith(prefix + self.separator):
                return prefix
        return None


def _dedupe(entries: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for entry in entries:
        if entry and entry not in seen:
            seen[entry] = None
    return tuple(seen)


def build_table(
    entries: Iterable[str],
    *,
    case_insensitive: bool = False,
    separator: str = "/",
    resolve_links: bool = False,
) -> ProtectedDirectoryTable:
    """Build a table from raw prefixes.

    With *resolve_links*, every entry that canonicalizes somewhere else also
    contributes its canonical form, e.g. ``/etc`` -> ``/private/etc`` on macOS.
    Only meaningful for the platform the process runs on.
    """
    bare = ProtectedDirectoryTable(prefixes=(), case_insensitive=case_insensitive, separator=separator)
    normalized: list[str] = []
    for entry in entries:
        normalized.append(bare.normalize(entry))
        if resolve_links:
            real = bare.normalize(os.path.realpath(entry))
            if real != normalized[-1]:
                normalized.append(real)
    return ProtectedDirectoryTable(
        prefixes=_dedupe(normalized),
        case_insensitive=case_insensitive,
        separator=separator,
    )


def posix_table(extra: Iterable[str] = (), *, resolve_links: bool = False) -> ProtectedDirectoryTable:
    return build_table((*POSIX_PROTECTED_DIRS, *extra), resolve_links=resolve_links)


def windows_table(
    extra: Iterable[str] = (),
    *,
    environ: dict[str, str] | None = None,
    resolve_links: bool = False,
) -> ProtectedDirectoryTable:
    env = os.environ if environ is None else environ
    from_env = [env[var] for var in _WINDOWS_ROOT_VARS if env.get(var)]
    return build_table(
        (*WINDOWS_PROTECTED_DIRS, *from_env, *extra),
        case_insensitive=True,
        separator="\\",
        resolve_links=resolve_links,
    )


@lru_cache(maxsize=None)
def platform_table(extra: tuple[str, ...] = ()) -> ProtectedDirectoryTable:
    """The table for the running OS family, built once per distinct *extra*."""
    if _IS_WINDOWS:
        return windows_table(extra, resolve_links=True)
    return posix_table(extra, resolve_links=True)


def check_protected(canonical_dir: str, table: ProtectedDirectoryTable) -> None:
    """Raise ProtectedDirectoryAccess when *canonical_dir* is inside a protected tree."""
    protected = table.match(canonical_dir)
    if protected is not None:
        logger.warning("Blocked output path under system directory %s: %s", protected, canonical_dir)
        raise ProtectedDirectoryAccess(canonical_dir, protected)
