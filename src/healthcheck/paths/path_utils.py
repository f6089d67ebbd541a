"""Canonical path resolution for output destinations.

Both branches go through os.path.realpath(strict=True), so every symlink and
every '.'/'..' segment of the existing part of a path is resolved before the
protected-directory check runs. The not-yet-existing final segment of a
pending path is joined literally.

SECURITY-REVIEW: Unlike a plain abspath(), realpath() on Windows may turn a
mapped drive letter into its UNC form. That is accepted here: an output path
has to be checked against what the filesystem will actually write to, and
the protected table only lists local system roots.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import CanonicalizationFailed


@dataclass(frozen=True)
class Exists:
    """The directory to check is already on disk."""

    directory: Path


@dataclass(frozen=True)
class Pending:
    """The directory to check is missing but its immediate parent exists."""

    parent: Path
    name: str


ExistsState = Exists | Pending


def is_current_dir(path: Path) -> bool:
    return str(path) in ("", ".")


def canonical_path(path: Path) -> Path:
    """Resolve an existing path through the OS, failing on anything unresolvable."""
    try:
        return Path(os.path.realpath(path, strict=True))
    except OSError as e:
        raise CanonicalizationFailed(str(path), e) from e


def current_dir() -> Path:
    try:
        return Path(os.getcwd())
    except OSError as e:
        raise CanonicalizationFailed(".", e) from e


def reject_dangling_link(path: Path) -> None:
    """A link whose target is missing would redirect the caller's later write."""
    if os.path.islink(path) and not os.path.exists(path):
        raise CanonicalizationFailed(str(path), FileNotFoundError(f"dangling symbolic link: {os.readlink(path)}"))


def canonicalize(state: ExistsState) -> Path:
    if isinstance(state, Exists):
        return canonical_path(state.directory)

    parent = current_dir() if is_current_dir(state.parent) else canonical_path(state.parent)
    reject_dangling_link(parent / state.name)
    return parent / state.name
