"""Resolve a user-supplied output destination into a safe canonical path.

The pipeline is linear and short-circuits on the first failure::

    classify -> ensure_creatable -> canonicalize -> check_protected -> recombine

An output file name that is itself a symlink has its target's directory
checked as well.

Only read-only filesystem queries are made. Nothing is created here; the
caller does its own I/O afterwards and should prefer exclusive-create
operations there, since the filesystem may change in between.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import CanonicalizationFailed, InvalidFilename, ParentDirectoryMissing
from .path_utils import (
    Exists,
    ExistsState,
    Pending,
    canonical_path,
    canonicalize,
    is_current_dir,
    reject_dangling_link,
)
from .protected import ProtectedDirectoryTable, check_protected, platform_table

logger = logging.getLogger(__name__)

_SEPARATORS = tuple(s for s in (os.sep, os.altsep) if s)


@dataclass(frozen=True)
class ClassifiedTarget:
    directory_to_check: Path
    is_file: bool
    filename: str | None = None


def _parent_or_current(raw: str) -> Path:
    parent = os.path.dirname(raw)
    return Path(parent) if parent else Path(".")


def classify(raw: str) -> ClassifiedTarget:
    """Decide whether *raw* names a file or a directory.

    Existing paths are classified by what they are on disk. Anything else is a
    directory only when it ends with a path separator; extensionless names
    such as ``Makefile`` are files.
    """
    if os.path.exists(raw):
        if os.path.isdir(raw):
            return ClassifiedTarget(directory_to_check=Path(raw), is_file=False)
        return ClassifiedTarget(
            directory_to_check=_parent_or_current(raw),
            is_file=True,
            filename=os.path.basename(raw),
        )

    if raw.endswith(_SEPARATORS):
        return ClassifiedTarget(directory_to_check=Path(raw), is_file=False)

    return ClassifiedTarget(
        directory_to_check=_parent_or_current(raw),
        is_file=True,
        filename=os.path.basename(raw),
    )


def ensure_creatable(directory: Path) -> ExistsState:
    """Check that *directory* exists, or that only its last segment is missing.

    Missing grandparents are not walked: ``missing/sub/out`` fails because
    ``missing`` is absent.
    """
    if directory.is_dir():
        return Exists(directory)
    if os.path.exists(directory):
        raise CanonicalizationFailed(str(directory), NotADirectoryError(f"not a directory: {directory}"))

    parent = directory.parent
    if not is_current_dir(parent) and not parent.is_dir():
        raise ParentDirectoryMissing(str(parent))
    return Pending(parent, directory.name)


def check_link_target(path: Path, table: ProtectedDirectoryTable) -> None:
    """Check where a symlinked output file really points.

    The returned path keeps the link name, but a write through it lands in
    the link target's directory, so that directory is checked too.
    """
    reject_dangling_link(path)
    if os.path.islink(path):
        check_protected(str(canonical_path(path).parent), table)


def _recombine(directory: Path, target: ClassifiedTarget, raw: str, table: ProtectedDirectoryTable) -> Path:
    if not target.is_file:
        return directory
    if target.filename in (None, "", ".", ".."):
        raise InvalidFilename(raw)
    resolved = directory / target.filename
    check_link_target(resolved, table)
    return resolved


def resolve(raw: str, table: ProtectedDirectoryTable | None = None) -> Path:
    """Resolve *raw* to an absolute canonical path outside every protected directory.

    Raises a PathError subclass on failure. *table* defaults to the process
    table for the running platform.
    """
    table = table if table is not None else platform_table()
    target = classify(raw)
    state = ensure_creatable(target.directory_to_check)
    directory = canonicalize(state)
    check_protected(str(directory), table)
    resolved = _recombine(directory, target, raw, table)
    logger.debug("Resolved output path %r -> %s", raw, resolved)
    return resolved
