"""Output path validation for generated binaries and configuration files."""

from __future__ import annotations

from .errors import (
    CanonicalizationFailed,
    InvalidFilename,
    ParentDirectoryMissing,
    PathError,
    ProtectedDirectoryAccess,
)
from .protected import ProtectedDirectoryTable, check_protected, platform_table
from .resolver import ClassifiedTarget, classify, ensure_creatable, resolve

__all__ = [
    "CanonicalizationFailed",
    "ClassifiedTarget",
    "InvalidFilename",
    "ParentDirectoryMissing",
    "PathError",
    "ProtectedDirectoryAccess",
    "ProtectedDirectoryTable",
    "check_protected",
    "classify",
    "ensure_creatable",
    "platform_table",
    "resolve",
]
