"""Failure reasons raised while resolving an output path.

All of them are terminal: callers report the message and stop. None of them
carry a suggested fallback destination.
"""

from __future__ import annotations


class PathError(ValueError):
    """Base class for output path validation failures."""


class ParentDirectoryMissing(PathError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Parent directory '{path}' does not exist")


class CanonicalizationFailed(PathError):
    def __init__(self, path: str, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Failed to resolve path '{path}': {error}")


class ProtectedDirectoryAccess(PathError):
    def __init__(self, path: str, protected: str) -> None:
        self.path = path
        self.protected = protected
        super().__init__(f"Access to system directory '{path}' is not allowed (protected: '{protected}')")


class InvalidFilename(PathError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Invalid filename in '{raw}'")
