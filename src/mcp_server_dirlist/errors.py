"""
Listing Errors

Every failure raised by the directory listing core derives from DirListError
and carries enough context (offending path or session token) to diagnose it.
"""

from __future__ import annotations

from typing import Any


class DirListError(Exception):
    """Base class for directory listing failures."""


class PathEncodingError(DirListError):
    """A native path or filename could not be converted to text."""

    def __init__(self, path: Any, reason: str = "malformed code units") -> None:
        self.path = path
        super().__init__(f"cannot encode path {path!r}: {reason}")


class EntryStatError(DirListError):
    """An entry vanished or became inaccessible between enumeration and stat."""

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"cannot stat '{path}': {cause.strerror or cause}")


class DuplicateSessionError(DirListError):
    """A session token was registered twice."""

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(f"duplicated session token '{handle}'")


class UnknownSessionError(DirListError):
    """A session token is not (or no longer) registered."""

    def __init__(self, handle: str, completed: bool = False) -> None:
        self.handle = handle
        self.completed = completed
        detail = "session already completed" if completed else "unknown session"
        super().__init__(f"{detail}: '{handle}'")


class AllocationError(DirListError):
    """Per-call storage for a record could not be acquired."""


class ResultTypeMismatchError(DirListError):
    """The caller's requested output shape does not match the record schema."""


class ListingError(DirListError):
    """An unclassified failure raised while driving a listing session."""

    def __init__(self, handle: str | None, message: str) -> None:
        self.handle = handle
        super().__init__(message)
