"""
Listing Types and Data Classes

This module contains the core data structures and enums used by the listing core.
"""

from dataclasses import dataclass
from enum import Enum


class SessionState(Enum):
    """Lifecycle of one listing session."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    DONE = "done"


class FileTypeTag(Enum):
    """Special file kinds reported in the ``type`` column."""

    BLOCK_DEVICE = "S_ISBLK"
    CHAR_DEVICE = "S_ISCHR"
    FIFO = "S_ISFIFO"
    SOCKET = "S_IFSOCK"


@dataclass(frozen=True)
class EntryRecord:
    """One formatted directory entry, ready to become a row."""

    attributes: str
    size: int
    modified: str
    type: str | None
    name: str

    def as_tuple(self) -> tuple[str, int, str, str | None, str]:
        return (self.attributes, self.size, self.modified, self.type, self.name)


@dataclass
class RegistryStats:
    """Session registry statistics for monitoring."""

    active_sessions: int
    completed_sessions: int
    oldest_idle_seconds: float
