"""
Directory Cursor

A forward-only position over one ``os.scandir`` enumeration, with one entry
of lookahead so exhaustion is known before the next call asks for a row.
Entries come back in whatever order the platform yields them.
"""

from __future__ import annotations

import os
import time

from .errors import EntryStatError


class DirectoryCursor:
    """Stateful cursor over one directory, plus its session's row budget.

    A cursor is owned by exactly one registry slot and cannot be copied.
    It is not thread-safe: callers must not advance the same cursor from
    two calls at once.
    """

    def __init__(self, directory_path: str | os.PathLike, row_limit: int | None = None) -> None:
        self.path = os.fspath(directory_path)
        self.row_limit = row_limit
        self.produced = 0
        self.created_at = time.time()
        self.last_access = self.created_at
        self._current: os.DirEntry | None = None
        self._closed = False
        try:
            self._entries = os.scandir(self.path)
        except OSError as exc:
            raise EntryStatError(os.fsdecode(self.path), exc) from exc
        self._fetch()

    def __copy__(self):
        raise TypeError("DirectoryCursor cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("DirectoryCursor cannot be copied")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return (
            f"DirectoryCursor(path={self.path!r}, produced={self.produced}, "
            f"row_limit={self.row_limit}, exhausted={self.exhausted})"
        )

    def _fetch(self) -> None:
        try:
            self._current = next(self._entries)
        except StopIteration:
            # Release the directory handle as soon as enumeration ends
            self.close()
        except OSError as exc:
            self.close()
            raise EntryStatError(os.fsdecode(self.path), exc) from exc

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def exhausted(self) -> bool:
        return self._current is None

    @property
    def limit_reached(self) -> bool:
        return self.row_limit is not None and self.produced >= self.row_limit

    def has_more(self) -> bool:
        """True while there is an entry left and the row budget allows it."""
        return not self.exhausted and not self.limit_reached

    @property
    def current(self) -> os.DirEntry:
        if self._current is None:
            raise IndexError(f"cursor over '{self.path}' is exhausted")
        return self._current

    def advance(self) -> None:
        """Move to the next entry; a no-op once exhausted."""
        if self._current is not None:
            self._fetch()

    def touch(self) -> None:
        self.last_access = time.time()

    def close(self) -> None:
        """Release the underlying directory handle. Safe to call repeatedly."""
        self._current = None
        if not self._closed:
            self._closed = True
            self._entries.close()
