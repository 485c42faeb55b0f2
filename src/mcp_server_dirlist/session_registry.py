"""
Session Registry

Thread-safe mapping from session token to the directory cursor it owns.

Design notes:
- One plain lock guards the map; it is held only for lookup/insert/erase,
  never while a directory is opened or an entry is classified.
- Cursors are released on ``close``, on ``reap_idle`` and on ``close_all``.
  A session abandoned by its caller stays registered until one of those
  runs, so the only unbounded leak is a caller that never finishes and a
  host that never reaps.
- Completed tokens are remembered for a while in a Cacheout TTL cache, so a
  stale token can be reported as "already completed" rather than "unknown".
"""

from __future__ import annotations

import logging
import os
import threading
import time

from cacheout import Cache

from .directory_cursor import DirectoryCursor
from .errors import DuplicateSessionError, UnknownSessionError
from .listing_types import RegistryStats

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Owns every live directory cursor, keyed by session token."""

    def __init__(
        self,
        completed_token_ttl: float = 10 * 60,
        max_completed_tokens: int = 1024,
    ) -> None:
        self._cursors: dict[str, DirectoryCursor] = {}
        self._lock = threading.Lock()
        self._completed = Cache(maxsize=max_completed_tokens, ttl=completed_token_ttl)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cursors)

    def open(
        self,
        handle: str,
        directory_path: str | os.PathLike,
        row_limit: int | None = None,
    ) -> None:
        """Open a cursor over ``directory_path`` and register it under ``handle``.

        Raises:
            DuplicateSessionError: ``handle`` is already registered
            EntryStatError: the directory cannot be opened
        """
        # Directory I/O happens before the lock is taken
        cursor = DirectoryCursor(directory_path, row_limit)
        try:
            self.register(handle, cursor)
        except DuplicateSessionError:
            cursor.close()
            raise

    def register(self, handle: str, cursor: DirectoryCursor) -> None:
        """Insert an already opened cursor."""
        with self._lock:
            if handle in self._cursors:
                raise DuplicateSessionError(handle)
            self._cursors[handle] = cursor
        logger.debug(f"Registered session {handle} over {cursor.path}")

    def get(self, handle: str) -> DirectoryCursor:
        """Borrow the cursor for ``handle`` for the duration of one call.

        Raises:
            UnknownSessionError: ``handle`` is not registered
        """
        with self._lock:
            cursor = self._cursors.get(handle)
            if cursor is not None:
                # Under the lock so reap_idle cannot pick it between lookup and touch
                cursor.touch()
        if cursor is None:
            raise UnknownSessionError(handle, completed=self.was_completed(handle))
        return cursor

    def has(self, handle: str) -> bool:
        with self._lock:
            return handle in self._cursors

    def was_completed(self, handle: str) -> bool:
        return bool(self._completed.has(handle))

    def handles(self) -> list[str]:
        with self._lock:
            return list(self._cursors)

    def close(self, handle: str) -> None:
        """Remove ``handle`` and release its cursor.

        Raises:
            UnknownSessionError: ``handle`` is not registered (e.g. closed twice)
        """
        with self._lock:
            cursor = self._cursors.pop(handle, None)
        if cursor is None:
            raise UnknownSessionError(handle, completed=self.was_completed(handle))
        self._completed.set(handle, time.time())
        cursor.close()
        logger.debug(f"Closed session {handle} after {cursor.produced} rows")

    def reap_idle(self, max_idle_seconds: float, now: float | None = None) -> list[str]:
        """Close sessions untouched for longer than ``max_idle_seconds``.

        Returns:
            The tokens that were reaped
        """
        now = time.time() if now is None else now
        with self._lock:
            stale = [
                handle
                for handle, cursor in self._cursors.items()
                if now - cursor.last_access > max_idle_seconds
            ]
            reaped = [(handle, self._cursors.pop(handle)) for handle in stale]

        for handle, cursor in reaped:
            self._completed.set(handle, now)
            cursor.close()
            logger.info(f"Reaped idle session {handle} over {cursor.path}")
        return [handle for handle, _ in reaped]

    def close_all(self) -> None:
        """Release every registered cursor."""
        with self._lock:
            cursors = list(self._cursors.items())
            self._cursors.clear()
        for handle, cursor in cursors:
            self._completed.set(handle, time.time())
            cursor.close()

    def get_stats(self) -> RegistryStats:
        now = time.time()
        with self._lock:
            active = len(self._cursors)
            oldest_idle = max(
                (now - cursor.last_access for cursor in self._cursors.values()),
                default=0.0,
            )
        self._completed.delete_expired()
        return RegistryStats(
            active_sessions=active,
            completed_sessions=len(self._completed),
            oldest_idle_seconds=oldest_idle,
        )


# Process-wide registry: empty at import, released only at process exit
_default_registry = SessionRegistry()


def default_registry() -> SessionRegistry:
    """Return the process-wide registry."""
    return _default_registry
