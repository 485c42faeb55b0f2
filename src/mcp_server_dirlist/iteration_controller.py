"""
Iteration Controller

Drives one listing session per token through UNINITIALIZED -> ACTIVE -> DONE,
one entry per call:

- first call: validate the row limit, open a cursor, register it
- each later call: borrow the cursor, classify the current entry, advance
- exhaustion or row limit: remove the cursor and report end-of-data

Any failure while a session is ACTIVE evicts its cursor before the error
reaches the caller, so a failed session is DONE and never holds a directory
handle. The caller must not drive one token from two threads at once.
"""

from __future__ import annotations

import logging
import os
import uuid
from datetime import timezone, tzinfo
from typing import Any, Iterator, Sequence

from .entry_classifier import DEFAULT_CLOCKS, ClockDomains, classify
from .errors import AllocationError, DirListError, ListingError, UnknownSessionError
from .listing_types import EntryRecord, SessionState
from .result_schema import check_result_shape, record_to_row
from .session_registry import SessionRegistry, default_registry
from .utils.session_utils import validate_row_limit

logger = logging.getLogger(__name__)


class IterationController:
    """Resumable, session-scoped directory listing."""

    def __init__(
        self,
        registry: SessionRegistry | None = None,
        tz: tzinfo = timezone.utc,
        clocks: ClockDomains = DEFAULT_CLOCKS,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.tz = tz
        self.clocks = clocks

    def open_session(
        self,
        directory_path: str | os.PathLike,
        row_limit: int,
        result_columns: Sequence[str | tuple[str, str]] | None = None,
    ) -> str:
        """Start a session over ``directory_path`` and return its token.

        Args:
            directory_path: Directory to list
            row_limit: Maximum number of records this session returns
            result_columns: Optional requested result shape to validate

        Raises:
            ValueError: ``row_limit`` is not an integer in 0..2**31-1
            ResultTypeMismatchError: ``result_columns`` cannot hold records
            EntryStatError: the directory cannot be opened
        """
        row_limit = validate_row_limit(row_limit)
        if result_columns is not None:
            check_result_shape(result_columns)

        token = uuid.uuid4().hex
        self.registry.open(token, directory_path, row_limit=row_limit)
        logger.info(
            f"Opened listing session {token} over {os.fspath(directory_path)} "
            f"(row_limit={row_limit})"
        )
        return token

    def fetch(self, token: str) -> EntryRecord | None:
        """Return the next record of the session, or None at end-of-data.

        Returning None ends the session; fetching again raises
        UnknownSessionError.
        """
        cursor = self.registry.get(token)
        try:
            if cursor.has_more():
                record = classify(cursor.current, tz=self.tz, clocks=self.clocks)
                cursor.advance()
                cursor.produced += 1
                return record
        except DirListError as exc:
            self._abort(token, exc)
            raise
        except MemoryError as exc:
            self._abort(token, exc)
            raise AllocationError(f"Unable to allocate memory in session '{token}'") from exc
        except Exception as exc:
            self._abort(token, exc)
            raise ListingError(token, f"listing session '{token}' failed: {exc}") from exc

        self.registry.close(token)
        logger.info(f"Listing session {token} done after {cursor.produced} rows")
        return None

    def fetch_row(self, token: str) -> tuple[tuple[Any, ...], tuple[bool, ...]] | None:
        """Like :meth:`fetch`, but return the record as ``(values, nulls)``."""
        record = self.fetch(token)
        if record is None:
            return None
        return record_to_row(record)

    def call(
        self,
        token: str | None,
        row_limit: int,
        directory_path: str | os.PathLike,
    ) -> tuple[str, EntryRecord | None]:
        """One invocation of the row-producing calling convention.

        A ``None`` token marks the first call: the path and row limit are
        consulted and a session is opened. Later calls ignore both.
        """
        if token is None:
            token = self.open_session(directory_path, row_limit)
        return token, self.fetch(token)

    def state(self, token: str | None) -> SessionState:
        if token is None:
            return SessionState.UNINITIALIZED
        if self.registry.has(token):
            return SessionState.ACTIVE
        if self.registry.was_completed(token):
            return SessionState.DONE
        raise UnknownSessionError(token)

    def iterate(self, directory_path: str | os.PathLike, row_limit: int) -> Iterator[EntryRecord]:
        """Run a whole session, yielding each record.

        The cursor is released when the listing ends, when it fails and when
        the generator is closed early.
        """
        token = self.open_session(directory_path, row_limit)
        try:
            while True:
                record = self.fetch(token)
                if record is None:
                    return
                yield record
        finally:
            if self.registry.has(token):
                self.registry.close(token)

    def _abort(self, token: str, exc: BaseException) -> None:
        logger.error(f"Listing session {token} failed: {exc}")
        try:
            self.registry.close(token)
        except UnknownSessionError:
            # Already removed, e.g. by the idle reaper
            logger.debug(f"Session {token} was already gone during abort")
