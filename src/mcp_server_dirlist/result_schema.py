"""
Record Schema and Row Materialization

Describes the five output columns, checks that a caller's requested result
shape is compatible with them, and turns records into rows: per-call
``(values, nulls)`` buffers for a row-at-a-time consumer, or a pandas
DataFrame for a whole listing.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

import pandas as pd

from .errors import AllocationError, ResultTypeMismatchError
from .listing_types import EntryRecord


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    dtype: str
    nullable: bool = False


RECORD_COLUMNS: tuple[ColumnDescriptor, ...] = (
    ColumnDescriptor("attributes", "text"),
    ColumnDescriptor("size", "int64"),
    ColumnDescriptor("modified", "text"),
    ColumnDescriptor("type", "text", nullable=True),
    ColumnDescriptor("name", "text"),
)

COLUMN_NAMES = [column.name for column in RECORD_COLUMNS]

# Spellings accepted for each schema type in a requested result shape
_TYPE_ALIASES = {
    "text": {"text", "varchar", "string", "str"},
    "int64": {"int64", "int8", "bigint"},
}

_PANDAS_DTYPES = {
    "text": "string",
    "int64": "Int64",
}


def check_result_shape(requested: Sequence[str | tuple[str, str]]) -> None:
    """Verify that ``requested`` can receive records.

    Each item is either a column name, which must match the schema name at
    that position, or a ``(name, dtype)`` pair, whose dtype must be
    compatible with the schema type (its name is free, as in a column
    definition list).

    Raises:
        ResultTypeMismatchError: count, name or type does not match
    """
    if len(requested) != len(RECORD_COLUMNS):
        raise ResultTypeMismatchError(
            f"result shape has {len(requested)} columns, "
            f"listing records have {len(RECORD_COLUMNS)}"
        )
    for position, (wanted, column) in enumerate(zip(requested, RECORD_COLUMNS)):
        if isinstance(wanted, str):
            if wanted != column.name:
                raise ResultTypeMismatchError(
                    f"column {position} is '{column.name}', not '{wanted}'"
                )
            continue
        if not isinstance(wanted, tuple) or len(wanted) != 2 or not isinstance(wanted[1], str):
            raise ResultTypeMismatchError(
                f"column {position} must be a name or a (name, dtype) pair, got {wanted!r}"
            )
        name, dtype = wanted
        if dtype.lower() not in _TYPE_ALIASES[column.dtype]:
            raise ResultTypeMismatchError(
                f"column {position} ('{name}') cannot accept {column.dtype}, "
                f"requested {dtype}"
            )


@contextmanager
def call_buffers(natts: int = len(RECORD_COLUMNS)) -> Iterator[tuple[list[Any], list[bool]]]:
    """Acquire fresh value/null buffers for one row, released on every exit path."""
    try:
        values: list[Any] = [None] * natts
        nulls = [False] * natts
    except MemoryError as exc:
        raise AllocationError(f"Unable to allocate buffers for {natts} fields") from exc
    try:
        yield values, nulls
    finally:
        values.clear()
        nulls.clear()


def record_to_row(record: EntryRecord) -> tuple[tuple[Any, ...], tuple[bool, ...]]:
    """Fill one row's values and null flags from ``record``."""
    with call_buffers() as (values, nulls):
        for position, value in enumerate(record.as_tuple()):
            if value is None:
                nulls[position] = True
            else:
                values[position] = value
        return tuple(values), tuple(nulls)


def records_to_frame(records: Iterable[EntryRecord]) -> pd.DataFrame:
    """Materialize records into a DataFrame with nullable schema dtypes."""
    rows = [record.as_tuple() for record in records]
    frame = pd.DataFrame(rows, columns=COLUMN_NAMES)
    return frame.astype({column.name: _PANDAS_DTYPES[column.dtype] for column in RECORD_COLUMNS})
