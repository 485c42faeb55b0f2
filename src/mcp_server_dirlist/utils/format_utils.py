from __future__ import annotations

import pandas as pd

from ..listing_types import EntryRecord

NULL_MARKER = "NULL"


def format_record(record: EntryRecord) -> str:
    """Render one record as a tab-separated line, nulls shown as NULL."""
    fields = [
        record.attributes,
        str(record.size),
        record.modified,
        record.type if record.type is not None else NULL_MARKER,
        record.name,
    ]
    return "\t".join(fields)


def summarize_listing(directory_path: str, frame: pd.DataFrame, row_limit: int) -> str:
    """Produce a human-readable table of a finished listing.

    Pure utility (no side effects), suitable for testing.
    """
    lines: list[str] = []
    lines.append(f"=== LISTING {directory_path} ===")
    lines.append(f"Entries: {len(frame)} (row_limit={row_limit})")

    if frame.empty:
        return "\n".join(lines + ["No entries."])

    lines.append("")
    lines.append(frame.fillna({"type": NULL_MARKER}).to_string(index=False))
    return "\n".join(lines)
