from __future__ import annotations

import pytest

from mcp_server_dirlist.listing_types import EntryRecord
from mcp_server_dirlist.result_schema import records_to_frame
from mcp_server_dirlist.utils.format_utils import format_record, summarize_listing
from mcp_server_dirlist.utils.session_utils import (
    MAX_ROW_LIMIT,
    validate_row_limit,
    validate_session_token,
)


def test_validate_session_token_ok():
    assert validate_session_token(" abc ") == "abc"


@pytest.mark.parametrize("bad", [None, "", "   ", 123])
def test_validate_session_token_errors(bad):
    with pytest.raises(ValueError):
        validate_session_token(bad)


@pytest.mark.parametrize("limit", [0, 1, 1000, MAX_ROW_LIMIT])
def test_validate_row_limit_ok(limit):
    assert validate_row_limit(limit) == limit


@pytest.mark.parametrize("bad", [-1, MAX_ROW_LIMIT + 1, False, 2.0, "3"])
def test_validate_row_limit_errors(bad):
    with pytest.raises(ValueError):
        validate_row_limit(bad)


def test_format_record_with_null_type():
    record = EntryRecord("-rw-r--r--", 10, "01/01/70 00:00:00.000 UTC", None, "a.txt")
    assert format_record(record) == "-rw-r--r--\t10\t01/01/70 00:00:00.000 UTC\tNULL\ta.txt"


def test_format_record_with_type():
    record = EntryRecord("-rw-r--r--", 0, "ts", "S_ISFIFO", "pipe")
    assert format_record(record).split("\t")[3] == "S_ISFIFO"


def test_summarize_listing_empty():
    text = summarize_listing("/tmp/x", records_to_frame([]), 10)
    assert "=== LISTING /tmp/x ===" in text
    assert "Entries: 0 (row_limit=10)" in text
    assert text.endswith("No entries.")


def test_summarize_listing_rows():
    frame = records_to_frame(
        [EntryRecord("drwxr-xr-x", 4096, "ts", None, "sub")]
    )
    text = summarize_listing("/data", frame, 5)
    assert "Entries: 1" in text
    assert "drwxr-xr-x" in text
    assert "NULL" in text
