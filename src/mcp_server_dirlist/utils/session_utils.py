from __future__ import annotations

MAX_ROW_LIMIT = 2**31 - 1


def validate_session_token(session_token: str | None) -> str:
    """Validate that session_token is a non-empty string and return the stripped value."""
    if session_token is None:
        raise ValueError("session_token is required")
    if not isinstance(session_token, str):
        raise ValueError("session_token must be a non-empty string")
    cleaned = session_token.strip()
    if not cleaned:
        raise ValueError("session_token must be a non-empty string")
    return cleaned


def validate_row_limit(row_limit: int) -> int:
    """Validate a row limit: a non-negative integer that fits in int4."""
    # bool is an int subclass but never a meaningful limit
    if isinstance(row_limit, bool) or not isinstance(row_limit, int):
        raise ValueError(f"row_limit must be an integer, got {type(row_limit).__name__}")
    if row_limit < 0:
        raise ValueError(f"row_limit must be >= 0, got {row_limit}")
    if row_limit > MAX_ROW_LIMIT:
        raise ValueError(f"row_limit must be <= {MAX_ROW_LIMIT}, got {row_limit}")
    return row_limit
