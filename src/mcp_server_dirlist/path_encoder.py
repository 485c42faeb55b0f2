"""Normalize platform-native paths and filenames to UTF-8 text."""

from __future__ import annotations

import os

from .errors import PathEncodingError

CANONICAL_ENCODING = "utf-8"


def encode(native_path: str | bytes | os.PathLike) -> str:
    """Return ``native_path`` as validated text.

    Text that is already valid is returned unchanged, so ``encode`` is
    idempotent. Bytes are decoded strictly. Strings holding lone surrogates
    (undecodable POSIX names carried via ``surrogateescape``, or broken
    UTF-16 names on Windows) raise :class:`PathEncodingError` instead of
    being replaced, since the name is what gets reported to the caller.
    """
    path = os.fspath(native_path)
    if isinstance(path, bytes):
        try:
            return path.decode(CANONICAL_ENCODING)
        except UnicodeDecodeError as exc:
            raise PathEncodingError(path, exc.reason) from exc

    try:
        path.encode(CANONICAL_ENCODING)
    except UnicodeEncodeError as exc:
        raise PathEncodingError(path, exc.reason) from exc
    return path
