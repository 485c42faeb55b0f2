"""
Entry Classifier

Turns one raw ``os.DirEntry`` into an :class:`EntryRecord`: a ``ls -l`` style
permission string, the size, the modification time, the special-file tag
and the display name (with the raw link target for symlinks).
"""

from __future__ import annotations

import os
import stat
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable

from .errors import EntryStatError
from .listing_types import EntryRecord, FileTypeTag
from .path_encoder import encode

SYMLINK_POINTER = " --> "

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# (owner, group, other) x (read, write, execute), in display order
_PERMISSION_BITS = (
    (stat.S_IRUSR, "r"),
    (stat.S_IWUSR, "w"),
    (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"),
    (stat.S_IWGRP, "w"),
    (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"),
    (stat.S_IWOTH, "w"),
    (stat.S_IXOTH, "x"),
)

_SPECIAL_KINDS: tuple[tuple[Callable[[int], bool], FileTypeTag], ...] = (
    (stat.S_ISBLK, FileTypeTag.BLOCK_DEVICE),
    (stat.S_ISCHR, FileTypeTag.CHAR_DEVICE),
    (stat.S_ISFIFO, FileTypeTag.FIFO),
    (stat.S_ISSOCK, FileTypeTag.SOCKET),
)


@dataclass(frozen=True)
class ClockDomains:
    """The filesystem clock and the wall clock, both in nanoseconds.

    On POSIX ``st_mtime_ns`` is already wall-clock time, so both default to
    ``time.time_ns`` and the offset is zero. A platform whose timestamps
    live in another epoch plugs its own ``filesystem_now`` in.
    """

    filesystem_now: Callable[[], int] = time.time_ns
    system_now: Callable[[], int] = time.time_ns

    def offset_ns(self) -> int:
        if self.filesystem_now is self.system_now:
            return 0
        # Filesystem clock first, so jitter never pushes a timestamp back
        filesystem = self.filesystem_now()
        return self.system_now() - filesystem


DEFAULT_CLOCKS = ClockDomains()


def format_attributes(mode: int, is_dir: bool) -> str:
    """Build the 10-character ``drwxr-xr-x`` style attribute string."""
    flags = ["d" if is_dir else "-"]
    for bit, char in _PERMISSION_BITS:
        flags.append(char if mode & bit else "-")
    return "".join(flags)


def type_tag(mode: int) -> str | None:
    """Return the special-file tag for ``mode``, or None for ordinary entries."""
    for predicate, tag in _SPECIAL_KINDS:
        if predicate(mode):
            return tag.value
    return None


def format_timestamp(native_ns: int, offset_ns: int = 0, tz: tzinfo = timezone.utc) -> str:
    """Format a native timestamp as ``MM/DD/YY HH:MM:SS.mmm ZONE``.

    The value is shifted into the wall-clock domain by ``offset_ns`` and
    truncated (floored) to millisecond precision.
    """
    millis = (native_ns + offset_ns) // 1_000_000
    moment = (_EPOCH + timedelta(milliseconds=millis)).astimezone(tz)
    return (
        f"{moment.strftime('%m/%d/%y %H:%M:%S')}.{moment.microsecond // 1000:03d} "
        f"{moment.tzname()}"
    )


def display_name(name: str | bytes, link_target: str | bytes | None = None) -> str:
    """Encode the base name, appending the raw link target for symlinks."""
    text = encode(name)
    if link_target is not None:
        text += SYMLINK_POINTER + encode(link_target)
    return text


def classify(
    entry: os.DirEntry,
    *,
    tz: tzinfo = timezone.utc,
    clocks: ClockDomains = DEFAULT_CLOCKS,
) -> EntryRecord:
    """Classify one directory entry.

    Symlinks are described by their own status (not their target's) and are
    never resolved, so broken links are still reported.

    Raises:
        EntryStatError: the entry vanished or cannot be inspected
        PathEncodingError: the name or link target is not valid text
    """
    path = entry.path
    try:
        is_link = entry.is_symlink()
        status = entry.stat(follow_symlinks=False) if is_link else entry.stat()
        is_dir = entry.is_dir()
        link_target = os.readlink(path) if is_link else None
    except OSError as exc:
        raise EntryStatError(os.fsdecode(path), exc) from exc

    return EntryRecord(
        attributes=format_attributes(status.st_mode, is_dir),
        size=status.st_size,
        modified=format_timestamp(status.st_mtime_ns, clocks.offset_ns(), tz),
        type=type_tag(status.st_mode),
        name=display_name(entry.name, link_target),
    )
