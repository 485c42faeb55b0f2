"""
Filesystem helpers for listing tests.
"""

import os


def scan_entry(directory, name):
    """Return the os.DirEntry called ``name`` inside ``directory``."""
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.name == name:
                return entry
    raise LookupError(name)


def drain(controller, token):
    """Fetch records from ``token`` until end-of-data and return them."""
    records = []
    while True:
        record = controller.fetch(token)
        if record is None:
            return records
        records.append(record)


def base_name(record):
    """Strip the symlink target from a record's display name."""
    return record.name.split(" --> ")[0]
