"""
Prefix arithmetic for browsing a flat key space as folders.

Canonical prefixes are either ``""`` (the bucket root) or a string ending in
the delimiter with no leading delimiter, e.g. ``"photos/2024/"``.
"""

from __future__ import annotations

DELIMITER = "/"


def normalize(raw: str, delimiter: str = DELIMITER) -> str:
    """
    Turn typed or pasted text into a canonical listing prefix.

    A final segment containing a dot is taken to be a file name and dropped, so a
    pasted object key lands in the folder that holds it. A folder that really has
    a dot in its name (``v1.0``) is therefore only reachable when typed with its
    trailing delimiter; without it, ``"v1.0"`` normalizes to the parent.
    """
    path = _strip_leading(raw or "", delimiter)
    if not path:
        return ""
    if path.endswith(delimiter):
        return path

    head, sep, last = path.rpartition(delimiter)
    if "." in last:
        return head + delimiter if sep and head else ""
    return path + delimiter


def _strip_leading(path: str, delimiter: str) -> str:
    # peel whitespace and leading delimiters until neither is left, so "/ /a" and "a" agree
    while True:
        trimmed = path.strip()
        if trimmed.startswith(delimiter):
            trimmed = trimmed[len(delimiter):]
        if trimmed == path:
            return path
        path = trimmed


def ascend(prefix: str, delimiter: str = DELIMITER) -> str:
    segments = [s for s in (prefix or "").split(delimiter) if s]
    if not segments:
        return ""
    parent = segments[:-1]
    return delimiter.join(parent) + delimiter if parent else ""


def basename(key: str, delimiter: str = DELIMITER) -> str:
    return key.rsplit(delimiter, 1)[-1]


def folder_name(key: str, prefix: str, delimiter: str = DELIMITER) -> str:
    name = key[len(prefix):] if prefix and key.startswith(prefix) else key
    return name.rstrip(delimiter)


def breadcrumbs(prefix: str, delimiter: str = DELIMITER) -> list[tuple[str, str]]:
    """``[(label, prefix), ...]`` from the root down to ``prefix``."""
    crumbs = [("/", "")]
    acc = ""
    for seg in (s for s in (prefix or "").split(delimiter) if s):
        acc += seg + delimiter
        crumbs.append((seg, acc))
    return crumbs
