from __future__ import annotations

from typing import Iterable

from bucketview.models import ListingEntry, ListingPayload, ObjectInfo
from bucketview.services.paths import DELIMITER, basename, folder_name


def build_entries(
    prefix: str,
    common_prefixes: Iterable[str],
    objects: Iterable[ObjectInfo],
    delimiter: str = DELIMITER,
) -> list[ListingEntry]:
    """
    Merge one listing into display order: folders, then files.

    Provider order is kept inside each group. An object whose key is exactly
    ``prefix`` is the folder's own marker and is left out.
    """
    folders = [
        ListingEntry(kind="folder", key=p, display_name=folder_name(p, prefix, delimiter))
        for p in common_prefixes
        if p
    ]
    files = [
        ListingEntry(
            kind="file",
            key=o.key,
            display_name=basename(o.key, delimiter),
            size=o.size,
            last_modified=o.last_modified,
        )
        for o in objects
        if o.key != prefix
    ]
    return folders + files


def entries_from_payload(prefix: str, payload: ListingPayload, delimiter: str = DELIMITER) -> list[ListingEntry]:
    return build_entries(prefix, payload.common_prefixes, payload.objects, delimiter)


def human_size(n: int | None) -> str:
    if n is None:
        return ""
    size = float(n)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < 1024 or unit == "TB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{n} B"
