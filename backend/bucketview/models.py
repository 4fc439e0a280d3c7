from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Literal

EntryKind = Literal["folder", "file"]


@dataclass(frozen=True)
class CredentialRecord:
    access_key_id: str | None = None
    secret_access_key: str | None = None
    bucket_name: str | None = None
    region: str | None = None
    account_id: str | None = None
    public_domain: str | None = None

    def as_wire(self) -> dict[str, str]:
        """camelCase dict with empty fields dropped, as the proxy endpoints expect it."""
        out = {
            "accessKeyId": self.access_key_id,
            "secretAccessKey": self.secret_access_key,
            "bucketName": self.bucket_name,
            "region": self.region,
            "accountId": self.account_id,
            "publicDomain": self.public_domain,
        }
        return {k: v for k, v in out.items() if v}


@dataclass(frozen=True)
class ObjectInfo:
    key: str
    size: int = 0
    last_modified: dt.datetime | None = None


@dataclass(frozen=True)
class ListingPayload:
    """One page of a delimiter listing: the folders and the objects directly under a prefix."""

    common_prefixes: list[str] = field(default_factory=list)
    objects: list[ObjectInfo] = field(default_factory=list)


@dataclass(frozen=True)
class ListingEntry:
    kind: EntryKind
    key: str
    display_name: str
    size: int | None = None
    last_modified: dt.datetime | None = None

    @property
    def is_folder(self) -> bool:
        return self.kind == "folder"
