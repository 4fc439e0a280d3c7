from __future__ import annotations

from typing import Protocol

from bucketview.models import ListingPayload


class StorageGateway(Protocol):
    """The three object-store calls the proxy needs, bound to one bucket."""

    def list_objects(self, prefix: str = "", delimiter: str = "/", max_keys: int = 1000) -> ListingPayload: ...
    def put_object(self, key: str, data: bytes, content_type: str) -> None: ...
    def presign_get(self, key: str, ttl_seconds: int) -> str: ...
