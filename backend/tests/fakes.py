from __future__ import annotations

import datetime as dt

from bucketview.errors import GatewayError
from bucketview.models import ListingPayload, ObjectInfo

MODIFIED = dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.timezone.utc)


class FakeGateway:
    """In-memory stand-in for S3Gateway; records every call it receives."""

    def __init__(self, listings=None, fail: str | None = None):
        self.listings: dict[str, ListingPayload] = listings or {}
        self.fail = fail
        self.calls: list[tuple] = []
        self.puts: dict[str, tuple[bytes, str]] = {}
        self.opened_with: list[tuple] = []

    def list_objects(self, prefix="", delimiter="/", max_keys=1000):
        self.calls.append(("list", prefix, delimiter, max_keys))
        if self.fail:
            raise GatewayError(self.fail)
        return self.listings.get(prefix, ListingPayload())

    def put_object(self, key, data, content_type):
        self.calls.append(("put", key, content_type))
        if self.fail:
            raise GatewayError(self.fail)
        self.puts[key] = (data, content_type)

    def presign_get(self, key, ttl_seconds):
        self.calls.append(("presign", key, ttl_seconds))
        if self.fail:
            raise GatewayError(self.fail)
        return f"https://signed.example/{key}?X-Amz-Expires={ttl_seconds}"


def root_listing() -> dict[str, ListingPayload]:
    return {
        "": ListingPayload(
            common_prefixes=["img/", "docs/"],
            objects=[ObjectInfo(key="readme.txt", size=42, last_modified=MODIFIED)],
        ),
        "img/": ListingPayload(
            common_prefixes=["img/2024/"],
            objects=[
                ObjectInfo(key="img/", size=0, last_modified=MODIFIED),
                ObjectInfo(key="img/cat.png", size=2048, last_modified=MODIFIED),
            ],
        ),
    }


R2_CONFIG = {
    "accessKeyId": "AKIAEXAMPLE",
    "secretAccessKey": "secret",
    "bucketName": "media",
    "accountId": "abc123",
}

AWS_CONFIG = {
    "accessKeyId": "AKIAEXAMPLE",
    "secretAccessKey": "secret",
    "bucketName": "media",
    "region": "eu-west-1",
}
