from __future__ import annotations

import logging
import mimetypes
import re
import threading
import time
from dataclasses import dataclass

from bucketview.errors import GatewayError, UploadError
from bucketview.models import CredentialRecord
from bucketview.storage.base import StorageGateway

log = logging.getLogger("bucketview.upload")

_WS = re.compile(r"\s+")
_stamp_lock = threading.Lock()
_last_stamp = 0


@dataclass(frozen=True)
class UploadResult:
    key: str
    url: str


def _next_stamp() -> int:
    global _last_stamp
    now_ms = time.time_ns() // 1_000_000
    with _stamp_lock:
        # two uploads inside one millisecond still get distinct, increasing stamps
        stamp = max(now_ms, _last_stamp + 1)
        _last_stamp = stamp
    return stamp


def derive_key(filename: str, now_ms: int | None = None) -> str:
    """``<ms>-<filename>`` with every whitespace run in the name turned into one hyphen."""
    name = _WS.sub("-", filename or "file")
    stamp = int(now_ms) if now_ms is not None else _next_stamp()
    return f"{stamp}-{name}"


def guess_content_type(filename: str, declared: str | None = None) -> str:
    if declared:
        return declared
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


def public_url(provider: str, record: CredentialRecord, key: str, region: str | None = None) -> str:
    if provider == "r2" and record.public_domain:
        domain = record.public_domain.rstrip("/")
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        return f"{domain}/{key}"
    if provider == "aws" and record.bucket_name:
        region = region or record.region or "us-east-1"
        return f"https://{record.bucket_name}.s3.{region}.amazonaws.com/{key}"
    return key


def upload_file(
    gateway: StorageGateway,
    provider: str,
    record: CredentialRecord,
    filename: str,
    data: bytes,
    content_type: str | None = None,
    region: str | None = None,
    now_ms: int | None = None,
) -> UploadResult:
    key = derive_key(filename, now_ms)
    ctype = guess_content_type(filename, content_type)
    try:
        gateway.put_object(key, data, ctype)
    except GatewayError as e:
        raise UploadError(e.message, {"key": key, **e.details}) from e
    url = public_url(provider, record, key, region)
    log.info("uploaded bucket=%s key=%s bytes=%s content_type=%s", record.bucket_name, key, len(data), ctype)
    return UploadResult(key=key, url=url)
