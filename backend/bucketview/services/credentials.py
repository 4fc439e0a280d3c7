from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from bucketview.config import get_settings
from bucketview.models import CredentialRecord

log = logging.getLogger("bucketview.credentials")

STORAGE_KEY = "uploader_config_v2"
DEFAULT_PROVIDER = "r2"

REQUIRED = {
    "r2": ["account_id", "access_key_id", "secret_access_key", "bucket_name"],
    "aws": ["access_key_id", "secret_access_key", "bucket_name", "region"],
}


def _parse_lines(text: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for line in (text or "").splitlines():
        key, sep, value = line.partition("=")
        key = key.strip()
        if not key or not sep:
            continue
        value = value.strip()
        # one quote off each end, paired or not
        if value[:1] in ("'", '"'):
            value = value[1:]
        if value[-1:] in ("'", '"'):
            value = value[:-1]
        out[key] = value
    return out


def _first(values: dict[str, str], *names: str) -> str | None:
    for n in names:
        if values.get(n):
            return values[n]
    return None


def parse_env_config(text: str, provider: str) -> CredentialRecord:
    """
    Parse a pasted ``KEY=value`` block into a credential record.

    AWS accepts both ``AWS_``-prefixed and bare names and defaults the region.
    Anything else is read with the R2 names.
    """
    if not text:
        return CredentialRecord()
    v = _parse_lines(text)
    if provider == "aws":
        return CredentialRecord(
            access_key_id=_first(v, "AWS_ACCESS_KEY_ID", "ACCESS_KEY_ID"),
            secret_access_key=_first(v, "AWS_SECRET_ACCESS_KEY", "SECRET_ACCESS_KEY"),
            region=_first(v, "AWS_REGION", "REGION") or get_settings().default_aws_region,
            bucket_name=_first(v, "AWS_BUCKET_NAME", "BUCKET_NAME"),
        )
    return CredentialRecord(
        account_id=_first(v, "R2_ACCOUNT_ID"),
        access_key_id=_first(v, "R2_ACCESS_KEY_ID"),
        secret_access_key=_first(v, "R2_SECRET_ACCESS_KEY"),
        bucket_name=_first(v, "R2_BUCKET_NAME"),
        public_domain=_first(v, "R2_PUBLIC_URL"),
    )


def missing_fields(record: CredentialRecord, provider: str) -> list[str]:
    required = REQUIRED.get(provider, REQUIRED[DEFAULT_PROVIDER])
    return [name for name in required if not getattr(record, name)]


def is_complete(record: CredentialRecord, provider: str) -> bool:
    return not missing_fields(record, provider)


class CredentialStore:
    """
    Keeps the raw pasted config text and the provider choice between sessions.

    The whole store is one JSON document; our record lives under STORAGE_KEY so
    other keys written next to it survive a save or clear. ``fingerprint`` is a
    digest of the stored record, so a browse view notices a change made by any
    process (another shell running `config set`) and starts over at the root.
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = get_settings().state_path() / "state.json"
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            log.warning("credential store %s is not valid JSON; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.chmod(tmp, 0o600)
        tmp.replace(self.path)

    def load(self) -> tuple[str, str]:
        saved = self._read_all().get(STORAGE_KEY) or {}
        return str(saved.get("text") or ""), str(saved.get("provider") or DEFAULT_PROVIDER)

    def save(self, text: str, provider: str) -> None:
        data = self._read_all()
        data[STORAGE_KEY] = {"text": text, "provider": provider}
        self._write_all(data)

    def clear(self) -> None:
        data = self._read_all()
        if data.pop(STORAGE_KEY, None) is not None:
            self._write_all(data)

    @property
    def fingerprint(self) -> str:
        text, provider = self.load()
        blob = json.dumps({"text": text, "provider": provider}, sort_keys=True)
        return hashlib.sha256(blob.encode("utf-8")).hexdigest()

    def record(self) -> tuple[str, CredentialRecord]:
        text, provider = self.load()
        return provider, parse_env_config(text, provider)
