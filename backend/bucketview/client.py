from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from bucketview.config import get_settings
from bucketview.errors import ProxyError
from bucketview.models import CredentialRecord, ListingPayload, ObjectInfo
from bucketview.schemas import ListResponse
from bucketview.services.uploader import guess_content_type

log = logging.getLogger("bucketview.client")


class ProxyClient:
    """
    Talks to the proxy endpoints on behalf of one credential set.

    Credentials travel with every request and are never kept server side.
    ``transport`` lets tests route calls straight into the ASGI app.
    """

    def __init__(
        self,
        provider: str,
        record: CredentialRecord,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.provider = provider
        self.record = record
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.proxy_url,
            timeout=timeout or settings.client_timeout_s,
            transport=transport,
        )

    async def __aenter__(self) -> "ProxyClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _post(self, path: str, **kwargs) -> dict[str, Any]:
        resp = await self._http.post(path, **kwargs)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.is_error:
            msg = body.get("error") if isinstance(body, dict) else None
            raise ProxyError(resp.status_code, str(msg or resp.reason_phrase or f"HTTP {resp.status_code}"))
        return body

    async def list_objects(self, prefix: str) -> ListingPayload:
        body = await self._post(
            "/list",
            json={"provider": self.provider, "config": self.record.as_wire(), "prefix": prefix},
        )
        parsed = ListResponse.model_validate(body)
        return ListingPayload(
            common_prefixes=[p.prefix for p in parsed.common_prefixes],
            objects=[ObjectInfo(key=o.key, size=o.size, last_modified=o.last_modified) for o in parsed.contents],
        )

    async def presign(self, key: str, ttl_seconds: int | None = None) -> str:
        payload: dict[str, Any] = {"provider": self.provider, "config": self.record.as_wire(), "key": key}
        if ttl_seconds:
            payload["ttlSeconds"] = int(ttl_seconds)
        body = await self._post("/presign", json=payload)
        return str(body["url"])

    async def upload(self, path: str | Path, content_type: str | None = None) -> str:
        path = Path(path)
        form = {"provider": self.provider, **self.record.as_wire()}
        ctype = guess_content_type(path.name, content_type)
        body = await self._post("/upload", data=form, files={"file": (path.name, path.read_bytes(), ctype)})
        log.info("uploaded %s -> %s", path.name, body.get("key"))
        return str(body["url"])
