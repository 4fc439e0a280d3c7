from __future__ import annotations

import asyncio

import httpx
import pytest

from bucketview.client import ProxyClient
from bucketview.errors import ProxyError
from bucketview.main import app
from bucketview.models import CredentialRecord
from bucketview.services.navigator import Navigator

R2 = CredentialRecord(access_key_id="AKIAEXAMPLE", secret_access_key="secret", bucket_name="media", account_id="abc123")


def _client(record: CredentialRecord = R2) -> ProxyClient:
    return ProxyClient("r2", record, base_url="http://test", transport=httpx.ASGITransport(app=app))


def test_browse_root_through_proxy(api):
    async def scenario():
        async with _client() as client:
            nav = Navigator(client.list_objects)
            await nav.start()
            return nav.state

    st = asyncio.run(scenario())
    assert [(e.kind, e.key, e.size) for e in st.entries] == [
        ("folder", "img/", None),
        ("folder", "docs/", None),
        ("file", "readme.txt", 42),
    ]
    assert st.entries[2].last_modified is not None


def test_descend_skips_directory_marker(api):
    async def scenario():
        async with _client() as client:
            nav = Navigator(client.list_objects)
            await nav.start()
            await nav.open(nav.find("img"))
            return nav.state

    st = asyncio.run(scenario())
    assert st.current_prefix == "img/"
    assert [(e.kind, e.display_name) for e in st.entries] == [("folder", "2024"), ("file", "cat.png")]


def test_proxy_error_is_recorded_on_state(api):
    async def scenario():
        async with _client(CredentialRecord(bucket_name="media", account_id="abc123")) as client:
            nav = Navigator(client.list_objects)
            await nav.start()
            return nav.state

    st = asyncio.run(scenario())
    assert st.entries == []
    assert "credentials" in st.error.lower()


def test_presign_and_upload_through_proxy(api, gateway, tmp_path):
    src = tmp_path / "holiday pic.png"
    src.write_bytes(b"\x89PNG")

    async def scenario():
        async with _client() as client:
            link = await client.presign("readme.txt", 120)
            url = await client.upload(src)
            return link, url

    link, url = asyncio.run(scenario())
    assert link.endswith("readme.txt?X-Amz-Expires=120")
    assert url.endswith("-holiday-pic.png")
    ((key, (data, ctype)),) = gateway.puts.items()
    assert (data, ctype) == (b"\x89PNG", "image/png")


def test_presign_error_raises_proxy_error(api, gateway):
    gateway.fail = "Access Denied"

    async def scenario():
        async with _client() as client:
            await client.presign("readme.txt")

    with pytest.raises(ProxyError) as info:
        asyncio.run(scenario())
    assert info.value.status_code == 500
    assert info.value.message == "Access Denied"
