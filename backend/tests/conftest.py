from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bucketview.deps import gateway_factory
from bucketview.main import app
from tests.fakes import FakeGateway, root_listing


@pytest.fixture
def gateway():
    return FakeGateway(root_listing())


@pytest.fixture
def api(gateway):
    def factory(record, cfg):
        gateway.opened_with.append((record, cfg))
        return gateway

    app.dependency_overrides[gateway_factory] = lambda: factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(gateway_factory, None)
