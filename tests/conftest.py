from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from leadscout.api.app import create_app
from leadscout.api.deps import get_provider_factory, get_settings
from leadscout.core.config import Settings
from leadscout.providers.outscraper import OutscraperConfig, OutscraperProvider
from leadscout.storage.memory import InMemoryLeadStore

VENDOR_URL = "https://vendor.test"


class FakeVendor:
    """Scripted stand-in for the Outscraper HTTP API, used as a MockTransport handler."""

    def __init__(self):
        self.calls = []
        self.search = (200, {"id": "r1", "status": "Pending", "results_location": f"{VENDOR_URL}/requests/r1"})
        self.requests = {}
        self.raise_on = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path
        if path in self.raise_on:
            raise httpx.ConnectError("connection refused", request=request)
        if path == "/maps/search-v3":
            status, body = self.search
            return httpx.Response(status, json=body)
        if path.startswith("/requests/"):
            request_id = path.rsplit("/", 1)[1]
            status, body = self.requests.get(request_id, (404, {"error": "Request not found"}))
            return httpx.Response(status, json=body)
        return httpx.Response(500, json={"error": "unexpected path"})


class StepClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def vendor():
    return FakeVendor()


@pytest.fixture
def provider(vendor):
    client = httpx.AsyncClient(transport=httpx.MockTransport(vendor), base_url=VENDOR_URL)
    return OutscraperProvider(OutscraperConfig(api_key="test-key", base_url=VENDOR_URL), client=client)


@pytest.fixture
def store():
    return InMemoryLeadStore(clock=StepClock())


@pytest.fixture
def app(store, provider):
    app = create_app(store=store)
    app.dependency_overrides[get_provider_factory] = lambda: (lambda: provider)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def unconfigured_client(store):
    app = create_app(store=store)
    app.dependency_overrides[get_settings] = lambda: Settings(outscraper_api_key="")
    with TestClient(app) as c:
        yield c
