import asyncio

import httpx
import pytest

from leadscout.providers.base import VendorError
from leadscout.providers.outscraper import OutscraperConfig, OutscraperProvider


def test_submit_search_sends_fixed_params_and_key(vendor, provider):
    ticket = asyncio.run(provider.submit_search("plumbers"))

    assert ticket.id == "r1"
    assert ticket.status == "Pending"
    assert ticket.results_location.endswith("/requests/r1")

    sent = vendor.calls[0]
    assert sent.headers["X-API-KEY"] == "test-key"
    params = sent.url.params
    assert params["query"] == "plumbers"
    assert params["limit"] == "10"
    assert params["language"] == "en"
    assert params["region"] == "us"
    assert params["coordinates"] == "45.5155,-122.6789"
    assert params["async"] == "true"


def test_submit_search_raises_on_vendor_error(vendor, provider):
    vendor.search = (401, {"error": "bad key"})
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(provider.submit_search("plumbers"))


def test_fetch_request_returns_client_errors_as_results(vendor, provider):
    result = asyncio.run(provider.fetch_request("missing"))
    assert result.http_status == 404
    assert result.body == {"error": "Request not found"}
    assert result.status is None


def test_fetch_request_exposes_status_and_data(vendor, provider):
    vendor.requests["r1"] = (200, {"status": "Success", "data": [[{"place_id": "p1"}]]})
    result = asyncio.run(provider.fetch_request("r1"))
    assert result.status == "Success"
    assert result.data == [[{"place_id": "p1"}]]


def test_fetch_request_raises_on_server_error(vendor, provider):
    vendor.requests["r1"] = (503, {"error": "unavailable"})
    with pytest.raises(VendorError) as exc:
        asyncio.run(provider.fetch_request("r1"))
    assert exc.value.status_code == 503


def test_provider_requires_api_key():
    with pytest.raises(ValueError):
        OutscraperProvider(OutscraperConfig(api_key=""))


def test_provider_without_client_must_be_entered():
    provider = OutscraperProvider(OutscraperConfig(api_key="k"))
    with pytest.raises(RuntimeError):
        provider.client
