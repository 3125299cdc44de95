# Outscraper Google Maps search provider.
# leadscout/providers/outscraper.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .base import JobResult, JobTicket, VendorError

logger = logging.getLogger(__name__)


def _decode_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


@dataclass(frozen=True)
class OutscraperConfig:
    api_key: str
    base_url: str = "https://api.app.outscraper.com"
    timeout_s: float = 30.0

    # Fixed search parameters sent with every query.
    limit: int = 10
    language: str = "en"
    region: str = "us"
    location: str = "Portland, Oregon, United States"
    coordinates: str = "45.5155,-122.6789"
    enrichment: str = "domain_service, emails_validator_service"


class OutscraperProvider:
    """
    Outscraper API provider:
      - GET https://api.app.outscraper.com/maps/search-v3   (async=true)
      - GET https://api.app.outscraper.com/requests/{request_id}

    Auth header:
      - X-API-KEY: <key>
    """

    provider_name = "outscraper"

    def __init__(self, cfg: OutscraperConfig, client: Optional[httpx.AsyncClient] = None):
        if not cfg.api_key:
            raise ValueError("OutscraperConfig.api_key is required")
        self.cfg = cfg
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.cfg.timeout_s)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("OutscraperProvider must be used with 'async with' or provide a client.")
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {"X-API-KEY": self.cfg.api_key}

    def _search_params(self, query: str) -> Dict[str, Any]:
        return {
            "query": query,
            "location": self.cfg.location,
            "limit": self.cfg.limit,
            "language": self.cfg.language,
            "region": self.cfg.region,
            "coordinates": self.cfg.coordinates,
            "enrichment": self.cfg.enrichment,
            "async": "true",
        }

    async def submit_search(self, query: str) -> JobTicket:
        url = f"{self.cfg.base_url}/maps/search-v3"
        resp = await self.client.get(
            url,
            params=self._search_params(query),
            headers=self._headers(),
            timeout=self.cfg.timeout_s,
        )
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError("Expected JSON object response")

        ticket = JobTicket(
            id=data.get("id"),
            status=data.get("status"),
            results_location=data.get("results_location"),
        )
        logger.info("Submitted search %r as request %s (%s)", query, ticket.id, ticket.status)
        return ticket

    async def fetch_request(self, request_id: str) -> JobResult:
        url = f"{self.cfg.base_url}/requests/{request_id}"
        resp = await self.client.get(url, headers=self._headers(), timeout=self.cfg.timeout_s)
        body = _decode_body(resp)
        # 4xx is an answer about the job, not a failure of the call.
        if resp.status_code >= 500:
            raise VendorError(resp.status_code, body)
        return JobResult(http_status=resp.status_code, body=body)
