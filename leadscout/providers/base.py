# Provider interfaces and dataclasses.
# leadscout/providers/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol


class VendorError(RuntimeError):
    """The vendor answered with a server-side (5xx) status."""

    def __init__(self, status_code: int, body: Any = None):
        super().__init__(f"vendor returned status {status_code}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class JobTicket:
    """Handle for an asynchronous vendor search, as returned on submission."""
    id: Optional[str]
    status: Optional[str]
    results_location: Optional[str]


@dataclass(frozen=True)
class JobResult:
    """
    One status poll of a vendor job.
    `body` is the decoded JSON body exactly as the vendor sent it.
    """
    http_status: int
    body: Any

    @property
    def status(self) -> Optional[str]:
        if isinstance(self.body, dict):
            return self.body.get("status")
        return None

    @property
    def data(self) -> Any:
        if isinstance(self.body, dict):
            return self.body.get("data")
        return None


class SearchProvider(Protocol):
    provider_name: str

    async def submit_search(self, query: str) -> JobTicket:
        """Starts an asynchronous search job and returns its ticket."""
        ...

    async def fetch_request(self, request_id: str) -> JobResult:
        """
        Fetches the job status. Responses in the 200-499 range are returned,
        server errors raise VendorError.
        """
        ...
