# Search/poll loop driven against the leadscout HTTP API.
# leadscout/client/orchestrator.py
from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from .pagination import RESULTS_PER_PAGE, clamp_page, page_slice, total_pages

logger = logging.getLogger(__name__)

SUCCESS = "Success"
FAILURE = "Failure"

DISPLAY_FIELDS = ("place_id", "id", "name", "full_address", "address", "phone", "site", "domain", "emails")


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    DONE_SUCCESS = "done_success"
    DONE_FAILURE = "done_failure"
    ERROR = "error"


class SearchClientError(Exception):
    pass


@dataclass
class OrchestratorState:
    phase: Phase = Phase.IDLE
    query: str = ""
    request_id: Optional[str] = None
    status: Optional[str] = None
    results: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    current_page: int = 1
    is_loading: bool = False

    # Bumped on every accepted submit; responses tagged with an older value are dropped.
    generation: int = 0
    timer: Optional[asyncio.Task] = None


def display_rows(data: Any) -> List[Dict[str, Any]]:
    """
    Rows for the results table, derived from the raw vendor payload:
    entries without a non-blank place_id are dropped.
    """
    if not (isinstance(data, list) and data and isinstance(data[0], list)):
        return []
    rows = []
    for item in data[0]:
        if not isinstance(item, dict):
            continue
        place_id = item.get("place_id")
        if not isinstance(place_id, str) or not place_id.strip():
            continue
        rows.append({k: item.get(k) for k in DISPLAY_FIELDS})
    return rows


def _json(resp: httpx.Response) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class SearchOrchestrator:
    """
    Drives one search at a time: submit, poll immediately, then poll every
    `interval_s` seconds until the job reaches Success or Failure.

    Only one polling timer exists at any moment. Starting a new search
    cancels the previous timer, and late responses from an earlier search
    are discarded. Call `close()` on teardown.
    """

    def __init__(self, client: httpx.AsyncClient, interval_s: float = 10.0, per_page: int = RESULTS_PER_PAGE):
        self.client = client
        self.interval_s = interval_s
        self.per_page = per_page
        self.state = OrchestratorState()

    # -- search / poll -------------------------------------------------

    async def submit(self, query: str) -> OrchestratorState:
        st = self.state
        if not query or not query.strip():
            st.error = "Please enter a search query."
            return st

        self._disarm()
        st.generation += 1
        gen = st.generation
        st.phase = Phase.SUBMITTING
        st.query = query
        st.is_loading = True
        st.error = None
        st.results = []
        st.current_page = 1
        st.request_id = None
        st.status = None

        try:
            resp = await self.client.post("/search", json={"query": query})
            body = _json(resp)
            if not resp.is_success or not body.get("success"):
                raise SearchClientError(body.get("message") or "Failed to initiate search.")
        except (httpx.HTTPError, SearchClientError) as e:
            if gen == st.generation:
                logger.error("Search initiation error: %s", e)
                self._fail(str(e) or "An error occurred during search initiation.")
            return st

        if gen != st.generation:
            return st

        st.is_loading = False
        st.request_id = body.get("requestId")
        st.status = body.get("status")
        if not st.request_id:
            self._fail("Search did not return a request ID.")
            return st

        st.phase = Phase.POLLING
        request_id = st.request_id
        await self._poll(gen, request_id)
        if st.phase is Phase.POLLING and gen == st.generation:
            self._arm(gen, request_id)
        return st

    async def poll_once(self) -> OrchestratorState:
        st = self.state
        if st.phase is Phase.POLLING and st.request_id:
            await self._poll(st.generation, st.request_id)
        return st

    async def wait(self) -> OrchestratorState:
        """Waits for the active polling timer, if any, to finish."""
        timer = self.state.timer
        if timer is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        return self.state

    async def close(self) -> None:
        timer = self.state.timer
        self._disarm()
        if timer is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await timer

    async def _poll(self, gen: int, request_id: str) -> None:
        st = self.state
        logger.debug("Polling for results for request ID: %s", request_id)
        try:
            resp = await self.client.get(f"/request-results/{request_id}")
            body = _json(resp)
            if not resp.is_success or not body.get("success"):
                raise SearchClientError(
                    body.get("message") or f"Failed to fetch results (status: {resp.status_code})."
                )
        except (httpx.HTTPError, SearchClientError) as e:
            if gen == st.generation:
                logger.error("Polling error: %s", e)
                self._fail(str(e) or "An error occurred while fetching results.")
            return

        if gen != st.generation:
            logger.debug("Discarding stale poll response for %s", request_id)
            return

        st.status = body.get("status")
        if st.status == SUCCESS:
            st.results = display_rows(body.get("data"))
            st.error = None
            st.phase = Phase.DONE_SUCCESS
            self._disarm()
            logger.info("Search %s finished with %d results", request_id, len(st.results))
        elif st.status == FAILURE:
            st.error = "The search request failed. Please try again."
            st.phase = Phase.DONE_FAILURE
            self._disarm()
            logger.warning("Search %s failed on Outscraper: %r", request_id, body.get("data"))
        else:
            logger.info("Search status: %s", st.status)

    def _fail(self, message: str) -> None:
        st = self.state
        st.error = message
        st.is_loading = False
        st.phase = Phase.ERROR
        self._disarm()

    # -- timer ---------------------------------------------------------

    def _arm(self, gen: int, request_id: str) -> None:
        self._disarm()
        self.state.timer = asyncio.create_task(self._tick(gen, request_id))

    def _disarm(self) -> None:
        timer = self.state.timer
        self.state.timer = None
        # The tick task disarms itself on a terminal status; it just returns.
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()

    async def _tick(self, gen: int, request_id: str) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            if gen != self.state.generation or self.state.phase is not Phase.POLLING:
                return
            await self._poll(gen, request_id)
            if self.state.phase is not Phase.POLLING:
                return

    # -- table ---------------------------------------------------------

    def delete_local(self, place_id: str) -> bool:
        """Drops a row from the displayed results only; nothing is sent to the server."""
        st = self.state
        before = len(st.results)
        st.results = [r for r in st.results if r.get("place_id") != place_id]
        st.current_page = clamp_page(st.current_page, len(st.results), self.per_page)
        return len(st.results) < before

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.state.results), self.per_page)

    @property
    def current_rows(self) -> List[Dict[str, Any]]:
        return page_slice(self.state.results, self.state.current_page, self.per_page)

    @property
    def has_next(self) -> bool:
        return self.state.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.state.current_page > 1

    def next_page(self) -> int:
        if self.has_next:
            self.state.current_page += 1
        return self.state.current_page

    def prev_page(self) -> int:
        if self.has_prev:
            self.state.current_page -= 1
        return self.state.current_page
