from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from ...storage.base import LeadStore
from ..workflow_types import PollContext

logger = logging.getLogger(__name__)


def usable_place_id(candidate: Any) -> Optional[str]:
    if not isinstance(candidate, dict):
        return None
    place_id = candidate.get("place_id")
    if not isinstance(place_id, str) or not place_id.strip():
        return None
    return place_id


def _emails(value: Any):
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return [str(e) for e in value]


def project_lead(candidate: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": candidate.get("name"),
        "full_address": candidate.get("full_address"),
        "phone": candidate.get("phone"),
        "site": candidate.get("site"),
        "type": candidate.get("type"),
        "emails": _emails(candidate.get("emails")),
    }


class PersistLeadsNode:
    name = "persist_leads"

    def __init__(self, store: LeadStore):
        self.store = store

    async def run(self, ctx: PollContext) -> PollContext:
        if not ctx.candidates:
            return ctx

        for c in ctx.candidates:
            place_id = usable_place_id(c)
            if place_id is None:
                label = c.get("name") if isinstance(c, dict) else None
                logger.warning("Skipping lead due to missing object or place_id: %s", label or "(no name)")
                ctx.failed += 1
                continue

            try:
                # Store calls are blocking; keep them off the event loop.
                await run_in_threadpool(self.store.upsert, place_id, project_lead(c))
                ctx.saved += 1
            except Exception:
                logger.exception("Failed to save lead %s (%s)", place_id, c.get("name"))
                ctx.failed += 1

        logger.info("Saved %d leads, failed to save %d.", ctx.saved, ctx.failed)
        return ctx
