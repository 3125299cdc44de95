from __future__ import annotations

import logging

from ..workflow_types import PollContext

logger = logging.getLogger(__name__)

SUCCESS = "Success"


def _nested_results(data):
    """Returns the inner result list of a `[[...], ...]` payload, else None."""
    if isinstance(data, list) and len(data) > 0 and isinstance(data[0], list):
        return data[0]
    return None


class ExtractCandidatesNode:
    name = "extract_candidates"

    async def run(self, ctx: PollContext) -> PollContext:
        if ctx.status != SUCCESS:
            return ctx

        inner = _nested_results(ctx.data)
        if inner is None:
            logger.warning(
                "Received Success status but data format is not the expected nested array: %r",
                ctx.data,
            )
            return ctx

        logger.info("Found %d potential leads in the nested array.", len(inner))
        ctx.candidates = list(inner)
        return ctx
