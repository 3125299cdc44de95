from __future__ import annotations

import logging

from ...providers.base import SearchProvider
from ..errors import ApiError
from ..workflow_types import PollContext

logger = logging.getLogger(__name__)


class FetchRequestNode:
    name = "fetch_request"

    def __init__(self, provider: SearchProvider):
        self.provider = provider

    async def run(self, ctx: PollContext) -> PollContext:
        result = await self.provider.fetch_request(ctx.request_id)

        if result.http_status != 200:
            logger.error(
                "Outscraper API error for requestId %s: Status %s %r",
                ctx.request_id,
                result.http_status,
                result.body,
            )
            raise ApiError(
                result.http_status,
                f"Outscraper API returned status {result.http_status}",
                error=result.body,
            )

        ctx.status = result.status
        ctx.data = result.data
        logger.info("request %s status: %s", ctx.request_id, ctx.status)
        return ctx
