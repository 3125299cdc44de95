from __future__ import annotations

import logging
from typing import List

from .workflow_types import PollContext

logger = logging.getLogger(__name__)


class WorkflowRunner:
    """Runs nodes in order; a node stops the run by raising."""

    def __init__(self, nodes: List):
        self.nodes = nodes

    async def run(self, ctx: PollContext) -> PollContext:
        for node in self.nodes:
            logger.debug("request %s: running %s", ctx.request_id, node.name)
            ctx = await node.run(ctx)
        return ctx
