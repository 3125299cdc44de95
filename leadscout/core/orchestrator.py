import logging

from .errors import ApiError
from .workflow import WorkflowRunner
from .workflow_types import PollContext
from .nodes.fetch import FetchRequestNode
from .nodes.extract import ExtractCandidatesNode
from .nodes.persist import PersistLeadsNode

logger = logging.getLogger(__name__)

# Search submission, result polling and lead listing. Each call is one
# request/response; nothing is kept between calls except what the store holds.


async def submit_search(provider, query):
    if not isinstance(query, str) or not query.strip():
        raise ApiError(400, "Query is required")

    try:
        ticket = await provider.submit_search(query)
    except Exception as e:
        logger.exception("Error processing search request %r", query)
        raise ApiError(500, "Internal server error", error=str(e)) from e
    return ticket


async def poll_results(provider, store, request_id):
    if not request_id or not str(request_id).strip():
        raise ApiError(400, "Request ID is required")

    runner = WorkflowRunner(
        nodes=[
            FetchRequestNode(provider),
            ExtractCandidatesNode(),
            PersistLeadsNode(store),
        ]
    )
    try:
        ctx = await runner.run(PollContext(request_id=request_id))
    except ApiError:
        raise
    except Exception as e:
        logger.exception("Error fetching results for requestId %s", request_id)
        raise ApiError(500, "Internal server error fetching results.", error=str(e)) from e

    return {"success": True, "status": ctx.status, "data": ctx.data}


def list_leads(store):
    try:
        return store.list_leads()
    except Exception as e:
        logger.exception("Error fetching leads")
        raise ApiError(500, "Failed to fetch leads.", error=str(e)) from e


def delete_lead(store, place_id):
    try:
        removed = store.delete(place_id)
    except Exception as e:
        logger.exception("Error deleting lead %s", place_id)
        raise ApiError(500, "Failed to delete lead.", error=str(e)) from e
    if not removed:
        raise ApiError(404, "Lead not found")
