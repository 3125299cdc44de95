from fastapi import APIRouter, Depends
from .deps import ProviderFactory, get_provider_factory, get_store
from .schemas import (
    DeleteLeadResponse,
    Lead,
    LeadsResponse,
    RequestResultsResponse,
    SearchRequest,
    SearchResponse,
)
from ..core.errors import ApiError
from ..core.orchestrator import submit_search, poll_results, list_leads, delete_lead
from ..storage.base import LeadStore

router = APIRouter()

@router.post("/search", response_model=SearchResponse)
async def create_search(req: SearchRequest, provider_factory: ProviderFactory = Depends(get_provider_factory)):
    if not req.query or not req.query.strip():
        raise ApiError(400, "Query is required")
    ticket = await submit_search(provider_factory(), req.query)
    return SearchResponse(requestId=ticket.id, status=ticket.status, resultsLocation=ticket.results_location)

@router.get("/request-results/", response_model=RequestResultsResponse)
async def read_results_without_id(provider_factory: ProviderFactory = Depends(get_provider_factory)):
    provider_factory()
    raise ApiError(400, "Request ID is required")

@router.get("/request-results/{request_id}", response_model=RequestResultsResponse)
async def read_results(
    request_id: str,
    provider_factory: ProviderFactory = Depends(get_provider_factory),
    store: LeadStore = Depends(get_store),
):
    provider = provider_factory()
    return await poll_results(provider, store, request_id)

@router.get("/leads", response_model=LeadsResponse)
def read_leads(store: LeadStore = Depends(get_store)):
    records = list_leads(store)
    return LeadsResponse(leads=[Lead.from_record(r) for r in records])

@router.delete("/leads/{place_id}", response_model=DeleteLeadResponse)
def remove_lead(place_id: str, store: LeadStore = Depends(get_store)):
    delete_lead(store, place_id)
    return DeleteLeadResponse()
