from datetime import datetime
from pydantic import BaseModel
from typing import Any, Optional, List

from ..storage.base import LeadRecord

class SearchRequest(BaseModel):
    query: Optional[str] = None

class SearchResponse(BaseModel):
    success: bool = True
    message: str = "Search request initiated successfully"
    requestId: Optional[str] = None
    status: Optional[str] = None
    resultsLocation: Optional[str] = None

class RequestResultsResponse(BaseModel):
    success: bool = True
    status: Optional[str] = None
    data: Any = None

class Lead(BaseModel):
    place_id: str
    name: Optional[str] = None
    full_address: Optional[str] = None
    phone: Optional[str] = None
    site: Optional[str] = None
    type: Optional[str] = None
    emails: List[str] = []
    socials: Optional[Any] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, r: LeadRecord) -> "Lead":
        return cls(
            place_id=r.place_id,
            name=r.name,
            full_address=r.full_address,
            phone=r.phone,
            site=r.site,
            type=r.type,
            emails=r.emails,
            socials=r.socials,
            createdAt=r.created_at,
            updatedAt=r.updated_at,
        )

class LeadsResponse(BaseModel):
    success: bool = True
    leads: List[Lead] = []

class DeleteLeadResponse(BaseModel):
    success: bool = True
