# Lead store interface and the lead record shape shared by store backends.
# leadscout/storage/base.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

# Scalar columns overwritten on every upsert.
SCALAR_FIELDS = ("name", "full_address", "phone", "site", "type")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def dump_emails(emails: Optional[List[str]]) -> Optional[str]:
    if emails is None:
        return None
    return json.dumps(list(emails))


def load_emails(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Discarding unreadable emails column: %r", raw)
        return []
    if not isinstance(value, list):
        logger.warning("Emails column is not a list: %r", raw)
        return []
    return value


@dataclass
class LeadRecord:
    """A persisted lead with its email list already expanded."""
    place_id: str
    name: Optional[str] = None
    full_address: Optional[str] = None
    phone: Optional[str] = None
    site: Optional[str] = None
    type: Optional[str] = None
    emails: List[str] = field(default_factory=list)
    socials: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LeadStore(Protocol):
    def upsert(self, place_id: str, fields: Dict[str, Any]) -> LeadRecord:
        """
        Inserts the lead or overwrites its scalar fields and email list.
        `place_id` and `created_at` never change once the row exists.
        """
        ...

    def list_leads(self) -> List[LeadRecord]:
        """All leads, most recently created first."""
        ...

    def delete(self, place_id: str) -> bool:
        ...
