# leadscout/storage/memory.py
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional

from .base import SCALAR_FIELDS, Clock, LeadRecord, dump_emails, load_emails, utcnow


class InMemoryLeadStore:
    """
    Dictionary-backed LeadStore. Emails go through the same JSON encoding as
    the SQL store so both backends read back identical lists.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._rows: Dict[str, Dict[str, Any]] = {}
        self._clock = clock or utcnow
        self._seq = 0

    def upsert(self, place_id: str, fields: Dict[str, Any]) -> LeadRecord:
        now = self._clock()
        row = self._rows.get(place_id)
        if row is None:
            self._seq += 1
            row = {"place_id": place_id, "created_at": now, "seq": self._seq}
            self._rows[place_id] = row
        for key in SCALAR_FIELDS:
            row[key] = fields.get(key)
        row["emails_json"] = dump_emails(fields.get("emails"))
        row["updated_at"] = now
        return self._to_record(row)

    def list_leads(self) -> List[LeadRecord]:
        rows = sorted(self._rows.values(), key=lambda r: (r["created_at"], r["seq"]), reverse=True)
        return [self._to_record(r) for r in rows]

    def delete(self, place_id: str) -> bool:
        return self._rows.pop(place_id, None) is not None

    @staticmethod
    def _to_record(row: Dict[str, Any]) -> LeadRecord:
        record = LeadRecord(
            place_id=row["place_id"],
            emails=load_emails(row.get("emails_json")),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        return replace(record, **{k: row.get(k) for k in SCALAR_FIELDS})
