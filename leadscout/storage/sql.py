# SQLAlchemy-backed lead store.
# leadscout/storage/sql.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine, select
from sqlalchemy.engine import make_url
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import declarative_base, sessionmaker

from .base import SCALAR_FIELDS, Clock, LeadRecord, dump_emails, load_emails, utcnow

Base = declarative_base()

_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands timestamps back without tzinfo; they were written as UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LeadRow(Base):
    __tablename__ = "leads"

    place_id = Column(String(255), primary_key=True)

    name = Column(Text)
    full_address = Column(Text)
    phone = Column(String(64))
    site = Column(Text)
    type = Column(String(255))

    # JSON-encoded lists
    emails_json = Column(Text)
    socials_json = Column(Text)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def to_record(self) -> LeadRecord:
        return LeadRecord(
            place_id=self.place_id,
            name=self.name,
            full_address=self.full_address,
            phone=self.phone,
            site=self.site,
            type=self.type,
            emails=load_emails(self.emails_json),
            socials=None,
            created_at=_aware(self.created_at),
            updated_at=_aware(self.updated_at),
        )


class SqlLeadStore:
    def __init__(self, url: str = "sqlite:///./leads.db", clock: Optional[Clock] = None):
        dialect = make_url(url).get_backend_name()
        if dialect not in _INSERTS:
            raise ValueError(f"unsupported database dialect for lead upserts: {dialect}")
        self._insert = _INSERTS[dialect]

        connect_args = {"check_same_thread": False} if dialect == "sqlite" else {}
        self.engine = create_engine(url, connect_args=connect_args)
        self._session = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._clock = clock or utcnow
        Base.metadata.create_all(self.engine)

    def upsert(self, place_id: str, fields: Dict[str, Any]) -> LeadRecord:
        now = self._clock()
        values = {key: fields.get(key) for key in SCALAR_FIELDS}
        values["emails_json"] = dump_emails(fields.get("emails"))
        values["socials_json"] = None
        values["updated_at"] = now

        stmt = self._insert(LeadRow.__table__).values(place_id=place_id, created_at=now, **values)
        # created_at is left out so it keeps the value from the first insert.
        stmt = stmt.on_conflict_do_update(
            index_elements=[LeadRow.__table__.c.place_id],
            set_={key: stmt.excluded[key] for key in values},
        )

        with self._session() as db:
            db.execute(stmt)
            db.commit()
            return db.get(LeadRow, place_id).to_record()

    def list_leads(self) -> List[LeadRecord]:
        with self._session() as db:
            rows = db.scalars(select(LeadRow).order_by(LeadRow.created_at.desc())).all()
            return [r.to_record() for r in rows]

    def delete(self, place_id: str) -> bool:
        with self._session() as db:
            row = db.get(LeadRow, place_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def close(self) -> None:
        self.engine.dispose()
