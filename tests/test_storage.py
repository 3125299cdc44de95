from datetime import timedelta

import pytest
from sqlalchemy import event

from conftest import StepClock
from leadscout.storage.base import dump_emails, load_emails
from leadscout.storage.memory import InMemoryLeadStore
from leadscout.storage.sql import SqlLeadStore


@pytest.fixture(params=["sql", "memory"])
def lead_store(request, tmp_path):
    if request.param == "sql":
        s = SqlLeadStore(f"sqlite:///{tmp_path / 'leads.db'}", clock=StepClock())
        yield s
        s.close()
    else:
        yield InMemoryLeadStore(clock=StepClock())


@pytest.mark.parametrize("emails", [["a@x.com", "b@y.com"], []])
def test_emails_round_trip(lead_store, emails):
    lead_store.upsert("p1", {"name": "Acme", "emails": emails})
    assert lead_store.list_leads()[0].emails == emails


def test_missing_emails_read_back_empty(lead_store):
    lead_store.upsert("p1", {"name": "Acme"})
    lead = lead_store.list_leads()[0]
    assert lead.emails == []
    assert lead.socials is None


def test_upsert_overwrites_fields_but_keeps_key_and_created_at(lead_store):
    lead_store.upsert("p1", {"name": "Acme", "phone": "555-0100", "emails": ["a@acme.com"]})
    created = lead_store.list_leads()[0].created_at

    lead_store.upsert("p1", {"name": "Acme Plumbing", "site": "https://acme.test", "emails": ["b@acme.com"]})

    leads = lead_store.list_leads()
    assert len(leads) == 1
    lead = leads[0]
    assert lead.place_id == "p1"
    assert lead.name == "Acme Plumbing"
    assert lead.phone is None
    assert lead.site == "https://acme.test"
    assert lead.emails == ["b@acme.com"]
    assert lead.created_at == created
    assert lead.updated_at > lead.created_at


def test_listing_is_newest_first(lead_store):
    for place_id in ("p1", "p2", "p3"):
        lead_store.upsert(place_id, {"name": place_id})
    lead_store.upsert("p1", {"name": "updated"})

    assert [lead.place_id for lead in lead_store.list_leads()] == ["p3", "p2", "p1"]


def test_delete(lead_store):
    lead_store.upsert("p1", {"name": "Acme"})
    assert lead_store.delete("p1") is True
    assert lead_store.delete("p1") is False
    assert lead_store.list_leads() == []


def test_sql_store_persists_across_instances(tmp_path):
    url = f"sqlite:///{tmp_path / 'leads.db'}"
    first = SqlLeadStore(url)
    first.upsert("p1", {"name": "Acme", "emails": ["a@acme.com"]})
    first.close()

    second = SqlLeadStore(url)
    try:
        assert [lead.emails for lead in second.list_leads()] == [["a@acme.com"]]
    finally:
        second.close()


def test_email_column_encoding():
    assert dump_emails(None) is None
    assert load_emails(None) == []
    assert load_emails("") == []
    assert load_emails("not json") == []
    assert load_emails('{"a": 1}') == []
    assert load_emails(dump_emails(["a@x.com"])) == ["a@x.com"]


def test_sql_upsert_updates_row_inserted_by_another_writer(tmp_path):
    url = f"sqlite:///{tmp_path / 'leads.db'}"
    clock_a = StepClock()
    clock_a.now += timedelta(days=1)
    writer_a = SqlLeadStore(url, clock=clock_a)
    writer_b = SqlLeadStore(url, clock=StepClock())
    inserted = {}

    # Writer B lands its row just before writer A's write reaches the database.
    def insert_from_b(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("INSERT") and not inserted:
            inserted["b"] = writer_b.upsert("p1", {"name": "First", "emails": ["b@x.com"]})

    event.listen(writer_a.engine, "before_cursor_execute", insert_from_b)
    try:
        lead = writer_a.upsert("p1", {"name": "Latest", "emails": ["a@x.com"]})

        assert lead.name == "Latest"
        assert lead.emails == ["a@x.com"]
        assert lead.created_at == inserted["b"].created_at
        assert [r.name for r in writer_b.list_leads()] == ["Latest"]
    finally:
        event.remove(writer_a.engine, "before_cursor_execute", insert_from_b)
        writer_a.close()
        writer_b.close()


def test_sql_timestamps_are_utc_aware(tmp_path):
    s = SqlLeadStore(f"sqlite:///{tmp_path / 'leads.db'}")
    try:
        s.upsert("p1", {"name": "Acme"})
        lead = s.list_leads()[0]
        assert lead.created_at.tzinfo is not None
        assert lead.created_at.utcoffset() == timedelta(0)
        assert lead.updated_at.tzinfo is not None
    finally:
        s.close()


def test_sql_store_rejects_unsupported_dialect():
    with pytest.raises(ValueError):
        SqlLeadStore("mysql+pymysql://user@localhost/leads")
