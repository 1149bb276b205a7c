"""
Tests for the Supabase backed document store and the shared paging helper.
"""
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from app.core.exceptions import Conflict, NotFound, Transient
from app.database.document_store import SupabaseDocumentStore
from tests.fakes import InMemoryDocumentStore


def make_store(data=None, count=None, error=None):
    query = MagicMock()
    for method in ("select", "eq", "order", "range", "limit", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data, count=count)
    supabase = MagicMock()
    supabase.table.return_value = query
    return SupabaseDocumentStore(supabase, page_size=2), supabase, query


def api_error(code, message="boom"):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def test_list_documents_builds_query():
    store, supabase, query = make_store(data=[{"id": "a"}], count=7)

    page = store.list_documents("qm_quotes", {"group_id": "g1"}, limit=10, offset=20, order_by="-created_at")

    supabase.table.assert_called_with("qm_quotes")
    query.select.assert_called_with("*", count="exact")
    query.eq.assert_called_with("group_id", "g1")
    query.order.assert_called_with("created_at", desc=True)
    query.range.assert_called_with(20, 29)
    assert page.documents == [{"id": "a"}]
    assert page.total == 7


def test_get_document_missing_raises_not_found():
    store, _, _ = make_store(data=[])
    with pytest.raises(NotFound):
        store.get_document("qm_groups", "nope")


def test_create_document_sorts_permissions():
    store, _, query = make_store(data=[{"id": "x"}])

    store.create_document("qm_groups", "x", {"name": "Club"}, ['update("user:b")', 'read("user:a")', 'read("user:a")'])

    query.insert.assert_called_with({
        "name": "Club", "id": "x", "permissions": ['read("user:a")', 'update("user:b")']
    })


def test_update_without_changes_reads_document():
    store, _, query = make_store(data=[{"id": "x"}])
    assert store.update_document("qm_groups", "x") == {"id": "x"}
    query.update.assert_not_called()


def test_update_only_sends_given_fields():
    store, _, query = make_store(data=[{"id": "x", "name": "New"}])
    store.update_document("qm_groups", "x", permissions=['read("user:a")'])
    query.update.assert_called_with({"permissions": ['read("user:a")']})


def test_update_missing_row_raises_not_found():
    store, _, _ = make_store(data=[])
    with pytest.raises(NotFound):
        store.update_document("qm_groups", "x", {"name": "New"})


def test_unique_violation_maps_to_conflict():
    store, _, _ = make_store(error=api_error("23505"))
    with pytest.raises(Conflict):
        store.create_document("qm_invites", "x", {"code": "AAAAAAAA"}, [])


def test_other_api_errors_map_to_transient():
    store, _, _ = make_store(error=api_error("57014", "statement timeout"))
    with pytest.raises(Transient) as exc_info:
        store.list_documents("qm_quotes")
    assert "statement timeout" in exc_info.value.detail


def test_network_errors_map_to_transient():
    store, _, _ = make_store(error=httpx.ConnectError("connection refused"))
    with pytest.raises(Transient):
        store.delete_document("qm_quotes", "x")


def test_list_all_documents_stops_on_short_page():
    store = InMemoryDocumentStore(page_size=2)
    for i in range(4):
        store.put("items", {"id": f"i{i}", "n": i})

    documents = store.list_all_documents("items", order_by="n")

    assert [d["id"] for d in documents] == ["i0", "i1", "i2", "i3"]
    # Full last page needs one more (empty) read to be sure
    assert [q[3] for q in store.queries] == [0, 2, 4]


def test_find_document_returns_first_match_or_none():
    store = InMemoryDocumentStore()
    store.put("items", {"id": "a", "kind": "x"})
    assert store.find_document("items", {"kind": "x"})["id"] == "a"
    assert store.find_document("items", {"kind": "y"}) is None
    assert store.get_document_or_none("items", "missing") is None
