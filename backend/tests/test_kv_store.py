"""Tests for KVStore against a mocked supabase client (no network)."""

import pytest
from unittest.mock import MagicMock

from app.core.errors import StorageError
from app.services.kv_store import KVEntry, KVStore


@pytest.fixture
def supabase():
    return MagicMock()


@pytest.fixture
def kv(supabase):
    return KVStore(supabase, "kv_store_test")


def test_get_returns_value(kv, supabase):
    supabase.table().select().eq().limit().execute.return_value = MagicMock(
        data=[{"value": {"id": "u1", "title": "Algebra I"}}]
    )
    assert kv.get("unit:u1") == {"id": "u1", "title": "Algebra I"}
    supabase.table.assert_called_with("kv_store_test")


def test_get_missing_returns_none(kv, supabase):
    supabase.table().select().eq().limit().execute.return_value = MagicMock(data=[])
    assert kv.get("unit:missing") is None


def test_set_upserts_key_and_value(kv, supabase):
    kv.set("lesson:l1", {"id": "l1"})
    supabase.table().upsert.assert_called_with({"key": "lesson:l1", "value": {"id": "l1"}})


def test_delete_filters_on_key(kv, supabase):
    kv.delete("lesson:l1")
    supabase.table().delete().eq.assert_called_with("key", "lesson:l1")


def test_get_by_prefix(kv, supabase):
    supabase.table().select().like().order().execute.return_value = MagicMock(data=[
        {"key": "unit:a", "value": {"id": "a"}},
        {"key": "unit:b", "value": {"id": "b"}},
    ])
    assert kv.get_by_prefix("unit:") == [
        KVEntry(key="unit:a", value={"id": "a"}),
        KVEntry(key="unit:b", value={"id": "b"}),
    ]
    supabase.table().select().like.assert_called_with("key", "unit:%")


def test_failures_become_storage_errors(kv, supabase):
    supabase.table().upsert().execute.side_effect = RuntimeError("connection reset")
    with pytest.raises(StorageError):
        kv.set("unit:u1", {"id": "u1"})


def test_scan_failure_becomes_storage_error(kv, supabase):
    supabase.table().select().like().order().execute.side_effect = RuntimeError("timeout")
    with pytest.raises(StorageError) as exc_info:
        kv.get_by_prefix("schedule:")
    assert exc_info.value.status_code == 500
