"""
Key-value persistence over a single Supabase table.

The table holds two columns, ``key`` (text primary key) and ``value`` (jsonb).
Documents live under ``<type>:<id>`` keys (``unit:``, ``lesson:``,
``schedule:``) and are always written whole; there are no partial updates,
transactions or locks, so concurrent writers to one key resolve last-write-wins.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from app.core.config import get_settings
from app.core.deps import get_supabase_client
from app.core.errors import StorageError

logger = logging.getLogger("planpro.kv_store")


@dataclass(frozen=True)
class KVEntry:
    key: str
    value: Any


class KVStore:
    def __init__(self, client, table: str):
        self.client = client
        self.table = table

    def _rows(self):
        return self.client.table(self.table)

    def get(self, key: str) -> Any | None:
        try:
            result = self._rows().select("value").eq("key", key).limit(1).execute()
        except Exception as e:
            logger.error("[kv_store.get] %s: %s", key, e, exc_info=True)
            raise StorageError(f"Failed to read {key}") from e
        if not result.data:
            return None
        return result.data[0].get("value")

    def set(self, key: str, value: Any) -> None:
        try:
            self._rows().upsert({"key": key, "value": value}).execute()
        except Exception as e:
            logger.error("[kv_store.set] %s: %s", key, e, exc_info=True)
            raise StorageError(f"Failed to write {key}") from e

    def delete(self, key: str) -> None:
        try:
            self._rows().delete().eq("key", key).execute()
        except Exception as e:
            logger.error("[kv_store.delete] %s: %s", key, e, exc_info=True)
            raise StorageError(f"Failed to delete {key}") from e

    def get_by_prefix(self, prefix: str) -> list[KVEntry]:
        try:
            result = (
                self._rows()
                .select("key, value")
                .like("key", f"{prefix}%")
                .order("key")
                .execute()
            )
        except Exception as e:
            logger.error("[kv_store.get_by_prefix] %s: %s", prefix, e, exc_info=True)
            raise StorageError(f"Failed to scan {prefix}") from e
        return [KVEntry(key=row["key"], value=row.get("value")) for row in (result.data or [])]


@lru_cache
def _default_store() -> KVStore:
    settings = get_settings()
    return KVStore(get_supabase_client(), settings.kv_table)


def get_kv_store() -> KVStore:
    """FastAPI dependency; tests swap it through ``app.dependency_overrides``."""
    try:
        return _default_store()
    except Exception as e:
        logger.error("Supabase client could not be created: %s", e)
        raise StorageError("Storage is not configured") from e
