import logging

from fastapi import APIRouter, Depends, Query

from app.core.deps import require_bearer
from app.core.errors import StorageError
from app.models.planning import ScheduleSlot
from app.services.kv_store import KVStore, get_kv_store
from app.services.planner import PERIODS, SCHEDULE_PREFIX, filter_slots, slot_key, validate_slot

router = APIRouter(prefix="/planner", tags=["planner"], dependencies=[Depends(require_bearer)])

logger = logging.getLogger("planpro.planner")


@router.get("")
def list_schedule(
    start: str | None = Query(None, description="First ISO date to include"),
    end: str | None = Query(None, description="Last ISO date to include"),
    store: KVStore = Depends(get_kv_store),
):
    """Return planner slots, optionally limited to a date range (e.g. one week)."""
    try:
        entries = store.get_by_prefix(SCHEDULE_PREFIX)
    except StorageError as e:
        raise StorageError("Failed to fetch schedule") from e
    slots = [entry.value for entry in entries if isinstance(entry.value, dict)]
    return filter_slots(slots, start, end)


@router.get("/periods")
def list_periods():
    """The bell schedule the weekly grid is laid out on."""
    return [p.model_dump() for p in PERIODS]


@router.post("")
def upsert_slot(slot: ScheduleSlot, store: KVStore = Depends(get_kv_store)):
    """Write one slot; a later write to the same date/period replaces it."""
    validate_slot(slot)
    document = slot.to_document()
    try:
        store.set(slot_key(slot.date, slot.period_id), document)
    except StorageError as e:
        raise StorageError("Failed to save schedule item") from e
    return document


@router.delete("/{slot_date}/{period_id}")
def delete_slot(slot_date: str, period_id: str, store: KVStore = Depends(get_kv_store)):
    try:
        store.delete(slot_key(slot_date, period_id))
    except StorageError as e:
        raise StorageError("Failed to delete schedule item") from e
    logger.info("Cleared slot %s/%s", slot_date, period_id)
    return {"success": True}
