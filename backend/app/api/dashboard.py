from datetime import date

from fastapi import APIRouter, Depends, Query

from app.core.deps import require_bearer
from app.core.errors import StorageError, ValidationError
from app.services.dashboard_service import get_teacher_dashboard
from app.services.kv_store import KVStore, get_kv_store


router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_bearer)])


@router.get("")
def teacher_dashboard(
    today: str | None = Query(None, description="ISO date to treat as today"),
    store: KVStore = Depends(get_kv_store),
):
    try:
        day = date.fromisoformat(today) if today else None
    except ValueError:
        raise ValidationError(f"Invalid date: {today}")
    try:
        return get_teacher_dashboard(store, day)
    except StorageError as e:
        raise StorageError("Failed to load dashboard") from e
