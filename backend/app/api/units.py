import logging
import re

from fastapi import APIRouter, Depends, Response

from app.core.deps import require_bearer
from app.core.errors import NotFoundError, StorageError, ValidationError
from app.models.planning import UnitPlan, utc_now_iso
from app.services.kv_store import KVStore, get_kv_store
from app.services.pdf import get_pdf_service
from app.services.unit_pipeline import unit_key

router = APIRouter(prefix="/units", tags=["units"], dependencies=[Depends(require_bearer)])

logger = logging.getLogger("planpro.units")

UNIT_PREFIX = "unit:"


def _require_title(unit: UnitPlan) -> None:
    if not unit.title.strip():
        raise ValidationError("Missing title")


@router.get("")
def list_units(store: KVStore = Depends(get_kv_store)):
    """List every stored unit plan."""
    try:
        entries = store.get_by_prefix(UNIT_PREFIX)
    except StorageError as e:
        raise StorageError("Failed to fetch units") from e
    return {"units": [entry.value for entry in entries]}


@router.get("/{unit_id}")
def get_unit(unit_id: str, store: KVStore = Depends(get_kv_store)):
    try:
        unit = store.get(unit_key(unit_id))
    except StorageError as e:
        raise StorageError("Failed to fetch unit") from e
    if unit is None:
        raise NotFoundError("Unit not found")
    return unit


@router.post("")
def create_unit(unit: UnitPlan, store: KVStore = Depends(get_kv_store)):
    """Store a new unit plan, generating an id when none is given."""
    _require_title(unit)
    now = utc_now_iso()
    unit.ensure_ids()
    unit.created_at = unit.created_at or now
    unit.updated_at = now

    document = unit.to_document()
    try:
        store.set(unit_key(unit.id), document)
    except StorageError as e:
        raise StorageError("Failed to save unit") from e
    logger.info("Created unit %s (%d lessons)", unit.id, len(unit.lessons))
    return document


@router.put("/{unit_id}")
def update_unit(unit_id: str, unit: UnitPlan, store: KVStore = Depends(get_kv_store)):
    """Replace the whole unit document stored under ``unit_id``."""
    _require_title(unit)
    key = unit_key(unit_id)
    try:
        if not unit.created_at:
            existing = store.get(key)
            unit.created_at = (existing or {}).get("createdAt")
        unit.id = unit_id
        unit.ensure_ids()
        unit.updated_at = utc_now_iso()
        unit.created_at = unit.created_at or unit.updated_at

        document = unit.to_document()
        store.set(key, document)
    except StorageError as e:
        raise StorageError("Failed to update unit") from e
    logger.info("Updated unit %s", unit_id)
    return document


@router.delete("/{unit_id}")
def delete_unit(unit_id: str, store: KVStore = Depends(get_kv_store)):
    try:
        store.delete(unit_key(unit_id))
    except StorageError as e:
        raise StorageError("Failed to delete unit") from e
    logger.info("Deleted unit %s", unit_id)
    return {"success": True}


@router.get("/{unit_id}/export.pdf")
def export_unit_pdf(unit_id: str, store: KVStore = Depends(get_kv_store)):
    """Download a unit plan as a printable PDF."""
    try:
        unit = store.get(unit_key(unit_id))
    except StorageError as e:
        raise StorageError("Failed to fetch unit") from e
    if unit is None:
        raise NotFoundError("Unit not found")

    pdf_bytes = get_pdf_service().generate_unit_pdf(unit)
    slug = re.sub(r"[^A-Za-z0-9_-]+", "_", unit.get("title") or "unit").strip("_") or "unit"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{slug}.pdf"'
        }
    )
