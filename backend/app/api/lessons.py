import logging

from fastapi import APIRouter, Depends, Query

from app.core.deps import require_bearer
from app.core.errors import StorageError, ValidationError
from app.models.planning import Lesson
from app.services.kv_store import KVStore, get_kv_store

router = APIRouter(prefix="/lessons", tags=["lessons"], dependencies=[Depends(require_bearer)])

logger = logging.getLogger("planpro.lessons")

LESSON_PREFIX = "lesson:"


def lesson_key(lesson_id: str) -> str:
    return f"{LESSON_PREFIX}{lesson_id}"


def _require_title(lesson: Lesson) -> None:
    if not lesson.title.strip():
        raise ValidationError("Missing title")


@router.get("")
def list_lessons(
    unit_id: str | None = Query(None, alias="unitId"),
    store: KVStore = Depends(get_kv_store),
):
    """List the lesson library, optionally only lessons linked to one unit."""
    try:
        entries = store.get_by_prefix(LESSON_PREFIX)
    except StorageError as e:
        raise StorageError("Failed to fetch lessons") from e
    lessons = [entry.value for entry in entries]
    if unit_id:
        lessons = [l for l in lessons if isinstance(l, dict) and l.get("unitId") == unit_id]
    return lessons


@router.post("")
def create_lesson(lesson: Lesson, store: KVStore = Depends(get_kv_store)):
    _require_title(lesson)
    lesson.ensure_ids()
    document = lesson.to_document()
    try:
        store.set(lesson_key(lesson.id), document)
    except StorageError as e:
        raise StorageError("Failed to save lesson") from e
    return document


@router.put("/{lesson_id}")
def update_lesson(lesson_id: str, lesson: Lesson, store: KVStore = Depends(get_kv_store)):
    _require_title(lesson)
    lesson.id = lesson_id
    lesson.ensure_ids()
    document = lesson.to_document()
    try:
        store.set(lesson_key(lesson_id), document)
    except StorageError as e:
        raise StorageError("Failed to save lesson") from e
    return document


@router.delete("/{lesson_id}")
def delete_lesson(lesson_id: str, store: KVStore = Depends(get_kv_store)):
    try:
        store.delete(lesson_key(lesson_id))
    except StorageError as e:
        raise StorageError("Failed to delete lesson") from e
    logger.info("Deleted lesson %s", lesson_id)
    return {"success": True}
