import asyncio
import logging

from fastapi import APIRouter, Depends

from app.core.deps import require_bearer
from app.core.errors import StorageError
from app.models.planning import (
    EnhancementRequest,
    LessonGenerationRequest,
    ResourceContentRequest,
    UnitFromDocumentRequest,
    UnitGenerationRequest,
    UnitImprovementRequest,
)
from app.services.ai import AIService, get_ai_service
from app.services.content_generation import ContentGenerationService
from app.services.kv_store import KVStore, get_kv_store
from app.services.unit_pipeline import UnitFromDocumentPipeline, unit_key

router = APIRouter(tags=["generation"], dependencies=[Depends(require_bearer)])

logger = logging.getLogger("planpro.generation")


@router.post("/generate-unit-from-pdf")
async def generate_unit_from_pdf(
    request: UnitFromDocumentRequest,
    ai_service: AIService = Depends(get_ai_service),
    store: KVStore = Depends(get_kv_store),
):
    """Build and store a unit plan from an uploaded curriculum document."""
    pipeline = UnitFromDocumentPipeline(ai_service, store)
    unit = await pipeline.run(request)
    return unit.to_document()


@router.post("/generate-unit")
async def generate_unit(
    request: UnitGenerationRequest,
    ai_service: AIService = Depends(get_ai_service),
    store: KVStore = Depends(get_kv_store),
):
    """Generate a unit plan from the create-unit form and store it."""
    unit = await ContentGenerationService(ai_service).generate_unit(request)
    document = unit.to_document()
    try:
        await asyncio.to_thread(store.set, unit_key(unit.id), document)
    except StorageError as e:
        raise StorageError("Failed to save unit") from e
    logger.info("Generated unit %s '%s' with %d lessons", unit.id, unit.title, len(unit.lessons))
    return document


@router.post("/generate-lesson")
async def generate_lesson(
    request: LessonGenerationRequest,
    ai_service: AIService = Depends(get_ai_service),
):
    lesson = await ContentGenerationService(ai_service).generate_lesson(
        request.unit_subject, request.topic, request.grade_level,
    )
    return lesson.to_document()


@router.post("/generate-resource-content")
async def generate_resource_content(
    request: ResourceContentRequest,
    ai_service: AIService = Depends(get_ai_service),
):
    content = await ContentGenerationService(ai_service).generate_resource_content(
        request.resource_type, request.title, request.description,
    )
    return {"content": content}


@router.post("/enhancement-suggestions")
async def enhancement_suggestions(
    request: EnhancementRequest,
    ai_service: AIService = Depends(get_ai_service),
):
    suggestions = await ContentGenerationService(ai_service).enhancement_suggestions(
        request.lesson, request.type,
    )
    return {"suggestions": suggestions}


@router.post("/unit-improvements")
async def unit_improvements(
    request: UnitImprovementRequest,
    ai_service: AIService = Depends(get_ai_service),
):
    suggestions = await ContentGenerationService(ai_service).unit_improvements(request.unit)
    return {"suggestions": suggestions}
