"""
Document → unit plan pipeline.

    Received → Decoded → TextExtracted → PromptBuilt → CompletionRequested
             → CompletionReceived → Validated → Persisted

Stages run strictly in order; the first failure stops the run and its error
is what the caller sees. Nothing is written before ``Persisted``, so a failed
run leaves the store untouched.
"""

import asyncio
import logging
import time
from datetime import date, timedelta
from enum import Enum

from app.core.errors import ExtractionError, PlanProError, ValidationError
from app.models.planning import GeneratedUnit, UnitFromDocumentRequest, UnitPlan, new_id, utc_now_iso
from app.prompts.unit_generation import JSON_ONLY_SYSTEM_PROMPT, build_unit_from_document_prompt
from app.services.ai import AIService
from app.services.document import MIN_TEXT_LENGTH, decode_document, extract_text
from app.services.kv_store import KVStore
from app.services.plan_parser import decode_generated_unit

logger = logging.getLogger("planpro.unit_pipeline")

EMPTY_DOCUMENT_MESSAGE = "PDF appears to be empty or text could not be extracted"
DEFAULT_UNIT_DAYS = 30


class PipelineStage(str, Enum):
    RECEIVED = "Received"
    DECODED = "Decoded"
    TEXT_EXTRACTED = "TextExtracted"
    PROMPT_BUILT = "PromptBuilt"
    COMPLETION_REQUESTED = "CompletionRequested"
    COMPLETION_RECEIVED = "CompletionReceived"
    VALIDATED = "Validated"
    PERSISTED = "Persisted"
    FAILED = "Failed"


def materialize_unit(
    generated: GeneratedUnit,
    subject: str,
    grade_level: str,
    start_date: str | None = None,
    end_date: str | None = None,
    title: str | None = None,
    description: str | None = None,
    today: date | None = None,
) -> UnitPlan:
    """Wrap generated content into a storable UnitPlan with fresh id and timestamps."""
    today = today or date.today()
    now = utc_now_iso()
    for standard in generated.standards:
        standard.subject = standard.subject or subject
        standard.grade_level = standard.grade_level or grade_level
    return UnitPlan(
        id=new_id(),
        title=title or generated.title,
        subject=subject,
        grade_level=grade_level,
        start_date=start_date or today.isoformat(),
        end_date=end_date or (today + timedelta(days=DEFAULT_UNIT_DAYS)).isoformat(),
        description=description or generated.description,
        standards=generated.standards,
        lessons=generated.lessons,
        created_at=now,
        updated_at=now,
    )


def unit_key(unit_id: str) -> str:
    return f"unit:{unit_id}"


class UnitFromDocumentPipeline:
    def __init__(self, ai_service: AIService, store: KVStore):
        self.ai_service = ai_service
        self.store = store
        self.stage = PipelineStage.RECEIVED

    def _advance(self, stage: PipelineStage, file_name: str) -> None:
        self.stage = stage
        logger.info("[%s] stage=%s", file_name, stage.value)

    async def run(self, request: UnitFromDocumentRequest) -> UnitPlan:
        file_name = request.file_name or "document.pdf"
        t0 = time.time()
        self._advance(PipelineStage.RECEIVED, file_name)
        try:
            unit = await self._run(request, file_name)
        except PlanProError as e:
            logger.warning(
                "[%s] stage=%s failed at %s: %s",
                file_name, PipelineStage.FAILED.value, self.stage.value, e.message,
            )
            self.stage = PipelineStage.FAILED
            raise
        logger.info(
            "[%s] unit %s generated with %d lessons in %dms",
            file_name, unit.id, len(unit.lessons), int((time.time() - t0) * 1000),
        )
        return unit

    async def _run(self, request: UnitFromDocumentRequest, file_name: str) -> UnitPlan:
        missing = [
            name for name, value in (
                ("pdfData", request.pdf_data),
                ("subject", request.subject),
                ("gradeLevel", request.grade_level),
            ) if not (value or "").strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        content = decode_document(request.pdf_data)
        self._advance(PipelineStage.DECODED, file_name)

        text = await asyncio.to_thread(extract_text, content, file_name)
        if len(text.strip()) < MIN_TEXT_LENGTH:
            raise ExtractionError(EMPTY_DOCUMENT_MESSAGE)
        self._advance(PipelineStage.TEXT_EXTRACTED, file_name)

        prompt = build_unit_from_document_prompt(
            subject=request.subject,
            grade_level=request.grade_level,
            source_text=text,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        self._advance(PipelineStage.PROMPT_BUILT, file_name)

        self._advance(PipelineStage.COMPLETION_REQUESTED, file_name)
        raw = await self.ai_service.generate_completion(prompt, system_prompt=JSON_ONLY_SYSTEM_PROMPT)
        self._advance(PipelineStage.COMPLETION_RECEIVED, file_name)

        generated = decode_generated_unit(raw)
        self._advance(PipelineStage.VALIDATED, file_name)

        unit = materialize_unit(
            generated,
            subject=request.subject,
            grade_level=request.grade_level,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        await asyncio.to_thread(self.store.set, unit_key(unit.id), unit.to_document())
        self._advance(PipelineStage.PERSISTED, file_name)
        return unit
