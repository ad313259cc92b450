"""Generation flows besides document ingestion: units from a form, single
lessons, resource content and improvement suggestions."""

import logging

from app.models.planning import Lesson, UnitGenerationRequest, UnitPlan
from app.prompts.content_generation import (
    build_enhancement_prompt,
    build_lesson_prompt,
    build_resource_content_prompt,
    build_unit_improvement_prompt,
)
from app.prompts.unit_generation import JSON_ONLY_SYSTEM_PROMPT, build_unit_from_form_prompt
from app.services.ai import AIService, get_ai_service
from app.services.plan_parser import (
    decode_generated_lesson,
    decode_generated_unit,
    decode_string_list,
    decode_text_field,
)
from app.services.unit_pipeline import materialize_unit

logger = logging.getLogger("planpro.content_generation")


class ContentGenerationService:
    def __init__(self, ai_service: AIService | None = None):
        self.ai_service = ai_service or get_ai_service()

    async def _complete(self, prompt: str, temperature: float | None = None) -> str:
        return await self.ai_service.generate_completion(
            prompt, system_prompt=JSON_ONLY_SYSTEM_PROMPT, temperature=temperature,
        )

    async def generate_unit(self, request: UnitGenerationRequest) -> UnitPlan:
        prompt = build_unit_from_form_prompt(
            title=request.title,
            subject=request.subject,
            grade_level=request.grade_level,
            start_date=request.start_date,
            end_date=request.end_date,
            num_lessons=request.num_lessons,
            description=request.description,
        )
        generated = decode_generated_unit(await self._complete(prompt))
        if len(generated.lessons) != request.num_lessons:
            logger.info(
                "Requested %d lessons for '%s', model returned %d",
                request.num_lessons, request.title, len(generated.lessons),
            )
        return materialize_unit(
            generated,
            subject=request.subject,
            grade_level=request.grade_level,
            start_date=request.start_date,
            end_date=request.end_date,
            title=request.title,
            description=request.description or None,
        )

    async def generate_lesson(self, subject: str, topic: str, grade_level: str | None = None) -> Lesson:
        raw = await self._complete(build_lesson_prompt(subject, topic, grade_level))
        return decode_generated_lesson(raw)

    async def generate_resource_content(self, resource_type: str, title: str, description: str) -> str:
        raw = await self._complete(build_resource_content_prompt(resource_type, title, description))
        return decode_text_field(raw, "content")

    async def enhancement_suggestions(self, lesson: Lesson, suggestion_type: str) -> list[str]:
        raw = await self._complete(build_enhancement_prompt(lesson, suggestion_type), temperature=0.8)
        return decode_string_list(raw, "suggestions")

    async def unit_improvements(self, unit: UnitPlan) -> list[str]:
        raw = await self._complete(build_unit_improvement_prompt(unit), temperature=0.8)
        return decode_string_list(raw, "suggestions")
