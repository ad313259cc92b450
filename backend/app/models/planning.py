"""Unit plans, lessons, standards, resources and planner slots.

Documents travel and are stored with camelCase keys; attributes are snake_case
with camelCase aliases. Unknown keys are kept so a client can store extra
fields alongside the known ones.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ResourceType = Literal["worksheet", "text", "quiz", "assignment", "exam"]

SuggestionType = Literal["differentiation", "technology", "assessment"]


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Resource(_Document):
    id: str | None = None
    type: ResourceType
    title: str
    description: str = ""
    estimated_time: str = Field("", alias="estimatedTime")
    aligned_objectives: list[str] = Field(default_factory=list, alias="alignedObjectives")


class Standard(_Document):
    id: str | None = None
    code: str
    description: str = ""
    subject: str = ""
    grade_level: str = Field("", alias="gradeLevel")


class Lesson(_Document):
    id: str | None = None
    title: str
    objectives: list[str] = Field(default_factory=list)
    activities: str = ""
    materials: list[str] = Field(default_factory=list)
    assessment: str = ""
    duration: str = ""
    scheduled_date: str | None = Field(None, alias="scheduledDate")
    resources: list[Resource] = Field(default_factory=list)
    notes: str = ""
    # Weak back-reference for library lessons; never implies ownership.
    unit_id: str | None = Field(None, alias="unitId")

    def ensure_ids(self) -> "Lesson":
        if not self.id:
            self.id = new_id()
        for resource in self.resources:
            if not resource.id:
                resource.id = new_id()
        return self


class UnitPlan(_Document):
    id: str | None = None
    title: str
    subject: str = ""
    grade_level: str = Field("", alias="gradeLevel")
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")
    description: str | None = None
    standards: list[Standard] = Field(default_factory=list)
    lessons: list[Lesson] = Field(default_factory=list)
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")

    def ensure_ids(self) -> "UnitPlan":
        if not self.id:
            self.id = new_id()
        for standard in self.standards:
            if not standard.id:
                standard.id = new_id()
        for lesson in self.lessons:
            lesson.ensure_ids()
        return self


class ScheduleSlot(_Document):
    """A planner cell. Any JSON object carrying ``date`` and ``periodId``; stored as sent."""

    date: Any = None
    period_id: Any = Field(None, alias="periodId")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Period(BaseModel):
    id: str
    name: str
    time: str
    type: Literal["class", "break"] = "class"


# ──────────────────────────────────────────────
# Completion-service output shapes
# ──────────────────────────────────────────────

class GeneratedUnit(_Document):
    """What the completion service must return for a unit plan."""

    title: str
    description: str = ""
    standards: list[Standard] = Field(min_length=1)
    lessons: list[Lesson] = Field(min_length=1)

    def ensure_ids(self) -> "GeneratedUnit":
        for standard in self.standards:
            if not standard.id:
                standard.id = new_id()
        for lesson in self.lessons:
            lesson.ensure_ids()
        return self


# ──────────────────────────────────────────────
# Request bodies
# ──────────────────────────────────────────────

class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UnitFromDocumentRequest(_Request):
    pdf_data: str = Field(alias="pdfData")
    file_name: str = Field("document.pdf", alias="fileName")
    subject: str
    grade_level: str = Field(alias="gradeLevel")
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")


class UnitGenerationRequest(_Request):
    title: str
    subject: str
    grade_level: str = Field(alias="gradeLevel")
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    description: str = ""
    num_lessons: int = Field(5, alias="numLessons", ge=1, le=20)


class LessonGenerationRequest(_Request):
    unit_subject: str = Field(alias="unitSubject")
    topic: str
    grade_level: str | None = Field(None, alias="gradeLevel")


class ResourceContentRequest(_Request):
    resource_type: str = Field(alias="resourceType")
    title: str
    description: str = ""


class EnhancementRequest(_Request):
    lesson: Lesson
    type: SuggestionType


class UnitImprovementRequest(_Request):
    unit: UnitPlan
