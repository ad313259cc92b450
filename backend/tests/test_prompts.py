"""Tests for prompt construction. Pure string templates, fully offline."""

from app.models.planning import Lesson, Standard, UnitPlan
from app.prompts.content_generation import (
    build_enhancement_prompt,
    build_lesson_prompt,
    build_resource_content_prompt,
    build_unit_improvement_prompt,
)
from app.prompts.unit_generation import (
    MAX_SOURCE_CHARS,
    TRUNCATION_MARKER,
    build_unit_from_document_prompt,
    build_unit_from_form_prompt,
    truncate_source_text,
)


class TestTruncation:
    def test_short_text_unchanged(self):
        assert truncate_source_text("abc") == "abc"

    def test_text_at_limit_unchanged(self):
        text = "x" * MAX_SOURCE_CHARS
        assert truncate_source_text(text) == text

    def test_long_text_cut_to_limit_with_marker(self):
        text = "a" * MAX_SOURCE_CHARS + "b" * 500
        result = truncate_source_text(text)
        assert result == "a" * MAX_SOURCE_CHARS + TRUNCATION_MARKER
        assert "b" not in result


class TestUnitFromDocumentPrompt:
    def test_embeds_context(self):
        prompt = build_unit_from_document_prompt(
            "Mathematics", "Grade 9", "Chapter 1: Linear equations",
            start_date="2026-01-05", end_date="2026-02-06",
        )
        assert "Subject: Mathematics" in prompt
        assert "Grade Level: Grade 9" in prompt
        assert "2026-01-05 to 2026-02-06" in prompt
        assert "Chapter 1: Linear equations" in prompt

    def test_specifies_output_schema(self):
        prompt = build_unit_from_document_prompt("Science", "Grade 7", "Cells and organelles")
        for field in ('"standards"', '"lessons"', '"objectives"', '"estimatedTime"', '"alignedObjectives"'):
            assert field in prompt
        assert '"gradeLevel": "Grade 7"' in prompt

    def test_no_dates_omits_date_line(self):
        prompt = build_unit_from_document_prompt("Science", "Grade 7", "Cells")
        assert "Unit Dates" not in prompt
        assert "Unit Start Date" not in prompt

    def test_long_source_is_truncated_in_prompt(self):
        text = "q" * (MAX_SOURCE_CHARS + 10)
        prompt = build_unit_from_document_prompt("History", "Grade 10", text)
        assert "q" * MAX_SOURCE_CHARS + TRUNCATION_MARKER in prompt
        assert "q" * (MAX_SOURCE_CHARS + 1) not in prompt

    def test_braces_in_source_survive(self):
        prompt = build_unit_from_document_prompt("CS", "Grade 11", "dict literal {a: 1}")
        assert "dict literal {a: 1}" in prompt


class TestOtherPrompts:
    def test_form_prompt(self):
        prompt = build_unit_from_form_prompt(
            "Algebra I", "Mathematics", "Grade 9", "2026-01-05", "2026-02-06", 4, "Focus on word problems",
        )
        assert "Number of Lessons: 4" in prompt
        assert "exactly 4 lessons" in prompt
        assert "Focus on word problems" in prompt

    def test_lesson_prompt(self):
        prompt = build_lesson_prompt("Biology", "Photosynthesis", "Grade 9")
        assert "Photosynthesis" in prompt
        assert "Grade Level: Grade 9" in prompt

    def test_resource_prompt_uses_type_guidance(self):
        prompt = build_resource_content_prompt("quiz", "Cell Quiz", "10 questions")
        assert "# Cell Quiz" in prompt
        assert "Multiple-choice" in prompt

    def test_resource_prompt_unknown_type(self):
        prompt = build_resource_content_prompt("poster", "Cell Poster", "")
        assert "poster" in prompt

    def test_enhancement_prompt(self):
        lesson = Lesson(title="Fractions", objectives=["Compare fractions"], duration="45 minutes")
        prompt = build_enhancement_prompt(lesson, "technology")
        assert "educational technology" in prompt
        assert "- Compare fractions" in prompt

    def test_unit_improvement_prompt(self):
        unit = UnitPlan(
            title="Ecosystems",
            subject="Science",
            standards=[Standard(code="MS-LS2-1", description="Analyze resource availability")],
            lessons=[Lesson(title="Food webs"), Lesson(title="Energy pyramids")],
        )
        prompt = build_unit_improvement_prompt(unit)
        assert "MS-LS2-1: Analyze resource availability" in prompt
        assert "1. Food webs" in prompt
        assert "2. Energy pyramids" in prompt
