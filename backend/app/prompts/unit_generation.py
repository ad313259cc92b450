"""Prompt templates for unit plan generation."""

MAX_SOURCE_CHARS = 15000
TRUNCATION_MARKER = "\n\n[... document truncated ...]"

JSON_ONLY_SYSTEM_PROMPT = """You are an expert curriculum designer and experienced classroom teacher.
You write practical, standards-aligned unit plans and lessons.
Always respond with valid JSON only: no markdown, no code fences, no commentary."""

UNIT_OUTPUT_SCHEMA = """{{
  "title": "Unit title",
  "description": "2-3 sentence overview of the unit",
  "standards": [
    {{
      "code": "CCSS.MATH.CONTENT.HSA.REI.B.3",
      "description": "Solve linear equations and inequalities in one variable",
      "subject": "{subject}",
      "gradeLevel": "{grade_level}"
    }}
  ],
  "lessons": [
    {{
      "title": "Lesson 1: Lesson title",
      "objectives": ["Students will be able to ...", "Students will be able to ..."],
      "activities": "Warm-up (5 min): ...\\n\\nDirect instruction (15 min): ...\\n\\nGuided practice (20 min): ...\\n\\nClosure (5 min): ...",
      "materials": ["Textbook", "Worksheet"],
      "assessment": "Exit ticket with 3 questions",
      "duration": "45 minutes",
      "notes": "",
      "resources": [
        {{
          "type": "worksheet",
          "title": "Practice worksheet",
          "description": "What the resource covers",
          "estimatedTime": "20 minutes",
          "alignedObjectives": ["Students will be able to ..."]
        }}
      ]
    }}
  ]
}}"""

UNIT_FROM_DOCUMENT_PROMPT = """Create a complete unit plan from the curriculum document below.

Subject: {subject}
Grade Level: {grade_level}
{date_context}
Base the unit on the topics, skills and sequence found in the document. Identify the
curriculum standards it addresses (use official codes such as Common Core or NGSS
where they apply) and break the content into a sequence of lessons.

DOCUMENT CONTENT:
{source_text}

Return the unit plan in exactly this JSON format:
""" + UNIT_OUTPUT_SCHEMA + """

Rules:
- Include at least 3 standards and between 5 and 10 lessons.
- Every lesson needs objectives, activities, materials, assessment, duration and 1-3 resources.
- Resource "type" must be one of: worksheet, text, quiz, assignment, exam.
- Return ONLY valid JSON."""

UNIT_FROM_FORM_PROMPT = """Create a unit plan with the following specifications:

Title: {title}
Subject: {subject}
Grade Level: {grade_level}
Dates: {start_date} to {end_date}
Number of Lessons: {num_lessons}
{description_context}
Return the unit plan in exactly this JSON format:
""" + UNIT_OUTPUT_SCHEMA + """

Rules:
- Produce exactly {num_lessons} lessons, numbered in teaching order.
- Include at least 3 standards appropriate for the grade level.
- Resource "type" must be one of: worksheet, text, quiz, assignment, exam.
- Return ONLY valid JSON."""


def truncate_source_text(text: str, limit: int = MAX_SOURCE_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _date_context(start_date: str | None, end_date: str | None) -> str:
    if start_date and end_date:
        return f"Unit Dates: {start_date} to {end_date}\n"
    if start_date:
        return f"Unit Start Date: {start_date}\n"
    if end_date:
        return f"Unit End Date: {end_date}\n"
    return ""


def build_unit_from_document_prompt(
    subject: str,
    grade_level: str,
    source_text: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> str:
    return UNIT_FROM_DOCUMENT_PROMPT.format(
        subject=subject,
        grade_level=grade_level,
        date_context=_date_context(start_date, end_date),
        source_text=truncate_source_text(source_text),
    )


def build_unit_from_form_prompt(
    title: str,
    subject: str,
    grade_level: str,
    start_date: str,
    end_date: str,
    num_lessons: int,
    description: str = "",
) -> str:
    description_context = f"Teacher's Notes: {description}\n" if description else ""
    return UNIT_FROM_FORM_PROMPT.format(
        title=title,
        subject=subject,
        grade_level=grade_level,
        start_date=start_date,
        end_date=end_date,
        num_lessons=num_lessons,
        description_context=description_context,
    )
