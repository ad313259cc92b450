"""Prompt templates for lesson, resource and suggestion generation."""

LESSON_GENERATION_PROMPT = """Create one lesson plan for a {subject} unit.

Lesson Topic: {topic}
{grade_context}
Return the lesson in exactly this JSON format:
{{
  "title": "{topic}",
  "objectives": ["Students will be able to ...", "Students will be able to ..."],
  "activities": "Warm-up (5 min): ...\\n\\nInstruction (20 min): ...\\n\\nGuided practice (20 min): ...\\n\\nReview (5 min): ...",
  "materials": ["Handouts", "Visual aids"],
  "assessment": "How understanding is checked",
  "duration": "60 minutes",
  "notes": "",
  "resources": [
    {{
      "type": "worksheet",
      "title": "Resource title",
      "description": "What the resource covers",
      "estimatedTime": "20 minutes",
      "alignedObjectives": ["Students will be able to ..."]
    }}
  ]
}}

Resource "type" must be one of: worksheet, text, quiz, assignment, exam.
Return ONLY valid JSON."""

RESOURCE_CONTENT_GUIDANCE = {
    "worksheet": "Instructions, a vocabulary part, application questions, a critical-thinking task and a teacher answer key.",
    "quiz": "Multiple-choice questions with four options, short-answer questions, one extended response and an answer key.",
    "assignment": "Objectives, step-by-step instructions, a task checklist and a grading rubric with point values.",
    "exam": "Sections for multiple choice, short answer and essay with point values, a time limit and total points.",
    "text": "An overview, three or more key concepts explained in depth, a summary and discussion questions.",
}

RESOURCE_CONTENT_PROMPT = """Write the full classroom-ready content for this {resource_type}.

Title: {title}
Description: {description}

Include: {guidance}

Format the content as Markdown, starting with a "# {title}" heading.

Return JSON in exactly this format:
{{
  "content": "# {title}\\n\\n..."
}}"""

ENHANCEMENT_FOCUS = {
    "differentiation": "differentiating instruction for learners with different readiness levels, needs and learning preferences",
    "technology": "integrating educational technology and digital tools meaningfully",
    "assessment": "strengthening formative and summative assessment aligned to the objectives",
}

ENHANCEMENT_PROMPT = """Suggest concrete improvements to this lesson, focused on {focus}.

Lesson Title: {title}
Objectives:
{objectives}
Activities:
{activities}
Assessment: {assessment}
Duration: {duration}

Return 5 short, actionable suggestions in exactly this JSON format:
{{
  "suggestions": ["Suggestion 1", "Suggestion 2"]
}}"""

UNIT_IMPROVEMENT_PROMPT = """Review this unit plan as an instructional coach and suggest improvements.

Unit Title: {title}
Subject: {subject}
Grade Level: {grade_level}
Dates: {start_date} to {end_date}
Standards:
{standards}
Lessons:
{lessons}

Consider pacing, engagement, assessment coverage, alignment between standards and
objectives, collaboration and real-world connections. Refer to lessons by number.

Return 5 to 7 specific suggestions in exactly this JSON format:
{{
  "suggestions": ["Suggestion 1", "Suggestion 2"]
}}"""


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items) or "- (none)"


def build_lesson_prompt(subject: str, topic: str, grade_level: str | None = None) -> str:
    grade_context = f"Grade Level: {grade_level}\n" if grade_level else ""
    return LESSON_GENERATION_PROMPT.format(
        subject=subject, topic=topic, grade_context=grade_context,
    )


def build_resource_content_prompt(resource_type: str, title: str, description: str) -> str:
    guidance = RESOURCE_CONTENT_GUIDANCE.get(
        resource_type, "Content appropriate for this kind of classroom resource."
    )
    return RESOURCE_CONTENT_PROMPT.format(
        resource_type=resource_type,
        title=title,
        description=description or "(none)",
        guidance=guidance,
    )


def build_enhancement_prompt(lesson, suggestion_type: str) -> str:
    return ENHANCEMENT_PROMPT.format(
        focus=ENHANCEMENT_FOCUS[suggestion_type],
        title=lesson.title,
        objectives=_bullets(lesson.objectives),
        activities=lesson.activities or "(none)",
        assessment=lesson.assessment or "(none)",
        duration=lesson.duration or "(unspecified)",
    )


def build_unit_improvement_prompt(unit) -> str:
    standards = [f"{s.code}: {s.description}" for s in unit.standards]
    lessons = [
        f"{i}. {lesson.title} ({lesson.duration or 'unspecified'}) - "
        f"objectives: {'; '.join(lesson.objectives) or 'none'}"
        for i, lesson in enumerate(unit.lessons, start=1)
    ]
    return UNIT_IMPROVEMENT_PROMPT.format(
        title=unit.title,
        subject=unit.subject or "(unspecified)",
        grade_level=unit.grade_level or "(unspecified)",
        start_date=unit.start_date or "?",
        end_date=unit.end_date or "?",
        standards=_bullets(standards),
        lessons="\n".join(lessons) or "(no lessons yet)",
    )
