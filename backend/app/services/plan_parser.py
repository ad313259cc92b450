"""
Decode completion-service output into plan documents.

Model output is untrusted text. It is fence-stripped, trimmed and decoded as
JSON, then validated against the expected shape:

- structural problems (not an object, missing or empty ``lessons`` /
  ``standards``, a lesson without a title, a resource type outside the closed
  set) are rejected with MalformedGenerationOutputError;
- missing free-text fields on otherwise valid items fall back to ``""`` / ``[]``
  and missing ids are generated.

Decoding is idempotent: feeding a decoded document back in yields an equal one.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import MalformedGenerationOutputError
from app.models.planning import GeneratedUnit, Lesson

logger = logging.getLogger("planpro.plan_parser")

_FENCE = "```"


def strip_code_fences(content: str) -> str:
    """Remove one leading and one trailing Markdown code fence.

    Content that carries no fence at either end is returned unchanged.
    """
    body = content.strip()
    if not (body.startswith(_FENCE) or body.endswith(_FENCE)):
        return content
    if body[:7].lower() == "```json":
        body = body[7:]
    elif body.startswith(_FENCE):
        body = body[3:]
    if body.endswith(_FENCE):
        body = body[:-3]
    return body.strip()


def decode_json_payload(raw: str) -> Any:
    content = strip_code_fences(raw or "").strip()
    if not content:
        raise MalformedGenerationOutputError("empty response")
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Completion output is not valid JSON: %s (first 200 chars: %r)", e, content[:200])
        raise MalformedGenerationOutputError(f"invalid JSON: {e.msg}") from e


def _describe(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg', 'invalid')}" if loc else first.get("msg", "invalid")


def _require_object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise MalformedGenerationOutputError(f"expected a JSON object for the {what}")
    return data


def decode_generated_unit(raw: str) -> GeneratedUnit:
    data = _require_object(decode_json_payload(raw), "unit plan")
    try:
        unit = GeneratedUnit.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Generated unit rejected: %s", _describe(e))
        raise MalformedGenerationOutputError(f"unexpected unit structure ({_describe(e)})") from e
    return unit.ensure_ids()


def decode_generated_lesson(raw: str) -> Lesson:
    data = _require_object(decode_json_payload(raw), "lesson")
    # A lesson may come back wrapped as {"lesson": {...}}
    if "title" not in data and isinstance(data.get("lesson"), dict):
        data = data["lesson"]
    try:
        lesson = Lesson.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Generated lesson rejected: %s", _describe(e))
        raise MalformedGenerationOutputError(f"unexpected lesson structure ({_describe(e)})") from e
    return lesson.ensure_ids()


def decode_string_list(raw: str, field: str = "suggestions") -> list[str]:
    data = decode_json_payload(raw)
    if isinstance(data, dict):
        data = data.get(field)
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise MalformedGenerationOutputError(f"expected a list of strings in '{field}'")
    return [item.strip() for item in data if item.strip()]


def decode_text_field(raw: str, field: str = "content") -> str:
    data = _require_object(decode_json_payload(raw), field)
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise MalformedGenerationOutputError(f"missing '{field}' text")
    return value
