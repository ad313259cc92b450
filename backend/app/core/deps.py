import hmac
import logging
import os
from functools import lru_cache

import httpx
from fastapi import Header
from openai import OpenAI
from supabase import create_client, Client

from app.core.config import get_settings
from app.core.errors import AuthenticationError, GenerationServiceError

_prompt_logger = logging.getLogger("planpro.llm_prompts")


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_service_key)


def require_bearer(authorization: str = Header(None)) -> str:
    """Return the bearer token passed through on the request."""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid authorization header")

    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise AuthenticationError("Missing or invalid authorization header")

    expected = get_settings().api_access_token
    if expected and not hmac.compare_digest(token, expected):
        raise AuthenticationError("Invalid token")
    return token


# ── Gemini adapter: mimics the OpenAI client interface ──────────────────────────────────────────
# AIService calls client.chat.completions.create(...); this adapter
# intercepts those calls and routes to Gemini.

class _FakeMessage:
    def __init__(self, content: str):
        self.content = content


class _FakeChoice:
    def __init__(self, content: str):
        self.message = _FakeMessage(content)


class _FakeResponse:
    def __init__(self, text: str):
        self.choices = [_FakeChoice(text)]


class _FakeCompletions:
    def __init__(self, api_key: str, model: str, timeout: float):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout

    def create(
        self,
        model=None,
        messages=None,
        temperature=0.7,
        max_tokens=None,
        **kwargs,
    ):
        from google import genai
        from google.genai import errors as genai_errors
        from google.genai import types

        system_parts = [
            m["content"] for m in (messages or []) if m.get("role") == "system"
        ]
        user_parts = [
            m["content"] for m in (messages or []) if m.get("role") != "system"
        ]

        system_instruction = "\n\n".join(system_parts) or None
        user_prompt = "\n\n".join(user_parts)

        client = genai.Client(
            api_key=self._api_key,
            http_options=types.HttpOptions(timeout=int(self._timeout * 1000)),
        )

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_tokens or 4096,
            response_mime_type="application/json",
            # No thinking, so no preamble text before the JSON output
            thinking_config=types.ThinkingConfig(thinking_budget=0),
        )
        try:
            response = client.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise GenerationServiceError(
                f"Gemini request failed with status {e.code}: {e.message}"
            ) from e
        except httpx.TimeoutException as e:
            raise GenerationServiceError("AI service timed out") from e
        except httpx.TransportError as e:
            raise GenerationServiceError("AI service is unreachable") from e
        return _FakeResponse(response.text or "")


class _FakeChat:
    def __init__(self, completions: _FakeCompletions):
        self.completions = completions


class GeminiClientAdapter:
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", timeout: float = 60.0):
        self.chat = _FakeChat(_FakeCompletions(api_key, model, timeout))


def get_llm_client(settings=None):
    """Return the active LLM client based on llm_provider setting."""
    if settings is None:
        settings = get_settings()
    if settings.llm_provider == "gemini":
        return GeminiClientAdapter(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.llm_timeout_seconds,
        )
    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )


def llm_api_key(settings=None) -> str:
    if settings is None:
        settings = get_settings()
    if settings.llm_provider == "gemini":
        return settings.gemini_api_key
    return settings.openai_api_key


def debug_prompts_enabled() -> bool:
    return os.environ.get("DEBUG_LLM_PROMPTS", "").lower() in ("1", "true")


def log_prompt(system_prompt: str | None, user_prompt: str, temperature: float, max_tokens: int) -> None:
    if not debug_prompts_enabled():
        return
    _prompt_logger.warning(
        "\n\n%s\n"
        "── SYSTEM ──────────────────────────────────────────────\n%s\n"
        "── USER ────────────────────────────────────────────────\n%s\n"
        "── CONFIG ──────────────────────────────────────────────\n"
        "  temp=%s  max_tokens=%s\n"
        "%s",
        "=" * 60,
        system_prompt or "(none)",
        user_prompt,
        temperature,
        max_tokens,
        "=" * 60,
    )
