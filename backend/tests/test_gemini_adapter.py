"""Tests for the Gemini adapter behind the OpenAI-shaped client interface.

``google.genai.Client`` is patched; nothing leaves the process.
"""

import asyncio
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from app.core.config import get_settings
from app.core.deps import GeminiClientAdapter, get_llm_client
from app.core.errors import GenerationServiceError
from app.services.ai import AIService


def _messages():
    return [
        {"role": "system", "content": "Return JSON only."},
        {"role": "user", "content": "Plan a unit on fractions."},
    ]


@pytest.fixture
def genai_client():
    with patch("google.genai.Client") as client_cls:
        instance = MagicMock()
        instance.models.generate_content.return_value = MagicMock(text='{"title": "Fractions"}')
        client_cls.return_value = instance
        yield client_cls


class TestGeminiAdapter:
    def test_returns_openai_shaped_response(self, genai_client):
        adapter = GeminiClientAdapter(api_key="g-key", model="gemini-2.5-flash", timeout=30.0)
        response = adapter.chat.completions.create(messages=_messages(), temperature=0.7, max_tokens=512)
        assert response.choices[0].message.content == '{"title": "Fractions"}'

    def test_passes_timeout_and_system_instruction(self, genai_client):
        adapter = GeminiClientAdapter(api_key="g-key", model="gemini-2.5-flash", timeout=30.0)
        adapter.chat.completions.create(messages=_messages(), max_tokens=512)

        client_kwargs = genai_client.call_args.kwargs
        assert client_kwargs["api_key"] == "g-key"
        assert client_kwargs["http_options"].timeout == 30000

        call = genai_client.return_value.models.generate_content.call_args.kwargs
        assert call["model"] == "gemini-2.5-flash"
        assert call["contents"] == "Plan a unit on fractions."
        assert call["config"].system_instruction == "Return JSON only."
        assert call["config"].max_output_tokens == 512

    def test_api_error_is_generation_error(self, genai_client):
        genai_client.return_value.models.generate_content.side_effect = genai_errors.ServerError(
            503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}},
        )
        adapter = GeminiClientAdapter(api_key="g-key")
        with pytest.raises(GenerationServiceError) as exc_info:
            adapter.chat.completions.create(messages=_messages())
        assert "503" in exc_info.value.message
        assert not exc_info.value.is_configuration_error

    def test_timeout_is_generation_error(self, genai_client):
        genai_client.return_value.models.generate_content.side_effect = httpx.ReadTimeout("timed out")
        adapter = GeminiClientAdapter(api_key="g-key")
        with pytest.raises(GenerationServiceError) as exc_info:
            adapter.chat.completions.create(messages=_messages())
        assert exc_info.value.message == "AI service timed out"

    def test_connection_failure_is_generation_error(self, genai_client):
        genai_client.return_value.models.generate_content.side_effect = httpx.ConnectError("refused")
        adapter = GeminiClientAdapter(api_key="g-key")
        with pytest.raises(GenerationServiceError) as exc_info:
            adapter.chat.completions.create(messages=_messages())
        assert exc_info.value.message == "AI service is unreachable"


class TestGeminiProvider:
    def test_provider_switch_selects_adapter(self):
        settings = get_settings().model_copy(update={"llm_provider": "gemini", "gemini_api_key": "g-key"})
        assert isinstance(get_llm_client(settings), GeminiClientAdapter)

    def test_ai_service_through_adapter(self, genai_client):
        settings = get_settings().model_copy(update={"llm_provider": "gemini", "gemini_api_key": "g-key"})
        service = AIService(settings=settings)
        result = asyncio.run(service.generate_completion("Plan a unit", system_prompt="JSON only"))
        assert result == '{"title": "Fractions"}'

    def test_ai_service_surfaces_adapter_failure(self, genai_client):
        genai_client.return_value.models.generate_content.side_effect = httpx.ReadTimeout("timed out")
        settings = get_settings().model_copy(update={"llm_provider": "gemini", "gemini_api_key": "g-key"})
        with pytest.raises(GenerationServiceError):
            asyncio.run(AIService(settings=settings).generate_completion("Plan a unit"))
