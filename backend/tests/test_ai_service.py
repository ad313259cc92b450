"""Tests for AIService error mapping. The OpenAI client is always mocked."""

import asyncio

import httpx
import openai
import pytest

from app.core.config import get_settings
from app.core.errors import GenerationServiceError
from app.services.ai import AIService
from conftest import completion_response, make_llm_client


def _run(coro):
    return asyncio.run(coro)


def _request():
    return httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class TestGenerateCompletion:
    def test_returns_first_choice_text(self):
        client = make_llm_client('{"title": "Unit"}')
        service = AIService(client=client, settings=get_settings())
        assert _run(service.generate_completion("prompt")) == '{"title": "Unit"}'

    def test_system_prompt_goes_first(self):
        client = make_llm_client()
        service = AIService(client=client, settings=get_settings())
        _run(service.generate_completion("user text", system_prompt="json only"))
        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "json only"},
            {"role": "user", "content": "user text"},
        ]

    def test_uses_configured_model_and_defaults(self):
        settings = get_settings()
        client = make_llm_client()
        _run(AIService(client=client, settings=settings).generate_completion("p"))
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == settings.llm_model
        assert kwargs["temperature"] == settings.llm_temperature
        assert kwargs["max_tokens"] == settings.llm_max_tokens

    def test_explicit_temperature_zero_is_kept(self):
        client = make_llm_client()
        service = AIService(client=client, settings=get_settings())
        _run(service.generate_completion("p", temperature=0.0))
        assert client.chat.completions.create.call_args.kwargs["temperature"] == 0.0


class TestErrors:
    def test_missing_key_is_configuration_error(self):
        settings = get_settings().model_copy(update={"openai_api_key": "", "llm_provider": "openai"})
        client = make_llm_client()
        with pytest.raises(GenerationServiceError) as exc_info:
            _run(AIService(client=client, settings=settings).generate_completion("p"))
        assert exc_info.value.is_configuration_error
        assert exc_info.value.status_code == 500
        client.chat.completions.create.assert_not_called()

    def test_missing_gemini_key(self):
        settings = get_settings().model_copy(update={"gemini_api_key": "", "llm_provider": "gemini"})
        with pytest.raises(GenerationServiceError) as exc_info:
            _run(AIService(client=make_llm_client(), settings=settings).generate_completion("p"))
        assert "gemini" in exc_info.value.message

    def test_upstream_status_error(self):
        client = make_llm_client()
        client.chat.completions.create.side_effect = openai.InternalServerError(
            "boom", response=httpx.Response(500, request=_request()), body=None,
        )
        with pytest.raises(GenerationServiceError) as exc_info:
            _run(AIService(client=client, settings=get_settings()).generate_completion("p"))
        assert exc_info.value.message == "AI service returned status 500"
        assert not exc_info.value.is_configuration_error

    def test_timeout(self):
        client = make_llm_client()
        client.chat.completions.create.side_effect = openai.APITimeoutError(request=_request())
        with pytest.raises(GenerationServiceError) as exc_info:
            _run(AIService(client=client, settings=get_settings()).generate_completion("p"))
        assert exc_info.value.message == "AI service timed out"

    def test_connection_error(self):
        client = make_llm_client()
        client.chat.completions.create.side_effect = openai.APIConnectionError(request=_request())
        with pytest.raises(GenerationServiceError) as exc_info:
            _run(AIService(client=client, settings=get_settings()).generate_completion("p"))
        assert exc_info.value.message == "AI service is unreachable"

    def test_no_choices(self):
        client = make_llm_client()
        response = completion_response("")
        response.choices = []
        client.chat.completions.create.return_value = response
        with pytest.raises(GenerationServiceError):
            _run(AIService(client=client, settings=get_settings()).generate_completion("p"))
