"""Completion-service client shared by every generation flow."""

import asyncio
import logging

import openai

from app.core.config import get_settings
from app.core.deps import get_llm_client, llm_api_key, log_prompt
from app.core.errors import GenerationServiceError

logger = logging.getLogger("planpro.ai")


class AIService:
    def __init__(self, client=None, settings=None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_llm_client(self.settings)
        return self._client

    def _check_configured(self) -> None:
        if not llm_api_key(self.settings):
            provider = self.settings.llm_provider
            logger.error("Completion service not configured: %s API key is missing", provider)
            raise GenerationServiceError(
                f"AI service is not configured: missing {provider} API key",
                kind=GenerationServiceError.CONFIGURATION,
            )

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one chat completion and return the first choice's text.

        Raises GenerationServiceError for a missing credential (configuration)
        and for any non-success answer from the provider (service).
        """
        self._check_configured()

        temperature = self.settings.llm_temperature if temperature is None else temperature
        max_tokens = max_tokens or self.settings.llm_max_tokens

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        log_prompt(system_prompt, prompt, temperature, max_tokens)

        try:
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.settings.llm_model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except GenerationServiceError:
            raise
        except openai.APIStatusError as e:
            logger.error("Completion service returned status %s: %s", e.status_code, e.message)
            raise GenerationServiceError(
                f"AI service returned status {e.status_code}"
            ) from e
        except openai.APITimeoutError as e:
            logger.error("Completion service timed out after %ss", self.settings.llm_timeout_seconds)
            raise GenerationServiceError("AI service timed out") from e
        except openai.APIConnectionError as e:
            logger.error("Completion service unreachable: %s", e)
            raise GenerationServiceError("AI service is unreachable") from e

        if not response.choices:
            raise GenerationServiceError("AI service returned no choices")
        return response.choices[0].message.content or ""


def get_ai_service() -> AIService:
    return AIService()
