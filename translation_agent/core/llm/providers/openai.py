"""
OpenAI-compatible provider implementation.

This module provides the OpenAICompatibleProvider class for interacting with
the OpenAI API and compatible endpoints (llama.cpp, LM Studio, vLLM, etc.).
"""

from typing import Optional
import asyncio
import json
import time
import httpx

from ..base import CompletionClient, LLMResponse
from translation_agent.core.exceptions import CompletionError
from translation_agent.utils.unified_logger import get_logger, LogType

from translation_agent.config import (
    API_ENDPOINT,
    DEFAULT_SYSTEM_MESSAGE,
    FALLBACK_MODEL,
    REQUEST_TIMEOUT,
    TEMPERATURE,
    RETRY_DELAY_SECONDS,
)

# Statuses worth retrying besides 5xx
RETRYABLE_STATUS_CODES = (408, 429)


class OpenAICompatibleProvider(CompletionClient):
    """OpenAI-compatible chat completions provider"""

    def __init__(self, api_endpoint: str = API_ENDPOINT, model: str = FALLBACK_MODEL,
                 api_key: Optional[str] = None, temperature: float = TEMPERATURE,
                 timeout: int = REQUEST_TIMEOUT, max_attempts: int = 1,
                 retry_delay: float = RETRY_DELAY_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(model or FALLBACK_MODEL, timeout=timeout, transport=transport)
        self.api_endpoint = api_endpoint
        self.api_key = api_key
        self.temperature = temperature
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.logger = get_logger()

    @property
    def completions_url(self) -> str:
        """Chat completions URL derived from the base endpoint"""
        base = self.api_endpoint.rstrip('/')
        if base.endswith('/chat/completions'):
            return base
        return f"{base}/chat/completions"

    def build_payload(self, prompt: str, system_prompt: Optional[str] = None) -> dict:
        """Request body with the system message first, then the user prompt"""
        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ],
        }

    async def generate(self, prompt: str,
                       system_prompt: Optional[str] = None) -> LLMResponse:
        """
        Generate text using an OpenAI compatible API.

        Args:
            prompt: The user prompt
            system_prompt: System message; the default assistant message when empty

        Returns:
            LLMResponse with the first choice's content and token usage info

        Raises:
            CompletionError: Transport, HTTP status or JSON errors once all
                attempts are used, or a response body without a usable choice
        """
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = self.build_payload(prompt, system_prompt)
        client = await self._get_client()
        last_error: Optional[CompletionError] = None

        for attempt in range(self.max_attempts):
            start_time = time.time()
            try:
                response = await client.post(
                    self.completions_url,
                    json=payload,
                    headers=headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
                response_json = response.json()

            except httpx.TimeoutException as e:
                last_error = CompletionError(
                    f"Request timed out: {e}",
                    context={'url': self.completions_url, 'attempt': attempt + 1}
                )
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                last_error = CompletionError(
                    f"HTTP error {status}",
                    status_code=status,
                    context={'body': e.response.text[:500], 'attempt': attempt + 1},
                    recoverable=status in RETRYABLE_STATUS_CODES or status >= 500
                )
            except httpx.HTTPError as e:
                last_error = CompletionError(
                    f"Transport error: {e}",
                    context={'url': self.completions_url, 'attempt': attempt + 1}
                )
            except json.JSONDecodeError as e:
                last_error = CompletionError(
                    f"Invalid JSON in response: {e}",
                    status_code=response.status_code,
                    context={'body': response.text[:500], 'attempt': attempt + 1}
                )
            else:
                return self._parse_response(response_json, time.time() - start_time)

            self.logger.warning(
                f"OpenAI-compatible API error (attempt {attempt + 1}/{self.max_attempts}): {last_error}"
            )
            if not last_error.recoverable:
                break
            if attempt < self.max_attempts - 1:
                await asyncio.sleep(self.retry_delay)

        raise last_error

    def _parse_response(self, response_json, execution_time: float) -> LLMResponse:
        if not isinstance(response_json, dict):
            raise CompletionError(
                "Unexpected response body",
                context={'type': type(response_json).__name__},
                recoverable=False
            )

        choices = response_json.get("choices") or []
        if not isinstance(choices, list):
            raise CompletionError(
                "Unexpected response body",
                context={'choices_type': type(choices).__name__},
                recoverable=False
            )
        if not choices:
            raise CompletionError("no completion choices returned")

        choice = choices[0]
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            raise CompletionError(
                "Unexpected response body",
                context={'choice': repr(choice)[:200]},
                recoverable=False
            )

        # null content (e.g. a refusal) counts as an empty answer
        content = message.get("content")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise CompletionError(
                "Unexpected response body",
                context={'content_type': type(content).__name__},
                recoverable=False
            )

        usage = response_json.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        llm_response = LLMResponse(
            content=content,
            prompt_tokens=usage.get("prompt_tokens") or 0,
            completion_tokens=usage.get("completion_tokens") or 0,
            model=response_json.get("model") or self.model
        )

        self.logger.debug(
            f"Completion received in {execution_time:.2f}s",
            LogType.LLM_RESPONSE,
            {
                'model': llm_response.model,
                'prompt_tokens': llm_response.prompt_tokens,
                'completion_tokens': llm_response.completion_tokens,
                'execution_time': execution_time,
            }
        )
        return llm_response
