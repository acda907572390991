"""
Base classes and data structures for completion clients.

This module defines the abstract base class every completion client implements,
as well as the LLMResponse data structure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import httpx

from translation_agent.config import REQUEST_TIMEOUT


@dataclass
class LLMResponse:
    """Response from LLM with token usage information"""
    content: str
    prompt_tokens: int = 0  # Number of tokens in the prompt
    completion_tokens: int = 0  # Number of tokens in the response
    model: str = ""  # Model name reported by the server


class CompletionClient(ABC):
    """
    Abstract chat-completion service.

    The pipeline only depends on ``complete``; any class implementing it can
    stand in for the HTTP provider (tests use in-memory fakes).
    """

    def __init__(self, model: str, timeout: int = REQUEST_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the completion client.

        Args:
            model: Model name/identifier
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a persistent HTTP client with connection pooling"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def generate(self, prompt: str,
                       system_prompt: Optional[str] = None) -> LLMResponse:
        """
        Generate text from prompt.

        Args:
            prompt: The user prompt (content to process)
            system_prompt: Optional system prompt (role/instructions)

        Returns:
            LLMResponse object with content and token usage info

        Raises:
            CompletionError: If the call fails
        """

    async def complete(self, prompt: str, system_message: str = "") -> str:
        """
        Single chat completion returning the first choice's text.

        Raises:
            CompletionError: If the call fails or returns no choices
        """
        response = await self.generate(prompt, system_prompt=system_message)
        return response.content
