"""
Completion client layer.

    from translation_agent.core.llm import create_llm_client

    async with create_llm_client(config) as client:
        text = await client.complete("Hello", "You are a translator.")
"""

from .base import CompletionClient, LLMResponse
from .providers import OpenAICompatibleProvider
from .factory import create_llm_client, create_agent

__all__ = [
    'CompletionClient',
    'LLMResponse',
    'OpenAICompatibleProvider',
    'create_llm_client',
    'create_agent',
]
