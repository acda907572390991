"""
Factory functions wiring configuration into clients and agents.
"""

from typing import Optional

from translation_agent.config import AgentConfig
from translation_agent.core.chunking.token_counter import resolve_token_counter
from translation_agent.utils.unified_logger import UnifiedLogger
from .base import CompletionClient
from .providers.openai import OpenAICompatibleProvider


def create_llm_client(config: AgentConfig) -> CompletionClient:
    """Factory function to create the completion client for a configuration"""
    return OpenAICompatibleProvider(
        api_endpoint=config.api_endpoint,
        model=config.model,
        api_key=config.api_key or None,
        temperature=config.temperature,
        timeout=config.timeout,
        max_attempts=config.max_attempts,
        retry_delay=config.retry_delay
    )


def create_agent(config: AgentConfig,
                 client: Optional[CompletionClient] = None,
                 logger: Optional[UnifiedLogger] = None,
                 show_progress: bool = False):
    """
    Build a TranslationAgent from a configuration.

    Args:
        config: Agent configuration
        client: Completion client to use instead of the configured provider
        logger: Logger for pipeline events
        show_progress: Show a tqdm progress bar per stage

    Raises:
        ConfigurationError: If the token encoding cannot be resolved
    """
    # Imported here: the pipeline depends on this package
    from translation_agent.core.pipeline import TranslationAgent

    counter = resolve_token_counter(config.model, config.token_encoding or None)
    return TranslationAgent(
        client=client or create_llm_client(config),
        token_counter=counter,
        token_budget=config.max_tokens,
        max_concurrency=config.max_concurrency,
        logger=logger,
        show_progress=show_progress
    )
