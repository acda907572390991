"""
Split decision and chunk size calculation.

Spreads the token load of an over-budget text evenly across the minimum number
of chunks so the final chunk is not a tiny remainder.
"""
from typing import Callable

from translation_agent.core.chunking.models import NoSplitNeeded, SplitRequired, SplitDecision
from translation_agent.core.exceptions import ConfigurationError


def calculate_chunk_size(token_count: int, token_limit: int) -> int:
    """
    Compute the target chunk size in tokens.

    Args:
        token_count: Tokens in the whole text
        token_limit: Token budget for one request

    Returns:
        token_count when it already fits, otherwise the even-spread size
        clamped to [1, token_limit]. The remainder term alone can push the
        raw value past the limit (1999 tokens / 1000 gives 1498).
    """
    if token_limit < 1:
        raise ConfigurationError(
            "Token budget must be a positive integer",
            context={'token_budget': token_limit}
        )
    if token_count <= token_limit:
        return token_count

    num_chunks = -(-token_count // token_limit)
    chunk_size = token_count // num_chunks
    remaining_tokens = token_count % token_limit
    if remaining_tokens > 0:
        chunk_size += remaining_tokens // num_chunks
    return max(min(chunk_size, token_limit), 1)


def decide_split(text: str, token_budget: int, counter: Callable[[str], int]) -> SplitDecision:
    """
    Decide whether text must be split for the given token budget.

    Args:
        text: Source text
        token_budget: Maximum tokens in one completion request
        counter: Token counting function (usually a TokenCounter)

    Returns:
        NoSplitNeeded when the text fits, SplitRequired with the chunk size otherwise

    Raises:
        ConfigurationError: If the budget is not positive
    """
    if token_budget < 1:
        raise ConfigurationError(
            "Token budget must be a positive integer",
            context={'token_budget': token_budget}
        )

    num_tokens = counter(text)
    if num_tokens <= token_budget:
        return NoSplitNeeded(num_tokens=num_tokens)

    num_chunks = -(-num_tokens // token_budget)
    return SplitRequired(
        num_tokens=num_tokens,
        chunk_size=calculate_chunk_size(num_tokens, token_budget),
        num_chunks=num_chunks
    )
