"""
Token counting with tiktoken.

A TokenCounter wraps one tiktoken encoding and maps text to its token count.
The same counter decides whether a text needs splitting and bounds every chunk
produced by the splitter.
"""
from typing import Optional

import tiktoken

from translation_agent.core.exceptions import ConfigurationError


class TokenCounter:
    """
    Deterministic text -> token count function for a fixed encoding.

    Instances are callable: ``counter(text)`` is ``counter.count(text)``.
    """

    def __init__(self, encoding: "tiktoken.Encoding"):
        """
        Initialize the TokenCounter.

        Args:
            encoding: tiktoken encoding used for every count
        """
        self.encoding = encoding
        self.name = encoding.name

    @classmethod
    def for_encoding(cls, encoding_name: str) -> "TokenCounter":
        """
        Build a counter from a tiktoken encoding name (e.g. "cl100k_base").

        Raises:
            ConfigurationError: If the encoding name is unknown
        """
        try:
            return cls(tiktoken.get_encoding(encoding_name))
        except (KeyError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown token encoding '{encoding_name}'",
                context={'encoding': encoding_name, 'details': str(e)}
            ) from e

    @classmethod
    def for_model(cls, model: str) -> "TokenCounter":
        """
        Build a counter from a model name (e.g. "gpt-4o-mini").

        Raises:
            ConfigurationError: If tiktoken cannot map the model to an encoding
        """
        try:
            return cls(tiktoken.encoding_for_model(model))
        except (KeyError, ValueError) as e:
            raise ConfigurationError(
                f"No token encoding known for model '{model}'",
                context={'model': model, 'details': str(e)}
            ) from e

    def count(self, text: str) -> int:
        """
        Count the number of tokens in a text string.

        Special-token strings such as "<|endoftext|>" inside user text are
        counted as ordinary text.
        """
        if not text:
            return 0
        return len(self.encoding.encode(text, disallowed_special=()))

    def __call__(self, text: str) -> int:
        return self.count(text)

    def __repr__(self) -> str:
        return f"TokenCounter({self.name!r})"


def resolve_token_counter(model: str, encoding_name: Optional[str] = None) -> TokenCounter:
    """
    Resolve the counter for a translation run.

    An explicit encoding name wins; otherwise the encoding is derived from the
    model name.

    Raises:
        ConfigurationError: If neither can be resolved
    """
    if encoding_name:
        return TokenCounter.for_encoding(encoding_name)
    if not model:
        raise ConfigurationError("A model name or a token encoding is required")
    return TokenCounter.for_model(model)
