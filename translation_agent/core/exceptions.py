"""
Exception hierarchy for the translation pipeline.

Every error is fatal to the translation unit it occurs in (the whole text or
one chunk) and never to the process. The orchestrator converts them into
``Err`` results instead of letting them escape.
"""

from typing import Optional, Dict, Any, List


class TranslationError(Exception):
    """Base exception for all translation-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context about the error
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base += f" (context: {context_str})"
        return base


class ConfigurationError(TranslationError):
    """Raised for an unusable setup: unknown tokenizer encoding or model,
    non-positive token budget or chunk size.

    Not recoverable without changing the configuration.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context, recoverable=False)


class TemplateError(TranslationError):
    """Raised when a prompt template cannot be rendered.

    Attributes:
        template_id: Identifier of the template that failed
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if template_id is not None:
            ctx['template_id'] = template_id
        super().__init__(message, ctx, recoverable=False)
        self.template_id = template_id


class CompletionError(TranslationError):
    """Raised when the completion service call fails (transport, HTTP status,
    malformed body, empty choice list).

    Attributes:
        status_code: HTTP status code when the server answered
        recoverable: Whether sending the same request again may succeed
            (timeouts, dropped connections, 408/429/5xx). Providers only
            retry recoverable errors.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = True
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        super().__init__(message, ctx, recoverable=recoverable)
        self.status_code = status_code


class PartialTranslationError(TranslationError):
    """Raised when some chunks of a multi-chunk translation failed.

    Attributes:
        failed_indices: Indices of the chunks without a final translation
        partial_text: Reassembled output where failed chunks are empty
        errors: Per-chunk errors, keyed by chunk index
    """

    def __init__(
        self,
        message: str,
        failed_indices: List[int],
        partial_text: str,
        errors: Optional[Dict[int, Exception]] = None
    ):
        super().__init__(message, {'failed_indices': failed_indices}, recoverable=True)
        self.failed_indices = failed_indices
        self.partial_text = partial_text
        self.errors = errors or {}
