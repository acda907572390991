"""Unit tests for the Result type and exception hierarchy."""

import pytest

from translation_agent.core.exceptions import (
    TranslationError,
    ConfigurationError,
    TemplateError,
    CompletionError,
    PartialTranslationError,
)
from translation_agent.core.result import Ok, Err, wrap_async_exception


class TestOk:
    """Test Ok result type."""

    def test_ok_creation(self):
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok()
        assert not result.is_err()

    def test_ok_unwrap(self):
        assert Ok("success").unwrap() == "success"

    def test_ok_unwrap_or(self):
        """Ok.unwrap_or should return the value, not the default."""
        assert Ok(42).unwrap_or(0) == 42

    def test_ok_map(self):
        result = Ok(5).map(lambda x: x * 2)
        assert result.is_ok()
        assert result.unwrap() == 10

    def test_empty_string_is_still_ok(self):
        """An empty translation is a success, not a failure."""
        result = Ok("")
        assert result.is_ok()
        assert result.unwrap() == ""


class TestErr:
    """Test Err result type."""

    def test_err_creation(self):
        error = CompletionError("boom")
        result = Err(error)
        assert result.error is error
        assert result.is_err()
        assert not result.is_ok()

    def test_err_unwrap_raises_wrapped_exception(self):
        """Unwrapping an Err re-raises the stored exception."""
        with pytest.raises(CompletionError):
            Err(CompletionError("boom")).unwrap()

    def test_err_unwrap_non_exception(self):
        with pytest.raises(ValueError, match="Called unwrap on Err"):
            Err("plain message").unwrap()

    def test_err_unwrap_or(self):
        assert Err("error").unwrap_or(0) == 0

    def test_err_map_is_noop(self):
        result = Err("error")
        assert result.map(lambda x: x * 2) is result


class TestWrapAsyncException:
    """Test the async exception-to-Err decorator."""

    @pytest.mark.asyncio
    async def test_success_wrapped_in_ok(self):
        @wrap_async_exception(CompletionError)
        async def call():
            return "done"

        result = await call()
        assert result == Ok("done")

    @pytest.mark.asyncio
    async def test_listed_exception_becomes_err(self):
        @wrap_async_exception(CompletionError, TemplateError)
        async def call():
            raise TemplateError("bad template", template_id="x")

        result = await call()
        assert result.is_err()
        assert isinstance(result.error, TemplateError)

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        """Only the listed exception types are converted."""
        @wrap_async_exception(CompletionError)
        async def call():
            raise KeyError("unexpected")

        with pytest.raises(KeyError):
            await call()

    @pytest.mark.asyncio
    async def test_preserves_name(self):
        @wrap_async_exception()
        async def named_call():
            """Docstring."""
            return 1

        assert named_call.__name__ == "named_call"
        assert named_call.__doc__ == "Docstring."


class TestExceptions:
    """Test the exception hierarchy."""

    def test_str_includes_context(self):
        error = TranslationError("failed", context={'chunk': 2})
        assert str(error) == "TranslationError: failed (context: chunk=2)"

    def test_str_without_context(self):
        assert str(ConfigurationError("bad budget")) == "ConfigurationError: bad budget"

    def test_all_derive_from_translation_error(self):
        for error in (
            ConfigurationError("x"),
            TemplateError("x"),
            CompletionError("x"),
            PartialTranslationError("x", failed_indices=[1], partial_text=""),
        ):
            assert isinstance(error, TranslationError)

    def test_recoverable_flags(self):
        assert not ConfigurationError("x").recoverable
        assert not TemplateError("x").recoverable
        assert CompletionError("x").recoverable
        assert not CompletionError("HTTP error 400", status_code=400, recoverable=False).recoverable

    def test_completion_error_status(self):
        error = CompletionError("HTTP error 503", status_code=503, context={'body': 'busy'})
        assert error.status_code == 503
        assert error.context == {'body': 'busy', 'status_code': 503}

    def test_template_error_id(self):
        error = TemplateError("missing", template_id="one_chunk_initial")
        assert error.template_id == "one_chunk_initial"
        assert error.context['template_id'] == "one_chunk_initial"

    def test_partial_translation_error(self):
        cause = CompletionError("boom")
        error = PartialTranslationError(
            "1 of 3 chunks failed", failed_indices=[1], partial_text="A C", errors={1: cause}
        )
        assert error.failed_indices == [1]
        assert error.partial_text == "A C"
        assert error.errors[1] is cause
        assert "failed_indices=[1]" in str(error)
