"""
Result type for explicit error handling.

``translate`` returns ``Ok(text)`` or ``Err(error)`` so callers can tell an
empty translation of empty input apart from a failed one.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union, Callable

T = TypeVar('T')  # Success type
E = TypeVar('E')  # Error type
R = TypeVar('R')  # Return type for map


@dataclass
class Ok(Generic[T]):
    """Finished translation (or any other successful value)."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value (safe for Ok)."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, func: Callable[[T], R]) -> 'Union[Ok[R], Err]':
        """Map function over Ok value."""
        return Ok(func(self.value))


@dataclass
class Err(Generic[E]):
    """Failed run. ``error`` is usually a TranslationError subclass."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Raises the wrapped exception, or ValueError for non-exception errors."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable) -> 'Err[E]':
        """No-op for Err."""
        return self


# Type alias for Result
Result = Union[Ok[T], Err[E]]


def wrap_async_exception(
    *exception_types: type
) -> Callable:
    """Decorator turning the given exception types of an async function into Err.

    Other exceptions propagate unchanged.

    Example:
        @wrap_async_exception(CompletionError)
        async def call(client, prompt):
            return await client.complete(prompt, "")

        result = await call(client, "Hello")
        if result.is_ok():
            print(result.unwrap())
    """
    caught = exception_types or (Exception,)

    def decorator(func):
        async def wrapper(*args, **kwargs):
            try:
                return Ok(await func(*args, **kwargs))
            except caught as e:
                return Err(e)
        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper
    return decorator
