"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and configuration for all test modules.
"""

import asyncio
import re
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest

from translation_agent.core.chunking.token_counter import TokenCounter
from translation_agent.utils.unified_logger import UnifiedLogger, LogLevel


_CHUNK_PATTERN = re.compile(r'<TRANSLATE_THIS>\n(.*?)\n</TRANSLATE_THIS>', re.DOTALL)


def stage_of(prompt: str) -> str:
    """Identify the pipeline stage a user prompt belongs to."""
    if "<EXPERT_SUGGESTIONS>" in prompt:
        return "improve"
    if "constructive critic" in prompt:
        return "reflect"
    return "initial"


def chunk_of(prompt: str) -> str:
    """Text of the chunk a multi-chunk prompt asks about (the repeated section)."""
    matches = _CHUNK_PATTERN.findall(prompt)
    return matches[-1] if matches else ""


class FakeCompletionClient:
    """
    In-memory completion client recording every call.

    responder(stage, chunk, prompt) returns the completion text or raises;
    chunk is the text being translated in multi-chunk prompts, "" otherwise.
    delay(stage, chunk) returns seconds to sleep before answering.
    completed lists (stage, chunk) pairs in the order answers were returned.
    """

    def __init__(self, responder=None, delay=None):
        self.model = "fake-model"
        self.calls = []
        self.completed = []
        self.responder = responder or (lambda stage, chunk, prompt: f"{stage} output")
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def complete(self, prompt: str, system_message: str = "") -> str:
        stage = stage_of(prompt)
        chunk = chunk_of(prompt)
        self.calls.append((stage, prompt, system_message))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay(stage, chunk))
            answer = self.responder(stage, chunk, prompt)
            self.completed.append((stage, chunk))
            return answer
        finally:
            self.in_flight -= 1

    @property
    def stages(self):
        return [stage for stage, _, _ in self.calls]

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


@pytest.fixture
def char_counter():
    """Counts one token per character."""
    return len


@pytest.fixture
def word_counter():
    """Counts one token per whitespace-separated word."""
    return lambda text: len(text.split())


@pytest.fixture
def log_entries():
    return []


@pytest.fixture
def quiet_logger(log_entries):
    """Logger that stores structured entries instead of printing."""
    return UnifiedLogger(
        console_output=False,
        enable_colors=False,
        min_level=LogLevel.DEBUG,
        storage_callback=log_entries.append
    )


@pytest.fixture
def make_client():
    """Factory for FakeCompletionClient instances."""
    return FakeCompletionClient


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture(scope="session")
def cl100k():
    """Real tiktoken counter; encoding files are downloaded on first use."""
    try:
        return TokenCounter.for_encoding("cl100k_base")
    except OSError as e:
        pytest.skip(f"cl100k_base encoding unavailable: {e}")
