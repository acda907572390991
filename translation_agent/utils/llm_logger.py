"""
Full prompt/response dumps for DEBUG_MODE.

Every completion call of the pipeline is printed with its stage and chunk
position, so a run can be followed call by call from the console.
"""
import sys
from typing import List, Optional

from translation_agent.config import DEBUG_MODE
from translation_agent.utils.unified_logger import Colors

_RULE = "-" * 80
_BANNER = "=" * 80


def _section(title: str, body: str, color: str) -> List[str]:
    return [
        f"{color}{title}{Colors.ENDC}",
        f"{Colors.GRAY}{_RULE}{Colors.ENDC}",
        f"{color}{body}{Colors.ENDC}",
        f"{Colors.GRAY}{_RULE}{Colors.ENDC}",
    ]


def format_llm_interaction(
    system_prompt: Optional[str],
    user_prompt: str,
    raw_response: str,
    stage: str,
    chunk_index: Optional[int] = None,
    total_chunks: int = 1
) -> str:
    """
    Render one exchange as a console block.

    Args:
        system_prompt: System message sent (omitted when empty)
        user_prompt: User message sent
        raw_response: Completion text received
        stage: Pipeline stage ("initial", "reflect" or "improve")
        chunk_index: Zero-based chunk index, shown for multi-chunk runs
        total_chunks: Number of chunks in the run
    """
    where = ""
    if chunk_index is not None and total_chunks > 1:
        where = f" [chunk {chunk_index + 1}/{total_chunks}]"

    lines = [
        f"{Colors.YELLOW}{_BANNER}",
        f"DEBUG: {stage.upper()}{where}",
        f"{_BANNER}{Colors.ENDC}",
    ]
    if system_prompt:
        lines += _section("System Prompt:", system_prompt, Colors.ORANGE)
    lines += _section("User Prompt:", user_prompt, Colors.ORANGE)
    lines += _section("Raw Response:", raw_response, Colors.GREEN)
    return "\n".join(lines)


def log_llm_interaction(
    system_prompt: Optional[str],
    user_prompt: str,
    raw_response: str,
    stage: str,
    chunk_index: Optional[int] = None,
    total_chunks: int = 1
):
    """Print the exchange to stderr when DEBUG_MODE is enabled; no-op otherwise."""
    if not DEBUG_MODE:
        return
    print(format_llm_interaction(system_prompt, user_prompt, raw_response,
                                 stage, chunk_index, total_chunks), file=sys.stderr, flush=True)
