"""
Prompts module for translation-agent
"""
from translation_agent.prompts.prompts import (
    PromptPair,
    render_template,
    generate_initial_prompt,
    generate_reflection_prompt,
    generate_improvement_prompt,
    generate_chunk_initial_prompt,
    generate_chunk_reflection_prompt,
    generate_chunk_improvement_prompt,
)

__all__ = [
    "PromptPair",
    "render_template",
    "generate_initial_prompt",
    "generate_reflection_prompt",
    "generate_improvement_prompt",
    "generate_chunk_initial_prompt",
    "generate_chunk_reflection_prompt",
    "generate_chunk_improvement_prompt",
]
