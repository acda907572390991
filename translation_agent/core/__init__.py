"""
Core translation modules.

Note: submodules are not imported here to keep import order free of cycles
(prompts imports core.exceptions). Import directly from the submodule:

    from translation_agent.core.pipeline import TranslationAgent
"""

__all__ = []
