"""
translation-agent: LLM translation with a translate / reflect / improve workflow.

    from translation_agent import AgentConfig, create_agent

    agent = create_agent(AgentConfig(target_language="Spanish"))
    result = await agent.translate("English", "Spanish", "Hello world")
"""

__version__ = "0.1.0"

from translation_agent.config import AgentConfig
from translation_agent.core.llm.factory import create_agent, create_llm_client
from translation_agent.core.pipeline import TranslationAgent
from translation_agent.core.result import Ok, Err

__all__ = [
    "AgentConfig",
    "TranslationAgent",
    "create_agent",
    "create_llm_client",
    "Ok",
    "Err",
]
