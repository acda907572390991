"""
Utility modules

Note: To prevent circular import issues, nothing is re-exported here. Import
directly from the module:

    from translation_agent.utils.unified_logger import get_logger
"""

__all__ = []
