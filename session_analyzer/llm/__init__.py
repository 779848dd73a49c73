"""
LLM access for the session analyzer.
"""
from session_analyzer.llm.oracle import LanguageOracle

__all__ = ["LanguageOracle"]
