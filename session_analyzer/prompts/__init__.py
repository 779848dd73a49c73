"""
Prompt templates for query generation and result analysis.

Importing this package registers every template with ``prompt_registry``.
"""

from session_analyzer.prompts.base import PromptTemplate, PromptVersion, PromptRegistry, prompt_registry
from session_analyzer.prompts.query_prompts import QUERY_GENERATOR_CONTEXT, QUERY_FIX_PROMPT
from session_analyzer.prompts.analysis_prompts import ANALYST_CONTEXT, ANALYSIS_PROMPT

__all__ = [
    'PromptTemplate',
    'PromptVersion',
    'PromptRegistry',
    'prompt_registry',
    'QUERY_GENERATOR_CONTEXT',
    'QUERY_FIX_PROMPT',
    'ANALYST_CONTEXT',
    'ANALYSIS_PROMPT',
]
