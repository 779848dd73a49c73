"""
Orchestration Module

Components of the question-answering pipeline:
- query_translator: question -> aggregation pipeline, and pipeline repair
- retry_coordinator: executes a pipeline, repairing it on database errors
- result_narrator: result set -> digest -> prose analysis

Flow:
    question
       │
       ▼
  QueryTranslator.generate
       │
       ▼
  RetryExecutionCoordinator.run ──(DataStoreError)──► QueryTranslator.fix
       │                      ◄──────(repaired pipeline)──────┘
       ▼
  ResultNarrator.analyze
       │
       ▼
    analysis
"""

from session_analyzer.orchestration.query_translator import QueryTranslator, parse_pipeline
from session_analyzer.orchestration.retry_coordinator import RetryExecutionCoordinator, ExecutionPhase
from session_analyzer.orchestration.result_narrator import ResultNarrator, is_aggregated_data, NO_DATA_MESSAGE

__all__ = [
    "QueryTranslator",
    "parse_pipeline",
    "RetryExecutionCoordinator",
    "ExecutionPhase",
    "ResultNarrator",
    "is_aggregated_data",
    "NO_DATA_MESSAGE",
]
