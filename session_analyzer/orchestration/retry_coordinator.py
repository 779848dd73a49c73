import logging
from enum import Enum
from typing import Any, Dict, List

from session_analyzer.config import MAX_QUERY_RETRIES
from session_analyzer.exceptions import (
    DataStoreError,
    QueryExecutionError,
    QueryRepairError,
    TranslationError,
)
from session_analyzer.orchestration.query_translator import QueryTranslator
from session_analyzer.repositories.session_repository import SessionRepository

logger = logging.getLogger("session_analyzer")


class ExecutionPhase(str, Enum):
    """Phases a single ``run`` moves through."""
    PENDING = "pending"
    EXECUTING = "executing"
    REPAIRING = "repairing"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    REPAIR_FAILED = "repair_failed"


class RetryExecutionCoordinator:
    """
    Executes a generated pipeline and repairs it when the database rejects it.

    Only database failures are repaired. A failed repair ends the run at once;
    the stale pipeline is never retried.
    """

    def __init__(self, repository: SessionRepository, translator: QueryTranslator):
        self.repository = repository
        self.translator = translator

    def _transition(self, phase: ExecutionPhase, attempt: int, max_retries: int) -> None:
        logger.debug(f"Pipeline execution -> {phase.value} (attempt {attempt}/{max_retries})")

    async def run(
        self,
        query: List[Dict[str, Any]],
        original_question: str,
        max_retries: int = MAX_QUERY_RETRIES,
    ) -> List[Dict[str, Any]]:
        """
        Execute ``query`` with at most ``max_retries`` attempts.

        Args:
            query: Aggregation pipeline produced by the translator
            original_question: The user's question, passed to repair prompts
            max_retries: Total number of execution attempts allowed

        Returns:
            The complete result set of the first successful attempt

        Raises:
            QueryExecutionError: every attempt failed
            QueryRepairError: the translator could not repair a failed pipeline
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self._transition(ExecutionPhase.PENDING, 0, max_retries)

        if not query:
            # Empty pipeline: the question has no pipeline equivalent
            logger.info("Empty pipeline generated - skipping execution")
            self._transition(ExecutionPhase.SUCCESS, 0, max_retries)
            return []

        current_query = query

        for attempt in range(1, max_retries + 1):
            self._transition(ExecutionPhase.EXECUTING, attempt, max_retries)
            logger.info(f"🔄 Executing query (attempt {attempt}/{max_retries})")

            try:
                results = await self.repository.aggregate(current_query)
            except DataStoreError as e:
                error_message = str(e)
                logger.error(f"❌ Query execution failed (attempt {attempt}): {error_message}")

                if attempt == max_retries:
                    self._transition(ExecutionPhase.EXHAUSTED, attempt, max_retries)
                    raise QueryExecutionError(max_retries, error_message) from e

                self._transition(ExecutionPhase.REPAIRING, attempt, max_retries)
                logger.info("🔄 Attempting to fix query...")
                try:
                    current_query = await self.translator.fix(
                        original_question,
                        error_message,
                        current_query,
                    )
                except TranslationError as fix_error:
                    self._transition(ExecutionPhase.REPAIR_FAILED, attempt, max_retries)
                    logger.error(f"❌ Failed to fix query: {fix_error}")
                    raise QueryRepairError(str(fix_error), attempt, error_message) from fix_error

                if not current_query:
                    logger.info("Repair produced an empty pipeline - nothing to execute")
                    self._transition(ExecutionPhase.SUCCESS, attempt, max_retries)
                    return []

                logger.info("✅ Query fixed, retrying...")
                continue

            self._transition(ExecutionPhase.SUCCESS, attempt, max_retries)
            logger.info(f"✅ Query executed successfully, found {len(results)} results")
            return results
