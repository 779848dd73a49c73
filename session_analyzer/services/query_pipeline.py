import logging
from datetime import datetime, timezone

from session_analyzer.config import MAX_QUERY_RETRIES, RAW_RESULTS_FULL_LIMIT, RAW_RESULTS_TRUNCATED_SIZE
from session_analyzer.models import HealthResponse, QueryResponse
from session_analyzer.orchestration.query_translator import QueryTranslator
from session_analyzer.orchestration.result_narrator import ResultNarrator
from session_analyzer.orchestration.retry_coordinator import RetryExecutionCoordinator
from session_analyzer.repositories.session_repository import SessionRepository
from session_analyzer.utils.formatting import to_jsonable, truncate_results

logger = logging.getLogger("session_analyzer")


class QueryPipeline:
    """
    Answers one question end to end: generate, execute with repair, analyze.

    All collaborators are injected and already initialized. Any error aborts
    the run and propagates to the caller unchanged.
    """

    def __init__(
        self,
        translator: QueryTranslator,
        coordinator: RetryExecutionCoordinator,
        narrator: ResultNarrator,
        repository: SessionRepository,
        max_retries: int = MAX_QUERY_RETRIES,
    ):
        self.translator = translator
        self.coordinator = coordinator
        self.narrator = narrator
        self.repository = repository
        self.max_retries = max_retries

    @property
    def context_initialized(self) -> bool:
        return self.translator.is_initialized and self.narrator.is_initialized

    async def process_query(self, question: str) -> QueryResponse:
        logger.info(f"📝 Processing query: \"{question}\"")

        logger.info("🔄 Generating MongoDB query...")
        pipeline = await self.translator.generate(question)

        logger.info("🔄 Executing database query...")
        results = await self.coordinator.run(pipeline, question, self.max_retries)

        logger.info("🔄 Analyzing results...")
        analysis = await self.narrator.analyze(question, results)
        logger.info("✅ Results analyzed")

        return QueryResponse(
            query=question,
            resultCount=len(results),
            analysis=analysis,
            rawResults=to_jsonable(
                truncate_results(results, RAW_RESULTS_FULL_LIMIT, RAW_RESULTS_TRUNCATED_SIZE)
            ),
            executionTime=datetime.now(timezone.utc).isoformat(),
        )

    async def health_check(self) -> HealthResponse:
        """Probe the database; raises DataStoreError when it is unreachable."""
        count = await self.repository.test_connection()
        return HealthResponse(
            message="Server and database are healthy",
            contextInitialized=self.context_initialized,
            documentCount=count,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
