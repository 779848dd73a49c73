"""
Explicit wiring of the pipeline components.

The application lifespan builds one ``ServiceContainer``, calls ``startup()``
once, and stores it on ``app.state``. Request handlers receive the pipeline
through a FastAPI dependency instead of module-level singletons.
"""
import logging
from typing import Optional

from session_analyzer.llm.oracle import LanguageOracle
from session_analyzer.orchestration.query_translator import QueryTranslator
from session_analyzer.orchestration.result_narrator import ResultNarrator
from session_analyzer.orchestration.retry_coordinator import RetryExecutionCoordinator
from session_analyzer.repositories.session_repository import SessionRepository
from session_analyzer.services.query_pipeline import QueryPipeline

logger = logging.getLogger("session_analyzer")


class ServiceContainer:

    def __init__(
        self,
        oracle: Optional[LanguageOracle] = None,
        repository: Optional[SessionRepository] = None,
    ):
        self.oracle = oracle or LanguageOracle()
        self.repository = repository or SessionRepository()
        self.translator = QueryTranslator(self.oracle)
        self.narrator = ResultNarrator(self.oracle)
        self.coordinator = RetryExecutionCoordinator(self.repository, self.translator)
        self.pipeline = QueryPipeline(
            self.translator,
            self.coordinator,
            self.narrator,
            self.repository,
        )

    async def startup(self) -> None:
        logger.info("🔄 Initializing contexts...")
        self.translator.initialize()
        self.narrator.initialize()
        await self.repository.connect()
        logger.info("✅ Contexts initialized")

    async def shutdown(self) -> None:
        logger.info("🔄 Shutting down gracefully...")
        await self.repository.disconnect()
