import json
import logging
from typing import Any, Dict, List

from session_analyzer.exceptions import NotInitializedError, OracleUnavailableError, TranslationError
from session_analyzer.llm.oracle import LanguageOracle
from session_analyzer.prompts import prompt_registry
from session_analyzer.utils.formatting import to_json

logger = logging.getLogger(__name__)

# Near-deterministic sampling for pipeline generation
GENERATION_TEMPERATURE = 0.1
GENERATION_MAX_TOKENS = 1000


def parse_pipeline(response_text: str) -> List[Dict[str, Any]]:
    """
    Parse a model reply into a list of pipeline stages.

    A surrounding markdown code fence is tolerated. An empty list is a valid
    result and means the question could not be expressed as a pipeline.

    Raises:
        TranslationError: the reply is not JSON, not an array, or holds non-object stages
    """
    content = response_text.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        pipeline = json.loads(content)
    except json.JSONDecodeError as e:
        raise TranslationError(
            f"Invalid MongoDB query generated: {e}",
            {"response": response_text[:500]},
        ) from e

    if not isinstance(pipeline, list):
        raise TranslationError(
            "Invalid MongoDB query generated: Query must be an array",
            {"response": response_text[:500]},
        )

    for index, stage in enumerate(pipeline):
        if not isinstance(stage, dict) or not stage:
            raise TranslationError(
                f"Invalid MongoDB query generated: stage {index} is not a stage object",
                {"response": response_text[:500]},
            )

    return pipeline


class QueryTranslator:
    """
    Turns English questions into MongoDB aggregation pipelines and repairs
    pipelines the database rejected.

    ``initialize()`` must be called once before ``generate`` or ``fix``.
    After that the translator holds no per-request state and can be shared
    between concurrent requests.
    """

    def __init__(self, oracle: LanguageOracle):
        self.oracle = oracle
        self.context = None
        self.is_initialized = False

    def initialize(self) -> None:
        if self.is_initialized:
            return

        self.context = prompt_registry.get("query_generator_context").content
        self._fix_prompt = prompt_registry.get("query_fix")
        self.is_initialized = True
        logger.info("✅ Query translator context initialized")

    def _ensure_initialized(self) -> None:
        if not self.is_initialized:
            raise NotInitializedError("QueryTranslator")

    async def _complete(self, user_prompt: str) -> str:
        try:
            return await self.oracle.complete(
                self.context,
                user_prompt,
                temperature=GENERATION_TEMPERATURE,
                max_output_tokens=GENERATION_MAX_TOKENS,
            )
        except OracleUnavailableError as e:
            raise TranslationError(str(e), e.details) from e

    async def generate(self, question: str) -> List[Dict[str, Any]]:
        """
        Generate an aggregation pipeline for ``question``.

        Returns:
            List of stage objects, possibly empty

        Raises:
            NotInitializedError: called before initialize()
            TranslationError: unusable model output or model unavailable
        """
        self._ensure_initialized()

        logger.info(f"Generating pipeline for: '{question[:100]}'")
        response_text = await self._complete(question)
        pipeline = parse_pipeline(response_text)

        logger.info(f"Generated MongoDB pipeline: {to_json(pipeline)}")
        return pipeline

    async def fix(
        self,
        question: str,
        error_message: str,
        failed_query: List[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """
        Ask the model for a corrected pipeline after the database rejected one.

        Raises:
            NotInitializedError: called before initialize()
            TranslationError: unusable model output or model unavailable
        """
        self._ensure_initialized()

        fix_prompt = self._fix_prompt.format(
            error_message=error_message,
            question=question,
            failed_query=to_json(failed_query, indent=None),
        )

        logger.info(f"Requesting pipeline fix for error: {error_message}")
        response_text = await self._complete(fix_prompt)
        pipeline = parse_pipeline(response_text)

        logger.info(f"Fixed MongoDB pipeline: {to_json(pipeline)}")
        return pipeline
