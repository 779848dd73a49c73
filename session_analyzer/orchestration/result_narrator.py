import logging
import math
from collections.abc import Hashable
from numbers import Number
from typing import Any, Dict, List

from session_analyzer.exceptions import AnalysisError, NotInitializedError, OracleUnavailableError
from session_analyzer.llm.oracle import LanguageOracle
from session_analyzer.prompts import prompt_registry
from session_analyzer.utils.formatting import to_json

logger = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.3
ANALYSIS_MAX_TOKENS = 800

NO_DATA_MESSAGE = "No data found matching the query criteria."

# Field names produced by typical $group stages
AGGREGATE_FIELDS = ("avgRating", "averageRating", "totalSessions", "count", "sum", "avg")
MAX_AGGREGATED_RECORDS = 200
MAX_VERBATIM_RECORDS = 10
SAMPLE_SIZE = 10
MAX_LISTED_INSTRUCTORS = 5


def is_aggregated_data(results: List[Dict[str, Any]]) -> bool:
    """
    Guess whether ``results`` came out of a grouping stage.

    Every record must carry ``_id`` and one of the common aggregate field
    names, and the set must stay small enough to be shown in full. This is
    a shape heuristic, not a contract.
    """
    if not results or len(results) > MAX_AGGREGATED_RECORDS:
        return False

    return all(
        isinstance(record, dict)
        and "_id" in record
        and any(field in record for field in AGGREGATE_FIELDS)
        for record in results
    )


def _overall_average(record: Dict[str, Any]):
    ratings = record.get("ratings")
    if not isinstance(ratings, dict):
        return None
    value = ratings.get("overallAverage")
    if isinstance(value, bool) or not isinstance(value, Number) or math.isnan(value):
        return None
    return value


def _distinct(results: List[Dict[str, Any]], field: str) -> List[Any]:
    # dict keeps first-seen order; unhashable values are keyed by their JSON
    seen = {}
    for record in results:
        value = record.get(field)
        if value:
            key = value if isinstance(value, Hashable) else to_json(value, indent=None)
            seen.setdefault(key, value)
    return list(seen.values())


class ResultNarrator:
    """
    Explains a result set in prose.

    ``summarize`` builds the evidence digest locally; ``analyze`` hands the
    digest to the language model together with the question.
    """

    def __init__(self, oracle: LanguageOracle):
        self.oracle = oracle
        self.context = None
        self.is_initialized = False

    def initialize(self) -> None:
        if self.is_initialized:
            return

        self.context = prompt_registry.get("analyst_context").content
        self._analysis_prompt = prompt_registry.get("analysis")
        self.is_initialized = True
        logger.info("✅ Result narrator context initialized")

    def summarize(self, results: List[Dict[str, Any]]) -> str:
        """
        Build the digest of ``results`` that is sent to the model.

        Small and aggregated sets are serialized in full. Large sets of raw
        documents are reduced to a count, the first records, the mean
        rating, and the instructors and domains they cover.
        """
        if not results:
            return NO_DATA_MESSAGE

        if is_aggregated_data(results):
            return f"Complete aggregated results ({len(results)} records):\n{to_json(results)}"

        if len(results) <= MAX_VERBATIM_RECORDS:
            return f"Complete results: {to_json(results)}"

        lines = [
            "Data overview:",
            f"- Total records: {len(results)}",
            f"- Sample data (first {SAMPLE_SIZE} records): {to_json(results[:SAMPLE_SIZE])}",
        ]

        ratings = [value for value in map(_overall_average, results) if value is not None]
        if ratings:
            lines.append(f"- Average rating across results: {sum(ratings) / len(ratings):.2f}")

        instructors = _distinct(results, "instructor")
        if instructors:
            listed = ", ".join(str(name) for name in instructors[:MAX_LISTED_INSTRUCTORS])
            more = "..." if len(instructors) > MAX_LISTED_INSTRUCTORS else ""
            lines.append(f"- Unique instructors: {len(instructors)} ({listed}{more})")

        domains = _distinct(results, "domain")
        if domains:
            lines.append(f"- Domains covered: {', '.join(str(domain) for domain in domains)}")

        return "\n".join(lines) + "\n"

    async def analyze(self, question: str, results: List[Dict[str, Any]]) -> str:
        """
        Ask the model to explain ``results`` as an answer to ``question``.

        Raises:
            NotInitializedError: called before initialize()
            AnalysisError: model unavailable or empty reply
        """
        if not self.is_initialized:
            raise NotInitializedError("ResultNarrator")

        analysis_prompt = self._analysis_prompt.format(
            question=question,
            result_count=len(results),
            summary=self.summarize(results),
        )

        try:
            response_text = await self.oracle.complete(
                self.context,
                analysis_prompt,
                temperature=ANALYSIS_TEMPERATURE,
                max_output_tokens=ANALYSIS_MAX_TOKENS,
            )
        except OracleUnavailableError as e:
            raise AnalysisError(f"Failed to analyze results: {e}", e.details) from e

        analysis = (response_text or "").strip()
        if not analysis:
            raise AnalysisError("Failed to analyze results: empty response from language model")

        logger.info(f"Generated analysis ({len(analysis)} characters)")
        return analysis
