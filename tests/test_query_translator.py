"""
Test suite for QueryTranslator.

Tests pipeline generation, repair prompts, output validation and
initialization rules.
"""
import json
import pytest

from session_analyzer.exceptions import NotInitializedError, OracleUnavailableError, TranslationError
from session_analyzer.orchestration.query_translator import (
    GENERATION_MAX_TOKENS,
    GENERATION_TEMPERATURE,
    QueryTranslator,
    parse_pipeline,
)


RISHI_PIPELINE = [
    {"$match": {"instructor": "Rishi Bollu"}},
    {"$group": {"_id": None, "avgRating": {"$avg": "$ratings.overallAverage"}}},
]


@pytest.fixture
def translator(mock_oracle):
    translator = QueryTranslator(mock_oracle)
    translator.initialize()
    return translator


class TestParsePipeline:
    """Test parse_pipeline output validation."""

    def test_parses_stage_array(self):
        assert parse_pipeline(json.dumps(RISHI_PIPELINE)) == RISHI_PIPELINE

    def test_empty_array_is_valid(self):
        assert parse_pipeline("[]") == []

    def test_strips_markdown_fence(self):
        text = "```json\n" + json.dumps(RISHI_PIPELINE) + "\n```"
        assert parse_pipeline(text) == RISHI_PIPELINE

    def test_strips_plain_fence(self):
        text = "```\n[{\"$limit\": 5}]\n```"
        assert parse_pipeline(text) == [{"$limit": 5}]

    def test_non_json_raises(self):
        with pytest.raises(TranslationError, match="Invalid MongoDB query generated"):
            parse_pipeline("Sure! Here is your query: db.sessions.find()")

    def test_json_object_raises(self):
        with pytest.raises(TranslationError, match="must be an array"):
            parse_pipeline('{"$match": {"domain": "SRE"}}')

    def test_non_object_stage_raises(self):
        with pytest.raises(TranslationError, match="stage 1"):
            parse_pipeline('[{"$match": {}}, "oops"]')

    def test_empty_stage_raises(self):
        with pytest.raises(TranslationError):
            parse_pipeline("[{}]")


class TestInitialization:
    """Test one-time context loading."""

    def test_initialize_loads_schema_context(self, mock_oracle):
        translator = QueryTranslator(mock_oracle)
        assert translator.is_initialized is False

        translator.initialize()

        assert translator.is_initialized is True
        assert "DATABASE SCHEMA" in translator.context
        assert "ratings" in translator.context

    def test_initialize_is_idempotent(self, mock_oracle):
        translator = QueryTranslator(mock_oracle)
        translator.initialize()
        context = translator.context
        fix_prompt = translator._fix_prompt

        translator.initialize()

        assert translator.context is context
        assert translator._fix_prompt is fix_prompt
        mock_oracle.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_before_initialize_raises(self, mock_oracle):
        translator = QueryTranslator(mock_oracle)

        with pytest.raises(NotInitializedError):
            await translator.generate("Average rating for Rishi Bollu")
        mock_oracle.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_fix_before_initialize_raises(self, mock_oracle):
        translator = QueryTranslator(mock_oracle)

        with pytest.raises(NotInitializedError):
            await translator.fix("question", "error", RISHI_PIPELINE)


class TestGenerate:
    """Test generate method."""

    @pytest.mark.asyncio
    async def test_generate_returns_pipeline(self, translator, mock_oracle):
        mock_oracle.complete.return_value = json.dumps(RISHI_PIPELINE)

        pipeline = await translator.generate("Average rating for Rishi Bollu")

        assert pipeline == RISHI_PIPELINE

    @pytest.mark.asyncio
    async def test_generate_sends_question_with_low_temperature(self, translator, mock_oracle):
        mock_oracle.complete.return_value = "[]"

        await translator.generate("Sessions in 2024")

        args, kwargs = mock_oracle.complete.call_args
        assert args[0] == translator.context
        assert args[1] == "Sessions in 2024"
        assert kwargs["temperature"] == GENERATION_TEMPERATURE
        assert kwargs["max_output_tokens"] == GENERATION_MAX_TOKENS
        assert GENERATION_TEMPERATURE <= 0.2

    @pytest.mark.asyncio
    async def test_generate_empty_pipeline(self, translator, mock_oracle):
        mock_oracle.complete.return_value = "[]"

        assert await translator.generate("What is the weather?") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", [
        "I cannot help with that",
        '{"$match": {}}',
        '"[]"',
        "42",
        "",
    ])
    async def test_generate_rejects_non_array(self, translator, mock_oracle, reply):
        mock_oracle.complete.return_value = reply

        with pytest.raises(TranslationError):
            await translator.generate("question")

    @pytest.mark.asyncio
    async def test_generate_oracle_unavailable(self, translator, mock_oracle):
        mock_oracle.complete.side_effect = OracleUnavailableError("connection reset")

        with pytest.raises(TranslationError, match="connection reset"):
            await translator.generate("question")


class TestFix:
    """Test fix method."""

    @pytest.mark.asyncio
    async def test_fix_prompt_embeds_question_error_and_query(self, translator, mock_oracle):
        mock_oracle.complete.return_value = json.dumps(RISHI_PIPELINE)
        failed = [{"$match": {"instructor": "Rishi Bollu"}}, {"$gruop": {}}]

        fixed = await translator.fix(
            "Average rating for Rishi Bollu",
            "Unrecognized pipeline stage name: '$gruop'",
            failed,
        )

        assert fixed == RISHI_PIPELINE
        args, kwargs = mock_oracle.complete.call_args
        prompt = args[1]
        assert "Average rating for Rishi Bollu" in prompt
        assert "Unrecognized pipeline stage name: '$gruop'" in prompt
        assert '"$gruop"' in prompt
        assert kwargs["temperature"] == GENERATION_TEMPERATURE

    @pytest.mark.asyncio
    async def test_fix_rejects_unparseable_reply(self, translator, mock_oracle):
        mock_oracle.complete.return_value = "Here is the corrected query"

        with pytest.raises(TranslationError):
            await translator.fix("q", "error", RISHI_PIPELINE)

    @pytest.mark.asyncio
    async def test_fix_oracle_unavailable(self, translator, mock_oracle):
        mock_oracle.complete.side_effect = OracleUnavailableError("timeout")

        with pytest.raises(TranslationError):
            await translator.fix("q", "error", RISHI_PIPELINE)
