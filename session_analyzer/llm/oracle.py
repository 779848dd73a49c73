"""
Thin async wrapper around the OpenAI chat model.

Both the query translator and the result narrator talk to the model through
``LanguageOracle.complete``; any failure of the underlying client surfaces as
``OracleUnavailableError``.
"""
import logging
from typing import Dict, Optional, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from session_analyzer.config import OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT
from session_analyzer.exceptions import OracleUnavailableError

logger = logging.getLogger(__name__)


class LanguageOracle:

    def __init__(
        self,
        model: str = OPENAI_MODEL,
        api_key: Optional[str] = OPENAI_API_KEY,
        timeout: float = OPENAI_TIMEOUT,
    ):
        self.model = model
        self._api_key = api_key or None
        self._timeout = timeout
        # One client per sampling configuration, created on first use
        self._clients: Dict[Tuple[float, int], ChatOpenAI] = {}

    def _get_llm(self, temperature: float, max_output_tokens: int) -> ChatOpenAI:
        key = (temperature, max_output_tokens)
        llm = self._clients.get(key)
        if llm is None:
            llm = ChatOpenAI(
                model=self.model,
                temperature=temperature,
                max_tokens=max_output_tokens,
                api_key=self._api_key,
                timeout=self._timeout,
            )
            self._clients[key] = llm
        return llm

    async def complete(
        self,
        system_context: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """
        Run one chat completion and return the raw reply text.

        Args:
            system_context: Instructions sent as the system message
            user_prompt: The request sent as the human message
            temperature: Sampling temperature
            max_output_tokens: Upper bound on generated tokens

        Raises:
            OracleUnavailableError: the client could not be created or the call failed
        """
        messages = [
            SystemMessage(content=system_context),
            HumanMessage(content=user_prompt),
        ]

        try:
            llm = self._get_llm(temperature, max_output_tokens)
            response = await llm.ainvoke(messages)
        except Exception as e:
            logger.error(f"Language model call failed ({self.model}): {e}")
            raise OracleUnavailableError(
                f"Language model call failed: {e}",
                {"model": self.model},
            ) from e

        content = response.content
        if not isinstance(content, str):
            # Multi-part replies: keep the text parts only
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        return content
