"""LLM service for TradieQuote.

Provides the LangChain/OpenAI call used to draft quote line items.
"""

import asyncio
import json
import re
from typing import Dict, Any, Optional, List
import httpx
import structlog
from langchain_openai import ChatOpenAI
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from config.settings import settings
from config.errors import GenerationError, ErrorCode

logger = structlog.get_logger()

# Tolerates a fenced ```json block even though JSON mode is requested
_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*\})\s*```")


class LLMService:
    """Service for LLM operations using LangChain.

    Wraps ChatOpenAI with a hard timeout, token tracking and error
    translation. Exactly one request is made per call: the client is built
    with retries disabled.

    Each call opens its own httpx connection pool and closes it before
    returning. HTTP handlers run every request on a fresh event loop, and a
    pooled connection must not outlive the loop it was opened on.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        base_url: Optional[str] = None
    ):
        """Initialize LLMService.

        Args:
            model: Model name (default from settings).
            temperature: Temperature (default from settings).
            api_key: OpenAI API key (default from settings).
            max_tokens: Response token cap (default from settings).
            timeout_seconds: Per-call timeout (default from settings).
            base_url: OpenAI-compatible endpoint (default from settings,
                None for the OpenAI API).
        """
        self.model = model or settings.llm_model
        self.temperature = temperature if temperature is not None else settings.llm_temperature
        self.api_key = api_key or settings.openai_api_key
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self.timeout_seconds = timeout_seconds or settings.llm_timeout_seconds
        self.base_url = base_url or settings.llm_base_url

        # Pre-built client; when set it is used instead of a per-call one
        self._client: Optional[ChatOpenAI] = None
        self._total_tokens_used = 0

    def build_client(self, http_async_client: Optional[httpx.AsyncClient] = None) -> ChatOpenAI:
        """Build a ChatOpenAI client in JSON mode with retries disabled."""
        return ChatOpenAI(
            model=self.model,
            temperature=self.temperature,
            api_key=self.api_key,
            base_url=self.base_url,
            max_tokens=self.max_tokens,
            timeout=self.timeout_seconds,
            max_retries=0,
            model_kwargs={"response_format": {"type": "json_object"}},
            http_async_client=http_async_client
        )

    @property
    def total_tokens_used(self) -> int:
        """Get total tokens used across all calls."""
        return self._total_tokens_used

    async def _invoke(self, messages: List[BaseMessage]) -> Any:
        if self._client is not None:
            return await self._client.ainvoke(messages)

        async with httpx.AsyncClient(timeout=self.timeout_seconds) as http_client:
            return await self.build_client(http_client).ainvoke(messages)

    async def generate(self, messages: List[BaseMessage]) -> Dict[str, Any]:
        """Generate a response from the LLM.

        Args:
            messages: List of LangChain messages.

        Returns:
            Dict with content and token usage.

        Raises:
            GenerationError: If the call fails, times out or returns nothing.
        """
        try:
            response = await asyncio.wait_for(
                self._invoke(messages),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            raise GenerationError(
                code=ErrorCode.LLM_TIMEOUT,
                message=f"LLM call timed out after {self.timeout_seconds}s",
                details={"timeout_seconds": self.timeout_seconds}
            )
        except Exception as e:
            error_msg = str(e)

            # Detect specific error types
            if "rate_limit" in error_msg.lower():
                raise GenerationError(
                    code=ErrorCode.LLM_RATE_LIMIT,
                    message="OpenAI rate limit exceeded",
                    details={"original_error": error_msg}
                )
            elif "context_length" in error_msg.lower() or "maximum context" in error_msg.lower():
                raise GenerationError(
                    code=ErrorCode.LLM_CONTEXT_TOO_LONG,
                    message="Input too long for model context",
                    details={"original_error": error_msg}
                )
            else:
                raise GenerationError(
                    code=ErrorCode.LLM_ERROR,
                    message=f"LLM generation failed: {error_msg}",
                    details={"original_error": error_msg}
                )

        content = response.content if isinstance(response.content, str) else ""

        # Track token usage if available
        tokens_used = 0
        if hasattr(response, "response_metadata"):
            usage = (response.response_metadata or {}).get("token_usage", {}) or {}
            tokens_used = usage.get("total_tokens", 0)
            self._total_tokens_used += tokens_used

        logger.info(
            "llm_generated",
            model=self.model,
            tokens_used=tokens_used,
            content_length=len(content)
        )

        if not content.strip():
            raise GenerationError(
                code=ErrorCode.LLM_EMPTY_RESPONSE,
                message="Empty response from AI"
            )

        return {
            "content": content.strip(),
            "tokens_used": tokens_used
        }

    async def generate_json(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        """Generate a JSON response.

        The parsed value is returned as-is (it may be any JSON type) and must
        be validated by the caller.

        Args:
            system_prompt: System prompt for context.
            user_message: User message/query.

        Returns:
            Dict with parsed JSON content, raw text and token usage.

        Raises:
            GenerationError: If the call fails or the response is not valid JSON.
        """
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_message)
        ]
        result = await self.generate(messages)

        raw = result["content"]
        match = _FENCED_JSON.search(raw)
        json_str = match.group(1) if match else raw

        try:
            parsed = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise GenerationError(
                code=ErrorCode.LLM_INVALID_JSON,
                message="Failed to parse AI response as JSON",
                details={
                    "parse_error": str(e),
                    "raw_content": raw[:500]
                }
            )

        return {
            "content": parsed,
            "raw": raw,
            "tokens_used": result["tokens_used"]
        }
