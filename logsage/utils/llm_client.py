import os
import time
from typing import Optional

from anthropic import APIError, AsyncAnthropic

from logsage.config import DEFAULT_LLM_MODEL
from logsage.errors import CompletionError
from logsage.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_TOKENS = 1024


class LLMResponse:
    """Wrapper for Anthropic API response."""
    def __init__(self, text: str, input_tokens: int, output_tokens: int):
        self.text = text
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class AnthropicClient:
    """Anthropic completion client.

    Holds configuration only, so one instance can serve concurrent requests.
    """

    def __init__(self, agent_name: str = "unknown", model: str = DEFAULT_LLM_MODEL, api_key: Optional[str] = None):
        self.agent_name = agent_name
        self.model = model
        self._client = AsyncAnthropic(api_key=api_key or os.getenv("ANTHROPIC_API_KEY"))

    async def complete(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Request one completion.

        Raises CompletionError when the API is unreachable or the response
        carries no text block. An empty text block is returned as-is.
        """
        max_tokens = max_tokens or DEFAULT_MAX_TOKENS
        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }

        logger.info("LLM call", extra={
            "agent_name": self.agent_name,
            "action": "llm_call",
            "tool": self.model,
            "tokens": {"max_tokens": max_tokens},
            "extra": {
                "system": _truncate(system, 500),
                "prompt": _truncate(prompt, 1000),
                "temperature": temperature,
            },
        })

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except APIError as e:
            logger.error("LLM call failed", extra={"agent_name": self.agent_name, "action": "llm_error", "extra": str(e)})
            raise CompletionError(f"Completion request failed: {e}") from e

        elapsed_ms = round((time.monotonic() - start) * 1000)
        text_blocks = [b.text for b in (response.content or []) if getattr(b, "type", "text") == "text"]
        if not text_blocks:
            logger.error("LLM returned no content", extra={
                "agent_name": self.agent_name,
                "action": "llm_error",
                "extra": {"stop_reason": response.stop_reason},
            })
            raise CompletionError("No response from AI")
        text = "".join(text_blocks)

        logger.info("LLM response", extra={
            "agent_name": self.agent_name,
            "action": "llm_response",
            "tokens": {"input": response.usage.input_tokens, "output": response.usage.output_tokens},
            "duration_ms": elapsed_ms,
            "extra": {
                "response": _truncate(text, 2000),
                "stop_reason": response.stop_reason,
            },
        })

        return LLMResponse(
            text=text,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
