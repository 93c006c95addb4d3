"""Client for an OpenAI-compatible chat completion server (e.g. llama.cpp).

Every failure mode is reported as :class:`LLMUnavailableError` so callers
can fall back to deterministic behavior.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Literal

import aiohttp
from aiohttp import ClientTimeout
from pydantic import BaseModel

from a2a_sandbox.errors import LLMUnavailableError
from a2a_sandbox.errors.codes import ErrorCode
from a2a_sandbox.logging import get_logger

logger = get_logger(__name__)

HEALTH_TIMEOUT = 2.0


class ChatMessage(BaseModel):
    """One chat turn sent to the model."""

    role: Literal["system", "user", "assistant"]
    content: str


class LanguageModel(ABC):
    """Text-generation collaborator used by agents."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Cheap liveness probe; never raises."""
        pass

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> str:
        """Generate a reply.

        Raises:
            LLMUnavailableError: If no reply could be produced
        """
        pass

    async def close(self) -> None:
        """Release held resources."""
        return None


class LLMClient(LanguageModel):
    """aiohttp client for ``/v1/chat/completions``.

    Example:
        ```python
        async with LLMClient("http://localhost:8080") as llm:
            text = await llm.complete([ChatMessage(role="user", content="Hi")])
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ):
        """Initialize client.

        Args:
            base_url: Server root, without the ``/v1`` suffix
            timeout: Total request timeout in seconds
            temperature: Default sampling temperature
            max_tokens: Default completion length limit
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> LLMClient:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Open the HTTP session."""
        if not self.session:
            self.session = aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout))

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def is_available(self) -> bool:
        if not self.session:
            await self.initialize()
        try:
            async with self.session.get(
                f"{self.base_url}/health",
                timeout=ClientTimeout(total=min(self.timeout, HEALTH_TIMEOUT)),
            ) as response:
                return response.ok
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.debug("LLM health check failed", base_url=self.base_url, error=str(e))
            return False

    async def complete(
        self,
        messages: list[ChatMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> str:
        if not self.session:
            await self.initialize()

        payload: dict[str, Any] = {
            "messages": [m.model_dump() for m in messages],
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
        }
        if stop:
            payload["stop"] = stop

        url = f"{self.base_url}/v1/chat/completions"
        try:
            async with self.session.post(url, json=payload) as response:
                if not response.ok:
                    text = await response.text()
                    raise LLMUnavailableError(
                        f"LLM API error: {response.status} {response.reason}",
                        details={"status": response.status, "body": text[:500]},
                    )
                data = await response.json(content_type=None)
        except TimeoutError as e:
            logger.warning("LLM request timed out", url=url, timeout=self.timeout)
            raise LLMUnavailableError(
                "LLM request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self.timeout},
            ) from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning("LLM request failed", url=url, error=str(e))
            raise LLMUnavailableError(f"LLM request failed: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMUnavailableError("Malformed LLM response") from e
        if not isinstance(content, str) or not content.strip():
            raise LLMUnavailableError("LLM returned an empty reply")

        logger.debug("LLM completion received", chars=len(content))
        return content.strip()
