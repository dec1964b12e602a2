"""Gemini generateContent client used as the engine's text source.

This module provides the GeminiTextSource class: a single HTTP POST with a
bounded timeout, strict 200-only success, and optional retries with fixed
delays (async, aiohttp).
"""

import asyncio
from typing import Any, Optional

import aiohttp

from chefai.utils.config import DEFAULT_GEMINI_API_URL, Config
from chefai.utils.errors import TextSourceError, safe_execute_async
from chefai.utils.logger import logger


class GeminiTextSource:
    """Fetch raw generateContent responses for a prompt.

    Any non-200 status, timeout or network error surfaces as TextSourceError;
    the engine turns that into a fallback run.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_GEMINI_API_URL,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
        timeout_seconds: float = 15,
        max_retries: int = 1,
        retry_delays: Optional[list[int]] = None,
    ) -> None:
        """Initialize GeminiTextSource with configuration.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter.
            api_url: generateContent endpoint.
            temperature: Sampling temperature sent in generationConfig.
            max_output_tokens: Output token cap sent in generationConfig.
            timeout_seconds: Total (connect + read) timeout per attempt.
            max_retries: Number of attempts (default: 1, no retry).
            retry_delays: Delays in seconds between attempts. If None, defaults to [1, 2, 4].

        Raises:
            ValueError: If api_key is None or empty string.
        """
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required")

        self.api_key = api_key
        self.api_url = api_url
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_seconds = timeout_seconds
        self.max_retries = max(max_retries, 1)
        self.retry_delays = retry_delays or [1, 2, 4]

    @classmethod
    def from_config(cls, settings: Config) -> "GeminiTextSource":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            api_url=settings.GEMINI_API_URL,
            temperature=settings.TEMPERATURE,
            max_output_tokens=settings.MAX_OUTPUT_TOKENS,
            timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
            max_retries=settings.MAX_RETRIES,
        )

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        """generateContent request body for ``prompt``."""
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def fetch(self, prompt: str) -> bytes:
        """POST ``prompt`` and return the raw response body.

        Returns:
            bytes: Body of the 200 response.

        Raises:
            TextSourceError: If every attempt fails.
        """
        last_exception: Optional[TextSourceError] = None
        for attempt in range(self.max_retries):
            try:
                logger.debug(f"Gemini request attempt {attempt + 1}/{self.max_retries}...")
                return await self._post(prompt)
            except TextSourceError as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    delay = self.retry_delays[attempt] if attempt < len(self.retry_delays) else self.retry_delays[-1]
                    logger.warning(
                        f"Gemini request failed ({e}), retrying in {delay}s... "
                        f"(attempt {attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(delay)

        raise last_exception

    async def _post(self, prompt: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.api_url,
                    params={"key": self.api_key},
                    json=self.build_request_body(prompt),
                ) as response:
                    logger.debug(f"Gemini HTTP status: {response.status}")
                    if response.status != 200:
                        detail = await safe_execute_async(
                            response.text(),
                            "Read Gemini error body",
                            log_level="debug",
                            default_return="",
                        )
                        logger.debug(f"Gemini error body: {detail[:500]}")
                        raise TextSourceError(f"Gemini returned HTTP {response.status}", status=response.status)
                    return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TextSourceError(f"Gemini request failed: {e!r}") from e
