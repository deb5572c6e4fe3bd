# genelinker/llm/openai_client.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

import httpx

try:
    import openai
    from openai import AsyncOpenAI
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "The OpenAI Python SDK is missing or too old. "
        "Run:  pip install -U openai"
    ) from e

from genelinker.config import ClientConfig
from genelinker.models import FallbackReason

log = logging.getLogger(__name__)


class CompletionFailed(Exception):
    def __init__(self, reason: FallbackReason, detail: str = ""):
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason


def classify(exc: BaseException) -> FallbackReason:
    if isinstance(exc, openai.APITimeoutError):
        return FallbackReason.TIMEOUT
    if isinstance(exc, openai.APIConnectionError):
        return FallbackReason.NETWORK
    if isinstance(exc, openai.APIStatusError):
        return FallbackReason.HTTP_STATUS
    return FallbackReason.BAD_RESPONSE


class CompletionClient:
    """One chat-completion request per call; no retries, bounded by the config timeout."""

    def __init__(self, config: ClientConfig,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport
        self._client: Optional[AsyncOpenAI] = None
        self.calls = 0
        self._active = 0
        self._close_when_idle = False

    def _get(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        http_client = None
        if self._transport is not None:
            http_client = httpx.AsyncClient(transport=self._transport, timeout=self.config.timeout_s)
        self._client = AsyncOpenAI(
            api_key=self.config.credential,
            base_url=self.config.endpoint,
            timeout=self.config.timeout_s,
            max_retries=0,
            http_client=http_client,
        )
        return self._client

    async def complete(self, system: str, user: str,
                       temperature: float = 0.3, max_tokens: int = 800) -> str:
        if not self.config.is_configured:
            raise CompletionFailed(FallbackReason.NO_CREDENTIAL)
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        self.calls += 1
        self._active += 1
        try:
            resp = await self._get().chat.completions.create(
                model=self.config.model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            raise CompletionFailed(classify(e), type(e).__name__) from e
        finally:
            self._active -= 1
            if self._active == 0 and self._close_when_idle:
                await self._close()
        try:
            return resp.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as e:
            raise CompletionFailed(FallbackReason.BAD_RESPONSE, "no choices") from e

    async def aclose(self) -> None:
        """Close the SDK client; requests still in flight finish first."""
        if self._active:
            self._close_when_idle = True
            return
        await self._close()

    async def _close(self) -> None:
        self._close_when_idle = False
        if self._client is not None:
            client, self._client = self._client, None
            await client.close()
