"""
Backoff Request Executor
------------------------
Retrying transport for one logical provider request. Knows nothing about the
payload: it POSTs JSON, retries rate limits and transport faults with
exponential backoff, and turns everything else into typed failures.

Retries of one request are strictly sequential; the backoff delay is awaited
so other coroutines keep running meanwhile.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import aiohttp
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from marketing_toolkit.core.errors import ExhaustedRetries, NonRetryableHttpError
from marketing_toolkit.models.envelope import ResponseEnvelope
from marketing_toolkit.utils.retry import (
    RATE_LIMIT_STATUS,
    BackoffPolicy,
    RateLimitedError,
    TransportFailure,
    backoff_wait,
    log_before_retry,
)

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class ProviderRequest:
    url: str
    # Payload may carry attachment bytes and headers carry the API key
    payload: Dict[str, Any] = field(repr=False)
    headers: Mapping[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}, repr=False
    )


class BackoffRequestExecutor:
    """POSTs a :class:`ProviderRequest` under a :class:`BackoffPolicy`."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        *,
        timeout_seconds: float = 60.0,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._timeout_seconds = timeout_seconds
        self._sleep: Sleep = sleep or asyncio.sleep

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or (self._owns_session and self._session.closed):
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def execute(self, request: ProviderRequest, policy: BackoffPolicy) -> ResponseEnvelope:
        """Run ``request`` until success, a non-retryable failure, or exhaustion."""
        session = await self._ensure_session()
        retrying = AsyncRetrying(
            stop=stop_after_attempt(policy.max_attempts),
            wait=backoff_wait(policy),
            retry=retry_if_exception_type((RateLimitedError, TransportFailure)),
            before_sleep=log_before_retry,
            sleep=self._sleep,
            reraise=True,
        )
        try:
            return await retrying(self._attempt, session, request)
        except RateLimitedError as e:
            logger.error(
                "Max retries exhausted",
                url=request.url,
                max_attempts=policy.max_attempts,
                status=e.status,
            )
            raise ExhaustedRetries(e, policy.max_attempts) from e
        except TransportFailure as e:
            logger.error(
                "Provider unreachable on final attempt",
                url=request.url,
                max_attempts=policy.max_attempts,
                error=str(e),
            )
            raise NonRetryableHttpError(None, str(e)) from (e.__cause__ or e)

    async def _attempt(
        self, session: aiohttp.ClientSession, request: ProviderRequest
    ) -> ResponseEnvelope:
        logger.debug("Sending provider request", url=request.url)
        try:
            async with session.post(
                request.url, json=request.payload, headers=dict(request.headers)
            ) as resp:
                status = resp.status
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(f"{type(e).__name__}: {e}") from e

        if 200 <= status < 300:
            try:
                data = json.loads(body)
            except json.JSONDecodeError as e:
                logger.error("Provider returned a non-JSON body", status=status)
                raise NonRetryableHttpError(status, body) from e
            return ResponseEnvelope.from_payload(data)

        if status == RATE_LIMIT_STATUS:
            raise RateLimitedError(status, body)

        logger.error("Provider request failed", url=request.url, status=status)
        raise NonRetryableHttpError(status, body)


__all__ = ["ProviderRequest", "BackoffRequestExecutor"]
