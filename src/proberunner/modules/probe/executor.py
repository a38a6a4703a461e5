"""Probe execution and response classification."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import httpx

from .models import TIMEOUT_MESSAGE, ProbeRequest, ProbeResult, ProbeStatus

if TYPE_CHECKING:
    from proberunner.tools.http import HTTPTransport

logger = logging.getLogger(__name__)

SUCCESS_CODES = (200, 204)


def classify_status(status_code: int) -> ProbeStatus:
    """Map a received HTTP status code to a probe status."""
    if status_code in SUCCESS_CODES:
        return ProbeStatus.SUCCESS
    if 400 <= status_code < 500:
        return ProbeStatus.BLOCKED
    return ProbeStatus.PARTIAL


def _error_text(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class ProbeExecutor:
    """Sends one probe request and turns whatever happens into a ProbeResult.

    Transport failures and timeouts never escape ``execute``; they come back
    as results with ``status == error``. With ``retries`` set, error outcomes
    are retried with exponential backoff. Received responses are classified
    once and never retried.
    """

    def __init__(
        self,
        client: HTTPTransport,
        retries: int = 0,
        retry_backoff_ms: float = 250.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self.client = client
        self.retries = retries
        self.retry_backoff_ms = retry_backoff_ms
        self._sleep = sleep

    async def execute(self, request: ProbeRequest, timeout_seconds: float) -> ProbeResult:
        """Execute ``request`` under a deadline of ``timeout_seconds``."""
        start = time.perf_counter()
        attempt = 0
        while True:
            attempt += 1
            status_code, error = await self._attempt(request, timeout_seconds)
            if error is None or attempt > self.retries:
                break
            delay = self.retry_backoff_ms * (2 ** (attempt - 1)) / 1000.0
            logger.debug(
                "Retrying %s after error %r (attempt %d, backoff %.3fs)",
                request.test_case.description,
                error,
                attempt,
                delay,
            )
            if delay > 0:
                await self._sleep(delay)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        test_case = request.test_case
        status = ProbeStatus.ERROR if error is not None else classify_status(status_code)
        return ProbeResult(
            category=test_case.category,
            description=test_case.description,
            payload=test_case.payload.to_dict(),
            status=status,
            response_code=status_code,
            elapsed_ms=elapsed_ms,
            error=error,
            attempts=attempt,
        )

    async def _attempt(
        self, request: ProbeRequest, timeout_seconds: float
    ) -> tuple[int | None, str | None]:
        try:
            response = await asyncio.wait_for(
                self.client.send(request, timeout_seconds),
                timeout=timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException):
            return None, TIMEOUT_MESSAGE
        except Exception as exc:
            logger.debug("Transport failure for %s: %s", request.url, exc)
            return None, _error_text(exc)
        return response.status_code, None
