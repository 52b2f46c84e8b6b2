"""Periodic self-ping so idle-suspending hosts keep the process warm.

Has no interaction with request handling; failures are logged and the
loop carries on.
"""
from __future__ import annotations

import asyncio
import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

logger = logging.getLogger(__name__)


class KeepAlivePinger:
    def __init__(self, url: str, interval_min: int, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.url = url
        self.interval_s = max(1, interval_min) * 60
        self._transport = transport

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.5, max=10),
        retry=retry_if_exception_type(httpx.RequestError),
    )
    async def ping(self) -> int:
        """GET the liveness URL once (network errors retried). Returns the status code."""
        t = httpx.Timeout(10.0, connect=5.0)
        async with httpx.AsyncClient(timeout=t, transport=self._transport) as client:
            resp = await client.get(self.url)
            return resp.status_code

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            try:
                status = await self.ping()
                logger.debug("Keep-alive ping %s -> %s", self.url, status)
            except httpx.HTTPError as exc:
                logger.warning("Keep-alive ping failed: %s", exc)
