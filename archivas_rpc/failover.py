from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel

from archivas_rpc.attempt import Failure, Success, run_attempt
from archivas_rpc.config import DEFAULT_JITTER_MS
from archivas_rpc.enums import HttpMethod
from archivas_rpc.errors import AllHostsFailed
from archivas_rpc.hosts import HostPool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RpcResponse:
    data: Any
    host: str


class FailoverDriver:
    """Runs one logical request against the pool, one host at a time.

    Hosts are tried in the pool order seen when the call starts. The first
    success is promoted to the front of the pool. Between a failure and the
    next host the driver waits ``jitter_ms``; there is no wait after the last
    host, so a single-host pool never sleeps.

    A caller-supplied ``transport`` is wrapped once in a client shared by
    every call and closed only by ``aclose``. Without one, each attempt opens
    its own client unless ``open`` has been called.
    """

    def __init__(
        self,
        pool: HostPool,
        jitter_ms: int = DEFAULT_JITTER_MS,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.pool = pool
        self.jitter_ms = jitter_ms
        self.transport = transport
        self.sleep = sleep
        self.client: httpx.AsyncClient | None = None
        if transport is not None:
            self.client = httpx.AsyncClient(transport=transport)

    def open(self) -> None:
        if self.client is None:
            self.client = httpx.AsyncClient()

    async def aclose(self) -> None:
        client = self.client
        if client is None:
            return
        if self.transport is None:
            self.client = None
        await client.aclose()

    async def execute(
        self,
        path: str,
        method: HttpMethod,
        timeout_ms: int,
        body: bytes | None = None,
        response_model: type[BaseModel] | None = None,
    ) -> RpcResponse:
        hosts = self.pool.snapshot()
        last_failure: Failure | None = None

        for index, host in enumerate(hosts):
            result = await run_attempt(
                host,
                path,
                method,
                timeout_ms,
                body,
                client=self.client,
                response_model=response_model,
            )
            if isinstance(result, Success):
                self.pool.promote(host)
                return RpcResponse(result.payload, host)

            last_failure = result
            logger.debug(
                "RPC %s %s failed on %s (%d/%d): %s",
                method.value,
                path,
                host,
                index + 1,
                len(hosts),
                result.cause,
            )
            if index < len(hosts) - 1 and self.jitter_ms > 0:
                await self.sleep(self.jitter_ms / 1000)

        logger.warning("RPC %s %s failed on all %d host(s)", method.value, path, len(hosts))
        raise AllHostsFailed(last_failure.cause, len(hosts)) from last_failure.cause  # type: ignore[union-attr]
