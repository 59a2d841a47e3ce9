from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from archivas_rpc import operations
from archivas_rpc.config import (
    DEFAULT_JITTER_MS,
    RpcSettings,
    default_timeout_ms,
    resolve_hosts,
    validate_jitter,
    validate_timeout,
)
from archivas_rpc.enums import HttpMethod
from archivas_rpc.failover import FailoverDriver, RpcResponse
from archivas_rpc.hosts import HostPool
from archivas_rpc.operations import OperationSpec, json_body


@dataclass
class RpcClient:
    """Archivas node RPC client with ordered multi-host failover.

    ``timeout_ms`` applies to each attempt, not to the whole call. When it is
    left unset, reads use 3000ms and writes 5000ms.

    Use it as an async context manager, or call ``aclose``, to share one
    connection pool across calls. A ``transport`` given here is always
    shared and is closed by ``aclose``.
    """

    base_urls: list[str] | None = None
    base_url: str | None = None
    timeout_ms: int | None = None
    jitter_ms: int = DEFAULT_JITTER_MS
    strict: bool = False
    transport: httpx.AsyncBaseTransport | None = None
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    pool: HostPool = field(init=False, repr=False)
    driver: FailoverDriver = field(init=False, repr=False)

    def __post_init__(self) -> None:
        validate_timeout(self.timeout_ms)
        validate_jitter(self.jitter_ms)
        self.pool = HostPool(resolve_hosts(self.base_urls, self.base_url))
        self.driver = FailoverDriver(self.pool, self.jitter_ms, self.transport, self.sleep)

    @classmethod
    def from_settings(
        cls,
        settings: RpcSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RpcClient:
        return cls(
            base_urls=settings.host_list(),
            base_url=settings.base_url,
            timeout_ms=settings.timeout_ms,
            jitter_ms=settings.jitter_ms,
            strict=settings.strict,
            transport=transport,
        )

    async def __aenter__(self) -> RpcClient:
        self.driver.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.driver.aclose()

    @property
    def hosts(self) -> list[str]:
        return self.pool.snapshot()

    def _timeout_for(self, method: HttpMethod, timeout_ms: int | None) -> int:
        if timeout_ms is not None:
            return validate_timeout(timeout_ms)
        if self.timeout_ms is not None:
            return self.timeout_ms
        return default_timeout_ms(method)

    async def request(
        self,
        spec: OperationSpec,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
        timeout_ms: int | None = None,
    ) -> RpcResponse:
        return await self.driver.execute(
            spec.render(**(params or {})),
            spec.method,
            self._timeout_for(spec.method, timeout_ms),
            spec.encode(body),
            spec.response_model if self.strict else None,
        )

    async def get(self, path: str, timeout_ms: int | None = None) -> RpcResponse:
        return await self.driver.execute(
            path, HttpMethod.GET, self._timeout_for(HttpMethod.GET, timeout_ms)
        )

    async def post(self, path: str, body: Any, timeout_ms: int | None = None) -> RpcResponse:
        return await self.driver.execute(
            path,
            HttpMethod.POST,
            self._timeout_for(HttpMethod.POST, timeout_ms),
            json_body(body),
        )

    async def _call(self, spec: OperationSpec, body: Any = None, **params: Any) -> Any:
        response = await self.request(spec, params=params, body=body)
        return response.data

    # Chain
    async def get_chain_tip(self) -> dict[str, Any]:
        return await self._call(operations.CHAIN_TIP)

    async def get_recent_blocks(self, n: int = 20) -> dict[str, Any]:
        return await self._call(operations.RECENT_BLOCKS, count=n)

    async def get_block_by_height(self, height: int | str) -> Any:
        return await self._call(operations.BLOCK_BY_HEIGHT, height=height)

    async def get_genesis_hash(self) -> dict[str, Any]:
        return await self._call(operations.GENESIS_HASH)

    # Farming
    async def get_challenge(self) -> dict[str, Any]:
        return await self._call(operations.CHALLENGE)

    # Node
    async def get_health(self) -> dict[str, Any]:
        return await self._call(operations.HEALTH)

    async def get_peers(self) -> dict[str, Any]:
        return await self._call(operations.PEERS)

    async def get_version(self) -> Any:
        return await self._call(operations.VERSION)

    # Accounts
    async def get_balance(self, address: str) -> dict[str, Any]:
        return await self._call(operations.BALANCE, address=address)

    async def get_accounts(self) -> dict[str, Any]:
        return await self._call(operations.ACCOUNTS)

    async def get_account(self, address: str) -> dict[str, Any]:
        return await self._call(operations.ACCOUNT, address=address)

    # Transactions
    async def submit_tx(self, tx: Any) -> Any:
        return await self._call(operations.SUBMIT_TX, body=tx)

    async def get_transaction(self, tx_hash: str) -> Any:
        return await self._call(operations.TRANSACTION, tx_hash=tx_hash)

    async def estimate_fee(self, size_bytes: int) -> dict[str, Any]:
        return await self._call(operations.ESTIMATE_FEE, size_bytes=size_bytes)
