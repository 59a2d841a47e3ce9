from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Union

import httpx
from pydantic import BaseModel, ValidationError

from archivas_rpc.enums import HttpMethod
from archivas_rpc.errors import DecodeError, HttpStatusError, NetworkError, RpcError, RpcTimeout

HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class Success:
    payload: Any
    host: str


@dataclass(frozen=True)
class Failure:
    cause: RpcError
    host: str


AttemptResult = Union[Success, Failure]


def build_url(host: str, path: str) -> str:
    return f"{host.rstrip('/')}{path}"


async def run_attempt(
    host: str,
    path: str,
    method: HttpMethod,
    timeout_ms: int,
    body: bytes | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    response_model: type[BaseModel] | None = None,
) -> AttemptResult:
    """Make exactly one request to ``host`` and classify the outcome.

    The whole exchange, connect through JSON decode, is bounded by
    ``timeout_ms``. A shared ``client`` is used as is and left open for other
    calls; without one, a client over ``transport`` is opened for this
    attempt only and closed on success, failure and cancellation alike.
    """
    timeout = timeout_ms / 1000
    try:
        payload = await asyncio.wait_for(
            _send(host, path, method, timeout_ms, body, client, transport, response_model),
            timeout,
        )
    except asyncio.TimeoutError:
        return Failure(RpcTimeout(timeout_ms, host), host)
    except RpcError as exc:
        return Failure(exc, host)
    return Success(payload, host)


async def _send(
    host: str,
    path: str,
    method: HttpMethod,
    timeout_ms: int,
    body: bytes | None,
    client: httpx.AsyncClient | None,
    transport: httpx.AsyncBaseTransport | None,
    response_model: type[BaseModel] | None,
) -> Any:
    if client is None:
        async with httpx.AsyncClient(transport=transport) as owned:
            response = await _request(owned, host, path, method, timeout_ms, body)
    else:
        response = await _request(client, host, path, method, timeout_ms, body)

    if not response.is_success:
        raise HttpStatusError(response.status_code, response.reason_phrase, host)

    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON from {host}: {exc}", host) from exc

    if response_model is not None:
        try:
            response_model.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Unexpected {response_model.__name__} payload from {host}: {exc.error_count()} error(s)",
                host,
            ) from exc
    return payload


async def _request(
    client: httpx.AsyncClient,
    host: str,
    path: str,
    method: HttpMethod,
    timeout_ms: int,
    body: bytes | None,
) -> httpx.Response:
    try:
        return await client.request(
            method.value,
            build_url(host, path),
            content=body,
            headers=HEADERS,
            timeout=timeout_ms / 1000,
            follow_redirects=True,
        )
    except httpx.TimeoutException as exc:
        raise RpcTimeout(timeout_ms, host) from exc
    except httpx.DecodingError as exc:
        raise DecodeError(f"Could not decode response from {host}: {exc}", host) from exc
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        raise NetworkError(exc, host) from exc
