import asyncio
import json
import time

import httpx

from archivas_rpc.attempt import Failure, Success, build_url, run_attempt
from archivas_rpc.enums import ErrorKind, HttpMethod
from archivas_rpc.errors import DecodeError, HttpStatusError, NetworkError, RpcTimeout
from archivas_rpc.models import ChainTip

from fakes import ClosingTransport

TIP = {"height": "10", "hash": "abc", "difficulty": "1"}


def attempt(handler, method=HttpMethod.GET, body=None, timeout_ms=1000, response_model=None):
    return asyncio.run(
        run_attempt(
            "http://seed",
            "/chainTip",
            method,
            timeout_ms,
            body,
            transport=httpx.MockTransport(handler),
            response_model=response_model,
        )
    )


def test_build_url_strips_trailing_slash():
    assert build_url("http://seed/", "/chainTip") == "http://seed/chainTip"
    assert build_url("http://seed", "/chainTip") == "http://seed/chainTip"


def test_success_returns_payload_and_host():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json=TIP)

    result = attempt(handler)
    assert result == Success(TIP, "http://seed")
    assert seen == {"url": "http://seed/chainTip", "content_type": "application/json"}


def test_post_sends_body():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    result = attempt(handler, HttpMethod.POST, body=b'{"amount": 1}')
    assert isinstance(result, Success)
    assert seen == {"method": "POST", "body": {"amount": 1}}


def test_non_2xx_is_http_error():
    result = attempt(lambda request: httpx.Response(503))
    assert isinstance(result, Failure)
    assert isinstance(result.cause, HttpStatusError)
    assert result.cause.status == 503
    assert result.cause.reason == "Service Unavailable"
    assert result.cause.kind == ErrorKind.HTTP_ERROR
    assert result.host == "http://seed"


def test_connection_refused_is_network_error():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    result = attempt(handler)
    assert isinstance(result.cause, NetworkError)
    assert isinstance(result.cause.cause, httpx.ConnectError)


def test_deadline_elapsed_is_timeout():
    async def handler(request):
        await asyncio.sleep(2)
        return httpx.Response(200, json=TIP)

    started = time.monotonic()
    result = attempt(handler, timeout_ms=50)
    elapsed = time.monotonic() - started
    assert isinstance(result.cause, RpcTimeout)
    assert not isinstance(result.cause, NetworkError)
    assert result.cause.timeout_ms == 50
    assert elapsed < 1


def test_transport_timeout_is_timeout():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    result = attempt(handler)
    assert isinstance(result.cause, RpcTimeout)


def test_invalid_json_is_decode_error():
    result = attempt(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    assert isinstance(result.cause, DecodeError)


def test_malformed_payload_passes_without_model():
    result = attempt(lambda request: httpx.Response(200, json={"height": 10}))
    assert result == Success({"height": 10}, "http://seed")


def test_malformed_payload_fails_with_model():
    result = attempt(lambda request: httpx.Response(200, json={"height": 10}), response_model=ChainTip)
    assert isinstance(result.cause, DecodeError)


def run_with(transport, timeout_ms=1000, client=None):
    return asyncio.run(
        run_attempt(
            "http://seed",
            "/chainTip",
            HttpMethod.GET,
            timeout_ms,
            client=client,
            transport=transport,
        )
    )


def test_attempt_client_closed_after_success():
    transport = ClosingTransport(lambda request: httpx.Response(200, json=TIP))
    assert isinstance(run_with(transport), Success)
    assert transport.closed


def test_attempt_client_closed_after_http_error():
    transport = ClosingTransport(lambda request: httpx.Response(500))
    assert isinstance(run_with(transport).cause, HttpStatusError)
    assert transport.closed


def test_attempt_client_closed_and_request_cancelled_on_timeout():
    cancelled = []

    async def handler(request):
        try:
            await asyncio.sleep(2)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise
        return httpx.Response(200, json=TIP)

    transport = ClosingTransport(handler)
    assert isinstance(run_with(transport, timeout_ms=50).cause, RpcTimeout)
    assert cancelled == [True]
    assert transport.closed


def test_shared_client_is_left_open():
    transport = ClosingTransport(lambda request: httpx.Response(200, json=TIP))

    async def main():
        client = httpx.AsyncClient(transport=transport)
        result = await run_attempt("http://seed", "/chainTip", HttpMethod.GET, 1000, client=client)
        assert not client.is_closed
        await client.aclose()
        return result

    assert isinstance(asyncio.run(main()), Success)
    assert transport.closed


def test_redirects_are_followed():
    def handler(request):
        if request.url.path == "/chainTip":
            return httpx.Response(301, headers={"Location": "http://seed/v1/chainTip"})
        return httpx.Response(200, json=TIP)

    assert attempt(handler) == Success(TIP, "http://seed")
