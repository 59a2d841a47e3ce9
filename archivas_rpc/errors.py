from __future__ import annotations

from archivas_rpc.enums import ErrorKind


class RpcError(Exception):
    kind: ErrorKind

    def __init__(self, message: str, host: str | None = None) -> None:
        super().__init__(message)
        self.host = host


class RpcTimeout(RpcError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int, host: str | None = None) -> None:
        super().__init__(f"Request timed out after {timeout_ms}ms", host)
        self.timeout_ms = timeout_ms


class HttpStatusError(RpcError):
    kind = ErrorKind.HTTP_ERROR

    def __init__(self, status: int, reason: str, host: str | None = None) -> None:
        super().__init__(f"HTTP {status}: {reason}", host)
        self.status = status
        self.reason = reason


class NetworkError(RpcError):
    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, cause: Exception, host: str | None = None) -> None:
        super().__init__(f"Network error: {str(cause) or type(cause).__name__}", host)
        self.cause = cause


class DecodeError(RpcError):
    kind = ErrorKind.DECODE_ERROR


class ConfigError(RpcError, ValueError):
    kind = ErrorKind.CONFIG_ERROR


class AllHostsFailed(RpcError):
    """Raised once every host in the pool has failed for a single call.

    Only the last observed failure is kept as ``last_cause``.
    """

    kind = ErrorKind.ALL_HOSTS_FAILED

    def __init__(self, last_cause: RpcError, attempts: int) -> None:
        super().__init__(f"All RPCs failed after {attempts} attempt(s): {last_cause}", last_cause.host)
        self.last_cause = last_cause
        self.attempts = attempts
