from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from archivas_rpc.enums import HttpMethod
from archivas_rpc.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_READ_TIMEOUT_MS = 3000
DEFAULT_WRITE_TIMEOUT_MS = 5000
DEFAULT_JITTER_MS = 150


class RpcSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    base_url: str | None = Field(None, alias="RPC_BASE_URL")
    base_urls: str = Field("", alias="RPC_BASE_URLS")
    timeout_ms: int | None = Field(None, alias="RPC_TIMEOUT_MS")
    jitter_ms: int = Field(DEFAULT_JITTER_MS, alias="RPC_JITTER_MS")
    strict: bool = Field(False, alias="RPC_STRICT")

    def host_list(self) -> list[str] | None:
        if not self.base_urls.strip():
            return None
        return [url.strip() for url in self.base_urls.split(",")]


def load_settings() -> RpcSettings:
    return RpcSettings()


def resolve_hosts(base_urls: list[str] | None = None, base_url: str | None = None) -> list[str]:
    """Pick the host list from the explicit list or the legacy single URL.

    ``base_urls`` wins whenever it is given; empty entries are dropped but
    duplicates are kept in order.
    """
    if base_urls is not None:
        if base_url:
            logger.warning("Ignoring deprecated base_url %s because base_urls was given", base_url)
        hosts = [url for url in base_urls if url]
    elif base_url:
        hosts = [base_url]
    else:
        hosts = []
    if not hosts:
        raise ConfigError("Rpc requires base_url or base_urls")
    return hosts


def validate_timeout(timeout_ms: int | None) -> int | None:
    if timeout_ms is not None and timeout_ms <= 0:
        raise ConfigError(f"timeout_ms must be positive, got {timeout_ms}")
    return timeout_ms


def validate_jitter(jitter_ms: int) -> int:
    if jitter_ms < 0:
        raise ConfigError(f"jitter_ms must not be negative, got {jitter_ms}")
    return jitter_ms


def default_timeout_ms(method: HttpMethod) -> int:
    if method == HttpMethod.POST:
        return DEFAULT_WRITE_TIMEOUT_MS
    return DEFAULT_READ_TIMEOUT_MS
