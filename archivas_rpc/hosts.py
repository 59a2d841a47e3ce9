from __future__ import annotations

import logging

from archivas_rpc.errors import ConfigError

logger = logging.getLogger(__name__)


class HostPool:
    """Ordered set of candidate base URLs, most recently successful first.

    The pool is shared by every in-flight call of one client and is not
    locked: concurrent promotions are last-write-wins. The set of hosts never
    changes, only their order.
    """

    def __init__(self, hosts: list[str]) -> None:
        if not hosts:
            raise ConfigError("HostPool requires at least one host")
        self._hosts = list(hosts)

    def __len__(self) -> int:
        return len(self._hosts)

    def __iter__(self):
        return iter(self.snapshot())

    @property
    def preferred(self) -> str:
        return self._hosts[0]

    def snapshot(self) -> list[str]:
        return list(self._hosts)

    def promote(self, host: str) -> None:
        try:
            index = self._hosts.index(host)
        except ValueError:
            return
        if index == 0:
            return
        self._hosts.insert(0, self._hosts.pop(index))
        logger.debug("Promoted %s from position %d to front", host, index)
