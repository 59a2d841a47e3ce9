from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

from archivas_rpc import models
from archivas_rpc.enums import HttpMethod


def json_body(value: Any) -> bytes:
    return json.dumps(value).encode("utf-8")


@dataclass(frozen=True)
class OperationSpec:
    path: str
    method: HttpMethod = HttpMethod.GET
    encode_body: Callable[[Any], bytes] | None = None
    response_model: type[BaseModel] | None = None

    def render(self, **params: Any) -> str:
        quoted = {key: quote(str(value), safe="") for key, value in params.items()}
        return self.path.format(**quoted)

    def encode(self, body: Any) -> bytes | None:
        if self.encode_body is None:
            return None
        return self.encode_body(body)


CHAIN_TIP = OperationSpec("/chainTip", response_model=models.ChainTip)
RECENT_BLOCKS = OperationSpec("/recentBlocks?count={count}", response_model=models.RecentBlocks)
BLOCK_BY_HEIGHT = OperationSpec("/block/{height}")
CHALLENGE = OperationSpec("/challenge", response_model=models.Challenge)
HEALTH = OperationSpec("/healthz", response_model=models.Health)
BALANCE = OperationSpec("/balance/{address}", response_model=models.Balance)
ACCOUNTS = OperationSpec("/accounts", response_model=models.Accounts)
SUBMIT_TX = OperationSpec("/submitTx", HttpMethod.POST, encode_body=json_body)

ACCOUNT = OperationSpec("/account/{address}", response_model=models.Account)
TRANSACTION = OperationSpec("/tx/{tx_hash}")
PEERS = OperationSpec("/peers", response_model=models.Peers)
GENESIS_HASH = OperationSpec("/genesisHash", response_model=models.GenesisHash)
VERSION = OperationSpec("/version")
ESTIMATE_FEE = OperationSpec("/estimateFee?bytes={size_bytes}", response_model=models.FeeEstimate)
