from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ChainTip(Payload):
    height: str
    hash: str
    difficulty: str


class RecentBlocks(Payload):
    blocks: list[Any]
    count: int


class Challenge(Payload):
    challenge: list[int]
    difficulty: int
    height: int


class Health(Payload):
    ok: bool
    height: int
    peers: int


class Balance(Payload):
    address: str
    balance: int
    nonce: int


class Accounts(Payload):
    count: int
    accounts: list[Any]


class Account(Payload):
    address: str
    balance: str
    nonce: str


class Peers(Payload):
    connected: list[str]
    known: list[str]


class GenesisHash(Payload):
    genesis_hash: str = Field(..., alias="genesisHash")


class FeeEstimate(Payload):
    fee: str
