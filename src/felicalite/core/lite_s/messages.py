"""FeliCa Lite-S terminal messages and results.

Each operation has a Message/Result pair; both are plain dataclasses.
Results carry an ``error`` string instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from felicalite.core.base import Message, Result
from felicalite.core.lite_s.constants import Block


@dataclass
class AuthenticateMessage(Message):
    """Write a fresh challenge, read ID/CKV/MAC_A and verify MAC_A."""


@dataclass
class AuthenticateResult(Result):
    authenticated: bool
    card_id: bytes | None = None
    ckv: bytes | None = None
    error: str | None = None


@dataclass
class ReadMessage(Message):
    """Read blocks, optionally with MAC_A verification (1-3 addresses)."""

    addresses: list[int]
    mac: bool = False


@dataclass
class ReadResult(Result):
    blocks: list[Block] = field(default_factory=list)
    # None for plain reads, False when MAC_A did not match.
    mac_verified: bool | None = None
    error: str | None = None


@dataclass
class WriteMessage(Message):
    """Write one block, optionally MAC-protected."""

    block: Block
    mac: bool = False


@dataclass
class WriteResult(Result):
    success: bool
    error: str | None = None


@dataclass
class GetDataMessage(Message):
    """Reader GET DATA (UID, card type, ...)."""

    data_type: int


@dataclass
class GetDataResult(Result):
    data: bytes | None
    error: str | None = None
