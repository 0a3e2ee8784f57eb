"""Master key lookup by card key version (CKV)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from felicalite.core.lite_s.keys import MASTER_KEY_LEN

CKV_LEN = 2


class MasterKeyLookup(Protocol):
    """Returns the 24-byte master key for a 2-byte CKV, or None if unknown."""

    def lookup(self, ckv: bytes) -> bytes | None: ...


class StaticKeyLookup:
    """MasterKeyLookup backed by an in-memory CKV -> master key mapping."""

    def __init__(self, keys: Mapping[bytes, bytes]) -> None:
        self._keys: dict[bytes, bytes] = {}
        for ckv, key in keys.items():
            self.add(ckv, key)

    def add(self, ckv: bytes, key: bytes) -> None:
        if len(ckv) != CKV_LEN:
            raise ValueError(f"CKV must be {CKV_LEN} bytes, got {len(ckv)}")
        if len(key) != MASTER_KEY_LEN:
            raise ValueError(f"master key must be {MASTER_KEY_LEN} bytes, got {len(key)}")
        self._keys[bytes(ckv)] = bytes(key)

    def lookup(self, ckv: bytes) -> bytes | None:
        return self._keys.get(bytes(ckv))

    def __len__(self) -> int:
        return len(self._keys)


def parse_master_key(text: str) -> bytes:
    """Parse a master key given as 24 ASCII characters or 48 hex digits."""
    if len(text) == 2 * MASTER_KEY_LEN:
        try:
            return bytes.fromhex(text)
        except ValueError:
            pass
    key = text.encode("ascii")
    if len(key) != MASTER_KEY_LEN:
        raise ValueError(
            f"master key must be {MASTER_KEY_LEN} characters or "
            f"{2 * MASTER_KEY_LEN} hex digits, got {len(text)} characters"
        )
    return key
