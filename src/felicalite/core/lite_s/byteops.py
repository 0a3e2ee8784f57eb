"""Byte-level helpers shared by key derivation and MAC computation.

The card works on little-endian blocks while the cipher works big-endian,
so most values are reversed on their way in and out of the cipher.
"""

from __future__ import annotations

BLOCK_SIZE = 8

# Reduction constant for doubling in GF(2^64).
_R64 = 0x1B


def reverse(buf: bytes) -> bytes:
    """Return *buf* with its byte order reversed."""
    return bytes(buf[::-1])


def xor(a: bytes, b: bytes) -> bytes:
    """Element-wise XOR of two equal-length buffers."""
    if len(a) != len(b):
        raise ValueError(f"xor length mismatch: {len(a)} != {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))


def _check_block(block: bytes) -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"expected {BLOCK_SIZE}-byte block, got {len(block)}")


def double_gf(block: bytes) -> bytes:
    """Multiply an 8-byte big-endian value by x in GF(2^64) (CMAC subkey step)."""
    _check_block(block)
    value = int.from_bytes(block, "big") << 1
    if block[0] & 0x80:
        value ^= _R64
    return (value & 0xFFFFFFFFFFFFFFFF).to_bytes(BLOCK_SIZE, "big")


def double_gf_card(block: bytes) -> bytes:
    """Doubling step as used for card key diversification.

    The carry from byte i+1 is ANDed into byte i instead of ORed, which
    clears bytes 0..6. Cards personalised with this derivation expect the
    same result, so it must not be replaced by double_gf().
    """
    _check_block(block)
    out = bytearray(BLOCK_SIZE)
    for i in range(BLOCK_SIZE - 1):
        out[i] = ((block[i] << 1) & 0xFF) & (block[i + 1] >> 7)
    out[-1] = (block[-1] << 1) & 0xFF
    if block[0] & 0x80:
        out[-1] ^= _R64
    return bytes(out)
