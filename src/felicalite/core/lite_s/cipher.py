"""Triple-DES block cipher used by the Lite-S key and MAC computations."""

from __future__ import annotations

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives.ciphers import Cipher, modes

from felicalite.core.lite_s.byteops import BLOCK_SIZE, reverse


def expand_key(key_2k: bytes) -> bytes:
    """Expand a 16-byte card/session key into a 24-byte 3DES key.

    The key is reversed first, then laid out as (K2, K1, K2) of the
    reversed value.
    """
    if len(key_2k) != 16:
        raise ValueError(f"expected 16-byte key, got {len(key_2k)}")
    rev = reverse(key_2k)
    return rev[8:] + rev[:8] + rev[8:]


class BlockCipher:
    """Single-block 3DES-EDE encryption in ECB mode.

    A 24-byte key is used as is (master keys); a 16-byte key goes through
    expand_key() first (CK, SK). Chaining is left to the caller.
    """

    def __init__(self, key: bytes) -> None:
        if len(key) == 16:
            key = expand_key(key)
        elif len(key) != 24:
            raise ValueError(f"expected 16- or 24-byte key, got {len(key)}")
        self._cipher = Cipher(TripleDES(key), modes.ECB())

    def encrypt_block(self, block: bytes) -> bytes:
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"expected {BLOCK_SIZE}-byte block, got {len(block)}")
        enc = self._cipher.encryptor()
        return enc.update(block) + enc.finalize()


def encrypt_block(key: bytes, block: bytes) -> bytes:
    """One-shot 3DES-ECB encryption of a single 8-byte block."""
    return BlockCipher(key).encrypt_block(block)
