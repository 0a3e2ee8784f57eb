"""Card key diversification and session key derivation."""

from __future__ import annotations

from felicalite.core.lite_s.byteops import BLOCK_SIZE, double_gf_card, reverse, xor
from felicalite.core.lite_s.cipher import BlockCipher

MASTER_KEY_LEN = 24
CARD_KEY_LEN = 16
CARD_ID_LEN = 16
CHALLENGE_LEN = 16

_ZERO_BLOCK = b"\x00" * BLOCK_SIZE


def derive_card_key(master_key: bytes, card_id: bytes) -> bytes:
    """Diversify the 16-byte card key (CK) from a master key and the card ID.

    CMAC-like construction over the two halves of the ID:
      L  = double(E(0))
      T1 = E(M1)
      T2 = E(E(M1 ^ 80..) ^ M2 ^ L)
    """
    if len(master_key) != MASTER_KEY_LEN:
        raise ValueError(f"master key must be {MASTER_KEY_LEN} bytes, got {len(master_key)}")
    if len(card_id) != CARD_ID_LEN:
        raise ValueError(f"card ID must be {CARD_ID_LEN} bytes, got {len(card_id)}")

    cipher = BlockCipher(master_key)
    subkey = double_gf_card(cipher.encrypt_block(_ZERO_BLOCK))

    m1 = card_id[:BLOCK_SIZE]
    m2 = xor(card_id[BLOCK_SIZE:], subkey)

    t1 = cipher.encrypt_block(m1)
    c2 = cipher.encrypt_block(bytes([m1[0] ^ 0x80]) + m1[1:])
    t2 = cipher.encrypt_block(xor(c2, m2))
    return t1 + t2


def derive_session_key(card_key: bytes, challenge: bytes) -> bytes:
    """Derive the 16-byte session key (SK) from CK and the random challenge.

    Two-block CBC encryption of the (half-wise reversed) challenge under the
    expanded card key; each output half is reversed back.
    """
    if len(card_key) != CARD_KEY_LEN:
        raise ValueError(f"card key must be {CARD_KEY_LEN} bytes, got {len(card_key)}")
    if len(challenge) != CHALLENGE_LEN:
        raise ValueError(f"challenge must be {CHALLENGE_LEN} bytes, got {len(challenge)}")

    cipher = BlockCipher(card_key)
    e1 = cipher.encrypt_block(reverse(challenge[:BLOCK_SIZE]))
    e2 = cipher.encrypt_block(xor(e1, reverse(challenge[BLOCK_SIZE:])))
    return reverse(e1) + reverse(e2)
