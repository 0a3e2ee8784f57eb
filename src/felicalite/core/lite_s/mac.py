"""MAC_A computation over block reads and writes.

The MAC is a 3DES CBC-MAC under the expanded session key, with the first
half of the random challenge as IV. Every chunk goes in byte-reversed and
the final chaining value is reversed on the way out.

Read MAC input::

    [a0 00 a1 00 a2 00 a3 00]   addresses read, FF-padded, MAC_A included
    data(block 0)[0:8], data(block 0)[8:16], ...   up to MAC_A

Write MAC input::

    [w0 w1 w2 00 addr 00 91 00]   WCNT, target address, MAC_A address
    data[0:8], data[8:16]
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from felicalite.core.lite_s.byteops import BLOCK_SIZE, reverse, xor
from felicalite.core.lite_s.cipher import BlockCipher
from felicalite.core.lite_s.constants import MAC_A, Block
from felicalite.core.lite_s.keys import CHALLENGE_LEN

MAC_LEN = 8
WCNT_LEN = 3
# Address slots in the read MAC descriptor.
MAX_READ_BLOCKS = 4


def compute_mac(
    session_key: bytes, challenge: bytes, chunks: Iterable[bytes]
) -> bytes:
    """CBC-MAC the 8-byte *chunks* with SK, chaining from RC[0:8]."""
    if len(challenge) != CHALLENGE_LEN:
        raise ValueError(f"challenge must be {CHALLENGE_LEN} bytes, got {len(challenge)}")
    cipher = BlockCipher(session_key)
    chain = reverse(challenge[:BLOCK_SIZE])
    for chunk in chunks:
        if len(chunk) != BLOCK_SIZE:
            raise ValueError(f"MAC input chunk must be {BLOCK_SIZE} bytes, got {len(chunk)}")
        chain = cipher.encrypt_block(xor(chain, reverse(chunk)))
    return reverse(chain)


def _halves(data: bytes) -> list[bytes]:
    return [data[:BLOCK_SIZE], data[BLOCK_SIZE:]]


def read_mac_chunks(blocks: Sequence[Block]) -> list[bytes]:
    """Build the read MAC input for *blocks* as returned by the card."""
    if len(blocks) > MAX_READ_BLOCKS:
        raise ValueError(f"read MAC covers at most {MAX_READ_BLOCKS} blocks, got {len(blocks)}")
    descriptor = bytearray(b"\xff" * BLOCK_SIZE)
    for i, block in enumerate(blocks):
        descriptor[2 * i] = block.address
        descriptor[2 * i + 1] = 0x00
    chunks = [bytes(descriptor)]
    for block in blocks:
        if block.address == MAC_A:
            break
        chunks.extend(_halves(block.data))
    return chunks


def write_mac_chunks(wcnt: bytes, block: Block) -> list[bytes]:
    """Build the write MAC input binding *block* to the current WCNT."""
    if len(wcnt) != WCNT_LEN:
        raise ValueError(f"WCNT must be {WCNT_LEN} bytes, got {len(wcnt)}")
    descriptor = bytes([wcnt[0], wcnt[1], wcnt[2], 0x00, block.address, 0x00, MAC_A, 0x00])
    return [descriptor, *_halves(block.data)]


def compute_read_mac(
    session_key: bytes, challenge: bytes, blocks: Sequence[Block]
) -> bytes:
    return compute_mac(session_key, challenge, read_mac_chunks(blocks))


def compute_write_mac(
    session_key: bytes, challenge: bytes, wcnt: bytes, block: Block
) -> bytes:
    return compute_mac(session_key, challenge, write_mac_chunks(wcnt, block))


def mac_matches(expected: bytes, received: bytes) -> bool:
    """Compare an 8-byte MAC against the first 8 bytes the card returned.

    Plain comparison, not constant time: the peer is a card on a local
    reader, not a remote party able to time responses.
    """
    return expected == bytes(received[:MAC_LEN])
