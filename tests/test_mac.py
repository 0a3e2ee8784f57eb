#!/usr/bin/env python3

import unittest

from felicalite.core.lite_s import constants as c
from felicalite.core.lite_s.constants import Block
from felicalite.core.lite_s.mac import (
    compute_mac,
    compute_read_mac,
    compute_write_mac,
    mac_matches,
    read_mac_chunks,
    write_mac_chunks,
)

CARD_ID = bytes.fromhex("0112233445566778899aabbccddeef00")
CHALLENGE = bytes.fromhex("f0e1d2c3b4a5968778695a4b3c2d1e0f")
SESSION_KEY = bytes.fromhex("a7bf3d28fe8f48ae6b6a059c031dec64")


class TestReadMacInput(unittest.TestCase):

    def test_descriptor_and_payload(self):
        blocks = [Block(c.ID, CARD_ID), Block(c.CKV), Block(c.MAC_A)]
        chunks = read_mac_chunks(blocks)
        self.assertEqual(chunks[0], bytes.fromhex("820086009100ffff"))
        self.assertEqual(chunks[1:], [CARD_ID[:8], CARD_ID[8:], bytes(8), bytes(8)])

    def test_four_blocks_fill_descriptor(self):
        blocks = [Block(c.S_PAD0), Block(c.S_PAD1), Block(c.S_PAD2), Block(c.MAC_A)]
        self.assertEqual(read_mac_chunks(blocks)[0], bytes.fromhex("0000010002009100"))
        self.assertEqual(len(read_mac_chunks(blocks)), 7)

    def test_too_many_blocks(self):
        with self.assertRaises(ValueError):
            read_mac_chunks([Block(a) for a in range(5)])


class TestWriteMacInput(unittest.TestCase):

    def test_descriptor(self):
        block = Block(c.S_PAD3, bytes(range(16)))
        chunks = write_mac_chunks(b"\x05\x00\x00", block)
        self.assertEqual(chunks[0], bytes.fromhex("0500000003009100"))
        self.assertEqual(chunks[1:], [bytes(range(8)), bytes(range(8, 16))])

    def test_wcnt_length(self):
        with self.assertRaises(ValueError):
            write_mac_chunks(b"\x05\x00", Block(c.S_PAD0))


class TestMac(unittest.TestCase):

    def test_read_mac_golden(self):
        blocks = [Block(c.ID, CARD_ID), Block(c.CKV), Block(c.MAC_A)]
        self.assertEqual(
            compute_read_mac(SESSION_KEY, CHALLENGE, blocks),
            bytes.fromhex("5774a7e4ffe7a2e6"),
        )

    def test_wcnt_read_mac_golden(self):
        blocks = [Block(c.WCNT, b"\x05" + bytes(15)), Block(c.MAC_A)]
        self.assertEqual(
            compute_read_mac(SESSION_KEY, CHALLENGE, blocks),
            bytes.fromhex("508291607c44bbec"),
        )

    def test_write_mac_golden(self):
        block = Block(c.S_PAD0, bytes(range(16)))
        self.assertEqual(
            compute_write_mac(SESSION_KEY, CHALLENGE, b"\x05\x00\x00", block),
            bytes.fromhex("8e325df584107f49"),
        )

    def test_mac_block_content_ignored(self):
        a = [Block(c.ID, CARD_ID), Block(c.MAC_A)]
        b = [Block(c.ID, CARD_ID), Block(c.MAC_A, b"\xaa" * 16)]
        self.assertEqual(
            compute_read_mac(SESSION_KEY, CHALLENGE, a),
            compute_read_mac(SESSION_KEY, CHALLENGE, b),
        )

    def test_single_bit_flips(self):
        chunks = [bytes.fromhex("820086009100ffff"), CARD_ID[:8], CARD_ID[8:]]
        reference = compute_mac(SESSION_KEY, CHALLENGE, chunks)
        for i in range(len(chunks)):
            for bit in range(64):
                flipped = bytearray(chunks[i])
                flipped[bit // 8] ^= 1 << (bit % 8)
                altered = chunks[:i] + [bytes(flipped)] + chunks[i + 1:]
                self.assertNotEqual(
                    compute_mac(SESSION_KEY, CHALLENGE, altered), reference,
                    f"chunk {i} bit {bit}",
                )

    def test_depends_on_challenge_head_only(self):
        chunks = [bytes(8)]
        other_tail = CHALLENGE[:8] + bytes(8)
        self.assertEqual(
            compute_mac(SESSION_KEY, CHALLENGE, chunks),
            compute_mac(SESSION_KEY, other_tail, chunks),
        )

    def test_chunk_length(self):
        with self.assertRaises(ValueError):
            compute_mac(SESSION_KEY, CHALLENGE, [bytes(16)])

    def test_mac_matches(self):
        mac = bytes.fromhex("5774a7e4ffe7a2e6")
        self.assertTrue(mac_matches(mac, mac + bytes(8)))
        self.assertFalse(mac_matches(mac, bytes(16)))


if __name__ == "__main__":
    unittest.main()
