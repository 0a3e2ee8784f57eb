#!/usr/bin/env python3

import sys
import types
import unittest
from unittest import mock

from click.testing import CliRunner

from felicalite.core.lite_s import constants as c
from felicalite.scripts import felicalite

from fakes import MASTER_KEY, FakeLiteSCard, FakeReaderCard


class TestCli(unittest.TestCase):

    def setUp(self):
        self.card = FakeLiteSCard()
        self.reader = FakeReaderCard(self.card)
        # Replace the pyscard-backed card module so the app session is
        # re-imported against the fake reader; no PC/SC stack needed.
        card_module = types.ModuleType("felicalite.core.smartcard.card")
        card_module.Card = mock.Mock(return_value=self.reader)
        modules = {"felicalite.core.smartcard.card": card_module}
        patcher = mock.patch.dict(sys.modules, modules)
        patcher.start()
        self.addCleanup(patcher.stop)
        sys.modules.pop("felicalite.app.session", None)
        self.runner = CliRunner()

    def invoke(self, *args, **kwargs):
        return self.runner.invoke(felicalite, list(args), **kwargs)

    def test_info(self):
        result = self.invoke("info")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertFalse(self.reader.connected)

    def test_check_ok(self):
        result = self.invoke("-k", MASTER_KEY.decode(), "check")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(len(self.card.challenges), 1)

    def test_check_key_from_environment(self):
        result = self.invoke("check", env={"FELICALITE_MASTER_KEY": MASTER_KEY.hex()})
        self.assertEqual(result.exit_code, 0, result.output)

    def test_check_wrong_key(self):
        result = self.invoke("-k", "0" * 24, "check")
        self.assertEqual(result.exit_code, 1)

    def test_check_needs_key(self):
        result = self.invoke("check")
        self.assertEqual(result.exit_code, 2)
        self.assertEqual(self.card.commands, [])

    def test_check_not_felica(self):
        self.card.fail[0xCA] = b"\x6a\x81"
        result = self.invoke("-k", MASTER_KEY.decode(), "check")
        self.assertEqual(result.exit_code, 1)

    def test_bad_master_key(self):
        result = self.invoke("-k", "short", "info")
        self.assertEqual(result.exit_code, 2)

    def test_read(self):
        self.card.memory[c.S_PAD1] = bytes(range(16))
        result = self.invoke("read", "S_PAD1", "0x90")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("S_PAD1: 00 01 02 03", result.output)
        self.assertIn("WCNT: 05 00 00", result.output)

    def test_read_with_mac(self):
        result = self.invoke("-k", MASTER_KEY.decode(), "read", "--mac", "ID")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("MAC_A:", result.output)

    def test_read_unknown_block(self):
        result = self.invoke("read", "NOPE")
        self.assertEqual(result.exit_code, 2)

    def test_write_with_mac(self):
        result = self.invoke(
            "-k", MASTER_KEY.decode(), "write", "--mac", "S_PAD7", "ab" * 16,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.card.memory[c.S_PAD7], b"\xab" * 16)
        self.assertEqual(self.card.wcnt, 6)

    def test_write_short_data(self):
        result = self.invoke("write", "S_PAD7", "abcd")
        self.assertEqual(result.exit_code, 2)
        self.assertEqual(self.card.memory[c.S_PAD7], bytes(16))


if __name__ == "__main__":
    unittest.main()
