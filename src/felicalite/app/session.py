"""Card session orchestrator.

Constructs the stack (Card -> LiteSSession -> LiteSTerminal), connects to
a reader, hands the terminal to the caller and disconnects afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from felicalite.core.lite_s import SERVICE_RO, SERVICE_RW, LiteSSession, LiteSTerminal
from felicalite.core.lite_s.keystore import StaticKeyLookup
from felicalite.core.smartcard.card import Card

lg = logging.getLogger(__name__)


@contextmanager
def session(
    reader: int | None = None,
    master_key: bytes | None = None,
    ckv: bytes = b"\x00\x00",
    read_only: bool = False,
) -> Iterator[LiteSTerminal]:
    """Open a FeliCa Lite-S session on the first (or *reader*-th) reader.

    *master_key* is bound to *ckv*; without it only ID reads and plain
    block access are possible.
    """
    lookup = StaticKeyLookup({ckv: master_key}) if master_key is not None else None
    card = Card()
    card.connect_first(reader)
    lg.debug("ATR %s", card.get_atr().hex(" ").upper())
    lite_s = LiteSSession(
        card.transmit,
        lookup,
        service=SERVICE_RO if read_only else SERVICE_RW,
    )
    terminal = LiteSTerminal(lite_s)
    try:
        yield terminal
    except Exception as exc:
        terminal.on_error(exc)
        raise
    finally:
        card.disconnect()
