from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.Exceptions import CardConnectionException, NoCardException
from smartcard.System import readers

from felicalite.core.smartcard.observer import LoggingCardObserver
from felicalite.exceptions import TransportError

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)


class Card:
    """pyscard connection exposing the byte-level transmit() transport.

    transmit() returns the reader response with the SW1 SW2 trailer
    appended, which is the shape the Lite-S protocol layer expects.
    """

    def __init__(self) -> None:
        self._connection: CardConnection | None = None
        self._observer = LoggingCardObserver()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @staticmethod
    def list_readers() -> list[Reader]:
        return readers()

    def connect(self, reader: Reader) -> None:
        connection = reader.createConnection()
        connection.addObserver(self._observer)
        try:
            connection.connect()
        except (CardConnectionException, NoCardException) as exc:
            connection.deleteObserver(self._observer)
            raise TransportError(f"cannot connect to {reader}: {exc}") from exc
        self._connection = connection

    def connect_first(self, index: int | None = None) -> None:
        """Connect to the reader at *index*, or the first one holding a card."""
        available = self.list_readers()
        if not available:
            raise TransportError("no readers found")
        if index is not None:
            if not 0 <= index < len(available):
                raise TransportError(f"no reader #{index} ({len(available)} found)")
            self.connect(available[index])
            lg.info("connected to %s", available[index])
            return
        for reader in available:
            try:
                self.connect(reader)
                lg.info("connected to %s", reader)
                return
            except TransportError:
                lg.debug("no card on %s", reader)
        raise TransportError("no card found on any reader")

    def disconnect(self) -> None:
        if self._connection is not None:
            self._connection.disconnect()
            self._connection.deleteObserver(self._observer)
            self._connection = None

    def get_atr(self) -> bytes:
        if self._connection is None:
            raise TransportError("not connected to a card")
        return bytes(self._connection.getATR())

    def transmit(self, command: bytes) -> bytes:
        if self._connection is None:
            raise TransportError("not connected to a card")
        try:
            data, sw1, sw2 = self._connection.transmit(list(command))
        except CardConnectionException as exc:
            raise TransportError(str(exc)) from exc
        return bytes(data) + bytes([sw1, sw2])
