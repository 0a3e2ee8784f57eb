"""FeliCa Lite-S terminal.

Translates the message vocabulary of the app layer into LiteSSession
calls and turns LiteSError exceptions into results.
"""

from __future__ import annotations

import logging

from felicalite.core.base import Terminal, handles
from felicalite.core.lite_s.messages import (
    AuthenticateMessage,
    AuthenticateResult,
    GetDataMessage,
    GetDataResult,
    ReadMessage,
    ReadResult,
    WriteMessage,
    WriteResult,
)
from felicalite.core.lite_s.session import LiteSSession
from felicalite.exceptions import LiteSError, MacMismatchError

lg = logging.getLogger(__name__)


class LiteSTerminal(Terminal):
    """Terminal driving one LiteSSession."""

    def __init__(self, session: LiteSSession) -> None:
        self._session = session

    @property
    def session(self) -> LiteSSession:
        return self._session

    @handles(AuthenticateMessage)
    def _authenticate(self, message: AuthenticateMessage) -> AuthenticateResult:
        try:
            self._session.authenticate()
        except LiteSError as exc:
            return AuthenticateResult(
                authenticated=False,
                card_id=self._session.card_id,
                ckv=self._session.ckv,
                error=str(exc),
            )
        return AuthenticateResult(
            authenticated=self._session.authenticated,
            card_id=self._session.card_id,
            ckv=self._session.ckv,
        )

    @handles(ReadMessage)
    def _read(self, message: ReadMessage) -> ReadResult:
        try:
            if message.mac:
                blocks = self._session.read_with_mac(message.addresses)
                return ReadResult(blocks=blocks, mac_verified=True)
            return ReadResult(blocks=self._session.read(message.addresses))
        except MacMismatchError as exc:
            return ReadResult(blocks=exc.blocks, mac_verified=False, error=str(exc))
        except (LiteSError, ValueError) as exc:
            return ReadResult(error=str(exc))

    @handles(WriteMessage)
    def _write(self, message: WriteMessage) -> WriteResult:
        try:
            if message.mac:
                self._session.write_with_mac(message.block)
            else:
                self._session.write([message.block])
        except LiteSError as exc:
            return WriteResult(success=False, error=str(exc))
        return WriteResult(success=True)

    @handles(GetDataMessage)
    def _get_data(self, message: GetDataMessage) -> GetDataResult:
        try:
            return GetDataResult(data=self._session.get_data(message.data_type))
        except LiteSError as exc:
            return GetDataResult(data=None, error=str(exc))
