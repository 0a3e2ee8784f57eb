"""FeliCa Lite-S reader commands.

Each method that maps to a single pseudo-APDU uses the ``send_`` prefix and
returns the raw Response. The block-level helpers (select_service, read,
write, get_data) check the status and raise on failure.

The protocol class is standalone: it receives a ``transmit(bytes) -> bytes``
callable and has no other dependency on the transport.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from felicalite.core.lite_s.constants import BLOCK_DATA_LEN, Block, block_name
from felicalite.core.smartcard import APDU, Response, Status
from felicalite.core.smartcard.logging import PROTOCOL, format_sw
from felicalite.exceptions import NoResponseError, UnknownStatusError

lg = logging.getLogger(__name__)

_CLA = 0xFF
_INS_SELECT = 0xA4
_INS_READ = 0xB0
_INS_GET_DATA = 0xCA
_INS_WRITE = 0xD6
_INS_RAW = 0xFE

# Block list element: 2-byte format, access mode 0 (Lite-S has one service).
_BLOCK_LIST_PREFIX = 0x80

Transmit = Callable[[bytes], bytes]


def check_status(response: Response) -> Response:
    """Raise the error matching the response status; return it on success."""
    status = response.status
    if status is Status.SUCCESS:
        return response
    if status is Status.NO_RESPONSE:
        raise NoResponseError()
    raise UnknownStatusError(response.to_bytes())


def _block_list(addresses: Sequence[int]) -> bytes:
    buf = bytearray()
    for address in addresses:
        buf.extend([_BLOCK_LIST_PREFIX, address])
    return bytes(buf)


def _labels(addresses: Sequence[int]) -> str:
    return ",".join(block_name(a) for a in addresses)


class LiteSProtocol:
    """Pseudo-APDU operations for FeliCa Lite-S through a PC/SC reader."""

    def __init__(self, transmit: Transmit) -> None:
        self._transmit = transmit

    def _send(self, label: str, apdu: APDU) -> Response:
        resp = Response.from_bytes(self._transmit(apdu.to_bytes()))
        lg.log(PROTOCOL, "%s %s", label, format_sw(resp.sw1, resp.sw2))
        return resp

    # -- commands --

    def send_select_service(self, service: int) -> Response:
        """SELECT FILE by service code (FF A4 00 01, service LE16)."""
        apdu = APDU(
            cla=_CLA, ins=_INS_SELECT, p1=0x00, p2=0x01,
            data=service.to_bytes(2, "little"),
        )
        return self._send(f"SELECT SERVICE {service:04X}", apdu)

    def send_read(self, addresses: Sequence[int]) -> Response:
        """READ BINARY of n blocks (FF B0 80 n, block list, Le=00)."""
        apdu = APDU(
            cla=_CLA, ins=_INS_READ, p1=0x80, p2=len(addresses),
            data=_block_list(addresses), le=0x00,
        )
        return self._send(f"READ {_labels(addresses)}", apdu)

    def send_write(self, blocks: Sequence[Block]) -> Response:
        """UPDATE BINARY of n blocks (FF D6 80 n, block list || data, Le=00)."""
        addresses = [b.address for b in blocks]
        data = _block_list(addresses) + b"".join(b.data for b in blocks)
        apdu = APDU(
            cla=_CLA, ins=_INS_WRITE, p1=0x80, p2=len(blocks), data=data, le=0x00,
        )
        return self._send(f"WRITE {_labels(addresses)}", apdu)

    def send_get_data(self, data_type: int) -> Response:
        """GET DATA from the reader (FF CA type 00, Le=00)."""
        apdu = APDU(cla=_CLA, ins=_INS_GET_DATA, p1=data_type, p2=0x00, le=0x00)
        return self._send(f"GET DATA {data_type:02X}", apdu)

    def send_command(self, command: bytes) -> Response:
        """Pass a raw FeliCa command through the reader (FF FE 00 00)."""
        if not command:
            raise ValueError("empty FeliCa command")
        apdu = APDU(cla=_CLA, ins=_INS_RAW, p1=0x00, p2=0x00, data=command)
        return self._send(f"COMMAND {command[:1].hex().upper()}", apdu)

    # -- checked operations --

    def select_service(self, service: int) -> None:
        check_status(self.send_select_service(service))

    def read(self, addresses: Sequence[int]) -> list[Block]:
        """Read blocks without MAC; one Block per address, in order."""
        if not addresses:
            raise ValueError("no block addresses given")
        resp = check_status(self.send_read(addresses))
        expected = len(addresses) * BLOCK_DATA_LEN
        if len(resp.data) < expected:
            raise UnknownStatusError(resp.to_bytes())
        return [
            Block(address, resp.data[i * BLOCK_DATA_LEN : (i + 1) * BLOCK_DATA_LEN])
            for i, address in enumerate(addresses)
        ]

    def write(self, blocks: Sequence[Block]) -> None:
        if not blocks:
            raise ValueError("no blocks given")
        check_status(self.send_write(blocks))

    def get_data(self, data_type: int) -> bytes:
        return check_status(self.send_get_data(data_type)).data
