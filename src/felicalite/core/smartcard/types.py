from __future__ import annotations

import enum
from dataclasses import dataclass

from felicalite.exceptions import TransportError

STATUS_LEN = 2


class Status(enum.Enum):
    """Decoded reader status trailer."""

    SUCCESS = "success"
    NO_RESPONSE = "no response"
    UNKNOWN = "unknown"


@dataclass
class APDU:
    """PC/SC pseudo-APDU sent to the reader (short form only)."""

    cla: int
    ins: int
    p1: int
    p2: int
    data: bytes = b""
    le: int | None = None

    def to_bytes(self) -> bytes:
        if len(self.data) > 255:
            raise ValueError(f"command data too long: {len(self.data)} bytes")
        buf = bytearray([self.cla, self.ins, self.p1, self.p2])
        if self.data:
            buf.append(len(self.data))
            buf.extend(self.data)
        if self.le is not None:
            buf.append(0x00 if self.le == 256 else self.le)
        return bytes(buf)

    def __repr__(self) -> str:
        return self.to_bytes().hex(" ").upper()


@dataclass
class Response:
    """Reader response: payload followed by SW1 SW2."""

    data: bytes
    sw1: int
    sw2: int

    @classmethod
    def from_bytes(cls, raw: bytes) -> Response:
        """Split a raw transport response into payload and status word."""
        if len(raw) < STATUS_LEN:
            raise TransportError(f"response too short: {bytes(raw).hex()}")
        return cls(data=bytes(raw[:-STATUS_LEN]), sw1=raw[-2], sw2=raw[-1])

    @property
    def sw(self) -> int:
        return (self.sw1 << 8) | self.sw2

    @property
    def status(self) -> Status:
        """Classify the status word; the only place SW values are interpreted."""
        if self.sw == 0x9000:
            return Status.SUCCESS
        if self.sw == 0x6401:
            return Status.NO_RESPONSE
        return Status.UNKNOWN

    @property
    def success(self) -> bool:
        return self.status is Status.SUCCESS

    def to_bytes(self) -> bytes:
        return self.data + bytes([self.sw1, self.sw2])

    def __repr__(self) -> str:
        sw = f"SW={self.sw:04X}"
        if self.data:
            return f"{self.data.hex(' ').upper()} {sw}"
        return sw
