"""FeliCa Lite-S memory map, service codes and reader GET DATA types."""

from __future__ import annotations

from dataclasses import dataclass

BLOCK_DATA_LEN = 16

# Service codes (little-endian on the wire)
SERVICE_RW = 0x0009
SERVICE_RO = 0x000B

# Block addresses
S_PAD0 = 0x00
S_PAD1 = 0x01
S_PAD2 = 0x02
S_PAD3 = 0x03
S_PAD4 = 0x04
S_PAD5 = 0x05
S_PAD6 = 0x06
S_PAD7 = 0x07
S_PAD8 = 0x08
S_PAD9 = 0x09
S_PAD10 = 0x0A
S_PAD11 = 0x0B
S_PAD12 = 0x0C
S_PAD13 = 0x0D
REG = 0x0E
RC = 0x80
MAC = 0x81
ID = 0x82
D_ID = 0x83
SER_C = 0x84
SYS_C = 0x85
CKV = 0x86
CK = 0x87
MC = 0x88
WCNT = 0x90
MAC_A = 0x91
STATE = 0x92
CRC_CHECK = 0xA0

BLOCK_NAMES: dict[int, str] = {
    **{addr: f"S_PAD{addr}" for addr in range(S_PAD0, S_PAD13 + 1)},
    REG: "REG",
    RC: "RC",
    MAC: "MAC",
    ID: "ID",
    D_ID: "D_ID",
    SER_C: "SER_C",
    SYS_C: "SYS_C",
    CKV: "CKV",
    CK: "CK",
    MC: "MC",
    WCNT: "WCNT",
    MAC_A: "MAC_A",
    STATE: "STATE",
    CRC_CHECK: "CRC_CHECK",
}

# Reader GET DATA (FF CA) types
DATA_UID = 0x00
DATA_ID = 0xF0
DATA_CARD_NAME = 0xF1
DATA_CARD_TYPE = 0xF3
DATA_CARD_TYPE_NAME = 0xF4

# Card type byte reported for FeliCa (GET DATA F3)
CARD_TYPE_FELICA = 0x04


def block_name(address: int) -> str:
    """Human-readable name of a block address, hex for unknown ones."""
    return BLOCK_NAMES.get(address, f"{address:02X}")


@dataclass(frozen=True)
class Block:
    """One 16-byte card block and its address."""

    address: int
    data: bytes = b"\x00" * BLOCK_DATA_LEN

    def __post_init__(self) -> None:
        if not 0 <= self.address <= 0xFF:
            raise ValueError(f"block address out of range: {self.address:#x}")
        if len(self.data) != BLOCK_DATA_LEN:
            raise ValueError(
                f"block {block_name(self.address)} needs {BLOCK_DATA_LEN} bytes, "
                f"got {len(self.data)}"
            )
        object.__setattr__(self, "data", bytes(self.data))

    def __repr__(self) -> str:
        return f"Block({block_name(self.address)}, {self.data.hex().upper()})"
