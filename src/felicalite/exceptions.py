"""Errors raised by the FeliCa Lite-S stack."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from felicalite.core.lite_s.constants import Block


class LiteSError(Exception):
    """Base class for all FeliCa Lite-S errors."""


class TransportError(LiteSError):
    """The transport failed to carry a command or returned garbage."""


class NoResponseError(LiteSError):
    """The reader reported that the card did not answer (SW 64 01)."""

    def __init__(self, message: str = "no response from card") -> None:
        super().__init__(message)


class UnknownStatusError(LiteSError):
    """The reader returned a status word other than success or no-response."""

    def __init__(self, raw: bytes) -> None:
        super().__init__(f"unknown status: {raw.hex()}")
        self.raw = raw


class ServiceSelectError(LiteSError):
    """Selecting the read-write or read-only service failed."""


class MasterKeyNotFoundError(LiteSError):
    """No master key is known for the card's key version."""

    def __init__(self, ckv: bytes) -> None:
        super().__init__(f"no master key for CKV {ckv.hex()}")
        self.ckv = ckv


class MacMismatchError(LiteSError):
    """MAC_A computed over the blocks does not match the card's.

    The blocks that were read are kept on the exception so the caller can
    still decide what to do with the (untrusted) data.
    """

    def __init__(
        self, blocks: list[Block], expected: bytes, received: bytes
    ) -> None:
        super().__init__(
            f"MAC_A mismatch: expected {expected.hex()}, card sent {received.hex()}"
        )
        self.blocks = blocks
        self.expected = expected
        self.received = received


class SessionStateError(LiteSError):
    """An operation was attempted in a session state that does not allow it."""
