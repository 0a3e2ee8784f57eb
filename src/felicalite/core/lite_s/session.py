"""Authenticated FeliCa Lite-S card session.

Authentication is one-way (card to reader): the reader writes a fresh
random challenge RC, reads ID, CKV and MAC_A, derives CK from the master
key and ID, SK from CK and RC, and checks MAC_A. Once authenticated,
reads can be MAC-verified and writes MAC-protected.

    UNAUTHENTICATED -> SERVICE_SELECTED -> CHALLENGE_ISSUED -> IDENTITY_READ
        -> AUTHENTICATED | AUTHENTICATION_FAILED

A session belongs to one card and one caller; it is not thread-safe.
"""

from __future__ import annotations

import enum
import logging
import secrets
from collections.abc import Callable, Sequence

from felicalite.core.lite_s import constants as c
from felicalite.core.lite_s.constants import Block
from felicalite.core.lite_s.keys import CHALLENGE_LEN, derive_card_key, derive_session_key
from felicalite.core.lite_s.keystore import CKV_LEN, MasterKeyLookup
from felicalite.core.lite_s.mac import (
    MAC_LEN,
    MAX_READ_BLOCKS,
    WCNT_LEN,
    compute_read_mac,
    compute_write_mac,
    mac_matches,
)
from felicalite.core.lite_s.protocol import LiteSProtocol, Transmit
from felicalite.core.smartcard.logging import PROTOCOL
from felicalite.exceptions import (
    LiteSError,
    MacMismatchError,
    MasterKeyNotFoundError,
    NoResponseError,
    ServiceSelectError,
    SessionStateError,
    UnknownStatusError,
)

lg = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    SERVICE_SELECTED = "service selected"
    CHALLENGE_ISSUED = "challenge issued"
    IDENTITY_READ = "identity read"
    AUTHENTICATED = "authenticated"
    AUTHENTICATION_FAILED = "authentication failed"


class LiteSSession:
    """Stateful session with one FeliCa Lite-S card.

    *key_lookup* maps the card's CKV to a master key. Without one,
    authenticate() stops after reading the card ID (ID-only use).
    *challenge_source* returns n random bytes and must be a CSPRNG.
    """

    def __init__(
        self,
        transmit: Transmit,
        key_lookup: MasterKeyLookup | None = None,
        *,
        service: int = c.SERVICE_RW,
        challenge_source: Callable[[int], bytes] = secrets.token_bytes,
    ) -> None:
        self._proto = LiteSProtocol(transmit)
        self._key_lookup = key_lookup
        self._service = service
        self._challenge_source = challenge_source
        self._state = SessionState.UNAUTHENTICATED
        self._challenge: bytes | None = None
        self._card_id: bytes | None = None
        self._ckv: bytes | None = None
        self._card_key: bytes | None = None
        self._session_key: bytes | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    @property
    def protocol(self) -> LiteSProtocol:
        return self._proto

    @property
    def card_id(self) -> bytes | None:
        return self._card_id

    @property
    def ckv(self) -> bytes | None:
        return self._ckv

    @property
    def challenge(self) -> bytes | None:
        return self._challenge

    @property
    def card_key(self) -> bytes | None:
        return self._card_key

    @property
    def session_key(self) -> bytes | None:
        return self._session_key

    def _enter(self, state: SessionState) -> None:
        lg.debug("session: %s -> %s", self._state.value, state.value)
        self._state = state

    def _reset(self) -> None:
        self._state = SessionState.UNAUTHENTICATED
        self._challenge = None
        self._card_id = None
        self._ckv = None
        self._card_key = None
        self._session_key = None

    def _new_challenge(self, previous: bytes | None) -> bytes:
        rc = bytes(self._challenge_source(CHALLENGE_LEN))
        if len(rc) != CHALLENGE_LEN:
            raise ValueError(f"challenge source returned {len(rc)} bytes")
        if rc == previous:
            raise LiteSError("challenge source repeated the previous challenge")
        return rc

    # -- authentication --

    def authenticate(self) -> None:
        """Run the challenge/identity/MAC_A handshake.

        Every call starts over with a new challenge. Raises
        ServiceSelectError if the reader rejects the service,
        MasterKeyNotFoundError (ID and CKV stay available) or
        MacMismatchError on failure. TransportError and status errors of
        the later steps propagate unchanged.
        """
        previous = self._challenge
        self._reset()

        try:
            self._proto.select_service(self._service)
        except (NoResponseError, UnknownStatusError) as exc:
            raise ServiceSelectError(
                f"cannot select service {self._service:04X}: {exc}"
            ) from exc
        self._enter(SessionState.SERVICE_SELECTED)

        rc = self._new_challenge(previous)
        self._challenge = rc
        self._proto.write([Block(c.RC, rc)])
        self._enter(SessionState.CHALLENGE_ISSUED)

        blocks = self._proto.read([c.ID, c.CKV, c.MAC_A])
        self._card_id = blocks[0].data
        self._ckv = blocks[1].data[:CKV_LEN]
        self._enter(SessionState.IDENTITY_READ)
        lg.log(
            PROTOCOL, "card ID %s CKV %s",
            self._card_id.hex().upper(), self._ckv.hex().upper(),
        )

        if self._key_lookup is None:
            lg.debug("no master key lookup, skipping MAC_A check")
            return

        master_key = self._key_lookup.lookup(self._ckv)
        if master_key is None:
            raise MasterKeyNotFoundError(self._ckv)

        self._card_key = derive_card_key(master_key, self._card_id)
        self._session_key = derive_session_key(self._card_key, rc)

        expected = compute_read_mac(self._session_key, rc, blocks)
        if not mac_matches(expected, blocks[2].data):
            self._enter(SessionState.AUTHENTICATION_FAILED)
            raise MacMismatchError(blocks, expected, blocks[2].data[:MAC_LEN])
        self._enter(SessionState.AUTHENTICATED)
        lg.log(PROTOCOL, "MAC_A verified")

    def _require_authenticated(self, operation: str) -> None:
        if self._state is not SessionState.AUTHENTICATED:
            raise SessionStateError(
                f"{operation} needs an authenticated session ({self._state.value})"
            )

    # -- block access --

    def read(self, addresses: Sequence[int]) -> list[Block]:
        """Plain read of up to four blocks."""
        if len(addresses) > MAX_READ_BLOCKS:
            raise ValueError(f"at most {MAX_READ_BLOCKS} blocks per read")
        return self._proto.read(list(addresses))

    def write(self, blocks: Sequence[Block]) -> None:
        """Plain write, no MAC."""
        self._proto.write(list(blocks))

    def read_with_mac(self, addresses: Sequence[int]) -> list[Block]:
        """Read 1-3 blocks plus MAC_A and verify the MAC.

        Returns the blocks including the trailing MAC_A block. On mismatch
        MacMismatchError is raised with the blocks attached.
        """
        self._require_authenticated("MAC read")
        if not 1 <= len(addresses) <= MAX_READ_BLOCKS - 1:
            raise ValueError(f"MAC read takes 1 to {MAX_READ_BLOCKS - 1} addresses")
        blocks = self._proto.read([*addresses, c.MAC_A])
        expected = compute_read_mac(self._session_key, self._challenge, blocks)
        received = blocks[-1].data
        if not mac_matches(expected, received):
            names = ",".join(c.block_name(a) for a in addresses)
            lg.warning("MAC_A mismatch reading %s", names)
            raise MacMismatchError(blocks, expected, received[:MAC_LEN])
        return blocks

    def write_with_mac(self, block: Block) -> None:
        """Write one block together with a MAC_A bound to the current WCNT."""
        self._require_authenticated("MAC write")
        wcnt = self.read_with_mac([c.WCNT])[0].data[:WCNT_LEN]
        lg.debug("WCNT %s", wcnt.hex().upper())
        mac = compute_write_mac(self._session_key, self._challenge, wcnt, block)
        mac_block = Block(c.MAC_A, mac.ljust(c.BLOCK_DATA_LEN, b"\x00"))
        self._proto.write([block, mac_block])

    # -- reader pass-through --

    def get_data(self, data_type: int) -> bytes:
        """Reader GET DATA (UID, card type, ...)."""
        return self._proto.get_data(data_type)

    def command(self, command: bytes) -> bytes:
        """Send a raw FeliCa command; returns the raw reader response."""
        return self._proto.send_command(command).to_bytes()
