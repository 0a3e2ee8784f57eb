from felicalite.core.lite_s.cipher import BlockCipher, expand_key
from felicalite.core.lite_s.constants import SERVICE_RO, SERVICE_RW, Block
from felicalite.core.lite_s.keys import derive_card_key, derive_session_key
from felicalite.core.lite_s.keystore import MasterKeyLookup, StaticKeyLookup
from felicalite.core.lite_s.mac import compute_mac, compute_read_mac, compute_write_mac
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
from felicalite.core.lite_s.protocol import LiteSProtocol
from felicalite.core.lite_s.session import LiteSSession, SessionState
from felicalite.core.lite_s.terminal import LiteSTerminal

__all__ = [
    "AuthenticateMessage",
    "AuthenticateResult",
    "Block",
    "BlockCipher",
    "GetDataMessage",
    "GetDataResult",
    "LiteSProtocol",
    "LiteSSession",
    "LiteSTerminal",
    "MasterKeyLookup",
    "ReadMessage",
    "ReadResult",
    "SERVICE_RO",
    "SERVICE_RW",
    "SessionState",
    "StaticKeyLookup",
    "WriteMessage",
    "WriteResult",
    "compute_mac",
    "compute_read_mac",
    "compute_write_mac",
    "derive_card_key",
    "derive_session_key",
    "expand_key",
]
