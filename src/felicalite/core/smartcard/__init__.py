from felicalite.core.smartcard.logging import PROTOCOL, TRACE
from felicalite.core.smartcard.types import APDU, Response, Status

# Card (pyscard) is imported from felicalite.core.smartcard.card directly so
# that the protocol code stays usable without a PC/SC stack.
__all__ = ["APDU", "PROTOCOL", "Response", "Status", "TRACE"]
