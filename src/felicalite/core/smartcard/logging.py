from __future__ import annotations

import logging

# Raw frames on the wire.
TRACE = 15
# One line per card command with its status word.
PROTOCOL = 18
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(PROTOCOL, "PROTOCOL")

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def configure(verbose: bool = False) -> None:
    """Set up root logging: TRACE shows raw frames, PROTOCOL shows commands."""
    logging.basicConfig(level=TRACE if verbose else PROTOCOL, format=LOG_FORMAT)


_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"


def format_sw(sw1: int, sw2: int) -> str:
    """Status word colored by outcome: success, no response, anything else."""
    if sw1 == 0x90 and sw2 == 0x00:
        color = _GREEN
    elif sw1 == 0x64 and sw2 == 0x01:
        color = _YELLOW
    else:
        color = _RED
    return f"{color}{sw1:02X} {sw2:02X}{_RESET}"
