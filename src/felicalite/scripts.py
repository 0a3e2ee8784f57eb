# filename : scripts.py
# created  : 10/18/2026


import logging
import sys

import click

from felicalite.core.lite_s import constants as c
from felicalite.core.lite_s.constants import Block
from felicalite.core.lite_s.keystore import CKV_LEN, parse_master_key
from felicalite.core.lite_s.messages import (
    AuthenticateMessage,
    GetDataMessage,
    ReadMessage,
    WriteMessage,
)
from felicalite.core.smartcard.logging import configure

lg = logging.getLogger(__name__)

_ADDRESSES = {name: addr for addr, name in c.BLOCK_NAMES.items()}


def _parse_address(value: str) -> int:
    """Block address by name (WCNT, S_PAD3, ...) or hex (0x90, 90)."""
    name = value.upper()
    if name in _ADDRESSES:
        return _ADDRESSES[name]
    try:
        address = int(value, 16)
    except ValueError:
        raise click.BadParameter(f"unknown block {value!r}") from None
    if not 0 <= address <= 0xFF:
        raise click.BadParameter(f"block address out of range: {value}")
    return address


def _parse_hex(value: str, length: int, what: str) -> bytes:
    try:
        data = bytes.fromhex(value)
    except ValueError:
        raise click.BadParameter(f"{what} is not hex: {value!r}") from None
    if len(data) != length:
        raise click.BadParameter(f"{what} must be {length} bytes, got {len(data)}")
    return data


def _open(ctx: click.Context):
    from felicalite.app.session import session

    opts = ctx.obj
    return session(
        reader=opts["reader"],
        master_key=opts["master_key"],
        ckv=opts["ckv"],
        read_only=opts["read_only"],
    )


def _authenticate(terminal) -> bool:
    result = terminal.send(AuthenticateMessage())
    if result.card_id is not None:
        lg.info("ID:  %s", result.card_id.hex(" ").upper())
        lg.info("CKV: %s", result.ckv.hex(" ").upper())
    if not result.authenticated:
        lg.error("authentication failed: %s", result.error or "no master key")
        return False
    return True


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw frames).")
@click.option("-r", "--reader", type=int, default=None, help="Reader index (default: first with a card).")
@click.option(
    "-k",
    "--master-key",
    envvar="FELICALITE_MASTER_KEY",
    default=None,
    help="Master key: 24 characters or 48 hex digits.",
)
@click.option("--ckv", default="0000", show_default=True, help="Key version the master key belongs to (hex).")
@click.option("--read-only", is_flag=True, help="Select the read-only service.")
@click.pass_context
def felicalite(ctx, verbose, reader, master_key, ckv, read_only):
    """FeliCa Lite-S authentication and block access."""
    configure(verbose)
    key = None
    if master_key is not None:
        try:
            key = parse_master_key(master_key)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="'--master-key'") from None
    ctx.obj = {
        "reader": reader,
        "master_key": key,
        "ckv": _parse_hex(ckv, CKV_LEN, "CKV"),
        "read_only": read_only,
    }


@felicalite.command()
@click.pass_context
def info(ctx):
    """Show card type, UID and card ID reported by the reader."""
    with _open(ctx) as terminal:
        for label, data_type in [
            ("card type", c.DATA_CARD_TYPE),
            ("UID", c.DATA_UID),
            ("card ID", c.DATA_ID),
        ]:
            result = terminal.send(GetDataMessage(data_type))
            if result.error:
                lg.warning("%s: %s", label, result.error)
            else:
                lg.info("%s: %s", label, result.data.hex(" ").upper())


@felicalite.command()
@click.pass_context
def check(ctx):
    """Authenticate the card against the master key (card OK / NG)."""
    if ctx.obj["master_key"] is None:
        raise click.UsageError("check needs --master-key")
    with _open(ctx) as terminal:
        card_type = terminal.send(GetDataMessage(c.DATA_CARD_TYPE))
        if card_type.error or not card_type.data or card_type.data[0] != c.CARD_TYPE_FELICA:
            lg.error("card NG: not a FeliCa card")
            sys.exit(1)
        if not _authenticate(terminal):
            lg.error("card NG")
            sys.exit(1)
        lg.info("card OK")


@felicalite.command()
@click.argument("addresses", nargs=-1, required=True)
@click.option("--mac", is_flag=True, help="Verify MAC_A (1-3 blocks, needs --master-key).")
@click.pass_context
def read(ctx, addresses, mac):
    """Read blocks by name or hex address."""
    parsed = [_parse_address(a) for a in addresses]
    with _open(ctx) as terminal:
        if mac and not _authenticate(terminal):
            sys.exit(1)
        result = terminal.send(ReadMessage(parsed, mac=mac))
        for block in result.blocks:
            click.echo(f"{c.block_name(block.address):>9s}: {block.data.hex(' ').upper()}")
        if result.error:
            lg.error("read failed: %s", result.error)
            sys.exit(1)


@felicalite.command()
@click.argument("address")
@click.argument("data")
@click.option("--mac", is_flag=True, help="Protect the write with MAC_A (needs --master-key).")
@click.pass_context
def write(ctx, address, data, mac):
    """Write 16 bytes of hex DATA to the block at ADDRESS."""
    block = Block(_parse_address(address), _parse_hex(data, c.BLOCK_DATA_LEN, "DATA"))
    with _open(ctx) as terminal:
        if mac and not _authenticate(terminal):
            sys.exit(1)
        result = terminal.send(WriteMessage(block, mac=mac))
        if not result.success:
            lg.error("write failed: %s", result.error)
            sys.exit(1)
        lg.info("wrote %s", block)
