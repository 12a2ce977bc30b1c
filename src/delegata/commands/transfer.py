"""
Transfer command - batched native transfers through the delegated EOA.

All transfers go into one ``execute(BATCH_DEFAULT, batch)`` transaction
sent from the EOA to itself; either every transfer happens or none does.
The EOA must already be authorized (see ``delegata authorize``).
"""

from __future__ import annotations

from typing import Optional

import click

from ..chain.execution import ExecutionMode, encode_batch, native_transfers
from ..chain.rpc import JsonRpcClient
from ..chain.tx import TransactionSender
from ..config import load_config
from ..errors import DelegataError
from ..utils import bytes_to_hex, parse_ether
from .common import abort, network_option, prompt_account, rpc_url_option


@click.command("batch-transfer")
@click.argument("amount")
@click.argument("destinations", nargs=-1, required=True)
@network_option
@rpc_url_option
@click.option("--wait/--no-wait", default=False, help="Wait for the receipt")
@click.pass_context
def batch_transfer(
    ctx: click.Context,
    amount: str,
    destinations: tuple[str, ...],
    network: str,
    rpc_url: Optional[str],
    wait: bool,
) -> None:
    """Send AMOUNT ether to every destination in one transaction."""
    try:
        calls = native_transfers(destinations, parse_ether(amount))
        config = load_config(network, rpc_url)
        account = prompt_account(ctx)
        click.echo(f"EOA address: {account.address}")

        click.echo(f"Calldata: {bytes_to_hex(encode_batch(calls, ExecutionMode.BATCH_DEFAULT))}")

        sender = TransactionSender(JsonRpcClient.from_config(config), account, config.chain_id)
        result = sender.send_batch(calls, ExecutionMode.BATCH_DEFAULT, wait=wait)
    except DelegataError as exc:
        abort(exc)

    click.echo(f"Transaction hash: {result['tx_hash']}")
    if wait and result.get("status") != 1:
        click.secho("FAILED: Transaction reverted", fg="red")
        ctx.exit(1)
