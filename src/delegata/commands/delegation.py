"""
Delegation commands - EIP-7702 code delegation of the EOA.

- authorize: install the delegate contract's code at the EOA
- revoke:    clear any delegation (authorization to the zero address)
- get-code:  show an account's code and its delegate, if any
"""

from __future__ import annotations

from typing import Optional

import click

from ..chain.rpc import JsonRpcClient
from ..chain.tx import TransactionSender
from ..config import load_config
from ..errors import DelegataError
from ..keys.authorization import AuthorizationIntent, parse_delegation
from ..utils import bytes_to_hex, checksum
from .common import abort, network_option, prompt_account, rpc_url_option


def _send_authorization(
    ctx: click.Context,
    intent: AuthorizationIntent,
    network: str,
    rpc_url: Optional[str],
    wait: bool,
) -> None:
    try:
        config = load_config(network, rpc_url)
        account = prompt_account(ctx)
        click.echo(f"EOA address: {account.address}")

        sender = TransactionSender(JsonRpcClient.from_config(config), account, config.chain_id)
        tx, authorization = sender.authorization_tx(intent, config.delegate_address)
        click.echo(f"Nonce: {tx['nonce']}")
        click.echo(f"Authorization: {authorization.to_dict()}")

        result = sender.sign_and_send(tx, wait=wait)
    except DelegataError as exc:
        abort(exc)

    click.echo(f"Transaction hash: {result['tx_hash']}")
    if wait:
        if result.get("status") == 1:
            click.secho("SUCCESS: Transaction confirmed!", fg="green")
        else:
            click.secho("FAILED: Transaction reverted", fg="red")
            ctx.exit(1)


@click.command()
@network_option
@rpc_url_option
@click.option("--wait/--no-wait", default=False, help="Wait for the receipt")
@click.pass_context
def authorize(ctx: click.Context, network: str, rpc_url: Optional[str], wait: bool) -> None:
    """Authorize the EIP-7702 delegate contract for the EOA."""
    _send_authorization(ctx, AuthorizationIntent.AUTHORIZE, network, rpc_url, wait)


@click.command()
@network_option
@rpc_url_option
@click.option("--wait/--no-wait", default=False, help="Wait for the receipt")
@click.pass_context
def revoke(ctx: click.Context, network: str, rpc_url: Optional[str], wait: bool) -> None:
    """Revoke the EOA's EIP-7702 delegation."""
    _send_authorization(ctx, AuthorizationIntent.REVOKE, network, rpc_url, wait)


@click.command("get-code")
@click.argument("account")
@network_option
@rpc_url_option
def get_code(account: str, network: str, rpc_url: Optional[str]) -> None:
    """Get the code of an account."""
    try:
        config = load_config(network, rpc_url)
        code = JsonRpcClient.from_config(config).get_code(checksum(account))
    except DelegataError as exc:
        abort(exc)

    click.echo(f"Byte code: {bytes_to_hex(code)}")
    delegate = parse_delegation(code)
    if delegate:
        click.echo(f"Delegated to: {delegate}")
