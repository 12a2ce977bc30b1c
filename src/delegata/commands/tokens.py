"""
Token commands - batched reads through Multicall3.

- fetch-balances:      native balances of many accounts in one call
- erc20:               ERC20 metadata
- erc721:              ERC721 metadata, optionally one token's URI / owner
- fetch-erc721-tokens: balanceOf -> tokenOfOwnerByIndex -> tokenURI fan-out
"""

from __future__ import annotations

from typing import Any, Optional

import click

from ..chain.abi import Signature
from ..chain.multicall import (
    AggregateReader,
    CallDescriptor,
    balances_batch,
    owned_token_ids_step,
    present_values,
    token_info_batch,
    token_uri_step,
)
from ..chain.rpc import JsonRpcClient
from ..config import load_config
from ..errors import DelegataError
from ..utils import checksum, format_ether
from .common import abort, rpc_url_option


def _reader(network: str, rpc_url: Optional[str]) -> AggregateReader:
    config = load_config(network, rpc_url)
    return AggregateReader(JsonRpcClient.from_config(config), config.multicall_address)


def _show(value: Any) -> str:
    return "None" if value is None else str(value)


@click.command("fetch-balances")
@click.argument("network")
@click.argument("accounts", nargs=-1, required=True)
@rpc_url_option
def fetch_balances(network: str, accounts: tuple[str, ...], rpc_url: Optional[str]) -> None:
    """Fetch native balances of ACCOUNTS using multicall."""
    try:
        reader = _reader(network, rpc_url)
        results = reader.aggregate(balances_batch(reader.multicall_address, accounts))
    except DelegataError as exc:
        abort(exc)

    for account, result in zip(accounts, results):
        balance = format_ether(result.value) if result.present else None
        click.echo(f"{account} balance: {_show(balance)}")


@click.command()
@click.argument("network")
@click.argument("contract_address")
@rpc_url_option
def erc20(network: str, contract_address: str, rpc_url: Optional[str]) -> None:
    """Fetch ERC20 token info."""
    try:
        reader = _reader(network, rpc_url)
        name, symbol, decimals, total_supply = reader.aggregate(
            token_info_batch(
                contract_address,
                [Signature.NAME, Signature.SYMBOL, Signature.DECIMALS, Signature.TOTAL_SUPPLY],
            )
        )
    except DelegataError as exc:
        abort(exc)

    click.echo(f"Contract Name: {_show(name.value)}")
    click.echo(f"Contract Symbol: {_show(symbol.value)}")
    click.echo(f"Contract Decimals: {_show(decimals.value)}")
    click.echo(f"Total Supply: {_show(total_supply.value)}")


@click.command()
@click.argument("network")
@click.argument("contract_address")
@click.argument("token_id", required=False, type=int)
@rpc_url_option
def erc721(
    network: str,
    contract_address: str,
    token_id: Optional[int],
    rpc_url: Optional[str],
) -> None:
    """Fetch ERC721 token info."""
    try:
        descriptors = token_info_batch(
            contract_address, [Signature.NAME, Signature.SYMBOL, Signature.TOTAL_SUPPLY]
        )
        if token_id is not None:
            descriptors += [
                CallDescriptor(contract_address, Signature.TOKEN_URI, (token_id,)),
                CallDescriptor(contract_address, Signature.OWNER_OF, (token_id,)),
            ]
        results = _reader(network, rpc_url).aggregate(descriptors)
    except DelegataError as exc:
        abort(exc)

    click.echo(f"Contract Name: {_show(results[0].value)}")
    click.echo(f"Contract Symbol: {_show(results[1].value)}")
    click.echo(f"Total Supply: {_show(results[2].value)}")
    if token_id is not None:
        click.echo(f"Token URI of {token_id}: {_show(results[3].value)}")
        click.echo(f"Token Owner of {token_id}: {_show(results[4].value)}")


@click.command("fetch-erc721-tokens")
@click.argument("network")
@click.argument("owner_address")
@click.argument("contract_address")
@rpc_url_option
def fetch_erc721_tokens(
    network: str,
    owner_address: str,
    contract_address: str,
    rpc_url: Optional[str],
) -> None:
    """Fetch all ERC721 tokens of an owner via multicall."""
    try:
        owner = checksum(owner_address)
        token = checksum(contract_address)
        balance_phase, ids_phase, uris_phase = _reader(network, rpc_url).fan_out(
            [CallDescriptor(token, Signature.BALANCE_OF, (owner,))],
            owned_token_ids_step(token, owner),
            token_uri_step(token),
        )
    except DelegataError as exc:
        abort(exc)

    balance = balance_phase[0].value or 0
    click.echo(f"Owner {owner} has {balance} ERC721 tokens")

    token_ids = present_values(ids_phase)
    click.echo(f"Token IDs owned by {owner}: {[str(i) for i in token_ids]}")

    for token_id, result in zip(token_ids, uris_phase):
        click.echo(f"Token ID: {token_id}, Token URI: {_show(result.value)}")
