"""Helpers shared by the command modules."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from eth_account.signers.local import LocalAccount

from ..errors import DelegataError
from ..keys.keystore import load_account, resolve_keystore


def abort(exc: DelegataError) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


def keystore_path(ctx: click.Context) -> Optional[Path]:
    return (ctx.obj or {}).get("keystore")


def prompt_account(ctx: click.Context) -> LocalAccount:
    """Resolve the keystore, ask for its password and decrypt it."""
    path = resolve_keystore(keystore_path(ctx))
    password = click.prompt("Password", hide_input=True)
    return load_account(path, password)


def rpc_url_option(func):
    return click.option(
        "--rpc-url",
        default=None,
        help="Override the network's RPC endpoint",
    )(func)


def network_option(func):
    return click.option(
        "--network",
        envvar="DELEGATA_NETWORK",
        default="sepolia",
        show_default=True,
        help="Network to send to (ethereum, bsc, polygon, sepolia)",
    )(func)
