"""
Account commands - keystore management.

- import-private-key: encrypt a private key into a new keystore file
- derive-private-key: decrypt the keystore and print the private key
- whoami:             show the keystore address without decrypting
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from eth_account import Account

from ..errors import DelegataError
from ..keys.keystore import decrypt_private_key, import_private_key, keystore_address, resolve_keystore
from .common import abort, keystore_path


@click.command("import-private-key")
@click.option(
    "--keystore-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to write the keystore file to",
)
def import_private_key_cmd(keystore_dir: Optional[Path]) -> None:
    """Import a private key into the keystore."""
    secret = click.prompt("Private key", hide_input=True)
    password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
    try:
        path = import_private_key(
            secret.strip(),
            password,
            keystore_dir.expanduser() if keystore_dir else None,
        )
        address = keystore_address(path)
    except DelegataError as exc:
        abort(exc)

    click.echo(f"EOA address: {address}")
    click.echo(f"Keystore: {path}")


@click.command("derive-private-key")
@click.pass_context
def derive_private_key_cmd(ctx: click.Context) -> None:
    """Export the private key from the keystore."""
    try:
        path = resolve_keystore(keystore_path(ctx))
        password = click.prompt("Password", hide_input=True)
        private_key = decrypt_private_key(path, password)
    except DelegataError as exc:
        abort(exc)

    click.echo(f"EOA address: {Account.from_key(private_key).address}")
    click.echo(f"Private key: {private_key}")


@click.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show the keystore address."""
    try:
        address = keystore_address(resolve_keystore(keystore_path(ctx)))
    except DelegataError as exc:
        click.echo("No keystore found.")
        click.echo("Run 'delegata import-private-key' to create one.")
        abort(exc)
    click.echo(f"Address: {address}")
