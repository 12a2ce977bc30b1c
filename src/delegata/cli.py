"""
Delegata CLI

Command-line interface for batched EOA operations: EIP-7702 delegated
execution for writes, Multicall3 aggregation for reads.

Commands:
  import-private-key  - Encrypt a private key into the keystore
  derive-private-key  - Print the keystore's private key
  whoami              - Show the keystore address
  authorize           - Delegate the EOA to the delegator contract
  revoke              - Remove the EOA's delegation
  batch-transfer      - Send ether to many addresses in one transaction
  get-code            - Show account code / delegation
  fetch-balances      - Native balances via multicall
  erc20               - ERC20 token info
  erc721              - ERC721 token info
  fetch-erc721-tokens - All ERC721 tokens of an owner via multicall
  info                - Show configuration
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from .config import NETWORKS, keystore_dir
from .errors import DelegataError
from .keys.keystore import first_keystore_file, keystore_address
from .log import setup_logging


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("D E L E G A T A", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(VERSION, "-V", "--version", prog_name="delegata")
@click.option(
    "-k",
    "--keystore",
    type=click.Path(dir_okay=False, path_type=Path),
    default=lambda: first_keystore_file(),
    help="Keystore file; default is the first 'UTC--' file in the keystore directory",
)
@click.option(
    "--log-level",
    envvar="DELEGATA_LOG_LEVEL",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (stderr)",
)
@click.option("-v", "--verbose", is_flag=True, help="Shortcut for --log-level DEBUG")
@click.pass_context
def cli(
    ctx: click.Context,
    keystore: Optional[Path],
    log_level: Optional[str],
    verbose: bool,
) -> None:
    """Delegata: batched EOA operations with EIP-7702 and Multicall3."""
    setup_logging("DEBUG" if verbose else log_level)
    ctx.ensure_object(dict)
    ctx.obj["keystore"] = keystore
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Commands ============

from .commands.account import derive_private_key_cmd, import_private_key_cmd, whoami
from .commands.delegation import authorize, get_code, revoke
from .commands.tokens import erc20, erc721, fetch_balances, fetch_erc721_tokens
from .commands.transfer import batch_transfer

cli.add_command(import_private_key_cmd)
cli.add_command(derive_private_key_cmd)
cli.add_command(whoami)
cli.add_command(authorize)
cli.add_command(revoke)
cli.add_command(batch_transfer)
cli.add_command(get_code)
cli.add_command(fetch_balances)
cli.add_command(erc20)
cli.add_command(erc721)
cli.add_command(fetch_erc721_tokens)


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show configuration."""
    _print_banner()

    click.secho("  Status ─────────────────────────────────", fg="cyan")
    click.echo()

    keystore = ctx.obj.get("keystore")
    try:
        address = keystore_address(keystore) if keystore else None
    except DelegataError:
        address = None
    if address:
        click.echo(
            click.style("  Address:     ", dim=True)
            + click.style(address, fg="bright_white")
        )
    else:
        click.echo(
            click.style("  Address:     ", dim=True)
            + click.style("no keystore", fg="yellow")
            + click.style("  (run: delegata import-private-key)", dim=True)
        )
    click.echo(click.style("  Keystores:   ", dim=True) + str(keystore_dir()))
    click.echo()

    click.secho("  Networks ───────────────────────────────", fg="cyan")
    click.echo()
    for network in NETWORKS.values():
        click.echo(
            click.style(f"  {network.name:<10}", fg="bright_white", bold=True)
            + click.style(f"  chain {network.chain_id:<9}", dim=True)
            + click.style(network.rpc_url, dim=True)
        )
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Delegata CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
