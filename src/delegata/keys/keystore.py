"""
Keystore - Web3 Secret Storage (V3) key files.

Keys live in the keystore directory (``~/.delegata/keystore`` by default)
as ``UTC--<timestamp>--<address>`` JSON files, encrypted with a password.
Encryption and decryption are done by eth-account.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import keystore_dir
from ..errors import ConfigError, KeystoreError
from ..utils import checksum

logger = logging.getLogger(__name__)

KEYSTORE_PREFIX = "UTC--"


def keystore_filename(address: str, now: Optional[datetime] = None) -> str:
    """Geth-style keystore file name for an address."""
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H-%M-%S.%f") + "Z"
    return f"{KEYSTORE_PREFIX}{stamp}--{address.lower().replace('0x', '')}"


def first_keystore_file(directory: Optional[Path] = None) -> Optional[Path]:
    """First ``UTC--`` file in the keystore directory, or None."""
    directory = directory or keystore_dir()
    if not directory.is_dir():
        return None
    candidates = sorted(
        p for p in directory.iterdir() if p.is_file() and p.name.startswith(KEYSTORE_PREFIX)
    )
    return candidates[0] if candidates else None


def resolve_keystore(path: Optional[Path]) -> Path:
    """
    Validate the keystore path given on the command line.

    Raises:
        ConfigError: If no path was given or the file does not exist
    """
    if path is None:
        raise ConfigError("No keystore file provided")
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise ConfigError(f"Keystore file {path} does not exist")
    return path


def _read_keystore(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        raise KeystoreError(f"Cannot read keystore {path}: {exc}") from exc


def import_private_key(
    private_key: str,
    password: str,
    directory: Optional[Path] = None,
) -> Path:
    """
    Encrypt a private key into a new keystore file.

    Args:
        private_key: Hex private key, with or without 0x prefix
        password: Keystore password
        directory: Target directory (default: configured keystore dir)

    Returns:
        Path to the written keystore file
    """
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    try:
        account = Account.from_key(private_key)
    except (ValueError, TypeError) as exc:
        raise KeystoreError(f"Invalid private key: {exc}") from exc

    keystore = Account.encrypt(account.key, password)

    directory = directory or keystore_dir()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / keystore_filename(account.address)
    path.write_text(json.dumps(keystore, indent=2), encoding="utf-8")

    # Set secure permissions on Unix
    if os.name != "nt":
        path.chmod(0o600)

    logger.info("wrote keystore for %s to %s", account.address, path)
    return path


def decrypt_private_key(path: Path, password: str) -> str:
    """
    Decrypt a keystore file.

    Returns:
        0x-prefixed hex private key

    Raises:
        KeystoreError: On unreadable file or wrong password
    """
    keystore = _read_keystore(path)
    try:
        key = Account.decrypt(keystore, password)
    except (ValueError, KeyError, TypeError) as exc:
        raise KeystoreError(f"Cannot decrypt keystore {path.name}: {exc}") from exc
    return "0x" + bytes(key).hex()


def load_account(path: Path, password: str) -> LocalAccount:
    """Decrypt a keystore into an eth-account LocalAccount for signing."""
    return Account.from_key(decrypt_private_key(path, password))


def keystore_address(path: Path) -> str:
    """Address recorded in a keystore file, without decrypting it."""
    keystore = _read_keystore(path)
    address = keystore.get("address")
    if not address:
        raise KeystoreError(f"Keystore {path.name} has no address field")
    return checksum(address if address.startswith("0x") else "0x" + address)
