"""
Configuration - network endpoints and contract addresses.

Values come from (highest priority first): explicit arguments / CLI options,
the process environment, ``~/.delegata/.env``, then the defaults below.
A ChainConfig is built once per invocation and handed to every component
that talks to the chain.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError


# Default config directory
DELEGATA_DIR = Path(os.environ.get("DELEGATA_HOME", Path.home() / ".delegata"))
DELEGATA_ENV = DELEGATA_DIR / ".env"

MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"
# MetaMask EIP7702StatelessDeleGator
METAMASK_DELEGATOR_ADDRESS = "0x63c0c19a282a1B52b07dD5a65b58948A07DAE32B"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_TIMEOUT = 30.0
DEFAULT_WRITE_NETWORK = "sepolia"


@dataclass(frozen=True)
class Network:
    name: str
    rpc_url: str
    chain_id: int


NETWORKS: dict[str, Network] = {
    "ethereum": Network("ethereum", "https://rpc.therpc.io/ethereum", 1),
    "bsc": Network("bsc", "https://bsc-dataseed.binance.org", 56),
    "polygon": Network("polygon", "https://polygon-rpc.com", 137),
    "sepolia": Network("sepolia", "https://sepolia.drpc.org", 11155111),
}


@dataclass(frozen=True)
class ChainConfig:
    """
    Everything a component needs to reach one chain.

    Attributes:
        network: Network name (key of NETWORKS)
        rpc_url: JSON-RPC endpoint
        chain_id: EIP-155 chain id
        multicall_address: Multicall3 deployment
        delegate_address: Contract installed by ``authorize``
        timeout: HTTP timeout in seconds
    """
    network: str
    rpc_url: str
    chain_id: int
    multicall_address: str = MULTICALL3_ADDRESS
    delegate_address: str = METAMASK_DELEGATOR_ADDRESS
    timeout: float = DEFAULT_TIMEOUT


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ``~/.delegata/.env`` without overriding the real environment."""
    env_path = env_path or DELEGATA_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def resolve_network(name: str) -> Network:
    """
    Look up a network by name.

    Raises:
        ConfigError: If the network is not supported
    """
    network = NETWORKS.get(name.lower())
    if network is None:
        raise ConfigError(f"Unsupported network: {name}")
    return network


def load_config(network: str, rpc_url: Optional[str] = None) -> ChainConfig:
    """
    Build the ChainConfig for one invocation.

    Args:
        network: Network name (ethereum, bsc, polygon, sepolia)
        rpc_url: Explicit RPC endpoint, overrides everything else

    Returns:
        ChainConfig
    """
    load_env()
    net = resolve_network(network)

    env_rpc = os.environ.get(f"DELEGATA_RPC_{net.name.upper()}")
    timeout_raw = os.environ.get("DELEGATA_RPC_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ConfigError(f"Invalid DELEGATA_RPC_TIMEOUT: {timeout_raw!r}")

    return ChainConfig(
        network=net.name,
        rpc_url=rpc_url or env_rpc or net.rpc_url,
        chain_id=net.chain_id,
        multicall_address=os.environ.get("DELEGATA_MULTICALL_ADDRESS", MULTICALL3_ADDRESS),
        delegate_address=os.environ.get("DELEGATA_DELEGATE_ADDRESS", METAMASK_DELEGATOR_ADDRESS),
        timeout=timeout,
    )


def keystore_dir() -> Path:
    """Directory holding ``UTC--`` keystore files."""
    load_env()
    configured = os.environ.get("DELEGATA_KEYSTORE_DIR")
    if configured:
        return Path(configured).expanduser()
    return DELEGATA_DIR / "keystore"
