"""
Chain - On-chain interaction layer for Delegata.

Provides the JSON-RPC transport, the fixed ABI signature table, Multicall3
batched reads, ERC-7579 batch encoding and transaction sending.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
