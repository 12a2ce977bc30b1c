"""
Commands - CLI command implementations for Delegata.

- account:    import-private-key, derive-private-key, whoami
- delegation: authorize, revoke, get-code
- transfer:   batch-transfer
- tokens:     fetch-balances, erc20, erc721, fetch-erc721-tokens
"""
