"""
Keys - Account material for Delegata.

- keystore:      V3 keystore files (import, decrypt, address lookup)
- authorization: EIP-7702 authorization tuples and delegation designators
"""
