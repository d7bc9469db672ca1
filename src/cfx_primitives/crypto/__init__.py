"""
Cryptographic primitives used by the transaction types.
"""
