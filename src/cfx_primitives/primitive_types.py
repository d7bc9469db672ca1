"""
Types re-used throughout the package.
"""

from ethereum_types.bytes import Bytes, Bytes0, Bytes20, Bytes32, Bytes64
from ethereum_types.numeric import U8, U32, U64, U256, Uint

from .crypto.hash import Hash32, keccak256

__all__ = (
    "Address",
    "Bytes",
    "Bytes0",
    "Hash32",
    "MERKLE_NULL_NODE",
    "Public",
    "Secret",
    "TxPropagateId",
    "TxShortId",
    "U8",
    "U32",
    "U64",
    "U256",
    "UNSIGNED_SENDER",
    "Uint",
)

Address = Bytes20
Public = Bytes64
Secret = Bytes32

# Shorter id for transactions in compact blocks.
# TODO: narrow to 48 bits once compact block encoding allows it.
TxShortId = U64
TxPropagateId = U32

UNSIGNED_SENDER = Address(b"\xff" * 20)
"""
Fake address for unsigned transactions.
"""

MERKLE_NULL_NODE = keccak256(b"")
"""
Root hash of an empty merkle subtree.
"""
