"""
Transaction Errors
^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Reasons a transaction may be refused when it is submitted. Nothing in this
package raises these; the pool and RPC layers build them, and each one
carries the values needed to render a precise message.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .exceptions import PrimitivesException, RLPDecodingError
from .primitive_types import U32, U64, U256

T = TypeVar("T", U64, U256)


@dataclass(frozen=True)
class OutOfBounds(Generic[T]):
    """
    A value that fell outside an optional minimum and maximum.
    """

    min: Optional[T]
    max: Optional[T]
    found: T

    def __str__(self) -> str:
        if self.min is not None and self.max is not None:
            bounds = f"Min={int(self.min)}, Max={int(self.max)}"
        elif self.min is not None:
            bounds = f"Min={int(self.min)}"
        elif self.max is not None:
            bounds = f"Max={int(self.max)}"
        else:
            bounds = ""
        return f"Value {int(self.found)} out of bounds. {bounds}"


class TransactionError(PrimitivesException):
    """
    Base class of the reasons a transaction is refused.
    """

    def detail(self) -> str:
        """
        Description of this particular failure.
        """
        raise NotImplementedError

    def __str__(self) -> str:
        return f"Transaction error ({self.detail()})"

    @staticmethod
    def from_signature_error(
        error: PrimitivesException,
    ) -> "InvalidSignature":
        return InvalidSignature(str(error))

    @staticmethod
    def from_decoding_error(error: RLPDecodingError) -> "InvalidRlp":
        return InvalidRlp(str(error))


@dataclass(unsafe_hash=True)
class AlreadyImported(TransactionError):
    """
    Transaction is already imported to the queue.
    """

    def detail(self) -> str:
        return "Already imported"


@dataclass(unsafe_hash=True)
class ChainIdMismatch(TransactionError):
    """
    Chain id in the transaction doesn't match the chain id of the network.
    """

    expected: U32
    got: U32

    def detail(self) -> str:
        return (
            f"Chain id mismatch, expected {int(self.expected)}, "
            f"got {int(self.got)}"
        )


@dataclass(unsafe_hash=True)
class EpochHeightOutOfBound(TransactionError):
    """
    The transaction's epoch height `set` is too far from the current
    `block_height`.
    """

    block_height: U64
    set: U64
    transaction_epoch_bound: U64

    def detail(self) -> str:
        return (
            f"EpochHeight out of bound:"
            f"block_height {int(self.block_height)}, "
            f"transaction epoch_height {int(self.set)}, "
            f"transaction_epoch_bound {int(self.transaction_epoch_bound)}"
        )


@dataclass(unsafe_hash=True)
class NotEnoughBaseGas(TransactionError):
    """
    The gas paid for transaction is lower than base gas.
    """

    required: U256
    got: U256

    def detail(self) -> str:
        return (
            f"Transaction gas {int(self.got)} less than intrinsic gas "
            f"{int(self.required)}"
        )


@dataclass(unsafe_hash=True)
class Stale(TransactionError):
    """
    Transaction is not valid anymore (state already has higher nonce).
    """

    def detail(self) -> str:
        return "No longer valid"


@dataclass(unsafe_hash=True)
class TooCheapToReplace(TransactionError):
    """
    A transaction with the same sender and nonce but a higher gas price is
    already queued.
    """

    def detail(self) -> str:
        return "Gas price too low to replace"


@dataclass(unsafe_hash=True)
class LimitReached(TransactionError):
    """
    Transaction was not imported to the queue because limit has been
    reached.
    """

    def detail(self) -> str:
        return "Transaction limit reached"


@dataclass(unsafe_hash=True)
class InsufficientGasPrice(TransactionError):
    minimal: U256
    got: U256

    def detail(self) -> str:
        return (
            f"Insufficient gas price. Min={int(self.minimal)}, "
            f"Given={int(self.got)}"
        )


@dataclass(unsafe_hash=True)
class InsufficientGas(TransactionError):
    minimal: U256
    got: U256

    def detail(self) -> str:
        return (
            f"Insufficient gas. Min={int(self.minimal)}, "
            f"Given={int(self.got)}"
        )


@dataclass(unsafe_hash=True)
class InsufficientBalance(TransactionError):
    """
    Sender doesn't have enough funds to pay for this transaction.
    """

    balance: U256
    cost: U256

    def detail(self) -> str:
        return (
            f"Insufficient balance for transaction. "
            f"Balance={int(self.balance)}, Cost={int(self.cost)}"
        )


@dataclass(unsafe_hash=True)
class GasLimitExceeded(TransactionError):
    """
    Transaction's gas is higher than the current gas limit.
    """

    limit: U256
    got: U256

    def detail(self) -> str:
        return (
            f"Gas limit exceeded. Limit={int(self.limit)}, "
            f"Given={int(self.got)}"
        )


@dataclass(unsafe_hash=True)
class InvalidGasLimit(TransactionError):
    bounds: OutOfBounds[U256]

    def detail(self) -> str:
        return f"Invalid gas limit. {self.bounds}"


@dataclass(unsafe_hash=True)
class InvalidSignature(TransactionError):
    reason: str

    def detail(self) -> str:
        return f"Transaction has invalid signature: {self.reason}."


@dataclass(unsafe_hash=True)
class TooBig(TransactionError):
    def detail(self) -> str:
        return "Transaction too big"


@dataclass(unsafe_hash=True)
class InvalidRlp(TransactionError):
    reason: str

    def detail(self) -> str:
        return f"Transaction has invalid RLP structure: {self.reason}."
