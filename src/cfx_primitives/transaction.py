"""
Transactions
^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Transactions are atomic units of work created externally and submitted to
be executed. A transaction passes through three shapes:

- :class:`Transaction`, the unsigned payload. Its hash is the message that
  gets signed.
- :class:`TransactionWithSignature`, the payload plus `(v, r, s)`. Its hash,
  taken over the encoding of :class:`TransactionWithSignatureSerializePart`,
  identifies the transaction everywhere downstream. The sender is not
  known yet.
- :class:`SignedTransaction`, which also records the sender and, when it
  was recovered from the signature, the sender's public key.

Each shape holds the previous one by value and is immutable once built.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from ethereum_types.frozen import slotted_freezable

from .crypto.elliptic_curve import (
    Signature,
    public_to_address,
    secp256k1_recover,
    secp256k1_sign,
    secp256k1_verify,
)
from .crypto.hash import keccak256
from .exceptions import InvalidSignatureError, RLPDecodingError
from .primitive_types import (
    U8,
    U32,
    U64,
    U256,
    UNSIGNED_SENDER,
    Address,
    Bytes,
    Bytes0,
    Hash32,
    Public,
    Secret,
)
from .rlp import Extended, Simple, deserialize_to, encode, optional, rlp_hash

logger = logging.getLogger(__name__)

FAKE_SIGNATURE = Signature(r=U256(1), s=U256(1), v=U8(0))
"""
Placeholder signature attached by :meth:`Transaction.fake_sign`.

No key produced it. Its only purpose is to make `is_unsigned()` report
`False`, since that predicate looks at nothing but `r` and `s`. Code that
needs a verifiable signature must check `public`, not `is_unsigned()`.
"""


@slotted_freezable
@dataclass
class Action:
    """
    What a transaction does: create a contract when `to` is empty, call (or
    transfer value to) the account `to` otherwise.
    """

    to: Union[Bytes0, Address]

    @classmethod
    def create(cls) -> "Action":
        """
        Create a new contract.
        """
        return cls(to=Bytes0())

    @classmethod
    def call(cls, address: Address) -> "Action":
        """
        Call the contract at `address`, or transfer value to it.
        """
        return cls(to=Address(address))

    @classmethod
    def default(cls) -> "Action":
        return cls.create()

    @property
    def is_create(self) -> bool:
        return len(self.to) == 0

    @property
    def address(self) -> Optional[Address]:
        """
        The callee, or `None` for contract creation.
        """
        if self.is_create:
            return None
        return Address(self.to)

    def to_rlp(self) -> Extended:
        """
        Creation encodes as the empty string and a call as the callee's
        address.
        """
        return self.to

    @classmethod
    def from_rlp(cls, decoded: Simple) -> "Action":
        return cls(to=deserialize_to(Union[Bytes0, Address], decoded))


@slotted_freezable
@dataclass
class ChainIdParams:
    """
    The parameters needed to determine the chain id at a given epoch.
    """

    chain_id: U32

    def get_chain_id(self, epoch_number: U64) -> U32:
        """
        The chain id in effect at `epoch_number`.
        """
        return self.chain_id


@slotted_freezable
@dataclass
class Transaction:
    """
    Atomic operation performed on the block chain, before it is signed.
    """

    nonce: U256
    gas_price: U256
    gas: U256
    action: Action
    value: U256
    storage_limit: U64
    epoch_height: U64
    chain_id: U32
    data: Bytes

    @classmethod
    def default(cls) -> "Transaction":
        """
        A contract creation with every number zero and no data.
        """
        return cls(
            nonce=U256(0),
            gas_price=U256(0),
            gas=U256(0),
            action=Action.default(),
            value=U256(0),
            storage_limit=U64(0),
            epoch_height=U64(0),
            chain_id=U32(0),
            data=Bytes(b""),
        )

    def hash(self) -> Hash32:
        """
        Hash of the unsigned transaction. This is the message that gets
        signed, not the identity of the signed transaction.
        """
        return rlp_hash(self)

    def sign(self, secret: Secret) -> "SignedTransaction":
        """
        Sign the transaction with `secret` and recover the signer.
        """
        signature = secp256k1_sign(self.hash(), secret)
        tx_with_sig = self.with_signature(signature)
        try:
            public = tx_with_sig.recover_public()
        except InvalidSignatureError as e:
            raise AssertionError(
                "signature produced from a valid secret must recover"
            ) from e
        logger.debug("signed transaction %s", tx_with_sig.hash.hex())
        return SignedTransaction.new(public, tx_with_sig)

    def fake_sign(self, sender: Address) -> "SignedTransaction":
        """
        Attribute the transaction to `sender` without any cryptography.

        The result carries :data:`FAKE_SIGNATURE` and no public key. Only
        use this for transactions whose sender is already trusted.
        """
        tx_with_sig = self.with_signature(FAKE_SIGNATURE)
        logger.debug(
            "fake signed transaction %s for %s",
            tx_with_sig.hash.hex(),
            sender.hex(),
        )
        return SignedTransaction(
            transaction=tx_with_sig,
            sender=sender,
            public=None,
        )

    def with_signature(
        self, signature: Signature
    ) -> "TransactionWithSignature":
        """
        Attach an externally produced `signature`.
        """
        return TransactionWithSignature.from_serialize_part(
            TransactionWithSignatureSerializePart(
                unsigned=self,
                v=signature.v,
                r=signature.r,
                s=signature.s,
            )
        )


@slotted_freezable
@dataclass
class TransactionWithSignatureSerializePart:
    """
    The fields of a signed transaction that are encoded and hashed.
    """

    unsigned: Transaction
    v: U8
    """
    Which of the two candidate points the signature was made with.
    """
    r: U256
    s: U256


@slotted_freezable
@dataclass
class TransactionWithSignature:
    """
    Signed transaction whose signature has not been verified.

    `hash` and `rlp_size` are computed once, when the value is built, and
    take no part in equality or in the encoding.
    """

    transaction: TransactionWithSignatureSerializePart
    hash: Hash32 = field(compare=False)
    rlp_size: Optional[int] = field(compare=False)

    @classmethod
    def from_serialize_part(
        cls, part: TransactionWithSignatureSerializePart
    ) -> "TransactionWithSignature":
        encoded = encode(part)
        return cls(
            transaction=part,
            hash=keccak256(encoded),
            rlp_size=len(encoded),
        )

    @classmethod
    def new_unsigned(cls, tx: Transaction) -> "TransactionWithSignature":
        """
        Wrap `tx` with an all-zero signature.
        """
        return cls.from_serialize_part(
            TransactionWithSignatureSerializePart(
                unsigned=tx, v=U8(0), r=U256(0), s=U256(0)
            )
        )

    @property
    def unsigned(self) -> Transaction:
        return self.transaction.unsigned

    @property
    def v(self) -> U8:
        return self.transaction.v

    @property
    def r(self) -> U256:
        return self.transaction.r

    @property
    def s(self) -> U256:
        return self.transaction.s

    def is_unsigned(self) -> bool:
        """
        Whether the signature is empty.
        """
        return self.r == U256(0) and self.s == U256(0)

    def signature(self) -> Signature:
        return Signature(r=self.r, s=self.s, v=self.v)

    def check_low_s(self) -> None:
        """
        Reject signatures whose `s` lies in the upper half of the curve
        order.
        """
        if not self.signature().is_low_s():
            raise InvalidSignatureError("signature s value is not low")

    def recover_public(self) -> Public:
        """
        Recover the public key of the signer.
        """
        try:
            return secp256k1_recover(self.signature(), self.unsigned.hash())
        except InvalidSignatureError:
            logger.debug("cannot recover public key of %s", self.hash.hex())
            raise

    def encoded_size(self) -> int:
        """
        Length of the canonical encoding.
        """
        if self.rlp_size is not None:
            return self.rlp_size
        return len(encode(self))

    def to_rlp(self) -> Extended:
        return self.transaction

    @classmethod
    def from_rlp(cls, decoded: Simple) -> "TransactionWithSignature":
        """
        The cached hash and size describe the received encoding, which the
        canonical decoder guarantees is the re-encoding of `decoded`.
        """
        if isinstance(decoded, bytes):
            raise RLPDecodingError(
                "got `bytes` while decoding `TransactionWithSignature`"
            )
        if len(decoded) != 4:
            logger.debug(
                "rejected signed transaction with %d item(s)", len(decoded)
            )
            raise RLPDecodingError(
                f"incorrect list length: `TransactionWithSignature` needs "
                f"4 item(s), but got {len(decoded)} instead"
            )
        part = deserialize_to(TransactionWithSignatureSerializePart, decoded)
        raw = encode(decoded)
        return cls(transaction=part, hash=keccak256(raw), rlp_size=len(raw))


@slotted_freezable
@dataclass
class SignedTransaction:
    """
    A signed transaction whose sender is known.

    The encoding of this type, `[transaction, sender, public]`, is for
    local storage only and never feeds the transaction hash.
    """

    transaction: TransactionWithSignature
    sender: Address
    public: Optional[Public]

    @classmethod
    def new(
        cls, public: Public, transaction: TransactionWithSignature
    ) -> "SignedTransaction":
        """
        Attribute `transaction` to the owner of `public`.

        An unsigned transaction is never attributed: its sender is
        `UNSIGNED_SENDER` and `public` is dropped.
        """
        if transaction.is_unsigned():
            return cls.new_unsigned(transaction)
        return cls(
            transaction=transaction,
            sender=public_to_address(public),
            public=public,
        )

    @classmethod
    def new_unsigned(
        cls, transaction: TransactionWithSignature
    ) -> "SignedTransaction":
        return cls(
            transaction=transaction, sender=UNSIGNED_SENDER, public=None
        )

    def set_public(self, public: Public) -> "SignedTransaction":
        """
        Copy of this transaction with `public` recorded and the sender
        derived from it.
        """
        return replace(self, sender=public_to_address(public), public=public)

    @property
    def nonce(self) -> U256:
        return self.transaction.unsigned.nonce

    @property
    def hash(self) -> Hash32:
        return self.transaction.hash

    @property
    def gas(self) -> U256:
        return self.transaction.unsigned.gas

    @property
    def gas_price(self) -> U256:
        return self.transaction.unsigned.gas_price

    @property
    def gas_limit(self) -> U256:
        return self.transaction.unsigned.gas

    @property
    def rlp_size(self) -> int:
        return self.transaction.encoded_size()

    def is_unsigned(self) -> bool:
        return self.transaction.is_unsigned()

    def verify_public(self, skip: bool) -> bool:
        """
        Check the recorded public key against the signature.

        Parameters
        ----------
        skip :
            Trust the recorded key without checking the signature, for
            transactions that were verified before being stored.

        Returns
        -------
        verified : `bool`
            `False` when no public key is recorded, `True` otherwise.

        Raises
        ------
        InvalidSignatureError
            If the key is unusable or did not produce the signature.
        """
        if self.public is None:
            return False

        if skip:
            return True

        if not secp256k1_verify(
            self.public,
            self.transaction.signature(),
            self.transaction.unsigned.hash(),
        ):
            logger.debug(
                "public key does not match signature of %s", self.hash.hex()
            )
            raise InvalidSignatureError(
                "public key does not match the signature"
            )
        return True

    def to_rlp(self) -> Extended:
        return (self.transaction, self.sender, optional(self.public))

    @classmethod
    def from_rlp(cls, decoded: Simple) -> "SignedTransaction":
        if isinstance(decoded, bytes) or len(decoded) != 3:
            raise RLPDecodingError(
                "incorrect list length: `SignedTransaction` needs 3 item(s)"
            )
        return cls(
            transaction=deserialize_to(TransactionWithSignature, decoded[0]),
            sender=deserialize_to(Address, decoded[1]),
            public=deserialize_to(Optional[Public], decoded[2]),
        )
