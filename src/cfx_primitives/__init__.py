"""
Transaction Primitives
^^^^^^^^^^^^^^^^^^^^^^

Canonical encoding, storage descriptors and the signing state machine of
a transaction.

A transaction moves through three shapes. A
:class:`~cfx_primitives.transaction.Transaction` holds the unsigned
payload. Attaching a signature yields a
:class:`~cfx_primitives.transaction.TransactionWithSignature`, whose hash
is the identity of the transaction everywhere downstream. Recovering the
signer yields a :class:`~cfx_primitives.transaction.SignedTransaction`
that knows its sender.
"""

__version__ = "0.1.0"
