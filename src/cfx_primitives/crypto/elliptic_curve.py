"""
Elliptic Curves
^^^^^^^^^^^^^^^

Signing, public key recovery and verification over secp256k1.
"""

from dataclasses import dataclass

import coincurve
from Crypto.Util.asn1 import DerSequence
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed
from ethereum_types.bytes import Bytes, Bytes20, Bytes32, Bytes64
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U8, U256

from ..exceptions import InvalidSignatureError
from .hash import Hash32, keccak256

SECP256K1B = U256(7)
SECP256K1P = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
)
SECP256K1N = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
)
SECP256K1_HALF_N = SECP256K1N // U256(2)


@slotted_freezable
@dataclass
class Signature:
    """
    A recoverable secp256k1 signature.
    """

    r: U256
    s: U256
    v: U8

    @classmethod
    def from_bytes(cls, buffer: Bytes) -> "Signature":
        """
        Build a signature from its 65 byte `r || s || v` form.
        """
        if len(buffer) != 65:
            raise InvalidSignatureError(
                f"signature needs 65 bytes, but got {len(buffer)}"
            )
        return cls(
            r=U256.from_be_bytes(buffer[0:32]),
            s=U256.from_be_bytes(buffer[32:64]),
            v=U8(buffer[64]),
        )

    def to_bytes(self) -> Bytes:
        """
        The 65 byte `r || s || v` form of the signature.
        """
        return (
            self.r.to_be_bytes32()
            + self.s.to_be_bytes32()
            + bytes([int(self.v)])
        )

    def is_low_s(self) -> bool:
        """
        Whether `s` lies in the lower half of the curve order.
        """
        return self.s <= SECP256K1_HALF_N

    def is_valid(self) -> bool:
        """
        Whether every component is in range for a recoverable signature.
        """
        return (
            int(self.v) <= 1
            and U256(0) < self.r < SECP256K1N
            and U256(0) < self.s < SECP256K1N
        )


def secp256k1_sign(msg_hash: Hash32, secret_key: Bytes32) -> Signature:
    """
    Returns the signature of a message hash given the secret key.

    Parameters
    ----------
    msg_hash :
        Hash of the message being signed.
    secret_key :
        The 32 byte secret key of the signer.

    Returns
    -------
    signature : `Signature`
        The recoverable signature, with `s` in low form.
    """
    try:
        private_key = coincurve.PrivateKey(bytes(secret_key))
    except ValueError as e:
        raise InvalidSignatureError("invalid secret key") from e
    signature = private_key.sign_recoverable(msg_hash, hasher=None)
    return Signature.from_bytes(signature)


def secp256k1_recover(signature: Signature, msg_hash: Hash32) -> Bytes64:
    """
    Recovers the public key from a given signature.

    Parameters
    ----------
    signature :
        The recoverable signature.
    msg_hash :
        Hash of the message being recovered.

    Returns
    -------
    public_key : `Bytes64`
        Recovered public key, without the uncompressed point prefix.
    """
    if not signature.is_valid():
        raise InvalidSignatureError("signature values out of range")

    r = signature.r
    is_square = pow(
        pow(int(r), 3, int(SECP256K1P)) + int(SECP256K1B),
        (int(SECP256K1P) - 1) // 2,
        int(SECP256K1P),
    )

    if is_square != 1:
        raise InvalidSignatureError(
            "r is not the x-coordinate of a point on the secp256k1 curve"
        )

    # If the recovery algorithm returns the point at infinity,
    # the signature is considered invalid
    # the below function will raise a ValueError.
    try:
        public_key = coincurve.PublicKey.from_signature_and_message(
            signature.to_bytes(), msg_hash, hasher=None
        )
    except ValueError as e:
        raise InvalidSignatureError from e

    return Bytes64(public_key.format(compressed=False)[1:])


def secp256k1_verify(
    public_key: Bytes64, signature: Signature, msg_hash: Hash32
) -> bool:
    """
    Verifies a signature against a known public key.

    Parameters
    ----------
    public_key :
        The 64 byte public key, without the uncompressed point prefix.
    signature :
        The signature to check. It must be in range, and only a low-s
        signature can verify.
    msg_hash :
        Hash of the message that was signed.

    Returns
    -------
    valid : `bool`
        True if the signature was produced by `public_key` over `msg_hash`.
    """
    if not signature.is_valid():
        raise InvalidSignatureError("signature values out of range")
    if not signature.is_low_s():
        return False

    x = int.from_bytes(public_key[:32], "big")
    y = int.from_bytes(public_key[32:], "big")

    try:
        pubkey = ec.EllipticCurvePublicNumbers(
            x, y, ec.SECP256K1()
        ).public_key()
    except ValueError as e:
        raise InvalidSignatureError("invalid public key") from e

    sig = DerSequence([int(signature.r), int(signature.s)]).encode()

    try:
        pubkey.verify(sig, msg_hash, ec.ECDSA(Prehashed(hashes.SHA256())))
    except InvalidSignature:
        return False

    return True


def public_to_address(public_key: Bytes64) -> Bytes20:
    """
    Derive the address of the account owning `public_key`.
    """
    return Bytes20(keccak256(public_key)[12:32])
