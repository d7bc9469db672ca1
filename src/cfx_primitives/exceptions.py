"""
Error types shared by every primitive in this package.
"""


class PrimitivesException(Exception):
    """
    Base class for all exceptions _expected_ to be thrown while encoding,
    decoding, signing or verifying primitives.
    """


class RLPDecodingError(PrimitivesException):
    """
    Indicates that RLP decoding failed, either because the input is not a
    canonical encoding or because it does not fit the requested type.
    """


class RLPEncodingError(PrimitivesException):
    """
    Indicates that RLP encoding failed.
    """


class UnknownStorageLayout(RLPDecodingError):
    """
    Thrown when the bytes of a storage layout name a kind this version does
    not know about.
    """


class InvalidSignatureError(PrimitivesException):
    """
    Thrown when a signature is malformed, cannot be recovered on the curve,
    is not in low-s form, or does not match the expected public key.
    """
