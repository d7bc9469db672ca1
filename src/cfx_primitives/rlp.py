"""
.. _rlp:

Recursive Length Prefix (RLP) Encoding
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Defines the canonical byte format of every primitive in this package. The
same bytes are sent over the wire and fed to the hash function, so an item
must have exactly one encoding: the decoder rejects anything the encoder
would not have produced.

An item is either a byte string or a list of items. Integers are byte
strings holding their minimal big-endian representation, so zero is the
empty string.

Types that are not plain records choose their own shape by implementing
:class:`RLPSerializable`. Dataclasses without such hooks are encoded as the
list of their fields, in declaration order.
"""

from dataclasses import fields, is_dataclass
from typing import (
    Any,
    Dict,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    TypeAlias,
    TypeVar,
    Union,
    cast,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

from ethereum_types.bytes import Bytes, FixedBytes
from ethereum_types.numeric import FixedUnsigned, Uint

from .crypto.hash import Hash32, keccak256
from .exceptions import RLPDecodingError, RLPEncodingError

Simple: TypeAlias = Union[Sequence["Simple"], bytes]

Extended: TypeAlias = Union[
    Sequence["Extended"],
    bytearray,
    bytes,
    Uint,
    FixedUnsigned,
    str,
    bool,
    "RLPSerializable",
]


@runtime_checkable
class RLPSerializable(Protocol):
    """
    [`Protocol`] for types that pick their own RLP shape.

    `to_rlp` returns any encodable value; `from_rlp` receives the decoded
    item (a byte string or a list) and rebuilds the value, raising
    `RLPDecodingError` when the item has the wrong shape.

    [`Protocol`]: https://docs.python.org/3/library/typing.html#typing.Protocol
    """

    def to_rlp(self) -> Extended:
        """Return the value to encode in place of `self`."""
        ...

    @classmethod
    def from_rlp(cls, decoded: Simple) -> Any:
        """Rebuild a value from its decoded item."""
        ...


#
# RLP Encode
#


def encode(raw_data: Extended) -> Bytes:
    """
    Encodes `raw_data` into a sequence of bytes using RLP.

    Parameters
    ----------
    raw_data :
        A `Bytes`, `Uint`, `U256`, dataclass, `RLPSerializable` or sequence
        of encodable objects.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoded bytes representing `raw_data`.
    """
    if isinstance(raw_data, RLPSerializable):
        return encode(raw_data.to_rlp())
    elif isinstance(raw_data, Sequence):
        if isinstance(raw_data, (bytearray, bytes)):
            return encode_bytes(bytes(raw_data))
        elif isinstance(raw_data, str):
            return encode_bytes(raw_data.encode())
        else:
            return encode_sequence(raw_data)
    elif isinstance(raw_data, bool):
        if raw_data:
            return encode_bytes(b"\x01")
        else:
            return encode_bytes(b"")
    elif isinstance(raw_data, (Uint, FixedUnsigned)):
        return encode_bytes(raw_data.to_be_bytes())
    elif is_dataclass(raw_data):
        return encode_sequence(dataclass_items(raw_data))
    else:
        raise RLPEncodingError(
            "RLP Encoding of type {} is not supported".format(type(raw_data))
        )


def encode_bytes(raw_bytes: Bytes) -> Bytes:
    """
    Encodes `raw_bytes`, a sequence of bytes, using RLP.

    Parameters
    ----------
    raw_bytes :
        Bytes to encode with RLP.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoded bytes representing `raw_bytes`.
    """
    len_raw_data = len(raw_bytes)

    if len_raw_data == 1 and raw_bytes[0] < 0x80:
        return raw_bytes
    elif len_raw_data < 0x38:
        return bytes([0x80 + len_raw_data]) + raw_bytes
    else:
        len_raw_data_as_be = Uint(len_raw_data).to_be_bytes()
        return (
            bytes([0xB7 + len(len_raw_data_as_be)])
            + len_raw_data_as_be
            + raw_bytes
        )


def encode_sequence(raw_sequence: Sequence[Extended]) -> Bytes:
    """
    Encodes a list of RLP encodable objects (`raw_sequence`) using RLP.

    Parameters
    ----------
    raw_sequence :
        Sequence of RLP encodable objects.

    Returns
    -------
    encoded : `Bytes`
        The RLP encoded bytes representing `raw_sequence`.
    """
    joined_encodings = b"".join(encode(item) for item in raw_sequence)
    len_joined_encodings = len(joined_encodings)

    if len_joined_encodings < 0x38:
        return bytes([0xC0 + len_joined_encodings]) + joined_encodings
    else:
        len_joined_encodings_as_be = Uint(len_joined_encodings).to_be_bytes()
        return (
            bytes([0xF7 + len(len_joined_encodings_as_be)])
            + len_joined_encodings_as_be
            + joined_encodings
        )


def optional(value: Optional[Extended]) -> Tuple[Extended, ...]:
    """
    Wrap an optional value for encoding: an absent value becomes the empty
    list and a present one a single-item list.
    """
    if value is None:
        return ()
    return (value,)


def dataclass_items(raw_data: Any) -> Tuple[Extended, ...]:
    """
    The values of the fields of the dataclass `raw_data`, in declaration
    order, with `Optional` fields wrapped by :func:`optional`.
    """
    hints = get_type_hints(type(raw_data))
    items = []
    for field in fields(raw_data):
        value = getattr(raw_data, field.name)
        if _optional_argument(hints[field.name]) is not None:
            value = optional(value)
        items.append(value)
    return tuple(items)


#
# RLP Decode
#


def decode(encoded_data: Bytes) -> Simple:
    """
    Decodes a byte string or a list of items from the byte sequence
    `encoded_data`, using RLP.

    The whole of `encoded_data` must be exactly one canonical item.

    Parameters
    ----------
    encoded_data :
        A sequence of bytes, in RLP form.

    Returns
    -------
    decoded_data : `Simple`
        Object decoded from `encoded_data`.
    """
    encoded_data = bytes(encoded_data)
    if len(encoded_data) <= 0:
        raise RLPDecodingError("Cannot decode empty bytestring")

    item_length = decode_item_length(encoded_data)
    if item_length > len(encoded_data):
        raise RLPDecodingError(
            f"item needs {item_length} byte(s), "
            f"but only {len(encoded_data)} are available"
        )
    if item_length < len(encoded_data):
        raise RLPDecodingError(
            f"{len(encoded_data) - item_length} trailing byte(s) after item"
        )

    if encoded_data[0] <= 0xBF:
        return decode_to_bytes(encoded_data)
    else:
        return decode_to_sequence(encoded_data)


def decode_to_bytes(encoded_bytes: Bytes) -> Bytes:
    """
    Decodes a rlp encoded byte stream assuming that the decoded data
    should be of type `bytes`.

    Parameters
    ----------
    encoded_bytes :
        RLP encoded byte stream, exactly one item long.

    Returns
    -------
    decoded : `Bytes`
        RLP decoded Bytes data
    """
    if len(encoded_bytes) == 1 and encoded_bytes[0] < 0x80:
        return encoded_bytes
    elif encoded_bytes[0] <= 0xB7:
        raw_data = encoded_bytes[1:]
        if len(raw_data) == 1 and raw_data[0] < 0x80:
            raise RLPDecodingError("single byte below 0x80 has a prefix")
        return raw_data
    else:
        decoded_data_start_idx = 1 + encoded_bytes[0] - 0xB7
        if len(encoded_bytes) - decoded_data_start_idx < 0x38:
            raise RLPDecodingError("long form used for a short byte string")
        return encoded_bytes[decoded_data_start_idx:]


def decode_to_sequence(encoded_sequence: Bytes) -> Sequence[Simple]:
    """
    Decodes a rlp encoded byte stream assuming that the decoded data
    should be of type `Sequence` of objects.

    Parameters
    ----------
    encoded_sequence :
        An RLP encoded Sequence, exactly one item long.

    Returns
    -------
    decoded : `Sequence[Simple]`
        Sequence of objects decoded from `encoded_sequence`.
    """
    if encoded_sequence[0] <= 0xF7:
        joined_encodings = encoded_sequence[1:]
    else:
        joined_encodings_start_idx = 1 + encoded_sequence[0] - 0xF7
        joined_encodings = encoded_sequence[joined_encodings_start_idx:]
        if len(joined_encodings) < 0x38:
            raise RLPDecodingError("long form used for a short list")

    return decode_joined_encodings(joined_encodings)


def decode_joined_encodings(joined_encodings: Bytes) -> Sequence[Simple]:
    """
    Decodes `joined_encodings`, which is a concatenation of RLP encoded
    objects.

    Parameters
    ----------
    joined_encodings :
        concatenation of RLP encoded objects

    Returns
    -------
    decoded : `List[Simple]`
        A list of objects decoded from `joined_encodings`.
    """
    decoded_sequence = []

    item_start_idx = 0
    while item_start_idx < len(joined_encodings):
        encoded_item_length = decode_item_length(
            joined_encodings[item_start_idx:]
        )
        item_end_idx = item_start_idx + encoded_item_length
        if item_end_idx > len(joined_encodings):
            raise RLPDecodingError("list item runs past the end of the list")
        decoded_sequence.append(
            decode(joined_encodings[item_start_idx:item_end_idx])
        )
        item_start_idx = item_end_idx

    return decoded_sequence


def decode_item_length(encoded_data: Bytes) -> int:
    """
    Find the length of the rlp encoding for the first object in
    `encoded_data`, as announced by its prefix.

    Parameters
    ----------
    encoded_data :
        RLP encoded data, starting at the first byte of an item.

    Returns
    -------
    rlp_length : `int`
    """
    if len(encoded_data) <= 0:
        raise RLPDecodingError("Cannot decode empty bytestring")

    first_rlp_byte = encoded_data[0]

    # Length of the big endian representation of the payload length, for
    # the long forms.
    length_length = 0
    decoded_data_length = 0

    if first_rlp_byte < 0x80:
        return 1
    elif first_rlp_byte <= 0xB7:
        decoded_data_length = first_rlp_byte - 0x80
    elif first_rlp_byte <= 0xBF:
        length_length = first_rlp_byte - 0xB7
        decoded_data_length = _decode_long_length(encoded_data, length_length)
    elif first_rlp_byte <= 0xF7:
        decoded_data_length = first_rlp_byte - 0xC0
    else:
        length_length = first_rlp_byte - 0xF7
        decoded_data_length = _decode_long_length(encoded_data, length_length)

    return 1 + length_length + decoded_data_length


def _decode_long_length(encoded_data: Bytes, length_length: int) -> int:
    if length_length >= len(encoded_data):
        raise RLPDecodingError("length prefix is truncated")
    if encoded_data[1] == 0:
        raise RLPDecodingError("length prefix has leading zero bytes")
    return int.from_bytes(encoded_data[1 : 1 + length_length], "big")


#
# Typed Decode
#


U = TypeVar("U")


def decode_to(cls: Type[U], encoded_data: Bytes) -> U:
    """
    Decode the bytes in `encoded_data` to an object of type `cls`. `cls` can
    be a `Bytes` subclass, a dataclass, an `RLPSerializable`, `Uint`,
    `U256`, `Optional[cls]` or `Tuple[cls, ...]`.

    Parameters
    ----------
    cls: `Type[U]`
        The type to decode to.
    encoded_data :
        A sequence of bytes, in RLP form.

    Returns
    -------
    decoded_data : `U`
        Object decoded from `encoded_data`.
    """
    return cast(U, deserialize_to(cls, decode(encoded_data)))


def deserialize_to(class_: object, value: Simple) -> Any:
    """
    Convert an already decoded item into a value of type `class_`.
    """
    optional_argument = _optional_argument(class_)
    if optional_argument is not None:
        return _deserialize_to_optional(optional_argument, value)
    elif not isinstance(class_, type):
        return _deserialize_to_annotation(class_, value)
    elif issubclass(class_, RLPSerializable):
        return class_.from_rlp(value)
    elif is_dataclass(class_):
        return _deserialize_to_dataclass(class_, value)
    elif issubclass(class_, (Uint, FixedUnsigned)):
        return _deserialize_to_uint(class_, value)
    elif issubclass(class_, (Bytes, FixedBytes)):
        return _deserialize_to_bytes(class_, value)
    elif class_ is bool:
        return _deserialize_to_bool(value)
    else:
        raise NotImplementedError(class_)


def _optional_argument(annotation: object) -> Optional[object]:
    if get_origin(annotation) is not Union:
        return None
    arguments = get_args(annotation)
    if len(arguments) != 2 or type(None) not in arguments:
        return None
    return next(a for a in arguments if a is not type(None))


def _deserialize_to_optional(argument: object, value: Simple) -> Any:
    if isinstance(value, bytes):
        raise RLPDecodingError("got `bytes` while decoding an optional value")
    if len(value) == 0:
        return None
    elif len(value) == 1:
        return deserialize_to(argument, value[0])
    else:
        raise RLPDecodingError(
            f"optional value needs 0 or 1 item(s), but got {len(value)}"
        )


def _deserialize_to_dataclass(cls: Type[U], decoded: Simple) -> U:
    assert is_dataclass(cls)
    hints = get_type_hints(cls)
    target_fields = fields(cls)

    if isinstance(decoded, bytes):
        raise RLPDecodingError(f"got `bytes` while decoding `{cls.__name__}`")

    if len(target_fields) != len(decoded):
        name = cls.__name__
        actual = len(decoded)
        expected = len(target_fields)
        raise RLPDecodingError(
            f"`{name}` needs {expected} field(s), but got {actual} instead"
        )

    values: Dict[str, Any] = {}

    for value, target_field in zip(decoded, target_fields):
        resolved_type = hints[target_field.name]
        values[target_field.name] = deserialize_to(resolved_type, value)

    result = cls(**values)
    assert isinstance(result, cls)
    return result


def _deserialize_to_bool(value: Simple) -> bool:
    if value == b"":
        return False
    elif value == b"\x01":
        return True
    else:
        raise RLPDecodingError(f"invalid boolean {value!r}")


def _deserialize_to_bytes(
    class_: Union[Type[Bytes], Type[FixedBytes]], value: Simple
) -> Union[Bytes, FixedBytes]:
    if not isinstance(value, bytes):
        raise RLPDecodingError(
            f"got a list while decoding `{class_.__name__}`"
        )
    try:
        return class_(value)
    except ValueError as e:
        raise RLPDecodingError(
            f"{len(value)} byte(s) do not fit `{class_.__name__}`"
        ) from e


def _deserialize_to_uint(
    class_: Union[Type[Uint], Type[FixedUnsigned]], decoded: Simple
) -> Union[Uint, FixedUnsigned]:
    if not isinstance(decoded, bytes):
        raise RLPDecodingError(
            f"got a list while decoding `{class_.__name__}`"
        )
    if decoded[:1] == b"\x00":
        raise RLPDecodingError("integer has leading zero bytes")
    if issubclass(class_, FixedUnsigned):
        width = (int(class_.MAX_VALUE).bit_length() + 7) // 8
        if len(decoded) > width:
            raise RLPDecodingError(
                f"{len(decoded)} byte(s) overflow `{class_.__name__}`"
            )
    try:
        return class_.from_be_bytes(decoded)
    except (ValueError, OverflowError) as e:
        raise RLPDecodingError from e


def _deserialize_to_annotation(annotation: object, value: Simple) -> Any:
    origin = get_origin(annotation)
    if origin is Union:
        return _deserialize_to_union(annotation, value)
    elif origin in (Tuple, tuple):
        return _deserialize_to_tuple(annotation, value)
    else:
        raise NotImplementedError(f"RLP non-type {annotation!r}")


def _deserialize_to_union(annotation: object, value: Simple) -> Any:
    arguments = get_args(annotation)
    successes = []
    failures = []
    for argument in arguments:
        try:
            success = deserialize_to(argument, value)
        except RLPDecodingError as e:
            failures.append(e)
            continue

        successes.append(success)

    if len(successes) == 1:
        return successes[0]
    elif not successes:
        raise RLPDecodingError(f"no matching union variant\n{failures!r}")
    else:
        raise RLPDecodingError("multiple matching union variants")


def _deserialize_to_tuple(annotation: object, values: Simple) -> Tuple:
    if isinstance(values, bytes):
        raise RLPDecodingError("got `bytes` while decoding a tuple")
    arguments = list(get_args(annotation))

    if arguments[-1] is Ellipsis:
        arguments.pop()
        fill_count = len(values) - len(arguments)
        arguments = list(arguments) + [arguments[-1]] * fill_count
    elif len(arguments) != len(values):
        raise RLPDecodingError(
            f"tuple needs {len(arguments)} item(s), but got {len(values)}"
        )

    decoded = []
    for argument, value in zip(arguments, values):
        decoded.append(deserialize_to(argument, value))

    return tuple(decoded)


def rlp_hash(data: Extended) -> Hash32:
    """
    Obtain the keccak-256 hash of the rlp encoding of the passed in data.

    Parameters
    ----------
    data :
        The data for which we need the rlp hash.

    Returns
    -------
    hash : `Hash32`
        The rlp hash of the passed in data.
    """
    return keccak256(encode(data))
