import pytest

from cfx_primitives import rlp
from cfx_primitives.crypto.hash import keccak256
from cfx_primitives.exceptions import RLPDecodingError, UnknownStorageLayout
from cfx_primitives.primitive_types import MERKLE_NULL_NODE, U8, U256
from cfx_primitives.storage import (
    STORAGE_LAYOUT_REGULAR_V0,
    NodeMerkleTriplet,
    RegularStorageLayout,
    StorageLayout,
    StorageRoot,
    StorageValue,
)
from cfx_primitives.utils.hexadecimal import hex_to_address, hex_to_hash

owner = hex_to_address("0x0f572e5295c57f15886f9b263e2f6d2d6c7b5ec6")

hash1 = keccak256(b"delta")
hash2 = keccak256(b"intermediate")
hash3 = keccak256(b"snapshot")


def test_merkle_null_node() -> None:
    assert MERKLE_NULL_NODE == hex_to_hash(
        "0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


#
# StorageLayout
#


def test_storage_layout() -> None:
    layout = RegularStorageLayout(version=U8(1))
    assert layout.to_bytes() == bytes([0, 1])
    assert StorageLayout.from_bytes(bytes([0, 1])) == layout
    assert STORAGE_LAYOUT_REGULAR_V0.to_bytes() == bytes([0, 0])


@pytest.mark.parametrize("version", [0, 1, 7, 255])
def test_storage_layout_round_trip(version: int) -> None:
    layout = RegularStorageLayout(version=U8(version))
    assert StorageLayout.from_bytes(layout.to_bytes()) == layout


@pytest.mark.parametrize(
    "raw",
    [
        bytes([1, 1]),
        bytes([255, 0]),
        bytes([]),
        bytes([0]),
        bytes([0, 1, 2]),
    ],
)
def test_storage_layout_unknown(raw: bytes) -> None:
    with pytest.raises(UnknownStorageLayout, match="Unknown storage layout"):
        StorageLayout.from_bytes(raw)


def test_unknown_storage_layout_is_decoding_error() -> None:
    with pytest.raises(RLPDecodingError):
        StorageLayout.from_bytes(bytes([1, 1]))


#
# StorageRoot
#


def test_storage_root_from_empty_triplet() -> None:
    triplet = NodeMerkleTriplet(delta=None, intermediate=None, snapshot=None)
    assert StorageRoot.from_node_merkle_triplet(triplet) is None


def test_storage_root_from_full_triplet() -> None:
    root = b"\xff" * 32
    triplet = NodeMerkleTriplet(delta=root, intermediate=root, snapshot=root)
    assert StorageRoot.from_node_merkle_triplet(triplet) == StorageRoot(
        delta=root, intermediate=root, snapshot=root
    )


@pytest.mark.parametrize(
    "triplet, expected",
    [
        (
            NodeMerkleTriplet(delta=hash1, intermediate=None, snapshot=None),
            StorageRoot(
                delta=hash1,
                intermediate=MERKLE_NULL_NODE,
                snapshot=MERKLE_NULL_NODE,
            ),
        ),
        (
            NodeMerkleTriplet(delta=None, intermediate=hash2, snapshot=None),
            StorageRoot(
                delta=MERKLE_NULL_NODE,
                intermediate=hash2,
                snapshot=MERKLE_NULL_NODE,
            ),
        ),
        (
            NodeMerkleTriplet(delta=hash1, intermediate=None, snapshot=hash3),
            StorageRoot(
                delta=hash1,
                intermediate=MERKLE_NULL_NODE,
                snapshot=hash3,
            ),
        ),
    ],
)
def test_storage_root_fills_gaps(
    triplet: NodeMerkleTriplet, expected: StorageRoot
) -> None:
    assert StorageRoot.from_node_merkle_triplet(triplet) == expected


def test_triplet_encoding() -> None:
    triplet = NodeMerkleTriplet(delta=hash1, intermediate=None, snapshot=hash3)
    encoded = rlp.encode(triplet)
    assert encoded == rlp.encode([[hash1], [], [hash3]])
    assert rlp.decode_to(NodeMerkleTriplet, encoded) == triplet


def test_storage_root_encoding() -> None:
    root = StorageRoot(delta=hash1, intermediate=hash2, snapshot=hash3)
    encoded = rlp.encode(root)
    assert encoded == rlp.encode([hash1, hash2, hash3])
    assert rlp.decode_to(StorageRoot, encoded) == root


#
# StorageValue
#


def test_storage_value_without_owner_is_scalar() -> None:
    value = StorageValue(value=U256(1024), owner=None)
    encoded = rlp.encode(value)
    assert encoded == rlp.encode(U256(1024))
    assert rlp.decode_to(StorageValue, encoded) == value


def test_storage_value_zero_without_owner() -> None:
    value = StorageValue(value=U256(0), owner=None)
    assert rlp.encode(value) == b"\x80"
    assert rlp.decode_to(StorageValue, b"\x80") == value


def test_storage_value_with_owner_is_pair() -> None:
    value = StorageValue(value=U256(5), owner=owner)
    encoded = rlp.encode(value)
    assert encoded == rlp.encode([U256(5), owner])
    assert isinstance(rlp.decode(encoded), list)
    assert rlp.decode_to(StorageValue, encoded) == value


@pytest.mark.parametrize(
    "items",
    [
        [],
        [U256(5)],
        [U256(5), owner, owner],
    ],
)
def test_storage_value_incorrect_list_length(items: list) -> None:
    with pytest.raises(RLPDecodingError, match="incorrect list length"):
        rlp.decode_to(StorageValue, rlp.encode(items))


def test_storage_value_bad_owner() -> None:
    with pytest.raises(RLPDecodingError):
        rlp.decode_to(StorageValue, rlp.encode([U256(5), b"\x01" * 19]))
