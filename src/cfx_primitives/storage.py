"""
Storage Descriptors
^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Small records describing account storage: how a storage area is laid out,
which roots name the state of each storage layer, and the value stored in
a single slot together with its optional owner.
"""

from dataclasses import dataclass
from typing import Optional

from ethereum_types.frozen import slotted_freezable

from .exceptions import RLPDecodingError, UnknownStorageLayout
from .primitive_types import MERKLE_NULL_NODE, U8, U256, Address, Bytes, Hash32
from .rlp import Extended, Simple, deserialize_to


class StorageLayout:
    """
    Layout of a storage area. Each kind of layout is a subclass; the byte
    form is `[kind, version]`.
    """

    def to_bytes(self) -> Bytes:
        """
        The two byte `[kind, version]` form of the layout.
        """
        raise NotImplementedError

    @staticmethod
    def from_bytes(raw: Bytes) -> "StorageLayout":
        """
        Parse the output of :meth:`to_bytes`. Kinds unknown to this version
        are rejected.
        """
        if len(raw) == 2 and raw[0] == RegularStorageLayout.KIND:
            return RegularStorageLayout(version=U8(raw[1]))
        raise UnknownStorageLayout(f"Unknown storage layout: {list(raw)}")


@slotted_freezable
@dataclass
class RegularStorageLayout(StorageLayout):
    """
    The regular storage layout, kind `0`.
    """

    version: U8

    KIND = 0

    def to_bytes(self) -> Bytes:
        """
        See :meth:`StorageLayout.to_bytes`.
        """
        return bytes([self.KIND, int(self.version)])


STORAGE_LAYOUT_REGULAR_V0 = RegularStorageLayout(version=U8(0))


@slotted_freezable
@dataclass
class NodeMerkleTriplet:
    """
    Roots of the delta, intermediate and snapshot storage layers. Any of
    them may be missing.
    """

    delta: Optional[Hash32]
    intermediate: Optional[Hash32]
    snapshot: Optional[Hash32]


@slotted_freezable
@dataclass
class StorageRoot:
    """
    Roots of the three storage layers, with absent layers replaced by
    `MERKLE_NULL_NODE`.
    """

    delta: Hash32
    intermediate: Hash32
    snapshot: Hash32

    @classmethod
    def from_node_merkle_triplet(
        cls, triplet: NodeMerkleTriplet
    ) -> Optional["StorageRoot"]:
        """
        Fill the gaps of `triplet` with the null node hash.

        Returns `None` when no layer has a root at all.
        """
        if (
            triplet.delta is None
            and triplet.intermediate is None
            and triplet.snapshot is None
        ):
            return None

        def or_null(root: Optional[Hash32]) -> Hash32:
            return MERKLE_NULL_NODE if root is None else root

        return cls(
            delta=or_null(triplet.delta),
            intermediate=or_null(triplet.intermediate),
            snapshot=or_null(triplet.snapshot),
        )


@slotted_freezable
@dataclass
class StorageValue:
    """
    Value of a storage slot and the account that paid for it.

    Without an owner the value is encoded as a bare integer; with one it is
    encoded as the list `[value, owner]`. There is no tag: the decoder tells
    the shapes apart by whether it sees a byte string or a list.
    """

    value: U256
    owner: Optional[Address]

    def to_rlp(self) -> Extended:
        """
        See :class:`~cfx_primitives.rlp.RLPSerializable`.
        """
        if self.owner is None:
            return self.value
        return (self.value, self.owner)

    @classmethod
    def from_rlp(cls, decoded: Simple) -> "StorageValue":
        """
        See :class:`~cfx_primitives.rlp.RLPSerializable`.
        """
        if isinstance(decoded, bytes):
            return cls(value=deserialize_to(U256, decoded), owner=None)

        if len(decoded) != 2:
            raise RLPDecodingError(
                f"incorrect list length: `StorageValue` needs 2 item(s), "
                f"but got {len(decoded)} instead"
            )
        return cls(
            value=deserialize_to(U256, decoded[0]),
            owner=deserialize_to(Address, decoded[1]),
        )
