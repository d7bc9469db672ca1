import pytest

from cfx_primitives import rlp
from cfx_primitives.exceptions import InvalidSignatureError, RLPDecodingError
from cfx_primitives.primitive_types import U32, U64, U256
from cfx_primitives.transaction import TransactionWithSignature
from cfx_primitives.transaction_error import (
    AlreadyImported,
    ChainIdMismatch,
    EpochHeightOutOfBound,
    GasLimitExceeded,
    InsufficientBalance,
    InsufficientGas,
    InsufficientGasPrice,
    InvalidGasLimit,
    InvalidRlp,
    InvalidSignature,
    LimitReached,
    NotEnoughBaseGas,
    OutOfBounds,
    Stale,
    TooBig,
    TooCheapToReplace,
    TransactionError,
)


@pytest.mark.parametrize(
    "error, message",
    [
        (AlreadyImported(), "Already imported"),
        (
            ChainIdMismatch(expected=U32(1), got=U32(2)),
            "Chain id mismatch, expected 1, got 2",
        ),
        (
            EpochHeightOutOfBound(
                block_height=U64(1000),
                set=U64(10),
                transaction_epoch_bound=U64(100),
            ),
            "EpochHeight out of bound:block_height 1000, "
            "transaction epoch_height 10, transaction_epoch_bound 100",
        ),
        (
            NotEnoughBaseGas(required=U256(21000), got=U256(100)),
            "Transaction gas 100 less than intrinsic gas 21000",
        ),
        (Stale(), "No longer valid"),
        (TooCheapToReplace(), "Gas price too low to replace"),
        (LimitReached(), "Transaction limit reached"),
        (
            InsufficientGasPrice(minimal=U256(5), got=U256(1)),
            "Insufficient gas price. Min=5, Given=1",
        ),
        (
            InsufficientGas(minimal=U256(21000), got=U256(1)),
            "Insufficient gas. Min=21000, Given=1",
        ),
        (
            InsufficientBalance(balance=U256(3), cost=U256(4)),
            "Insufficient balance for transaction. Balance=3, Cost=4",
        ),
        (
            GasLimitExceeded(limit=U256(10), got=U256(11)),
            "Gas limit exceeded. Limit=10, Given=11",
        ),
        (
            InvalidGasLimit(
                OutOfBounds(min=U256(1), max=U256(10), found=U256(11))
            ),
            "Invalid gas limit. Value 11 out of bounds. Min=1, Max=10",
        ),
        (
            InvalidSignature("bad s"),
            "Transaction has invalid signature: bad s.",
        ),
        (TooBig(), "Transaction too big"),
        (
            InvalidRlp("truncated"),
            "Transaction has invalid RLP structure: truncated.",
        ),
    ],
)
def test_message(error: TransactionError, message: str) -> None:
    assert error.detail() == message
    assert str(error) == f"Transaction error ({message})"


@pytest.mark.parametrize(
    "bounds, message",
    [
        (
            OutOfBounds(min=U256(1), max=None, found=U256(0)),
            "Value 0 out of bounds. Min=1",
        ),
        (
            OutOfBounds(min=None, max=U256(5), found=U256(6)),
            "Value 6 out of bounds. Max=5",
        ),
        (
            OutOfBounds(min=None, max=None, found=U256(6)),
            "Value 6 out of bounds. ",
        ),
    ],
)
def test_out_of_bounds(bounds: OutOfBounds, message: str) -> None:
    assert str(bounds) == message


def test_errors_carry_values() -> None:
    error = ChainIdMismatch(expected=U32(1029), got=U32(1))
    assert error == ChainIdMismatch(expected=U32(1029), got=U32(1))
    assert error != ChainIdMismatch(expected=U32(1029), got=U32(2))
    assert error.expected == U32(1029)

    with pytest.raises(TransactionError) as exc_info:
        raise error
    assert exc_info.value is error


def test_errors_are_hashable() -> None:
    bounds = OutOfBounds(min=U256(1), max=U256(10), found=U256(11))
    rejected = {
        AlreadyImported(): "first",
        ChainIdMismatch(expected=U32(1029), got=U32(1)): "second",
        InvalidGasLimit(bounds): "third",
    }

    assert rejected[AlreadyImported()] == "first"
    assert rejected[ChainIdMismatch(expected=U32(1029), got=U32(1))] == (
        "second"
    )
    assert rejected[InvalidGasLimit(bounds)] == "third"
    assert len({Stale(), Stale(), TooBig()}) == 2


def test_from_signature_error() -> None:
    error = TransactionError.from_signature_error(
        InvalidSignatureError("bad r")
    )
    assert error == InvalidSignature("bad r")


def test_from_decoding_error() -> None:
    with pytest.raises(RLPDecodingError) as exc_info:
        rlp.decode_to(TransactionWithSignature, rlp.encode([]))

    error = TransactionError.from_decoding_error(exc_info.value)
    assert isinstance(error, InvalidRlp)
    assert "incorrect list length" in str(error)
