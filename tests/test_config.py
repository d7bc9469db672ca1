from pathlib import Path

import pytest

from cfx_primitives.config import TRANSACTION_DEFAULT_EPOCH_BOUND, ChainConfig
from cfx_primitives.primitive_types import U32, U64
from cfx_primitives.transaction import ChainIdParams


def write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "chain.yaml"
    path.write_text(content)
    return path


def test_defaults() -> None:
    config = ChainConfig()
    assert config.chain_id == 0
    assert config.transaction_epoch_bound == TRANSACTION_DEFAULT_EPOCH_BOUND


def test_from_yaml(tmp_path: Path) -> None:
    path = write(tmp_path, "chain_id: 1029\ntransaction_epoch_bound: 50\n")
    config = ChainConfig.from_yaml(path)
    assert config.chain_id == 1029
    assert config.transaction_epoch_bound == 50


def test_from_empty_yaml(tmp_path: Path) -> None:
    assert ChainConfig.from_yaml(write(tmp_path, "")) == ChainConfig()


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ChainConfig.from_yaml(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "chain_id: -1\n",
        "chain_id: 4294967296\n",
        "transaction_epoch_bound: -5\n",
        "chain_id: mainnet\n",
        "- 1\n- 2\n",
        "chain_id: [1029\n",
    ],
)
def test_invalid_yaml(tmp_path: Path, content: str) -> None:
    with pytest.raises(ValueError, match="Invalid configuration"):
        ChainConfig.from_yaml(write(tmp_path, content))


def test_chain_id_params() -> None:
    params = ChainConfig(chain_id=1029).chain_id_params()
    assert params == ChainIdParams(chain_id=U32(1029))
    assert params.get_chain_id(U64(12345)) == U32(1029)
