"""
Chain configuration.

Loads the chain parameters that transactions are checked against from a
YAML file and validates them with Pydantic.

Example `chain.yaml`::

    chain_id: 1029
    transaction_epoch_bound: 100000
"""

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .primitive_types import U32
from .transaction import ChainIdParams

TRANSACTION_DEFAULT_EPOCH_BOUND = 100000


class ChainConfig(BaseModel):
    """
    Parameters of the chain a node runs on.

    Attributes:
    - chain_id (int): The id signed into every transaction.
    - transaction_epoch_bound (int): How many epochs away from the current
      one a transaction's `epoch_height` may be.
    """

    chain_id: int = Field(default=0, ge=0, le=2**32 - 1)
    transaction_epoch_bound: int = Field(
        default=TRANSACTION_DEFAULT_EPOCH_BOUND, ge=0
    )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ChainConfig":
        """
        Read and validate the configuration stored at `path`.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(
                f"The configuration file '{path}' does not exist."
            )

        with path.open("r") as file:
            try:
                config_data = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid configuration: {e}") from e
        if not isinstance(config_data, dict):
            raise ValueError(
                f"Invalid configuration: expected a mapping in '{path}'"
            )
        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def chain_id_params(self) -> ChainIdParams:
        return ChainIdParams(chain_id=U32(self.chain_id))
