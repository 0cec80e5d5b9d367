from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Union

from .backends.csv_backend import CsvInventoryStore
from .interface import InventoryStore
from ..config import get_config


def get_inventory_store(
    kind: Literal["csv"] = "csv",
    data_dir: Optional[Union[str, Path]] = None,
) -> InventoryStore:
    if kind == "csv":
        # Reads from the configured CSV folder unless one is given
        return CsvInventoryStore(data_dir=data_dir or get_config().data_dir)
    raise ValueError(f"Unknown inventory store kind: {kind}")
