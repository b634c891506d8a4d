from __future__ import annotations

from typing import Literal

from .backends.csv_backend import CsvDataAccess
from .interface import InventoryDataAccess
from ..config import get_config


def get_data_access(kind: Literal["csv"] | None = None) -> InventoryDataAccess:
    config = get_config()
    kind = kind or config.data_backend
    if kind == "csv":
        # Reads from configured CSV folder
        return CsvDataAccess(data_dir=config.data_dir)
    raise ValueError(f"Unknown data access kind: {kind}")
