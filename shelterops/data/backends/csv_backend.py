from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from ..interface import DataAccessError, InventoryDataAccess
from ..models import (
    InventoryFilters, TransactionFilters, InventoryOption, TransactionRecord, StringList
)
from ...config import get_config, get_report_timezone
from ...logging import get_logger

logger = get_logger(__name__)

REQUIRED_FILES = ["items.csv", "lots.csv", "transactions.csv"]

INVENTORY_COLUMNS = ["item_id", "name", "category", "current_qty", "active", "organization_id"]
LEDGER_COLUMNS = [
    "transaction_id", "organization_id", "item_id", "type", "quantity", "created_at",
    "item_name", "category",
]

_ID_DTYPES = {"item_id": str, "organization_id": str}


@dataclass
class _Tables:
    items: pd.DataFrame
    lots: pd.DataFrame
    transactions: pd.DataFrame
    # Per-item current quantity (sum of remaining lot quantity); see _build_inventory_view()
    inventory_view: pd.DataFrame
    # Transactions joined to item name/category, with a parsed UTC timestamp; see _build_ledger()
    ledger: pd.DataFrame


class CsvDataAccess(InventoryDataAccess):
    """
    CSV-backed implementation.
    - Loads CSVs from `data_dir` once at construction.
    - Every method call performs a fresh filter pass over the loaded frames
      (so each UI interaction triggers new work, mirroring a DB query).
    - Naive `created_at` values are wall-clock time in `tz` (the configured
      report time zone, or system local time), the same rule the trend
      reports use for day keys.
    """

    def __init__(self, data_dir: str | Path = None, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz if tz is not None else get_report_timezone()
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            if repo_root:
                self.data_dir = repo_root / self.data_dir
            else:
                self.data_dir = current / self.data_dir

        self._tables = self._load_tables(self.data_dir, self.tz)
        logger.info(
            f"Loaded {len(self._tables.items)} items and "
            f"{len(self._tables.transactions)} transactions from {self.data_dir}"
        )

    # ---------- loading / join helpers ----------

    @staticmethod
    def _load_tables(data_dir: Path, tz: Optional[tzinfo] = None) -> _Tables:
        if not data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m shelterops.seed_data\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory\n"
                f"  3. Create a .env file with DATA_DIR=/path/to/your/data"
            )

        missing_files = [f for f in REQUIRED_FILES if not (data_dir / f).exists()]

        if missing_files:
            raise FileNotFoundError(
                f"Required CSV files missing in {data_dir}:\n"
                f"  Missing: {', '.join(missing_files)}\n"
                f"  Expected files: {', '.join(REQUIRED_FILES)}\n\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m shelterops.seed_data\n"
                f"  2. Ensure your data directory contains all required CSV files"
            )

        try:
            items = pd.read_csv(data_dir / "items.csv", dtype=_ID_DTYPES)
            lots = pd.read_csv(data_dir / "lots.csv", dtype={**_ID_DTYPES, "lot_id": str})
            # created_at stays a raw string; malformed values are handled downstream
            transactions = pd.read_csv(
                data_dir / "transactions.csv",
                dtype={**_ID_DTYPES, "transaction_id": str, "type": str, "created_at": str},
            )
            inventory_view = CsvDataAccess._build_inventory_view(items, lots)
            ledger = CsvDataAccess._build_ledger(transactions, items, tz)
        except (KeyError, ValueError, OSError) as e:
            raise DataAccessError(
                f"Error reading CSV files from {data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        return _Tables(
            items=items,
            lots=lots,
            transactions=transactions,
            inventory_view=inventory_view,
            ledger=ledger,
        )

    @staticmethod
    def _build_inventory_view(items: pd.DataFrame, lots: pd.DataFrame) -> pd.DataFrame:
        qty = (
            lots.assign(remaining_qty=pd.to_numeric(lots["remaining_qty"], errors="coerce").fillna(0))
                .groupby("item_id", as_index=False)["remaining_qty"]
                .sum()
                .rename(columns={"remaining_qty": "current_qty"})
        )
        df = items.merge(qty, on="item_id", how="left").copy()
        # Items without lots are simply out of stock
        df["current_qty"] = df["current_qty"].fillna(0)
        if "active" not in df.columns:
            df["active"] = True
        df["active"] = df["active"].fillna(True).astype(bool)
        return df[INVENTORY_COLUMNS]

    @staticmethod
    def _build_ledger(transactions: pd.DataFrame, items: pd.DataFrame, tz: Optional[tzinfo] = None) -> pd.DataFrame:
        df = (
            transactions.merge(
                items[["item_id", "name", "category"]].rename(columns={"name": "item_name"}),
                on="item_id",
                how="left",
            )
            .copy()
        )
        if "transaction_id" not in df.columns:
            df["transaction_id"] = None
        # Unparseable timestamps become NaT and never match a since/until bound
        parsed = df["created_at"].map(lambda v: CsvDataAccess._parse_created(v, tz))
        df["created_ts"] = pd.to_datetime(parsed, utc=True)
        return df

    @staticmethod
    def _parse_created(value, tz: Optional[tzinfo] = None) -> pd.Timestamp:
        try:
            ts = pd.Timestamp(value)
            if pd.isna(ts):
                return pd.NaT
            return CsvDataAccess._to_utc(ts, tz)
        except (TypeError, ValueError, OverflowError, OSError):
            return pd.NaT

    @staticmethod
    def _to_utc(value: datetime, tz: Optional[tzinfo] = None) -> pd.Timestamp:
        ts = pd.Timestamp(value)
        if ts.tzinfo is None:
            # Naive values are wall-clock time in tz, or system local time
            dt = ts.to_pydatetime()
            ts = pd.Timestamp(dt.replace(tzinfo=tz) if tz is not None else dt.astimezone())
        return ts.tz_convert("UTC")

    @staticmethod
    def _match(df: pd.DataFrame, column: str, value: Optional[str | list[str]]) -> pd.DataFrame:
        if value is None:
            return df
        if isinstance(value, str):
            return df[df[column] == value]
        return df[df[column].isin(value)]

    # ---------- interface implementation ----------

    def list_organizations(self) -> StringList:
        if self._tables.items.empty:
            return StringList(values=[])
        orgs = self._tables.items["organization_id"].dropna().unique().tolist()
        return StringList(values=sorted(orgs))

    def list_inventory(self, filters: InventoryFilters) -> Union[pd.DataFrame, List[InventoryOption]]:
        df = self._tables.inventory_view.copy()

        df = df[df["organization_id"] == filters.organization_id]
        if filters.active is not None:
            df = df[df["active"] == filters.active]
        df = self._match(df, "item_id", filters.item_id)

        return df.reset_index(drop=True)

    def get_transactions(self, filters: TransactionFilters) -> Union[pd.DataFrame, List[TransactionRecord]]:
        df = self._tables.ledger.copy()

        df = df[df["organization_id"] == filters.organization_id]
        if filters.since is not None:
            df = df[df["created_ts"] >= self._to_utc(filters.since, self.tz)]
        if filters.until is not None:
            df = df[df["created_ts"] <= self._to_utc(filters.until, self.tz)]
        df = self._match(df, "item_id", filters.item_id)

        df = df.sort_values("created_ts", kind="stable")
        return df[LEDGER_COLUMNS].reset_index(drop=True)
