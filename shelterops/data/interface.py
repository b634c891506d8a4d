from __future__ import annotations

from typing import List, Protocol, Union

import pandas as pd

from .models import (
    InventoryFilters,
    TransactionFilters,
    InventoryOption,
    TransactionRecord,
    StringList,
)


class DataAccessError(RuntimeError):
    """Raised when the underlying store cannot answer a query."""


# ---- Data access protocol ----

class InventoryDataAccess(Protocol):
    """
    Backend-agnostic contract for the reports pages.

    Every query is scoped to one organization; implementations must never
    return rows from another shelter. Each call performs a fresh query
    against the underlying source.
    """

    def list_organizations(self) -> StringList:
        """List the organization IDs that have inventory."""
        ...

    # Aggregated inventory view: one row per item with its current_qty
    def list_inventory(self, filters: InventoryFilters) -> Union[pd.DataFrame, List[InventoryOption]]:
        """Get items and their current on-hand quantity."""
        ...

    # Ledger: type, quantity, created_at, item_id, organization_id,
    # plus item_name and category joined from the item table
    def get_transactions(self, filters: TransactionFilters) -> Union[pd.DataFrame, List[TransactionRecord]]:
        """Get inventory transactions matching the filters."""
        ...
