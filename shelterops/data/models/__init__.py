from .data_filters import (
    InventoryFilters,
    TransactionFilters,
)

from .inventory import InventoryOption
from .transactions import TransactionRecord, TransactionType
from .trends import (
    DayBucket,
    TrendPoint,
    TrendSummary,
    TrendReport,
)
from .summary import ItemSummaryRow, ItemSummaryReport
from .list_response import StringList

__all__ = [
    # Filter classes
    "InventoryFilters",
    "TransactionFilters",
    # Ledger and inventory
    "InventoryOption",
    "TransactionRecord",
    "TransactionType",
    # Report models
    "DayBucket",
    "TrendPoint",
    "TrendSummary",
    "TrendReport",
    "ItemSummaryRow",
    "ItemSummaryReport",
    # List response models
    "StringList",
]
