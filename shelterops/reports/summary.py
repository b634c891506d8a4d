from __future__ import annotations

from typing import Dict, List, Tuple

import pandas as pd

from ..data.models import ItemSummaryRow
from .inventory import text_or_default
from .trends import IN_TYPES, OUT_TYPES, Transactions, coerce_quantity

TOTAL_CATEGORY = "—"
TOTAL_LABEL = "Total"


def summarize_by_item(transactions: Transactions) -> List[ItemSummaryRow]:
    """IN/OUT totals per item over whatever transactions were fetched.

    Rows are sorted by category then item name; the last row is always the
    grand total. Expects item_name and category joined onto each transaction.
    """
    if isinstance(transactions, pd.DataFrame):
        records = transactions.to_dict(orient="records")
    else:
        records = [t if isinstance(t, dict) else dict(t) for t in transactions]

    by_item: Dict[Tuple[str, str], ItemSummaryRow] = {}
    grand_in = 0.0
    grand_out = 0.0

    for t in records:
        category = text_or_default(t.get("category"), "Other")
        item = text_or_default(t.get("item_name"), "Unknown")
        qty = coerce_quantity(t.get("quantity"))
        kind = str(t.get("type", "")).strip().upper()

        row = by_item.setdefault((category, item), ItemSummaryRow(category=category, item=item))
        if kind in IN_TYPES:
            row.total_in += qty
            grand_in += qty
        elif kind in OUT_TYPES:
            row.total_out += qty
            grand_out += qty

    rows = [by_item[k] for k in sorted(by_item)]
    rows.append(ItemSummaryRow(category=TOTAL_CATEGORY, item=TOTAL_LABEL, total_in=grand_in, total_out=grand_out))
    return rows
