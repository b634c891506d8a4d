from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

import pandas as pd

from ..data.models import InventoryOption
from .trends import coerce_quantity

ALL_ITEMS = "all"


def text_or_default(value: Any, default: str) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    return str(value)


def build_inventory_options(rows: Union[pd.DataFrame, Iterable[Mapping[str, Any]]]) -> List[InventoryOption]:
    """Normalize inventory-view rows into selectable options.

    Rows without an item_id are dropped, duplicates collapse to the last row
    seen, and the result is sorted by category then name.
    """
    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict(orient="records")

    unique: dict[str, InventoryOption] = {}
    for r in rows:
        item_id = text_or_default(r.get("item_id"), "")
        if not item_id:
            continue
        unique[item_id] = InventoryOption(
            item_id=item_id,
            name=text_or_default(r.get("name"), "Unknown"),
            category=text_or_default(r.get("category"), "Other"),
            current_qty=coerce_quantity(r.get("current_qty")),
            active=bool(r.get("active", True)),
            organization_id=text_or_default(r.get("organization_id"), ""),
        )

    return sorted(unique.values(), key=lambda o: (o.category, o.name))


def current_qty_for_selection(options: List[InventoryOption], item_id: str = ALL_ITEMS) -> float:
    """Current on-hand for the selection: every item summed, or one item (0 if unknown)."""
    if item_id == ALL_ITEMS:
        return sum(o.current_qty for o in options)
    for o in options:
        if o.item_id == item_id:
            return o.current_qty
    return 0.0


def selection_label(options: List[InventoryOption], item_id: str = ALL_ITEMS) -> str:
    if item_id == ALL_ITEMS:
        return "All items"
    for o in options:
        if o.item_id == item_id:
            return f"{o.name} ({o.category})"
    return "Selected item"
