from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ItemSummaryRow(BaseModel):
    """IN/OUT totals for one item over the report range."""
    category: str = Field(description="Item category")
    item: str = Field(description="Item name")
    total_in: float = Field(default=0, description="IN + ADJUST quantity")
    total_out: float = Field(default=0, description="OUT quantity")


class ItemSummaryReport(BaseModel):
    """Per-item totals table; the last row is the grand total."""
    report_range: str = Field(description="Range name (day, week, month, year)")
    rows: List[ItemSummaryRow] = Field(default_factory=list)
    message: Optional[str] = Field(default=None, description="User-visible error, if the data could not be loaded")
