from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DayBucket(BaseModel):
    """IN/OUT totals for one calendar day."""
    day: str = Field(description="Calendar date key (YYYY-MM-DD)")
    total_in: float = Field(default=0, description="Sum of IN and ADJUST quantities")
    total_out: float = Field(default=0, description="Sum of OUT quantities")

    @property
    def net(self) -> float:
        return self.total_in - self.total_out


class TrendPoint(BaseModel):
    """One day of the reconstructed on-hand series.

    Serialize with ``model_dump(by_alias=True)`` to get the ``in``/``out`` keys
    the charts expect.
    """
    model_config = ConfigDict(populate_by_name=True)

    day: str = Field(description="Calendar date key (YYYY-MM-DD)")
    on_hand: float = Field(description="Reconstructed on-hand quantity at end of day")
    net_change: float = Field(description="IN minus OUT for the day")
    total_in: float = Field(alias="in", description="IN + ADJUST quantity for the day")
    total_out: float = Field(alias="out", description="OUT quantity for the day")


class TrendSummary(BaseModel):
    """Rollup of a reconstructed series."""
    current_on_hand: float = Field(description="On-hand quantity at the end of the series")
    total_in: float = Field(description="Sum of IN over the series")
    total_out: float = Field(description="Sum of OUT over the series")
    net_change: float = Field(description="total_in - total_out")


class TrendReport(BaseModel):
    """Everything the reports page needs to draw the trend section."""
    report_range: str = Field(description="Range name (day, week, month, year)")
    day_keys: List[str] = Field(default_factory=list, description="Ordered day keys of the range")
    item_id: str = Field(default="all", description="Selected item or 'all'")
    label: str = Field(default="All items", description="Human label for the selection")
    series: List[TrendPoint] = Field(default_factory=list, description="Oldest to newest")
    summary: TrendSummary
    message: Optional[str] = Field(default=None, description="User-visible error, if the data could not be loaded")
