from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

TransactionType = Literal["IN", "OUT", "ADJUST"]


class TransactionRecord(BaseModel):
    """A single inventory movement as stored in the ledger.

    Quantity and timestamp are left loose on purpose: rows read back from the
    store are not guaranteed to be clean, and the trend code coerces them.
    """
    type: str = Field(description="Movement type: IN, OUT or ADJUST")
    quantity: Optional[Any] = Field(default=None, description="Units moved (non-negative)")
    created_at: Optional[datetime | str] = Field(default=None, description="When the movement was recorded")
    item_id: Optional[str] = Field(default=None, description="Item moved")
    organization_id: Optional[str] = Field(default=None, description="Organization owning the item")
