from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InventoryFilters(BaseModel):
    """Filters for the aggregated inventory view."""
    organization_id: str = Field(description="Organization (shelter) the items belong to")
    item_id: Optional[str | list[str]] = Field(default=None, description="Item ID filter (single item or list of items)")
    active: Optional[bool] = Field(default=True, description="Only active items when True, only inactive when False, all when None")


class TransactionFilters(BaseModel):
    """Filters for the inventory transaction ledger."""
    organization_id: str = Field(description="Organization (shelter) the transactions belong to")
    since: Optional[datetime] = Field(default=None, description="Inclusive lower bound on created_at")
    until: Optional[datetime] = Field(default=None, description="Inclusive upper bound on created_at")
    item_id: Optional[str | list[str]] = Field(default=None, description="Item ID filter (single item or list of items)")
