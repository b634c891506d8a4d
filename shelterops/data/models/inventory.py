from __future__ import annotations

from pydantic import BaseModel, Field


class InventoryOption(BaseModel):
    """An item selectable in reports, with its current on-hand quantity."""
    item_id: str = Field(description="Unique item identifier")
    name: str = Field(default="Unknown", description="Item name")
    category: str = Field(default="Other", description="Item category")
    current_qty: float = Field(default=0, description="Current on-hand quantity across all lots")
    active: bool = Field(default=True, description="Whether the item is active")
    organization_id: str = Field(default="", description="Organization the item belongs to")
