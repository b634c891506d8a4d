from __future__ import annotations

from datetime import date, tzinfo
from typing import List, Optional

from ..config import get_report_timezone
from ..data.interface import DataAccessError, InventoryDataAccess
from ..data.models import (
    InventoryFilters,
    InventoryOption,
    ItemSummaryReport,
    TransactionFilters,
    TrendReport,
    TrendSummary,
)
from ..logging import get_logger
from .inventory import ALL_ITEMS, build_inventory_options, current_qty_for_selection, selection_label
from .ranges import range_to_days, since_timestamp
from .summary import summarize_by_item
from .trends import TrendReconstructor


class InventoryReportService:
    """Loads report inputs from the data store and runs the trend core.

    Query failures are not raised to the page: they are logged and returned
    as an empty report carrying the error message, so the page can show it.
    """
    def __init__(self, data_access: InventoryDataAccess, tz: Optional[tzinfo] = None) -> None:
        self.data_access = data_access
        self.tz = tz if tz is not None else get_report_timezone()
        self.reconstructor = TrendReconstructor(tz=self.tz)
        self.logger = get_logger(__name__)

    def inventory_options(self, organization_id: str) -> List[InventoryOption]:
        """Active items of the organization with their current quantity.

        Raises:
            DataAccessError: If the inventory view cannot be queried.
        """
        rows = self.data_access.list_inventory(InventoryFilters(organization_id=organization_id, active=True))
        if isinstance(rows, list):
            rows = [r.model_dump() if isinstance(r, InventoryOption) else r for r in rows]
        return build_inventory_options(rows)

    def trend_report(
        self,
        organization_id: str,
        report_range: str = "month",
        item_id: str = ALL_ITEMS,
        today: Optional[date] = None,
    ) -> TrendReport:
        """Reconstructed on-hand trend for all items or one item."""
        days = range_to_days(report_range)
        day_keys = self.reconstructor.build_day_keys(days, today)
        since = since_timestamp(day_keys[0], self.tz)

        try:
            options = self.inventory_options(organization_id)
            transactions = self.data_access.get_transactions(
                TransactionFilters(
                    organization_id=organization_id,
                    since=since,
                    item_id=None if item_id == ALL_ITEMS else item_id,
                )
            )
        except DataAccessError as e:
            self.logger.error(f"Could not load trend data for organization {organization_id}: {e}")
            return TrendReport(
                report_range=report_range,
                day_keys=day_keys,
                item_id=item_id,
                label=selection_label([], item_id),
                summary=TrendSummary(current_on_hand=0, total_in=0, total_out=0, net_change=0),
                message=str(e),
            )

        current = current_qty_for_selection(options, item_id)
        day_keys, series, summary = self.reconstructor.reconstruct(transactions, current, days, today)

        negative_days = [p.day for p in series if p.on_hand < 0]
        if negative_days:
            self.logger.warning(
                f"Reconstructed on-hand goes negative on {len(negative_days)} day(s) "
                f"(first {negative_days[0]}); ledger and current count disagree"
            )

        return TrendReport(
            report_range=report_range,
            day_keys=day_keys,
            item_id=item_id,
            label=selection_label(options, item_id),
            series=series,
            summary=summary,
        )

    def item_summary(
        self,
        organization_id: str,
        report_range: str = "month",
        today: Optional[date] = None,
    ) -> ItemSummaryReport:
        """Per-item IN/OUT totals for the range, ending with a grand total row."""
        days = range_to_days(report_range)
        day_keys = self.reconstructor.build_day_keys(days, today)

        try:
            transactions = self.data_access.get_transactions(
                TransactionFilters(organization_id=organization_id, since=since_timestamp(day_keys[0], self.tz))
            )
        except DataAccessError as e:
            self.logger.error(f"Could not load item summary for organization {organization_id}: {e}")
            return ItemSummaryReport(report_range=report_range, message=str(e))

        return ItemSummaryReport(report_range=report_range, rows=summarize_by_item(transactions))
