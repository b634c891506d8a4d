import pandas as pd
import streamlit as st

from shelterops.config import get_config
from shelterops.data.interface import DataAccessError
from shelterops.data.util import get_data_access
from shelterops.reports.inventory import ALL_ITEMS
from shelterops.reports.ranges import RANGE_DAYS, range_label
from shelterops.reports.service import InventoryReportService

st.set_page_config(page_title="Inventory Reports", layout="wide")

# -----------------------------------------------------------------------------
# Backend selection. Selections below are passed explicitly to the service on
# every rerun; nothing is kept in module-level state.
# -----------------------------------------------------------------------------
config = get_config()
da = get_data_access()
service = InventoryReportService(da)

# -----------------------------------------------------------------------------
# Sidebar filters
# -----------------------------------------------------------------------------
st.sidebar.header("Report")

orgs = da.list_organizations().values
if not orgs:
    st.warning(f"No organizations found in `{config.data_dir}/`. Run `python -m shelterops.seed_data` first.")
    st.stop()

default_org = config.default_organization_id if config.default_organization_id in orgs else orgs[0]
org_id = st.sidebar.selectbox("Shelter", orgs, index=orgs.index(default_org))

ranges = list(RANGE_DAYS)
default_range = config.default_report_range if config.default_report_range in ranges else "month"
report_range = st.sidebar.radio(
    "Range", ranges, index=ranges.index(default_range), format_func=range_label, horizontal=True
)

try:
    options = service.inventory_options(org_id)
except DataAccessError as e:
    st.error(str(e))
    options = []
item_ids = [ALL_ITEMS] + [o.item_id for o in options]
labels = {o.item_id: f"{o.name} ({o.category})" for o in options}
item_id = st.sidebar.selectbox(
    "Item", item_ids, format_func=lambda i: "All items" if i == ALL_ITEMS else labels.get(i, i)
)

# -----------------------------------------------------------------------------
# Trend
# -----------------------------------------------------------------------------
trend = service.trend_report(org_id, report_range, item_id)

st.markdown(f"### Inventory trend: {trend.label} ({range_label(report_range)})")
if trend.message:
    st.error(trend.message)

c1, c2, c3, c4 = st.columns(4)
c1.metric("Current on hand", f"{trend.summary.current_on_hand:,.0f}")
c2.metric("Total in", f"{trend.summary.total_in:,.0f}")
c3.metric("Total out", f"{trend.summary.total_out:,.0f}")
c4.metric("Net change", f"{trend.summary.net_change:+,.0f}")

chart_df = pd.DataFrame([p.model_dump(by_alias=True) for p in trend.series])
if not chart_df.empty:
    if (chart_df["on_hand"] < 0).any():
        st.warning("Reconstructed on-hand drops below zero: the ledger and the current count disagree. Consider a recount.")
    st.line_chart(chart_df, x="day", y="on_hand", use_container_width=True)
    st.bar_chart(chart_df, x="day", y=["in", "out"], use_container_width=True)
    with st.expander("Daily detail"):
        st.dataframe(chart_df, use_container_width=True)

# -----------------------------------------------------------------------------
# Totals per item
# -----------------------------------------------------------------------------
st.markdown("### Totals per item")
summary = service.item_summary(org_id, report_range)
if summary.message:
    st.error(summary.message)
st.dataframe(pd.DataFrame([r.model_dump() for r in summary.rows]), use_container_width=True)
