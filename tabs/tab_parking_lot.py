"""Tab 1: Parking Lot: live occupancy grid and spot selection."""

import streamlit as st
import pandas as pd

from config.defaults import HALF_LABELS, WHOLE_SPOT_LABEL
from data.session_store import get_service, get_reconciler, get_rule_config, add_notice
from engine.occupancy import occupancy_rows
from engine.sync import Selection
from components.charts import lot_occupancy_heatmap, occupancy_donut
from components.metrics_cards import render_occupancy_metrics, render_alert_card


def _render_live(lot_id: str):
    service = get_service()
    update = get_reconciler().poll()
    occupancy = update.occupancy

    if update.invalidated:
        add_notice(update.invalidated.message)
        render_alert_card(update.invalidated.message, "error")

    for issue in occupancy.issues:
        if issue.half.lot_id == lot_id:
            render_alert_card(f"Data-integrity fault: {issue.describe()}", "error")

    render_occupancy_metrics(occupancy.summary(lot_id))
    rows = occupancy_rows(service.catalog, occupancy, lot_id)
    lot = service.catalog.lot(lot_id)

    col1, col2 = st.columns([3, 1])
    with col1:
        st.plotly_chart(lot_occupancy_heatmap(rows, title=lot.name), use_container_width=True)
    with col2:
        st.plotly_chart(occupancy_donut(occupancy.summary(lot_id)), use_container_width=True)

    if update.changed:
        st.caption(f"{len(update.changed)} halves changed since the last refresh.")


def _render_selection(lot_id: str):
    service = get_service()
    reconciler = get_reconciler()
    lot = service.catalog.lot(lot_id)
    occupancy = reconciler.occupancy

    free_rows = [
        r for r in occupancy_rows(service.catalog, occupancy, lot_id)
        if r["half_a"] == "Free" or r["half_b"] == "Free"
    ]
    if not free_rows:
        st.warning(f"{lot.name} is full.")
        return

    col1, col2, col3 = st.columns([2, 2, 1])
    with col1:
        spot_number = st.selectbox(
            "Spot",
            options=[r["spot_number"] for r in free_rows],
            key=f"select_spot_{lot_id}",
        )
    row = next(r for r in free_rows if r["spot_number"] == spot_number)
    options = [h for h, key in zip(HALF_LABELS, ("half_a", "half_b")) if row[key] == "Free"]
    if len(options) == len(HALF_LABELS):
        options.append(WHOLE_SPOT_LABEL)
    with col2:
        target = st.radio("Half", options, horizontal=True, key=f"select_half_{lot_id}")
    with col3:
        st.write("")
        if st.button("Select", type="primary", key=f"btn_select_{lot_id}"):
            half = None if target == WHOLE_SPOT_LABEL else target
            notice = reconciler.select(Selection(lot_id, spot_number, half))
            if notice:
                st.error(notice.message)
            else:
                st.success(f"Selected {lot_id}-{spot_number} ({target}). Continue on the Request tab.")


def render(sidebar_state):
    """Render the Parking Lot tab."""
    lot_id = sidebar_state.lot_id
    service = get_service()
    st.header(service.catalog.lot(lot_id).name)

    interval = get_rule_config().get("poll_interval_seconds", get_reconciler().interval)

    @st.fragment(run_every=interval)
    def live():
        _render_live(lot_id)

    live()

    st.divider()
    st.subheader("Choose a Spot")
    _render_selection(lot_id)

    with st.expander("Spot table"):
        rows = occupancy_rows(service.catalog, get_reconciler().occupancy, lot_id)
        st.dataframe(pd.DataFrame(rows), use_container_width=True, height=400)
