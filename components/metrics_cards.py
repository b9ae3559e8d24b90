"""Reusable KPI metric card widgets."""

import streamlit as st


def render_metric_row(metrics: list[dict]):
    """Render a row of metric cards.

    Each metric dict should have: label, value, and optionally help.
    """
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        with col:
            st.metric(label=m["label"], value=m["value"], help=m.get("help"))


def render_occupancy_metrics(summary: dict):
    free = summary.get("Free", 0)
    pending = summary.get("PendingHalf", 0) + summary.get("PendingSolo", 0)
    occupied = summary.get("OccupiedHalf", 0) + summary.get("OccupiedSolo", 0)
    render_metric_row([
        {"label": "Free halves", "value": f"{free:,}"},
        {"label": "Pending halves", "value": f"{pending:,}", "help": "Solo requests awaiting review"},
        {"label": "Occupied halves", "value": f"{occupied:,}"},
        {"label": "Blocked halves", "value": f"{summary.get('Blocked', 0):,}"},
    ])


def render_alert_card(message: str, level: str = "warning"):
    """Render an alert card with appropriate styling."""
    if level == "error":
        st.error(message, icon="🔴")
    elif level == "warning":
        st.warning(message, icon="🟡")
    else:
        st.info(message, icon="🔵")
