"""Plotly chart builders for lot occupancy."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Dict, List

# Status -> numeric level for the heatmap colour scale
STATUS_LEVELS = {
    "Free": 0,
    "PendingHalf": 1,
    "PendingSolo": 1,
    "OccupiedHalf": 2,
    "OccupiedSolo": 2,
    "Blocked": 3,
}
STATUS_COLORS = ["#27AE60", "#F5C542", "#E74C3C", "#7F8C8D"]
SPOTS_PER_ROW = 20


def lot_occupancy_heatmap(rows: List[dict], title: str = "Lot Occupancy") -> go.Figure:
    """Grid of spots, two cells (halves A and B) per spot."""
    if not rows:
        return go.Figure()

    z, text, hover, y_labels = [], [], [], []
    for start in range(0, len(rows), SPOTS_PER_ROW):
        chunk = rows[start:start + SPOTS_PER_ROW]
        z_row, text_row, hover_row = [], [], []
        for r in chunk:
            for half, status_key, holder_key in (("A", "half_a", "holder_a"), ("B", "half_b", "holder_b")):
                z_row.append(STATUS_LEVELS[r[status_key]])
                text_row.append(f"{r['spot_number']}{half}")
                hover_row.append(f"{r['spot_id']} {half}: {r[status_key]}"
                                 + (f" ({r[holder_key]})" if r[holder_key] else ""))
        pad = SPOTS_PER_ROW * 2 - len(z_row)
        z.append(z_row + [None] * pad)
        text.append(text_row + [""] * pad)
        hover.append(hover_row + [""] * pad)
        y_labels.append(f"{chunk[0]['spot_number']}-{chunk[-1]['spot_number']}")

    n = len(STATUS_COLORS)
    colorscale = []
    for i, color in enumerate(STATUS_COLORS):
        colorscale.append([i / n, color])
        colorscale.append([(i + 1) / n, color])

    fig = go.Figure(data=go.Heatmap(
        z=z,
        text=text,
        customdata=hover,
        texttemplate="%{text}",
        hovertemplate="%{customdata}<extra></extra>",
        colorscale=colorscale,
        zmin=-0.5,
        zmax=n - 0.5,
        showscale=False,
        xgap=2,
        ygap=2,
    ))
    fig.update_layout(
        title=title,
        height=max(300, len(z) * 40),
        xaxis=dict(showticklabels=False),
        yaxis=dict(tickvals=list(range(len(y_labels))), ticktext=y_labels, autorange="reversed"),
    )
    return fig


def occupancy_donut(summary: Dict[str, int], title: str = "Halves by Status") -> go.Figure:
    """Donut of half counts per status."""
    df = pd.DataFrame([{"status": k, "halves": v} for k, v in summary.items() if v > 0])
    if df.empty:
        return go.Figure()
    fig = px.pie(
        df, names="status", values="halves", hole=0.6, title=title,
        color="status",
        color_discrete_map={
            "Free": "#27AE60", "PendingHalf": "#F5C542", "PendingSolo": "#E8A33A",
            "OccupiedHalf": "#E74C3C", "OccupiedSolo": "#C0392B", "Blocked": "#7F8C8D",
        },
    )
    fig.update_layout(height=350)
    return fig
