"""Global sidebar controls for lot selection."""

import streamlit as st
from dataclasses import dataclass

from data.session_store import get_service, get_active_lot, set_active_lot, get_reconciler


@dataclass
class SidebarState:
    lot_id: str


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    service = get_service()
    catalog = service.catalog

    with st.sidebar:
        st.title("Spot Share")
        st.divider()

        lot_ids = catalog.lot_ids()
        current = get_active_lot()
        selected_idx = lot_ids.index(current) if current in lot_ids else 0
        lot_id = st.selectbox(
            "Parking Lot",
            options=lot_ids,
            format_func=lambda x: f"{catalog.lot(x).name} ({x})",
            index=selected_idx,
            key="sidebar_lot",
        )
        if lot_id != current:
            set_active_lot(lot_id)

        st.divider()

        lot = catalog.lot(lot_id)
        st.caption(f"Spots: {lot.total_spots}")
        selection = get_reconciler().selection
        if selection:
            target = selection.half or "Solo"
            st.success(f"Selected: {selection.lot_id}-{selection.spot_number} ({target})")
        else:
            st.caption("No spot selected")
        st.caption(f"Pending reviews: {len(service.claim_log.pending())}")

    return SidebarState(lot_id=lot_id)
