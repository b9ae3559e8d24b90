"""Spot Share: Streamlit entry point."""

import logging
import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.defaults import LOG_LEVEL, LOG_FORMAT
from components.sidebar import render_sidebar
from data.session_store import initialize_session_state
from tabs import tab_parking_lot, tab_request, tab_admin

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


def main():
    st.set_page_config(
        page_title="Spot Share",
        page_icon="🅿️",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2, tab3 = st.tabs([
        "🅿️ Parking Lot",
        "📝 Request",
        "⚙️ Admin",
    ])

    with tab1:
        tab_parking_lot.render(sidebar_state)
    with tab2:
        tab_request.render(sidebar_state)
    with tab3:
        tab_admin.render(sidebar_state)


if __name__ == "__main__":
    main()
