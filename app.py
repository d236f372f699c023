"""
Bluebikes Station Traffic - Streamlit GUI Application

This module provides the Streamlit-based web interface for exploring
station traffic on an interactive map.
"""

import streamlit as st
from pathlib import Path
import logging
import sys

from bluebikes_traffic.maps import render_station_traffic_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

METHODOLOGY_PATH = Path(__file__).parent / "bluebikes_traffic" / "maps" / "methodology.md"


def main():
    """Main Streamlit application entry point"""
    st.set_page_config(
        page_title="Bluebikes Station Traffic",
        page_icon="🚲",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    page_configs = [
        ("Station Traffic Map", "🗺️"),
        ("Methodology", "📚")
    ]

    st.sidebar.markdown("### Navigation")
    radio_options = [f"{icon} {name}" for name, icon in page_configs]
    selected_option = st.sidebar.radio("Choose a page:", radio_options, index=0, key="page_radio")

    page = page_configs[radio_options.index(selected_option)][0]

    if page == "Station Traffic Map":
        render_station_traffic_page()
    elif page == "Methodology":
        methodology_page()


def methodology_page():
    st.title("📚 Traffic Methodology")
    st.markdown("---")

    if METHODOLOGY_PATH.exists():
        with open(METHODOLOGY_PATH, "r", encoding="utf-8") as f:
            st.markdown(f.read())
    else:
        st.error("Methodology documentation not found")


def run():
    """Console entry point: launch this file with ``streamlit run``."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(Path(__file__).resolve())]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
