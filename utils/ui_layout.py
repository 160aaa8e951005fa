"""Reusable layout helpers for Streamlit pages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import pandas as pd
import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from utils.ui_state import DATA_SOURCE_SESSION_KEY, get_base_dir, get_config, get_model_state, load_shared_history

NavRenderer = Callable[[Optional[pd.DataFrame]], pd.DataFrame]


@dataclass(frozen=True)
class _NavigationLink:
    label: str
    target: str
    help_text: Optional[str] = None


_NAV_LINKS = (
    _NavigationLink("Home (Guide)", "pages/00_Home.py", "Assumptions and how the model works."),
    _NavigationLink("Capacity workspace", "app.py", "Drag the contracted capacity and review charges."),
    _NavigationLink("Capacity sweep", "pages/01_Capacity_Sweep.py", "Cost curve and battery sensitivity."),
)


def _render_navigation_block(container: DeltaGenerator) -> None:
    """Render standardized navigation links for the workspace."""

    container.markdown("#### Navigate")
    for link in _NAV_LINKS:
        container.page_link(link.target, label=link.label, help=link.help_text)


def _render_status_block(container: DeltaGenerator, history_df: pd.DataFrame) -> None:
    """Show concise session status for the loaded history and current inputs."""

    config = get_config()
    state = get_model_state()
    data_source = st.session_state.get(DATA_SOURCE_SESSION_KEY, {})

    container.markdown("#### Session status")
    container.caption(f"Billing periods loaded: {len(history_df):,}")
    container.caption(f"Data source: {data_source.get('history', 'default')}.")
    container.caption(
        f"Battery {state.battery_capacity_kw:,.0f} kW · contracted {state.contracted_capacity_kw:,.0f} kW"
    )
    container.caption(
        f"Tariff: ${config.tariff.contracted_rate_per_kw_month:.2f}/kW/month contracted, "
        f"${config.tariff.exceedance_rate_per_kw_month:.2f}/kW/month exceedance."
    )


def init_page_layout(
    *,
    page_title: str,
    main_title: str,
    description: Optional[str] = None,
    base_dir: Optional[Path] = None,
) -> NavRenderer:
    """Initialize the page layout with shared navigation and status blocks.

    The helper sets ``st.set_page_config`` immediately, reserves a header slot at
    the top of the page, and returns a renderer that can be called after data
    loading completes. Passing ``history_df`` avoids a second read when the page
    already loaded the history; otherwise it comes from the session or defaults.
    """

    st.set_page_config(page_title=page_title, layout="wide")
    header_container = st.container()
    resolved_base_dir = base_dir or get_base_dir()

    def _render(history_df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        shared_history = history_df if history_df is not None else load_shared_history(resolved_base_dir)

        with header_container:
            st.title(main_title)
            if description:
                st.caption(description)

            nav_col, status_col = st.columns([3, 2])
            _render_navigation_block(nav_col)
            _render_status_block(status_col, shared_history)

        st.divider()
        return shared_history

    return _render
