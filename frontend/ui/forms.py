"""Streamlit form rendering for capacity inputs and the demand history source.

Widgets only read and write the session ModelState through the callbacks in
``utils.ui_state`` so manual edits share the clamp path used by the chart
drag and the optimizer.
"""

from pathlib import Path
from typing import List

import pandas as pd
import streamlit as st

from services.demand_charges import HistoricalRecord
from services.model_config import ModelConfig
from utils import history_from_readings, parse_numeric_series
from utils.ui_state import (
    BATTERY_INPUT_KEY,
    CONTRACTED_INPUT_KEY,
    apply_optimal_capacity,
    get_explanation,
    load_shared_history,
    on_battery_input_change,
    on_contracted_input_change,
    replace_shared_history,
    reset_shared_history,
    sync_widget_values,
)


def render_capacity_inputs(history: List[HistoricalRecord], config: ModelConfig) -> None:
    """Render the battery/contracted inputs and the optimizer button."""

    sync_widget_values()
    battery_low, battery_high = config.battery_bounds_kw
    contracted_low, contracted_high = config.contracted_bounds_kw
    step = int(config.capacity_step_kw)

    c1, c2, c3 = st.columns([2, 2, 1])
    with c1:
        st.number_input(
            "Battery Capacity (kW)",
            min_value=int(battery_low),
            max_value=int(battery_high),
            step=step,
            help="Peak shaving offset applied to every month's maximum demand.",
            key=BATTERY_INPUT_KEY,
            on_change=on_battery_input_change,
        )
    with c2:
        st.number_input(
            "Contracted Capacity (kW)",
            min_value=int(contracted_low),
            max_value=int(contracted_high),
            step=step,
            help="Billed every month at the contracted rate; demand above it pays the exceedance rate.",
            key=CONTRACTED_INPUT_KEY,
            on_change=on_contracted_input_change,
        )
    with c3:
        st.write("")
        st.button(
            "Set Optimal Capacity",
            type="primary",
            use_container_width=True,
            on_click=apply_optimal_capacity,
            args=(history,),
            disabled=not history,
            key="inputs_set_optimal",
        )

    explanation = get_explanation()
    if explanation:
        st.info(explanation)


def _apply_pasted_readings(labels_text: str, readings_text: str) -> None:
    try:
        readings = parse_numeric_series("Maximum demand readings", readings_text, min_value=0.0)
    except ValueError:
        return  # already shown by parse_numeric_series
    if not readings:
        st.error("Provide at least one reading.")
        return

    labels = [token.strip() for token in labels_text.split(",") if token.strip()] or None
    try:
        history_df = history_from_readings(readings, labels)
    except ValueError as exc:
        st.error(str(exc))
        return
    replace_shared_history(history_df, "pasted")
    st.success(f"Loaded {len(readings)} periods.")


def render_history_source(base_dir: Path) -> pd.DataFrame:
    """Sidebar controls for uploading or pasting a history; returns the active history."""

    st.sidebar.markdown("### Demand history")
    upload = st.sidebar.file_uploader(
        "Upload CSV (label, max_demand_kw)",
        type=["csv"],
        help="One row per billing period, in billing order.",
        key="inputs_history_upload",
    )
    with st.sidebar.expander("Paste readings", expanded=False):
        labels_text = st.text_input(
            "Period labels (optional)",
            placeholder="May, Jun, Jul",
            key="inputs_history_labels",
        )
        readings_text = st.text_area(
            "Maximum demand readings (kW)",
            placeholder="3114, 2736, 1467",
            key="inputs_history_readings",
        )
        if st.button("Use pasted readings", key="inputs_history_apply"):
            _apply_pasted_readings(labels_text, readings_text)

    if st.sidebar.button("Reset to bundled history", key="inputs_history_reset"):
        reset_shared_history()

    return load_shared_history(base_dir, upload)
