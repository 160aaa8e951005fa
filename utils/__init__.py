"""Utility helpers shared across Streamlit app modules."""

from utils.io import history_from_frame, history_from_readings, read_demand_history
from utils.ui_inputs import parse_numeric_series

__all__ = [
    "history_from_frame",
    "history_from_readings",
    "read_demand_history",
    "parse_numeric_series",
]
