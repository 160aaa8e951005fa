"""Parsing for pasted kW readings and capacity lists."""

from __future__ import annotations

from typing import List, Optional

import streamlit as st


def parse_numeric_series(
    label: str,
    raw_text: str,
    *,
    unit: str = "kW",
    min_value: Optional[float] = None,
) -> List[float]:
    """Parse comma/newline separated readings, reporting the first bad entry.

    Each failure is shown with ``st.error`` before ``ValueError`` is raised, so
    callers only need to stop; they should not report it again.
    """

    tokens = [token.strip() for token in raw_text.replace(",", "\n").splitlines() if token.strip()]
    series: List[float] = []
    for token in tokens:
        try:
            value = float(token)
        except ValueError:
            message = f"{label} contains a non-numeric entry: '{token}' (expected {unit})"
            st.error(message)
            raise ValueError(message)
        if min_value is not None and value < min_value:
            message = f"{label} contains {value:g} {unit}; values must be at least {min_value:g} {unit}"
            st.error(message)
            raise ValueError(message)
        series.append(value)
    return series
