"""Shared rendering helpers for Streamlit pages."""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import pandas as pd
import streamlit as st
from streamlit.delta_generator import DeltaGenerator

Formatter = Union[str, Callable[[Any], str]]


def format_currency(value: float) -> str:
    """Format USD with thousands separators and cents, sign before the symbol."""

    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_kw(value: float) -> str:
    return f"{value:,.0f} kW"


@dataclass(frozen=True)
class MetricSpec:
    """Specification for a Streamlit metric card."""

    label: str
    value: str
    help: Optional[str] = None
    caption: Optional[str] = None
    delta: Optional[str] = None
    delta_color: str = "normal"


def render_metrics(columns: Sequence[DeltaGenerator], specs: Sequence[MetricSpec]) -> None:
    """Render metric cards from specs to keep layout and captions consistent."""

    for col, spec in zip(columns, specs):
        col.metric(spec.label, spec.value, delta=spec.delta, delta_color=spec.delta_color, help=spec.help)
        if spec.caption:
            col.caption(spec.caption)


def render_formatted_dataframe(
    df: pd.DataFrame,
    formatters: Mapping[str, Formatter],
    *,
    use_container_width: bool = True,
    **dataframe_kwargs: Any,
) -> None:
    """Render a dataframe with shared number formatting to avoid repeated style blocks."""

    st.dataframe(
        df.style.format(formatters),
        use_container_width=use_container_width,
        **dataframe_kwargs,
    )
