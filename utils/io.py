"""Input parsing utilities for monthly maximum-demand histories."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd
import streamlit as st

from services.demand_charges import HistoricalRecord

HISTORY_COLUMNS = ["label", "max_demand_kw"]


def read_demand_history(path_candidates: List[Any]) -> pd.DataFrame:
    """Read and validate a history with ['label','max_demand_kw'] columns in kW.

    The first candidate that parses wins. Rows with missing, non-numeric or
    negative demand are dropped with a warning; row order is kept because it is
    the billing-period order.
    """

    def _clean(df: pd.DataFrame) -> pd.DataFrame:
        if not set(HISTORY_COLUMNS).issubset(df.columns):
            raise ValueError("CSV must contain columns: label, max_demand_kw")

        df = df[HISTORY_COLUMNS].copy()
        df["label"] = df["label"].astype(str).str.strip()
        df["max_demand_kw"] = pd.to_numeric(df["max_demand_kw"], errors="coerce")

        invalid_rows = ~np.isfinite(df["max_demand_kw"]) | (df["max_demand_kw"] < 0)
        if invalid_rows.any():
            message = (
                "Demand CSV contains missing, non-numeric or negative max_demand_kw entries; "
                f"dropping {int(invalid_rows.sum())} rows."
            )
            st.warning(message)
            logging.getLogger(__name__).warning(message)
            df = df.loc[~invalid_rows].copy()

        if df.empty:
            raise ValueError("No valid demand rows after cleaning.")

        duplicate_labels = df["label"].duplicated(keep=False)
        if duplicate_labels.any():
            st.warning(
                "Duplicate period labels found: "
                f"{sorted(df.loc[duplicate_labels, 'label'].unique().tolist())}. Each row is kept as its own period."
            )

        df["max_demand_kw"] = df["max_demand_kw"].astype(float)
        return df.reset_index(drop=True)

    last_err = None
    for candidate in path_candidates:
        try:
            df = pd.read_csv(candidate)
            return _clean(df)
        except Exception as e:  # pragma: no cover - errors handled via last_err
            last_err = e
    raise RuntimeError(
        "Failed to read demand history. "
        f"Looked for: {path_candidates}. Last error: {last_err}"
    )


def history_from_frame(df: pd.DataFrame) -> List[HistoricalRecord]:
    """Convert a cleaned history frame into ordered records."""

    return [
        HistoricalRecord(label=str(row.label), max_demand_kw=float(row.max_demand_kw))
        for row in df.itertuples(index=False)
    ]


def history_from_readings(
    readings_kw: Sequence[float], labels: Optional[Sequence[str]] = None
) -> pd.DataFrame:
    """Build a history frame from pasted readings, labelling periods P1..Pn by default."""

    if labels is not None and len(labels) != len(readings_kw):
        raise ValueError("labels must match the number of readings")
    resolved_labels = list(labels) if labels is not None else [f"P{idx}" for idx in range(1, len(readings_kw) + 1)]
    df = pd.DataFrame({"label": resolved_labels, "max_demand_kw": [float(v) for v in readings_kw]})
    negative = df["max_demand_kw"] < 0
    if negative.any():
        raise ValueError("Maximum demand readings must be non-negative.")
    return df
