"""Shared UI helpers for session-scoped data and the capacity model state."""

from __future__ import annotations

import hashlib
import io
import os
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pandas as pd
import streamlit as st

from services.capacity_optimizer import optimize_contracted_capacity
from services.demand_charges import HistoricalRecord
from services.derivation import ModelState
from services.drag_controller import CapacityDragController, PlotArea, PointerEvent
from services.model_config import ModelConfig
from utils.io import read_demand_history

HISTORY_SESSION_KEY = "shared_demand_history_df"
HISTORY_HASH_SESSION_KEY = "shared_demand_history_hash"
DATA_SOURCE_SESSION_KEY = "shared_data_source_status"
CONFIG_SESSION_KEY = "capacity_model_config"
MODEL_STATE_KEY = "capacity_model_state"
EXPLANATION_KEY = "optimizer_explanation"
DRAG_CONTROLLER_KEY = "capacity_drag_controller"
BATTERY_INPUT_KEY = "battery_capacity_input"
CONTRACTED_INPUT_KEY = "contracted_capacity_input"

HISTORY_PATH_ENV = "CAPACITYLAB_DEMAND_HISTORY"


def get_base_dir() -> Path:
    return Path(__file__).resolve().parent.parent


def default_history_paths(base_dir: Path) -> List[str]:
    """Return history CSV candidates: environment override first, then the bundled file."""

    candidates = [str(base_dir / "data" / "max_demand_history.csv")]
    override = os.environ.get(HISTORY_PATH_ENV)
    if override:
        candidates.insert(0, override)
    return candidates


def get_config() -> ModelConfig:
    """Return the session config, resolving environment overrides once per session."""

    if CONFIG_SESSION_KEY not in st.session_state:
        st.session_state[CONFIG_SESSION_KEY] = ModelConfig.from_env()
    return st.session_state[CONFIG_SESSION_KEY]


@st.cache_data(show_spinner=False)
def _cache_history_upload(file_hash: str, content: bytes) -> pd.DataFrame:
    """Parse and cache demand histories keyed by upload hash."""

    return read_demand_history([io.BytesIO(content)])


def _hash_upload(upload: Any) -> Tuple[str, bytes]:
    content = upload.getvalue()
    file_hash = hashlib.sha256(content).hexdigest()
    return file_hash, content


def _set_session_df(key: str, df: pd.DataFrame) -> None:
    st.session_state[key] = df.copy()


def _record_data_source(source: str) -> None:
    st.session_state[DATA_SOURCE_SESSION_KEY] = {"history": source}


def load_shared_history(base_dir: Path, history_file=None) -> pd.DataFrame:
    """Load the demand history from an upload, the session, or the bundled default.

    Uploads are hashed and parsed through ``st.cache_data`` so reruns and page
    switches do not decode the same file twice. A malformed upload surfaces an
    error and falls back to the bundled history.
    """

    source = "default"
    history_df: Optional[pd.DataFrame] = None

    if history_file is not None:
        history_hash, history_content = _hash_upload(history_file)
        # A still-attached upload is applied once so later pasted readings win.
        if history_hash != st.session_state.get(HISTORY_HASH_SESSION_KEY):
            st.session_state[HISTORY_HASH_SESSION_KEY] = history_hash
            try:
                history_df = _cache_history_upload(history_hash, history_content)
            except RuntimeError as exc:
                st.error(f"Could not read the uploaded history; using the bundled data instead. ({exc})")
            else:
                _set_session_df(HISTORY_SESSION_KEY, history_df)
                st.session_state.pop(EXPLANATION_KEY, None)
                source = "upload"

    if history_df is None and HISTORY_SESSION_KEY in st.session_state:
        history_df = st.session_state[HISTORY_SESSION_KEY]
        source = st.session_state.get(DATA_SOURCE_SESSION_KEY, {}).get("history", "session")

    if history_df is None:
        history_df = read_demand_history(default_history_paths(base_dir))
        _set_session_df(HISTORY_SESSION_KEY, history_df)

    _record_data_source(source)
    return history_df


def replace_shared_history(history_df: pd.DataFrame, source: str) -> None:
    """Swap the session history (e.g., pasted readings) and clear the stale explanation."""

    _set_session_df(HISTORY_SESSION_KEY, history_df)
    st.session_state.pop(EXPLANATION_KEY, None)
    _record_data_source(source)


def reset_shared_history() -> None:
    """Drop the session history so the next load falls back to the bundled file."""

    st.session_state.pop(HISTORY_SESSION_KEY, None)
    st.session_state.pop(DATA_SOURCE_SESSION_KEY, None)
    st.session_state.pop(EXPLANATION_KEY, None)


def get_model_state() -> ModelState:
    """Return the session's ModelState, creating the defaults on first access."""

    if MODEL_STATE_KEY not in st.session_state:
        st.session_state[MODEL_STATE_KEY] = ModelState.initial(get_config())
    return st.session_state[MODEL_STATE_KEY]


def set_model_state(state: ModelState) -> None:
    st.session_state[MODEL_STATE_KEY] = state


def sync_widget_values() -> None:
    """Copy the ModelState into the input widgets before they are rendered.

    Chart drags and the optimizer change the state outside the widgets, so the
    widgets are re-seeded on every run.
    """

    state = get_model_state()
    st.session_state[BATTERY_INPUT_KEY] = state.battery_capacity_kw
    st.session_state[CONTRACTED_INPUT_KEY] = state.contracted_capacity_kw


def on_battery_input_change() -> None:
    config = get_config()
    set_model_state(get_model_state().with_battery_capacity(st.session_state[BATTERY_INPUT_KEY], config))


def on_contracted_input_change() -> None:
    config = get_config()
    set_model_state(get_model_state().with_contracted_capacity(st.session_state[CONTRACTED_INPUT_KEY], config))


def apply_optimal_capacity(history: List[HistoricalRecord]) -> None:
    """Run the optimizer for the current battery size and store its explanation."""

    config = get_config()
    state = get_model_state()
    result = optimize_contracted_capacity(
        history,
        state.battery_capacity_kw,
        config.tariff,
        search_range=config.contracted_bounds_kw,
        step=config.capacity_step_kw,
    )
    set_model_state(state.with_contracted_capacity(result.optimal_capacity_kw, config))
    st.session_state[EXPLANATION_KEY] = result.explanation_text


def get_explanation() -> Optional[str]:
    return st.session_state.get(EXPLANATION_KEY)


def get_drag_controller(plot_area: PlotArea) -> CapacityDragController:
    """Return the session drag controller, rebuilding it if the plot area changed."""

    controller = st.session_state.get(DRAG_CONTROLLER_KEY)
    if controller is None or controller.plot_area != plot_area:
        controller = CapacityDragController(plot_area, get_config())
        st.session_state[DRAG_CONTROLLER_KEY] = controller
    return controller


def apply_pointer_events(plot_area: PlotArea, events: List[PointerEvent]) -> None:
    """Replay pointer events through the drag controller into the ModelState."""

    controller = get_drag_controller(plot_area)
    set_model_state(controller.replay(events, get_model_state()))
