# app.py: CapacityLab capacity workspace
# - Battery peak shaving vs a two-tier contracted-capacity tariff
# - Drag the contracted-capacity line on the demand chart, or let the optimizer pick it
# - Monthly breakdown, savings vs the no-battery baseline, CSV/PDF downloads

import streamlit as st

from frontend.ui.charts import (
    CAPACITY_BRUSH_NAME,
    DEMAND_CHART_HEIGHT,
    brush_to_pointer_events,
    build_demand_chart,
    build_demand_chart_df,
    extract_brush_range,
)
from frontend.ui.forms import render_capacity_inputs, render_history_source
from frontend.ui.metrics import render_breakdown_table, render_rationale_section, render_summary_metrics
from frontend.ui.pdf import build_pdf_summary
from services.derivation import BaselineScenario, derive_series
from services.drag_controller import PlotArea
from utils import history_from_frame
from utils.ui_layout import init_page_layout
from utils.ui_state import (
    apply_pointer_events,
    get_base_dir,
    get_config,
    get_drag_controller,
    get_explanation,
    get_model_state,
)

BASE_DIR = get_base_dir()
DEMAND_CHART_KEY = "demand_chart"


def _on_chart_select() -> None:
    """Replay the chart's y-brush as a grab-and-drag pointer gesture."""

    value_range = extract_brush_range(st.session_state.get(DEMAND_CHART_KEY))
    if value_range is None:
        return
    config = get_config()
    plot_area = PlotArea(height_px=DEMAND_CHART_HEIGHT, value_max_kw=config.chart_value_max_kw)
    events = brush_to_pointer_events(value_range, get_model_state().contracted_capacity_kw, plot_area)
    apply_pointer_events(plot_area, events)


def run_app() -> None:
    render_layout = init_page_layout(
        page_title="CapacityLab",
        main_title="Capacity Charge Modeling",
        description="Contracted capacity vs exceedance penalties with battery peak shaving.",
    )
    history_df = render_layout(render_history_source(BASE_DIR))

    config = get_config()
    history = history_from_frame(history_df)
    baseline = BaselineScenario(contracted_capacity_kw=config.baseline_capacity_kw)

    render_capacity_inputs(history, config)

    # One snapshot feeds every figure below.
    state = get_model_state()
    derived = derive_series(history, config.tariff, state, baseline)

    render_summary_metrics(derived)

    plot_area = PlotArea(height_px=DEMAND_CHART_HEIGHT, value_max_kw=config.chart_value_max_kw)
    controller = get_drag_controller(plot_area)
    st.markdown("#### Maximum vs effective demand")
    st.caption(
        "Drag vertically on the chart to move the contracted-capacity line "
        f"(snaps to {config.capacity_step_kw} kW, limited to "
        f"{config.contracted_bounds_kw[0]:,}–{config.contracted_bounds_kw[1]:,} kW). Double-click to clear the brush."
    )
    st.altair_chart(
        build_demand_chart(
            build_demand_chart_df(derived),
            state.contracted_capacity_kw,
            config.chart_value_max_kw,
            highlight=controller.is_hovering or controller.is_dragging,
        ),
        use_container_width=True,
        key=DEMAND_CHART_KEY,
        on_select=_on_chart_select,
        selection_mode=[CAPACITY_BRUSH_NAME],
    )

    st.markdown("#### Monthly breakdown")
    render_breakdown_table(derived)

    render_rationale_section(derived, baseline.contracted_capacity_kw, config.tariff)

    d1, d2 = st.columns(2)
    d1.download_button(
        "Download breakdown (CSV)",
        data=derived.to_frame().to_csv(index=False).encode("utf-8"),
        file_name="capacity_breakdown.csv",
        mime="text/csv",
        use_container_width=True,
    )
    d2.download_button(
        "Download PDF snapshot",
        data=build_pdf_summary(derived, config.tariff, baseline.contracted_capacity_kw, get_explanation()),
        file_name="capacity_summary.pdf",
        mime="application/pdf",
        use_container_width=True,
    )


if __name__ == "__main__":
    run_app()
