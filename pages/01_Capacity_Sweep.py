import streamlit as st

from frontend.ui.charts import build_battery_sweep_chart, build_cost_curve_chart
from frontend.ui.rendering import MetricSpec, format_currency, format_kw, render_formatted_dataframe, render_metrics
from services.capacity_optimizer import optimize_contracted_capacity, scan_capacity_costs, sweep_battery_capacities
from services.derivation import BaselineScenario
from utils import history_from_frame, parse_numeric_series
from utils.ui_layout import init_page_layout
from utils.ui_state import get_config, get_model_state

render_layout = init_page_layout(
    page_title="Capacity Sweep",
    main_title="Contracted capacity sweep",
    description="Total charge across every candidate capacity, and how the optimum moves with battery size.",
)
history_df = render_layout()

config = get_config()
state = get_model_state()
history = history_from_frame(history_df)

if not history:
    st.info("Load at least one billing period to run the sweep.")
    st.stop()

st.markdown("### Cost curve")
st.caption(
    f"Battery capacity from the workspace: {format_kw(state.battery_capacity_kw)}. "
    "The dashed line marks the workspace's current contracted capacity."
)

curve_df = scan_capacity_costs(
    [record.max_demand_kw for record in history],
    state.battery_capacity_kw,
    config.tariff,
    search_range=config.contracted_bounds_kw,
    step=config.capacity_step_kw,
)
result = optimize_contracted_capacity(
    history,
    state.battery_capacity_kw,
    config.tariff,
    search_range=config.contracted_bounds_kw,
    step=config.capacity_step_kw,
)
current_cost = curve_df.loc[
    curve_df["contracted_capacity_kw"] == state.contracted_capacity_kw, "total_charge"
]

render_metrics(
    st.columns(3),
    [
        MetricSpec("Optimal capacity", format_kw(result.optimal_capacity_kw)),
        MetricSpec("Total charge at optimum", format_currency(result.total_charge)),
        MetricSpec(
            "Premium at current capacity",
            format_currency(float(current_cost.iloc[0]) - result.total_charge) if not current_cost.empty else "n/a",
            help="Extra cost of the workspace's contracted capacity over the optimum.",
        ),
    ],
)
st.altair_chart(
    build_cost_curve_chart(curve_df, result.optimal_capacity_kw, result.total_charge, state.contracted_capacity_kw),
    use_container_width=True,
)
st.caption(result.explanation_text)

st.markdown("---")
st.markdown("### Battery size sensitivity")
battery_text = st.text_input(
    "Battery capacities to test (kW)",
    value="0, 100, 200, 300, 400, 500, 600, 700, 800, 900, 1000",
    help="Comma-separated values; each is clamped to the battery bounds and snapped to the capacity step.",
    key="sweep_battery_values",
)
try:
    battery_values = parse_numeric_series("Battery capacities", battery_text, min_value=0.0)
except ValueError:
    st.stop()

battery_values = sorted({config.clamp_battery(value) for value in battery_values})
if not battery_values:
    st.info("Provide at least one battery capacity.")
    st.stop()

sweep_df = sweep_battery_capacities(
    history,
    config.tariff,
    battery_values,
    BaselineScenario(contracted_capacity_kw=config.baseline_capacity_kw),
    search_range=config.contracted_bounds_kw,
    step=config.capacity_step_kw,
)
st.altair_chart(build_battery_sweep_chart(sweep_df), use_container_width=True)
render_formatted_dataframe(
    sweep_df.rename(
        columns={
            "battery_capacity_kw": "Battery (kW)",
            "optimal_capacity_kw": "Optimal capacity (kW)",
            "total_charge": "Total charge ($)",
            "net_savings": "Net savings ($)",
        }
    ),
    {
        "Battery (kW)": "{:,.0f}",
        "Optimal capacity (kW)": "{:,.0f}",
        "Total charge ($)": format_currency,
        "Net savings ($)": format_currency,
    },
    hide_index=True,
)
st.download_button(
    "Download sweep (CSV)",
    data=sweep_df.to_csv(index=False).encode("utf-8"),
    file_name="battery_sweep.csv",
    mime="text/csv",
)
