"""Chart and data prep helpers for Streamlit visualizations."""

from typing import List, Optional, Sequence

import altair as alt
import pandas as pd

from services.derivation import DerivedSeries
from services.drag_controller import PlotArea, PointerEvent, PointerKind

DEMAND_CHART_HEIGHT = 400
CAPACITY_BRUSH_NAME = "capacity_drag"
MAX_DEMAND_LABEL = "Max Demand"
EFFECTIVE_DEMAND_LABEL = "Effective Demand (after battery)"
_SERIES_COLORS = {MAX_DEMAND_LABEL: "#f87171", EFFECTIVE_DEMAND_LABEL: "#4ade80"}
_CONTRACTED_COLOR = "#3b82f6"


def build_demand_chart_df(derived: DerivedSeries) -> pd.DataFrame:
    """Long-form max vs effective demand per period for grouped bars."""

    rows = []
    for order, label in enumerate(derived.labels):
        rows.append(
            {"period": label, "period_order": order, "series": MAX_DEMAND_LABEL, "demand_kw": derived.max_demand_kw[order]}
        )
        rows.append(
            {
                "period": label,
                "period_order": order,
                "series": EFFECTIVE_DEMAND_LABEL,
                "demand_kw": derived.effective_demand_kw[order],
            }
        )
    return pd.DataFrame(rows, columns=["period", "period_order", "series", "demand_kw"])


def build_demand_chart(
    chart_df: pd.DataFrame,
    contracted_capacity_kw: float,
    value_max_kw: float,
    *,
    highlight: bool = False,
    height: int = DEMAND_CHART_HEIGHT,
) -> alt.LayerChart:
    """Return grouped demand bars with the contracted-capacity reference line.

    The bar layer carries a y-only interval selection so a drag on the chart can
    be replayed as pointer input by the page.
    """

    brush = alt.selection_interval(name=CAPACITY_BRUSH_NAME, encodings=["y"], clear="dblclick")
    period_sort = alt.EncodingSortField(field="period_order", order="ascending")
    y_scale = alt.Scale(domain=[0, value_max_kw], nice=False)

    bars = (
        alt.Chart(chart_df)
        .mark_bar()
        .encode(
            x=alt.X("period:N", title="Month", sort=period_sort),
            xOffset=alt.XOffset("series:N", sort=[MAX_DEMAND_LABEL, EFFECTIVE_DEMAND_LABEL]),
            y=alt.Y("demand_kw:Q", title="Demand (kW)", scale=y_scale),
            color=alt.Color(
                "series:N",
                title=None,
                scale=alt.Scale(domain=list(_SERIES_COLORS), range=list(_SERIES_COLORS.values())),
                legend=alt.Legend(orient="bottom"),
            ),
            tooltip=[
                alt.Tooltip("period:N", title="Month"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("demand_kw:Q", title="kW", format=".0f"),
            ],
        )
        .add_params(brush)
    )

    rule_df = pd.DataFrame(
        {"demand_kw": [contracted_capacity_kw], "label": [f"Contracted Capacity: {contracted_capacity_kw:,.0f} kW"]}
    )
    rule = (
        alt.Chart(rule_df)
        .mark_rule(color=_CONTRACTED_COLOR, strokeWidth=3 if highlight else 2)
        .encode(y=alt.Y("demand_kw:Q", scale=y_scale))
    )
    rule_label = (
        alt.Chart(rule_df)
        .mark_text(align="left", dx=4, dy=-8, color=_CONTRACTED_COLOR, fontWeight="bold")
        .encode(y=alt.Y("demand_kw:Q", scale=y_scale), x=alt.value(0), text="label:N")
    )

    return alt.layer(bars, rule, rule_label).properties(height=height)


def brush_to_pointer_events(
    value_range: Sequence[float],
    current_capacity_kw: float,
    plot_area: PlotArea,
) -> List[PointerEvent]:
    """Translate a y-brush (data units) into a grab-and-drag pointer sequence.

    The pointer is pressed on the brush edge nearest the current line and
    released on the far edge, so the far edge becomes the new capacity. The
    sequence ends with a leave so hover styling does not outlive the gesture.
    """

    if len(value_range) != 2:
        return []
    low, high = sorted(float(v) for v in value_range)
    if abs(high - current_capacity_kw) <= abs(low - current_capacity_kw):
        start_kw, end_kw = high, low
    else:
        start_kw, end_kw = low, high
    return [
        PointerEvent(PointerKind.ENTER),
        PointerEvent(PointerKind.DOWN, plot_area.value_to_offset(start_kw)),
        PointerEvent(PointerKind.MOVE, plot_area.value_to_offset(start_kw)),
        PointerEvent(PointerKind.MOVE, plot_area.value_to_offset(end_kw)),
        PointerEvent(PointerKind.UP, plot_area.value_to_offset(end_kw)),
        PointerEvent(PointerKind.LEAVE),
    ]


def extract_brush_range(selection_state: Optional[dict]) -> Optional[List[float]]:
    """Pull the ``demand_kw`` range out of a Streamlit chart selection payload."""

    if not selection_state:
        return None
    selection = selection_state.get("selection", {}) or {}
    brush = selection.get(CAPACITY_BRUSH_NAME) or {}
    value_range = brush.get("demand_kw")
    if not value_range or len(value_range) != 2:
        return None
    return [float(v) for v in value_range]


def build_cost_curve_chart(
    curve_df: pd.DataFrame,
    optimal_capacity_kw: float,
    optimal_total_charge: float,
    current_capacity_kw: Optional[float] = None,
) -> alt.LayerChart:
    """Total charge vs contracted capacity with the optimum highlighted."""

    base_chart = alt.Chart(curve_df).encode(
        x=alt.X("contracted_capacity_kw:Q", title="Contracted capacity (kW)"),
        y=alt.Y("total_charge:Q", title="Total charge ($)", scale=alt.Scale(zero=False)),
        tooltip=[
            alt.Tooltip("contracted_capacity_kw:Q", title="Capacity (kW)", format=",.0f"),
            alt.Tooltip("total_charge:Q", title="Total charge ($)", format=",.2f"),
        ],
    )
    line = base_chart.mark_line(color="#d62728").interactive()
    optimum_df = pd.DataFrame(
        {
            "contracted_capacity_kw": [optimal_capacity_kw],
            "total_charge": [optimal_total_charge],
            "label": [f"Optimum: {optimal_capacity_kw:,.0f} kW"],
        }
    )
    optimum_point = alt.Chart(optimum_df).mark_circle(color="#d62728", size=90).encode(
        x="contracted_capacity_kw:Q", y="total_charge:Q"
    )
    optimum_label = (
        alt.Chart(optimum_df)
        .mark_text(dy=-12, color="#d62728")
        .encode(x="contracted_capacity_kw:Q", y="total_charge:Q", text="label:N")
    )

    layers = [line, optimum_point, optimum_label]
    if current_capacity_kw is not None:
        current_rule = (
            alt.Chart(pd.DataFrame({"contracted_capacity_kw": [current_capacity_kw]}))
            .mark_rule(color=_CONTRACTED_COLOR, strokeDash=[6, 3])
            .encode(x="contracted_capacity_kw:Q")
        )
        layers.append(current_rule)
    return alt.layer(*layers).properties(height=320)


def build_battery_sweep_chart(sweep_df: pd.DataFrame) -> alt.VConcatChart:
    """Optimal capacity and net savings as battery size varies."""

    base = alt.Chart(sweep_df).encode(x=alt.X("battery_capacity_kw:Q", title="Battery capacity (kW)"))
    optimal = base.mark_line(point=True, color=_CONTRACTED_COLOR).encode(
        y=alt.Y("optimal_capacity_kw:Q", title="Optimal contracted capacity (kW)", scale=alt.Scale(zero=False)),
        tooltip=[
            alt.Tooltip("battery_capacity_kw:Q", title="Battery (kW)", format=",.0f"),
            alt.Tooltip("optimal_capacity_kw:Q", title="Optimal capacity (kW)", format=",.0f"),
        ],
    )
    savings = base.mark_bar(opacity=0.8).encode(
        y=alt.Y("net_savings:Q", title="Net savings vs baseline ($)"),
        color=alt.condition(alt.datum.net_savings >= 0, alt.value("#16a34a"), alt.value("#dc2626")),
        tooltip=[
            alt.Tooltip("battery_capacity_kw:Q", title="Battery (kW)", format=",.0f"),
            alt.Tooltip("net_savings:Q", title="Net savings ($)", format=",.2f"),
        ],
    )
    return alt.vconcat(optimal.properties(height=220), savings.properties(height=220))
