"""Summary cards and breakdown tables built from a derived scenario."""

from typing import List

import pandas as pd
import streamlit as st
from pandas.io.formats.style import Styler

from frontend.ui.rendering import MetricSpec, format_currency, format_kw, render_formatted_dataframe, render_metrics
from services.demand_charges import TariffConstants
from services.derivation import DerivedSeries
from services.rationale import build_savings_narrative, rationale_caption


def build_summary_metric_specs(derived: DerivedSeries) -> List[MetricSpec]:
    """Cards for contracted capacity, total charge and savings vs the baseline."""

    periods = derived.period_count
    return [
        MetricSpec(
            "Contracted Capacity",
            format_kw(derived.state.contracted_capacity_kw),
            help="Drag the blue line on the chart or edit the input to change it.",
        ),
        MetricSpec(
            f"Total Charge ({periods} months)",
            format_currency(derived.total_charge),
            help="Contracted charge plus exceedance penalties over all periods.",
        ),
        MetricSpec(
            f"Savings vs Original ({periods} months)",
            format_currency(derived.net_savings),
            delta=derived.net_label,
            delta_color="normal" if derived.is_positive_savings else "inverse",
            help=f"Baseline total: {format_currency(derived.baseline_total_charge)}.",
        ),
    ]


def render_summary_metrics(derived: DerivedSeries) -> None:
    specs = build_summary_metric_specs(derived)
    render_metrics(st.columns(len(specs)), specs)


def build_breakdown_table(derived: DerivedSeries) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Month": list(derived.labels),
            "Max Demand (kW)": list(derived.max_demand_kw),
            "Effective Demand (kW)": list(derived.effective_demand_kw),
            "Exceedance (kW)": list(derived.exceedance_kw),
            "Total Charge ($)": list(derived.monthly_charge),
        }
    )


def build_net_impact_table(derived: DerivedSeries) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Month": list(derived.labels),
            "Monthly Net Impact ($)": list(derived.monthly_savings),
        }
    )


def _color_signed(value: float) -> str:
    return "color: #16a34a" if value >= 0 else "color: #dc2626"


def style_net_impact_table(derived: DerivedSeries) -> Styler:
    """Net-impact table with currency formatting and sign colouring."""

    return build_net_impact_table(derived).style.format({"Monthly Net Impact ($)": format_currency}).map(
        _color_signed, subset=["Monthly Net Impact ($)"]
    )


def render_breakdown_table(derived: DerivedSeries) -> None:
    render_formatted_dataframe(
        build_breakdown_table(derived),
        {
            "Max Demand (kW)": "{:,.0f}",
            "Effective Demand (kW)": "{:,.0f}",
            "Exceedance (kW)": "{:,.0f}",
            "Total Charge ($)": format_currency,
        },
        hide_index=True,
    )


def render_rationale_section(derived: DerivedSeries, baseline_capacity_kw: float, tariff: TariffConstants) -> None:
    """Narrative, per-month net impact, and the overall savings sentence."""

    st.markdown("#### Monthly Savings & Optimization Rationale")
    st.caption(
        build_savings_narrative(
            derived.state.contracted_capacity_kw,
            baseline_capacity_kw,
            derived.is_positive_savings,
            derived.rationale,
        )
    )
    st.caption(rationale_caption(derived.rationale))

    st.dataframe(
        style_net_impact_table(derived),
        use_container_width=True,
        hide_index=True,
    )

    color = "green" if derived.is_positive_savings else "red"
    st.markdown(
        f"Overall, this yields a total **{derived.net_label}** of "
        f":{color}[**{format_currency(abs(derived.net_savings))}**] over {derived.period_count} months. "
        "The model determines the *optimal contracted capacity* by finding the best balance between the "
        f"fixed charge (`${tariff.contracted_rate_per_kw_month:.2f}/kW/month`) and potential exceedance "
        f"charges (`${tariff.exceedance_rate_per_kw_month:.2f}/kW/month`) when your effective demand goes "
        "above the contracted limit."
    )
