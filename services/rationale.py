"""Rationale metadata and the savings narrative shown next to the results."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Sequence


class RationaleKind(str, Enum):
    PEAK_REDUCTION = "peak_reduction"
    OVER_CONTRACTED = "over_contracted"
    UNDER_CONTRACTED = "under_contracted"


RATIONALE_DEFINITIONS: Dict[RationaleKind, Dict[str, str]] = {
    RationaleKind.PEAK_REDUCTION: {
        "label": "Battery peak reduction",
        "reason": (
            "the battery helps reduce your peak demand each month, thus reducing penalties"
            " for exceedance."
        ),
        "knobs": "Keep the battery sized so effective peaks stay near the contracted level.",
    },
    RationaleKind.OVER_CONTRACTED: {
        "label": "Over-contracted",
        "reason": (
            "the contracted capacity may be set too high relative to your actual usage,"
            " causing overpayment in fixed charges."
        ),
        "knobs": "Lower the contracted capacity or use the optimizer.",
    },
    RationaleKind.UNDER_CONTRACTED: {
        "label": "Under-contracted",
        "reason": (
            "the contracted capacity may be set too low relative to your effective demands,"
            " causing higher exceedance penalties."
        ),
        "knobs": "Raise the contracted capacity or add battery capacity.",
    },
}


def classify_rationale(
    net_savings: float,
    contracted_capacity_kw: float,
    effective_demand_kw: Sequence[float],
) -> RationaleKind:
    """Pick exactly one explanation for the current savings figure.

    Order matters: non-negative savings always credit the battery; otherwise a
    capacity above every effective peak is over-contracting, and everything
    else (including a capacity between the lowest and highest peaks) is
    reported as under-contracting.
    """

    if net_savings >= 0:
        return RationaleKind.PEAK_REDUCTION
    max_effective = max(effective_demand_kw) if effective_demand_kw else 0.0
    if contracted_capacity_kw > max_effective:
        return RationaleKind.OVER_CONTRACTED
    return RationaleKind.UNDER_CONTRACTED


def rationale_reason(kind: RationaleKind) -> str:
    return RATIONALE_DEFINITIONS[kind]["reason"]


def rationale_caption(kind: RationaleKind) -> str:
    """Short "label: what to adjust" line shown under the narrative."""

    definition = RATIONALE_DEFINITIONS[kind]
    return f"{definition['label']}: {definition['knobs']}"


def build_savings_narrative(
    contracted_capacity_kw: float,
    baseline_capacity_kw: float,
    is_positive_savings: bool,
    kind: RationaleKind,
) -> str:
    """Return the sentence pair that introduces the monthly net-impact table."""

    direction = "lowered" if is_positive_savings else "higher"
    verb = "saves" if is_positive_savings else "costs"
    return (
        f"With a contracted capacity of {contracted_capacity_kw:,.0f} kW, your monthly demand charges are "
        f"{direction} compared to the original {baseline_capacity_kw:,.0f} kW scenario. "
        f"This {verb} you overall because {rationale_reason(kind)}"
    )
