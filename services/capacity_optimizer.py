"""Brute-force search for the contracted capacity with the lowest total charge."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from services.demand_charges import (
    HistoricalRecord,
    TariffConstants,
    effective_demand_series,
    total_charge,
)
from services.derivation import BaselineScenario, ModelState, derive_series
from services.model_config import DEFAULT_CONFIG

DEFAULT_SEARCH_RANGE: Tuple[float, float] = DEFAULT_CONFIG.contracted_bounds_kw
DEFAULT_SEARCH_STEP: float = DEFAULT_CONFIG.capacity_step_kw


@dataclass(frozen=True)
class OptimizationResult:
    """Optimizer outcome plus the message shown to the user."""

    optimal_capacity_kw: float
    total_charge: float
    explanation_text: str


def _candidate_capacities(search_range: Tuple[float, float], step: float) -> List[float]:
    """Return the inclusive candidate grid, stepping by index to avoid drift."""

    low, high = search_range
    if step <= 0:
        raise ValueError("step must be positive.")
    if low > high:
        raise ValueError("search_range lower bound must not exceed the upper bound.")
    # Tolerance keeps the upper bound when (high - low) / step lands just below an integer.
    count = int(math.floor((high - low) / step + 1e-9)) + 1
    return [min(high, low + idx * step) for idx in range(count)]


def scan_capacity_costs(
    max_demand_series: Sequence[float],
    battery_capacity_kw: float,
    tariff: TariffConstants,
    search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE,
    step: float = DEFAULT_SEARCH_STEP,
) -> pd.DataFrame:
    """Evaluate the total charge at every candidate capacity.

    Returns a frame with ``contracted_capacity_kw`` and ``total_charge`` columns
    in ascending capacity order.
    """

    effective = effective_demand_series(max_demand_series, battery_capacity_kw)
    candidates = _candidate_capacities(search_range, step)
    return pd.DataFrame(
        {
            "contracted_capacity_kw": candidates,
            "total_charge": [total_charge(effective, capacity, tariff) for capacity in candidates],
        }
    )


def find_optimal_capacity(
    max_demand_series: Sequence[float],
    battery_capacity_kw: float,
    tariff: TariffConstants,
    search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE,
    step: float = DEFAULT_SEARCH_STEP,
) -> float:
    """Return the lowest-cost contracted capacity on the search grid.

    A candidate replaces the incumbent only when its cost is strictly lower,
    so among equal-cost capacities the smallest one wins.
    """

    effective = effective_demand_series(max_demand_series, battery_capacity_kw)
    optimal_capacity = search_range[0]
    min_cost = float("inf")
    for capacity in _candidate_capacities(search_range, step):
        cost = total_charge(effective, capacity, tariff)
        if cost < min_cost:
            min_cost = cost
            optimal_capacity = capacity
    return optimal_capacity


def build_optimization_explanation(
    optimal_capacity_kw: float, period_count: int, tariff: TariffConstants
) -> str:
    return (
        f"The optimal contracted capacity of {optimal_capacity_kw:,.0f} kW was determined by minimizing "
        f"the total cost over {period_count} months, balancing fixed charges "
        f"(${tariff.contracted_rate_per_kw_month:.2f}/kW/month) against penalties for exceeding the "
        f"contracted capacity (${tariff.exceedance_rate_per_kw_month:.2f}/kW/month)."
    )


def optimize_contracted_capacity(
    history: Sequence[HistoricalRecord],
    battery_capacity_kw: float,
    tariff: TariffConstants,
    search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE,
    step: float = DEFAULT_SEARCH_STEP,
) -> OptimizationResult:
    """Run the capacity search for a history and explain the result."""

    max_demand = [float(record.max_demand_kw) for record in history]
    optimal = find_optimal_capacity(max_demand, battery_capacity_kw, tariff, search_range, step)
    cost = total_charge(effective_demand_series(max_demand, battery_capacity_kw), optimal, tariff)
    logging.getLogger(__name__).info(
        "Optimal contracted capacity %s kW (battery %s kW, total charge %.2f).",
        optimal,
        battery_capacity_kw,
        cost,
    )
    return OptimizationResult(
        optimal_capacity_kw=optimal,
        total_charge=cost,
        explanation_text=build_optimization_explanation(optimal, len(history), tariff),
    )


def sweep_battery_capacities(
    history: Sequence[HistoricalRecord],
    tariff: TariffConstants,
    battery_values_kw: Iterable[float],
    baseline: BaselineScenario = BaselineScenario(),
    search_range: Tuple[float, float] = DEFAULT_SEARCH_RANGE,
    step: float = DEFAULT_SEARCH_STEP,
) -> pd.DataFrame:
    """Optimize the contracted capacity for each battery size.

    Each row reports the optimal capacity, its total charge and the net savings
    against the baseline scenario. Rows follow the order of ``battery_values_kw``.
    """

    rows = []
    for battery_kw in battery_values_kw:
        result = optimize_contracted_capacity(history, float(battery_kw), tariff, search_range, step)
        derived = derive_series(
            history,
            tariff,
            ModelState(battery_capacity_kw=float(battery_kw), contracted_capacity_kw=result.optimal_capacity_kw),
            baseline,
        )
        rows.append(
            {
                "battery_capacity_kw": float(battery_kw),
                "optimal_capacity_kw": result.optimal_capacity_kw,
                "total_charge": derived.total_charge,
                "net_savings": derived.net_savings,
            }
        )

    return pd.DataFrame(
        rows, columns=["battery_capacity_kw", "optimal_capacity_kw", "total_charge", "net_savings"]
    )
