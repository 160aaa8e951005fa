"""Demand-charge cost model for a two-tier capacity tariff.

The tariff bills a fixed rate on the contracted capacity every month plus a
penalty rate on any effective demand above it. Battery peak shaving is
modeled as a flat offset on the monthly maximum demand. This module stays
free of Streamlit/UI dependencies so it can be reused from notebooks or
other entrypoints.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence


def _ensure_positive_finite(value: float, name: str) -> None:
    """Raise ValueError when a rate is non-positive or non-finite."""

    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number")
    if value <= 0:
        raise ValueError(f"{name} must be strictly positive")


@dataclass(frozen=True)
class TariffConstants:
    """Capacity tariff rates in USD per kW per month.

    The exceedance rate must be higher than the contracted rate so that
    under-contracting is never cost-free.
    """

    contracted_rate_per_kw_month: float
    exceedance_rate_per_kw_month: float

    def __post_init__(self) -> None:
        _ensure_positive_finite(self.contracted_rate_per_kw_month, "contracted_rate_per_kw_month")
        _ensure_positive_finite(self.exceedance_rate_per_kw_month, "exceedance_rate_per_kw_month")
        if self.exceedance_rate_per_kw_month <= self.contracted_rate_per_kw_month:
            raise ValueError(
                "exceedance_rate_per_kw_month must be greater than contracted_rate_per_kw_month"
            )


# Geneco high-tension tariff quoted for the reference site.
REFERENCE_TARIFF = TariffConstants(
    contracted_rate_per_kw_month=16.37,
    exceedance_rate_per_kw_month=24.56,
)


@dataclass(frozen=True)
class HistoricalRecord:
    """Maximum demand (kW) recorded in one billing period."""

    label: str
    max_demand_kw: float


def effective_demand(max_demand_kw: float, battery_capacity_kw: float) -> float:
    """Return the peak demand left after battery peak shaving, floored at zero."""

    return max(0.0, max_demand_kw - battery_capacity_kw)


def exceedance(effective_demand_kw: float, contracted_capacity_kw: float) -> float:
    """Return the kW billed at the exceedance rate for one period."""

    return max(0.0, effective_demand_kw - contracted_capacity_kw)


def monthly_charge(
    effective_demand_kw: float,
    contracted_capacity_kw: float,
    tariff: TariffConstants,
) -> float:
    """Return the demand charge (USD) for one billing period.

    ``contracted × contracted_rate + max(0, demand − contracted) × exceedance_rate``.
    The charge is non-decreasing in demand and convex piecewise linear in the
    contracted capacity.
    """

    contracted_charge = contracted_capacity_kw * tariff.contracted_rate_per_kw_month
    exceedance_charge = (
        exceedance(effective_demand_kw, contracted_capacity_kw) * tariff.exceedance_rate_per_kw_month
    )
    return contracted_charge + exceedance_charge


def effective_demand_series(
    max_demand_series: Iterable[float], battery_capacity_kw: float
) -> List[float]:
    """Apply :func:`effective_demand` to every period."""

    return [effective_demand(float(demand), battery_capacity_kw) for demand in max_demand_series]


def monthly_charge_series(
    effective_demand_series_kw: Iterable[float],
    contracted_capacity_kw: float,
    tariff: TariffConstants,
) -> List[float]:
    """Apply :func:`monthly_charge` to every period."""

    return [
        monthly_charge(float(demand), contracted_capacity_kw, tariff)
        for demand in effective_demand_series_kw
    ]


def total_charge(
    effective_demand_series_kw: Sequence[float],
    contracted_capacity_kw: float,
    tariff: TariffConstants,
) -> float:
    """Return the summed demand charge over all periods."""

    return math.fsum(monthly_charge_series(effective_demand_series_kw, contracted_capacity_kw, tariff))


__all__ = [
    "HistoricalRecord",
    "REFERENCE_TARIFF",
    "TariffConstants",
    "effective_demand",
    "effective_demand_series",
    "exceedance",
    "monthly_charge",
    "monthly_charge_series",
    "total_charge",
]
