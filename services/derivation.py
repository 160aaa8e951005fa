"""Single-pass derivation of every figure shown for a capacity scenario.

All outputs come from one immutable :class:`ModelState` snapshot, so the
chart, tables, summary cards and savings can never disagree with each other.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Sequence, Tuple

import pandas as pd

from services.demand_charges import (
    HistoricalRecord,
    TariffConstants,
    effective_demand_series,
    exceedance,
    monthly_charge_series,
)
from services.model_config import DEFAULT_CONFIG, ModelConfig
from services.rationale import RationaleKind, classify_rationale


@dataclass(frozen=True)
class ModelState:
    """User-controlled inputs for one session (kW)."""

    battery_capacity_kw: float
    contracted_capacity_kw: float

    @classmethod
    def initial(cls, config: ModelConfig = DEFAULT_CONFIG) -> "ModelState":
        return cls(
            battery_capacity_kw=config.default_battery_kw,
            contracted_capacity_kw=config.default_contracted_kw,
        )

    def with_battery_capacity(self, value: float, config: ModelConfig = DEFAULT_CONFIG) -> "ModelState":
        return replace(self, battery_capacity_kw=config.clamp_battery(value))

    def with_contracted_capacity(self, value: float, config: ModelConfig = DEFAULT_CONFIG) -> "ModelState":
        return replace(self, contracted_capacity_kw=config.clamp_contracted(value))


@dataclass(frozen=True)
class BaselineScenario:
    """No-battery comparison case billed at a fixed contracted capacity."""

    contracted_capacity_kw: float = DEFAULT_CONFIG.baseline_capacity_kw


@dataclass(frozen=True)
class DerivedSeries:
    labels: Tuple[str, ...]
    max_demand_kw: Tuple[float, ...]
    effective_demand_kw: Tuple[float, ...]
    exceedance_kw: Tuple[float, ...]
    monthly_charge: Tuple[float, ...]
    total_charge: float
    baseline_charge: Tuple[float, ...]
    baseline_total_charge: float
    monthly_savings: Tuple[float, ...]
    net_savings: float
    rationale: RationaleKind
    state: ModelState

    @property
    def is_positive_savings(self) -> bool:
        return self.net_savings >= 0

    @property
    def net_label(self) -> str:
        return "savings" if self.is_positive_savings else "additional cost"

    @property
    def period_count(self) -> int:
        return len(self.labels)

    def to_frame(self) -> pd.DataFrame:
        """Per-period table used by the breakdown view and CSV download."""

        return pd.DataFrame(
            {
                "period": list(self.labels),
                "max_demand_kw": list(self.max_demand_kw),
                "effective_demand_kw": list(self.effective_demand_kw),
                "exceedance_kw": list(self.exceedance_kw),
                "monthly_charge_usd": list(self.monthly_charge),
                "baseline_charge_usd": list(self.baseline_charge),
                "monthly_savings_usd": list(self.monthly_savings),
            }
        )


def derive_series(
    history: Sequence[HistoricalRecord],
    tariff: TariffConstants,
    state: ModelState,
    baseline: BaselineScenario = BaselineScenario(),
) -> DerivedSeries:
    """Recompute all dependent figures for ``state`` in one pass.

    The baseline is billed on raw maximum demand (no battery). Monthly savings
    keep their own sign per period; a month can cost more even when the total
    shows savings.
    """

    labels = tuple(record.label for record in history)
    max_demand = tuple(float(record.max_demand_kw) for record in history)
    contracted = state.contracted_capacity_kw

    effective = tuple(effective_demand_series(max_demand, state.battery_capacity_kw))
    exceedance_kw = tuple(exceedance(demand, contracted) for demand in effective)
    charges = tuple(monthly_charge_series(effective, contracted, tariff))
    baseline_charges = tuple(monthly_charge_series(max_demand, baseline.contracted_capacity_kw, tariff))
    monthly_savings = tuple(base - charge for base, charge in zip(baseline_charges, charges))
    net_savings = math.fsum(monthly_savings)

    return DerivedSeries(
        labels=labels,
        max_demand_kw=max_demand,
        effective_demand_kw=effective,
        exceedance_kw=exceedance_kw,
        monthly_charge=charges,
        total_charge=math.fsum(charges),
        baseline_charge=baseline_charges,
        baseline_total_charge=math.fsum(baseline_charges),
        monthly_savings=monthly_savings,
        net_savings=net_savings,
        rationale=classify_rationale(net_savings, contracted, effective),
        state=state,
    )
