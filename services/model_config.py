"""Bounds, defaults and the shared clamp path for capacity inputs."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

from services.demand_charges import REFERENCE_TARIFF, TariffConstants

Bounds = Tuple[float, float]

CONTRACTED_RATE_ENV = "CAPACITYLAB_CONTRACTED_RATE"
EXCEEDANCE_RATE_ENV = "CAPACITYLAB_EXCEEDANCE_RATE"


def quantize_capacity(value: float, step: float) -> float:
    """Round ``value`` half-up to the nearest multiple of ``step``."""

    return math.floor(value / step + 0.5) * step


def clamp_capacity(value: float, bounds: Bounds, step: float) -> float:
    """Quantize then clamp a capacity into ``bounds``.

    Every ModelState mutator (manual input, chart drag, optimizer) goes
    through this helper so all of them land on the same grid.
    """

    low, high = bounds
    return max(low, min(high, quantize_capacity(value, step)))


@dataclass(frozen=True)
class ModelConfig:
    """Session defaults for the capacity workspace.

    Units are kW for every capacity field. ``chart_value_max_kw`` is the top of
    the demand chart's value axis, which the drag mapping is scaled against.
    """

    battery_bounds_kw: Bounds = (0, 1000)
    contracted_bounds_kw: Bounds = (1000, 4000)
    capacity_step_kw: int = 10
    default_battery_kw: int = 400
    default_contracted_kw: int = 3100
    baseline_capacity_kw: int = 3100
    chart_value_max_kw: int = 4000
    tariff: TariffConstants = field(default=REFERENCE_TARIFF)

    def clamp_battery(self, value: float) -> float:
        return clamp_capacity(value, self.battery_bounds_kw, self.capacity_step_kw)

    def clamp_contracted(self, value: float) -> float:
        return clamp_capacity(value, self.contracted_bounds_kw, self.capacity_step_kw)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ModelConfig":
        """Return the default config with tariff overrides from the environment.

        The lookup order is environment variable → built-in reference tariff.
        Invalid overrides raise ``ValueError`` from :class:`TariffConstants`.
        """

        env = os.environ if environ is None else environ
        cfg = cls()
        contracted_raw = env.get(CONTRACTED_RATE_ENV)
        exceedance_raw = env.get(EXCEEDANCE_RATE_ENV)
        if not contracted_raw and not exceedance_raw:
            return cfg

        tariff = TariffConstants(
            contracted_rate_per_kw_month=float(contracted_raw or cfg.tariff.contracted_rate_per_kw_month),
            exceedance_rate_per_kw_month=float(exceedance_raw or cfg.tariff.exceedance_rate_per_kw_month),
        )
        return replace(cfg, tariff=tariff)


DEFAULT_CONFIG = ModelConfig()
