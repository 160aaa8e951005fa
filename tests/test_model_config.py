import pytest

from services.demand_charges import REFERENCE_TARIFF
from services.model_config import (
    CONTRACTED_RATE_ENV,
    EXCEEDANCE_RATE_ENV,
    ModelConfig,
    clamp_capacity,
    quantize_capacity,
)


def test_quantize_rounds_half_up():
    assert quantize_capacity(1005, 10) == 1010
    assert quantize_capacity(2995, 10) == 3000
    assert quantize_capacity(2994.9, 10) == 2990


def test_clamp_capacity_is_symmetric_at_both_bounds():
    bounds = (1000, 4000)
    assert clamp_capacity(-250, bounds, 10) == 1000
    assert clamp_capacity(999, bounds, 10) == 1000
    assert clamp_capacity(4004, bounds, 10) == 4000
    assert clamp_capacity(9000, bounds, 10) == 4000


def test_config_defaults_match_reference_site():
    cfg = ModelConfig()
    assert cfg.default_battery_kw == 400
    assert cfg.default_contracted_kw == 3100
    assert cfg.baseline_capacity_kw == 3100
    assert cfg.tariff == REFERENCE_TARIFF
    assert cfg.clamp_battery(1234) == 1000
    assert cfg.clamp_contracted(3333) == 3330


def test_from_env_without_overrides_returns_reference_tariff():
    assert ModelConfig.from_env({}).tariff == REFERENCE_TARIFF


def test_from_env_applies_partial_override():
    cfg = ModelConfig.from_env({EXCEEDANCE_RATE_ENV: "30"})
    assert cfg.tariff.contracted_rate_per_kw_month == pytest.approx(16.37)
    assert cfg.tariff.exceedance_rate_per_kw_month == pytest.approx(30.0)


def test_from_env_rejects_inverted_rates():
    with pytest.raises(ValueError):
        ModelConfig.from_env({CONTRACTED_RATE_ENV: "40", EXCEEDANCE_RATE_ENV: "30"})
