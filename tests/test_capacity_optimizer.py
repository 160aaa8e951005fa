import pytest

from services.capacity_optimizer import (
    find_optimal_capacity,
    optimize_contracted_capacity,
    scan_capacity_costs,
    sweep_battery_capacities,
)
from services.demand_charges import REFERENCE_TARIFF, HistoricalRecord, TariffConstants
from services.derivation import BaselineScenario

MAX_DEMAND = [3114, 2736, 1467, 3894, 3085, 3077, 3113, 3098]
HISTORY = [HistoricalRecord(f"P{idx}", kw) for idx, kw in enumerate(MAX_DEMAND, start=1)]


def test_reference_history_optimum():
    assert find_optimal_capacity(MAX_DEMAND, 400, REFERENCE_TARIFF) == 2680


@pytest.mark.parametrize("battery_kw", [0, 150, 400, 1000])
def test_optimum_matches_full_scan(battery_kw):
    curve = scan_capacity_costs(MAX_DEMAND, battery_kw, REFERENCE_TARIFF)
    best = curve.loc[curve["total_charge"].idxmin()]

    assert len(curve) == 301
    assert curve["contracted_capacity_kw"].iloc[0] == 1000
    assert curve["contracted_capacity_kw"].iloc[-1] == 4000
    assert find_optimal_capacity(MAX_DEMAND, battery_kw, REFERENCE_TARIFF) == best["contracted_capacity_kw"]


def test_ties_resolve_to_lowest_capacity():
    tariff = TariffConstants(contracted_rate_per_kw_month=10.0, exceedance_rate_per_kw_month=20.0)
    # 1000 kW: 10000 + 5 * 20; 1010 kW: 10100.
    assert find_optimal_capacity([1005], 0, tariff, search_range=(1000, 1010), step=10) == 1000


def test_empty_history_returns_lower_bound():
    assert find_optimal_capacity([], 400, REFERENCE_TARIFF) == 1000


def test_search_is_deterministic():
    first = optimize_contracted_capacity(HISTORY, 400, REFERENCE_TARIFF)
    second = optimize_contracted_capacity(HISTORY, 400, REFERENCE_TARIFF)
    assert first == second
    assert first.optimal_capacity_kw == 2680
    assert "2,680 kW" in first.explanation_text
    assert "8 months" in first.explanation_text


@pytest.mark.parametrize("search_range, step", [((1000, 4000), 0), ((1000, 4000), -10), ((4000, 1000), 10)])
def test_invalid_search_grid_raises(search_range, step):
    with pytest.raises(ValueError):
        find_optimal_capacity(MAX_DEMAND, 400, REFERENCE_TARIFF, search_range=search_range, step=step)


def test_battery_sweep_rows_follow_input_order():
    sweep = sweep_battery_capacities(HISTORY, REFERENCE_TARIFF, [400, 0], BaselineScenario(3100))

    assert list(sweep.columns) == ["battery_capacity_kw", "optimal_capacity_kw", "total_charge", "net_savings"]
    assert list(sweep["battery_capacity_kw"]) == [400.0, 0.0]
    assert sweep["optimal_capacity_kw"].iloc[0] == 2680
    # An optimized contract never costs more than the same battery at the baseline capacity.
    assert (sweep["net_savings"] >= 0).all()


def test_fractional_step_keeps_upper_bound():
    curve = scan_capacity_costs(MAX_DEMAND, 400, REFERENCE_TARIFF, search_range=(1000, 4000), step=0.1)

    assert len(curve) == 30001
    assert curve["contracted_capacity_kw"].iloc[-1] == 4000


def test_fractional_step_can_select_upper_bound():
    tariff = TariffConstants(contracted_rate_per_kw_month=1.0, exceedance_rate_per_kw_month=100.0)
    assert find_optimal_capacity([1.0], 0, tariff, search_range=(0, 1), step=0.1) == 1.0


def test_step_not_dividing_range_stays_inside_bounds():
    curve = scan_capacity_costs([500], 0, REFERENCE_TARIFF, search_range=(0, 1), step=0.3)
    assert curve["contracted_capacity_kw"].tolist() == pytest.approx([0.0, 0.3, 0.6, 0.9])
