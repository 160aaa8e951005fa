import math

import pytest

from services.demand_charges import REFERENCE_TARIFF, HistoricalRecord
from services.derivation import BaselineScenario, ModelState, derive_series
from services.rationale import RationaleKind

HISTORY = [
    HistoricalRecord(label, kw)
    for label, kw in [
        ("May", 3114),
        ("Jun", 2736),
        ("Jul", 1467),
        ("Aug", 3894),
        ("Sep", 3085),
        ("Oct", 3077),
        ("Nov", 3113),
        ("Dec", 3098),
    ]
]


def test_reference_scenario_figures():
    derived = derive_series(HISTORY, REFERENCE_TARIFF, ModelState(400, 3100))

    assert derived.labels[2] == "Jul"
    assert derived.monthly_charge[2] == pytest.approx(50747.0)
    assert derived.monthly_charge[3] == pytest.approx(60423.64)
    assert derived.exceedance_kw == (0.0, 0.0, 0.0, 394.0, 0.0, 0.0, 0.0, 0.0)
    assert derived.total_charge == pytest.approx(415652.64)
    assert derived.baseline_total_charge == pytest.approx(426139.76)
    assert derived.net_savings == pytest.approx(10487.12)
    assert derived.rationale is RationaleKind.PEAK_REDUCTION
    assert derived.net_label == "savings"


def test_savings_decompose_per_period():
    derived = derive_series(HISTORY, REFERENCE_TARIFF, ModelState(250, 2900))
    assert derived.net_savings == math.fsum(derived.monthly_savings)
    assert derived.net_savings == pytest.approx(derived.baseline_total_charge - derived.total_charge)
    for base, charge, saving in zip(derived.baseline_charge, derived.monthly_charge, derived.monthly_savings):
        assert saving == pytest.approx(base - charge)


def test_baseline_state_has_zero_savings():
    derived = derive_series(HISTORY, REFERENCE_TARIFF, ModelState(0, 3100), BaselineScenario(3100))
    assert derived.net_savings == 0.0
    assert derived.rationale is RationaleKind.PEAK_REDUCTION


def test_over_and_under_contracting_are_reported():
    over = derive_series(HISTORY, REFERENCE_TARIFF, ModelState(0, 4000))
    under = derive_series(HISTORY, REFERENCE_TARIFF, ModelState(0, 1000))

    assert over.net_savings < 0
    assert over.rationale is RationaleKind.OVER_CONTRACTED
    assert over.net_label == "additional cost"
    assert under.net_savings < 0
    assert under.rationale is RationaleKind.UNDER_CONTRACTED


def test_to_frame_keeps_period_order():
    frame = derive_series(HISTORY, REFERENCE_TARIFF, ModelState(400, 3100)).to_frame()
    assert list(frame["period"]) == [record.label for record in HISTORY]
    assert frame["monthly_savings_usd"].sum() == pytest.approx(10487.12)


def test_state_mutators_clamp_and_quantize():
    state = ModelState.initial()
    assert (state.battery_capacity_kw, state.contracted_capacity_kw) == (400, 3100)
    assert state.with_battery_capacity(-5).battery_capacity_kw == 0
    assert state.with_contracted_capacity(3456).contracted_capacity_kw == 3460
    assert state.with_contracted_capacity(50).contracted_capacity_kw == 1000


def test_empty_history_derives_zero_totals():
    derived = derive_series([], REFERENCE_TARIFF, ModelState(400, 3100))
    assert derived.period_count == 0
    assert derived.total_charge == 0.0
    assert derived.net_savings == 0.0
