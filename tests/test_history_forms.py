from typing import List

import pytest

import frontend.ui.forms as forms


@pytest.fixture
def reported(monkeypatch):
    messages: List[str] = []
    replaced = []
    monkeypatch.setattr(forms.st, "error", messages.append)
    monkeypatch.setattr(forms.st, "success", lambda message: None)
    monkeypatch.setattr(forms, "replace_shared_history", lambda df, source: replaced.append((df, source)))
    return messages, replaced


def test_bad_reading_is_reported_once(reported):
    messages, replaced = reported
    forms._apply_pasted_readings("", "3114, abc")

    assert len(messages) == 1
    assert "'abc'" in messages[0]
    assert replaced == []


def test_negative_reading_is_reported_once(reported):
    messages, replaced = reported
    forms._apply_pasted_readings("", "3114, -5")

    assert len(messages) == 1
    assert replaced == []


def test_empty_readings_ask_for_input(reported):
    messages, _ = reported
    forms._apply_pasted_readings("", "   ")
    assert messages == ["Provide at least one reading."]


def test_label_mismatch_is_reported(reported):
    messages, replaced = reported
    forms._apply_pasted_readings("May", "3114, 2736")

    assert messages == ["labels must match the number of readings"]
    assert replaced == []


def test_valid_readings_replace_history(reported):
    messages, replaced = reported
    forms._apply_pasted_readings("May, Jun", "3114\n2736")

    assert messages == []
    df, source = replaced[0]
    assert source == "pasted"
    assert list(df["label"]) == ["May", "Jun"]
    assert list(df["max_demand_kw"]) == [3114.0, 2736.0]
