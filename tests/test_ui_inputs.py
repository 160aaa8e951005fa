import pytest

from utils.ui_inputs import parse_numeric_series


def test_parse_numeric_series_accepts_commas_and_newlines():
    assert parse_numeric_series("Readings", "3114, 2736\n1467,\n\n3894.5") == [3114.0, 2736.0, 1467.0, 3894.5]


def test_parse_numeric_series_blank_is_empty():
    assert parse_numeric_series("Readings", "  ") == []


def test_parse_numeric_series_names_bad_token():
    with pytest.raises(ValueError, match="Readings contains a non-numeric entry: 'abc'"):
        parse_numeric_series("Readings", "100, abc")


def test_parse_numeric_series_names_unit_in_error():
    with pytest.raises(ValueError, match=r"expected kW"):
        parse_numeric_series("Readings", "12x")


def test_parse_numeric_series_rejects_values_below_minimum():
    assert parse_numeric_series("Battery capacities", "0, 250", min_value=0.0) == [0.0, 250.0]
    with pytest.raises(ValueError, match="values must be at least 0 kW"):
        parse_numeric_series("Battery capacities", "100, -20", min_value=0.0)
