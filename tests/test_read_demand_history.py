import io
from pathlib import Path

import pandas as pd
import pytest

from utils.io import history_from_frame, history_from_readings, read_demand_history

BUNDLED_HISTORY = Path(__file__).resolve().parent.parent / "data" / "max_demand_history.csv"


def _csv(text: str) -> io.StringIO:
    return io.StringIO(text)


def test_bundled_history_loads_in_billing_order():
    df = read_demand_history([str(BUNDLED_HISTORY)])
    records = history_from_frame(df)

    assert [record.label for record in records] == ["May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    assert records[3].max_demand_kw == 3894.0


def test_falls_back_to_next_candidate(tmp_path):
    missing = tmp_path / "missing.csv"
    df = read_demand_history([str(missing), _csv("label,max_demand_kw\nJan,1200\n")])
    assert df.to_dict("records") == [{"label": "Jan", "max_demand_kw": 1200.0}]


def test_invalid_rows_are_dropped():
    df = read_demand_history([_csv("label,max_demand_kw\nJan,1200\nFeb,abc\nMar,-5\nApr,\nMay,900\n")])
    assert list(df["label"]) == ["Jan", "May"]
    assert df.index.tolist() == [0, 1]


def test_missing_columns_raise_runtime_error():
    with pytest.raises(RuntimeError, match="Failed to read demand history"):
        read_demand_history([_csv("month,kw\nJan,1200\n")])


def test_all_invalid_rows_raise_runtime_error():
    with pytest.raises(RuntimeError):
        read_demand_history([_csv("label,max_demand_kw\nJan,-1\n")])


def test_readings_default_labels():
    df = history_from_readings([100, 200.5])
    assert list(df["label"]) == ["P1", "P2"]
    assert history_from_frame(df)[1].max_demand_kw == 200.5


def test_readings_with_labels():
    df = history_from_readings([100, 200], ["Jan", "Feb"])
    assert isinstance(df, pd.DataFrame)
    assert list(df["label"]) == ["Jan", "Feb"]


@pytest.mark.parametrize("readings, labels", [([100, 200], ["Jan"]), ([100, -1], None)])
def test_readings_reject_bad_input(readings, labels):
    with pytest.raises(ValueError):
        history_from_readings(readings, labels)
