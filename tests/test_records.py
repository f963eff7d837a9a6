import numpy as np
import pandas as pd
import pytest

from hazardcast.data.records import (
    AQI_INDICES,
    EventRecord,
    POLLUTION_TARGET_COLUMNS,
    RECORD_COLUMNS,
    load_fire_records,
    load_pollution_records,
    prepare_fire_frame,
    prepare_pollution_frame,
    records_to_frame,
)


def test_fire_frame_drops_incomplete_rows():
    raw = pd.DataFrame({
        "FIRE_SIZE": ["5.0", "", "0", "2.5"],
        "LATITUDE": [30.0, 31.0, 32.0, "abc"],
        "LONGITUDE": [-80.0, -81.0, -82.0, -83.0],
        "FIRE_YEAR": [2020, 2021, 2022, 2023],
        "DISCOVERY_DOY": [100, 150, 200, 250],
    })
    df = prepare_fire_frame(raw)
    assert list(df.columns) == RECORD_COLUMNS
    assert len(df) == 2
    assert df["label"].tolist() == [True, False]
    assert df["year"].dtype == np.int64
    assert df["day_of_year"].tolist() == [100, 200]


def test_fire_frame_missing_column():
    raw = pd.DataFrame({"FIRE_SIZE": [1.0], "LATITUDE": [30.0]})
    with pytest.raises(ValueError, match="LONGITUDE"):
        prepare_fire_frame(raw)


def test_load_fire_records_from_csv(tmp_path):
    path = tmp_path / "firedata.csv"
    pd.DataFrame({
        "OBJECTID": [1, 2],
        "FIRE_SIZE": [0.1, 12.0],
        "LATITUDE": [40.0, 41.5],
        "LONGITUDE": [-121.0, -120.5],
        "FIRE_YEAR": [2005, 2006],
        "DISCOVERY_DOY": [33, 210],
    }).to_csv(path, index=False)
    df = load_fire_records(str(path))
    assert len(df) == 2
    assert df["magnitude"].tolist() == [0.1, 12.0]


def test_load_fire_records_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_fire_records(str(tmp_path / "nope.csv"))


def test_pollution_frame_coerces_bad_targets_and_drops_missing_coords():
    raw = pd.DataFrame({
        "Date": ["2020-01-01", "2020-01-02", None],
        "Longitude_Geocoded": [-112.0, "", -110.0],
        "Latitude_Geocoded": [33.4, 33.5, 33.6],
    })
    for col in POLLUTION_TARGET_COLUMNS:
        raw[col] = [1.5, 2.5, 3.5]
    raw.loc[0, "O3 Mean"] = "n/a"

    df = prepare_pollution_frame(raw)
    assert len(df) == 1
    assert df.loc[0, "O3 Mean"] == 0.0
    assert df.loc[0, "CO AQI"] == 1.5


def test_pollution_frame_fills_absent_target_column():
    raw = pd.DataFrame({
        "Date": ["2021-06-01"],
        "Longitude_Geocoded": [-100.0],
        "Latitude_Geocoded": [40.0],
        "NO2 AQI": [42],
    })
    df = prepare_pollution_frame(raw)
    assert df.loc[0, "NO2 AQI"] == 42.0
    assert df.loc[0, "SO2 Mean"] == 0.0


def test_load_pollution_records_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pollution_records(str(tmp_path / "missing.csv"))


def test_target_order():
    assert len(POLLUTION_TARGET_COLUMNS) == 16
    assert POLLUTION_TARGET_COLUMNS[0] == "O3 Mean"
    assert POLLUTION_TARGET_COLUMNS[5] == "CO 1st Max Value"
    assert POLLUTION_TARGET_COLUMNS[14] == "NO2 1st Max Hour"
    assert AQI_INDICES == [3, 7, 11, 15]


def test_records_to_frame():
    df = records_to_frame([EventRecord(30.5, -80.5, 2020, 10)])
    assert list(df.columns) == RECORD_COLUMNS
    assert df.loc[0, "magnitude"] == 0.0
    assert not df.loc[0, "label"]
    assert len(records_to_frame([])) == 0
