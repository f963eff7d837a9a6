"""
Record Loading
==============
Read raw wildfire / pollution CSVs into normalized pandas frames.

Wildfire frames carry one row per event with columns
    latitude, longitude, year, day_of_year, magnitude, label
where magnitude is the fire size and label = magnitude > 0.

Pollution frames carry
    date, latitude, longitude, <16 pollutant target columns>
in the fixed target order {O3, CO, SO2, NO2} x {Mean, 1st Max Value, 1st Max Hour, AQI}.

Rows missing a required field are dropped. Unparseable pollutant targets are
coerced to 0.0 and the row is kept.
"""

import os
from typing import List, NamedTuple

import numpy as np
import pandas as pd

# Raw wildfire column -> normalized column
FIRE_SOURCE_COLUMNS = {
    "FIRE_SIZE": "magnitude",
    "LATITUDE": "latitude",
    "LONGITUDE": "longitude",
    "FIRE_YEAR": "year",
    "DISCOVERY_DOY": "day_of_year",
}

RECORD_COLUMNS = ["latitude", "longitude", "year", "day_of_year", "magnitude", "label"]

POLLUTANTS = ["O3", "CO", "SO2", "NO2"]
POLLUTANT_METRICS = ["Mean", "1st Max Value", "1st Max Hour", "AQI"]
POLLUTION_TARGET_COLUMNS = [f"{p} {m}" for p in POLLUTANTS for m in POLLUTANT_METRICS]
# Positions of the per-pollutant AQI values in the target vector
AQI_INDICES = [POLLUTION_TARGET_COLUMNS.index(f"{p} AQI") for p in POLLUTANTS]

POLLUTION_REQUIRED = ["Date", "Longitude_Geocoded", "Latitude_Geocoded"]


class EventRecord(NamedTuple):
    """One space-time observation (positive or synthesized negative)."""
    latitude: float
    longitude: float
    year: int
    day_of_year: int
    magnitude: float = 0.0
    label: bool = False


def records_to_frame(records: List[EventRecord]) -> pd.DataFrame:
    """Build a normalized event frame from a list of EventRecord."""
    if not records:
        return empty_event_frame()
    df = pd.DataFrame.from_records(records, columns=RECORD_COLUMNS)
    return _cast_event_frame(df)


def empty_event_frame() -> pd.DataFrame:
    return _cast_event_frame(pd.DataFrame({c: [] for c in RECORD_COLUMNS}))


def _cast_event_frame(df):
    return df.astype({
        "latitude": np.float64,
        "longitude": np.float64,
        "year": np.int64,
        "day_of_year": np.int64,
        "magnitude": np.float64,
        "label": bool,
    })


def _check_columns(df, required, source):
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {source}: {missing}")


def prepare_fire_frame(raw: pd.DataFrame, source="fire data") -> pd.DataFrame:
    """
    Normalize a raw wildfire table.

    Args:
        raw: DataFrame with FIRE_SIZE, LATITUDE, LONGITUDE, FIRE_YEAR, DISCOVERY_DOY
        source: Label used in error messages

    Returns:
        DataFrame with RECORD_COLUMNS, rows with missing/unparseable fields dropped
    """
    raw = raw.copy()
    raw.columns = [str(c).lstrip("\ufeff").strip() for c in raw.columns]
    _check_columns(raw, list(FIRE_SOURCE_COLUMNS), source)

    df = raw[list(FIRE_SOURCE_COLUMNS)].rename(columns=FIRE_SOURCE_COLUMNS)
    for col in df.columns:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    before = len(df)
    df = df.replace([np.inf, -np.inf], np.nan).dropna()
    dropped = before - len(df)
    if dropped:
        print(f"[Data] Dropped {dropped} of {before} rows with missing required fields")

    df["label"] = df["magnitude"] > 0
    return _cast_event_frame(df[RECORD_COLUMNS].reset_index(drop=True))


def load_fire_records(csv_path) -> pd.DataFrame:
    """Read a wildfire CSV (e.g. firedata.csv) into a normalized event frame."""
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Fire CSV not found: {csv_path}")
    raw = pd.read_csv(csv_path, low_memory=False)
    df = prepare_fire_frame(raw, source=csv_path)
    print(f"[Data] Loaded {len(df)} fire records from {csv_path}")
    return df


def prepare_pollution_frame(raw: pd.DataFrame, source="pollution data") -> pd.DataFrame:
    """
    Normalize a raw pollution table.

    Rows with a missing/unparseable Date, Longitude_Geocoded or
    Latitude_Geocoded are dropped. Target cells that fail to parse become 0.0;
    a target column absent from the file is filled with 0.0.
    """
    raw = raw.copy()
    raw.columns = [str(c).lstrip("\ufeff").strip() for c in raw.columns]
    _check_columns(raw, POLLUTION_REQUIRED, source)

    df = pd.DataFrame({
        "date": pd.to_datetime(raw["Date"], errors="coerce", format="mixed"),
        "latitude": pd.to_numeric(raw["Latitude_Geocoded"], errors="coerce"),
        "longitude": pd.to_numeric(raw["Longitude_Geocoded"], errors="coerce"),
    })

    absent = [c for c in POLLUTION_TARGET_COLUMNS if c not in raw.columns]
    if absent:
        print(f"[Warning] Target columns absent from {source}, filled with 0: {absent}")
    for col in POLLUTION_TARGET_COLUMNS:
        if col in raw.columns:
            df[col] = pd.to_numeric(raw[col], errors="coerce").fillna(0.0).astype(np.float64)
        else:
            df[col] = 0.0

    before = len(df)
    df = df.dropna(subset=["date", "latitude", "longitude"])
    dropped = before - len(df)
    if dropped:
        print(f"[Data] Dropped {dropped} of {before} rows with missing date or coordinates")

    return df.reset_index(drop=True)


def load_pollution_records(csv_path) -> pd.DataFrame:
    """Read a geocoded pollution CSV into a normalized frame."""
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Pollution CSV not found: {csv_path}")
    raw = pd.read_csv(csv_path, low_memory=False)
    df = prepare_pollution_frame(raw, source=csv_path)
    print(f"[Data] Loaded {len(df)} pollution records from {csv_path}")
    return df
