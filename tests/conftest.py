"""Shared fixtures: small seeded fire / pollution tables."""
import numpy as np
import pandas as pd
import pytest

from hazardcast.data.records import prepare_fire_frame, prepare_pollution_frame, POLLUTION_TARGET_COLUMNS
from hazardcast.utils.seed import make_rng


@pytest.fixture
def rng():
    return make_rng(1234)


@pytest.fixture
def two_fires():
    raw = pd.DataFrame({
        "FIRE_SIZE": [5.0, 3.0],
        "LATITUDE": [30.0, 31.0],
        "LONGITUDE": [-80.0, -81.0],
        "FIRE_YEAR": [2020, 2021],
        "DISCOVERY_DOY": [100, 150],
    })
    return prepare_fire_frame(raw)


@pytest.fixture
def clustered_fires():
    """200 fires packed into the south-west corner of a 5x5 degree box, plus two corner anchors."""
    gen = np.random.default_rng(7)
    n = 200
    lat = np.concatenate([gen.uniform(30.0, 31.5, n), [30.0, 35.0]])
    lon = np.concatenate([gen.uniform(-85.0, -83.5, n), [-85.0, -80.0]])
    raw = pd.DataFrame({
        "FIRE_SIZE": np.concatenate([gen.uniform(0.1, 50.0, n), [1.0, 2.0]]),
        "LATITUDE": lat,
        "LONGITUDE": lon,
        "FIRE_YEAR": np.concatenate([gen.integers(2000, 2011, n), [2000, 2010]]),
        "DISCOVERY_DOY": np.concatenate([gen.integers(1, 367, n), [50, 250]]),
    })
    return prepare_fire_frame(raw)


@pytest.fixture
def pollution_records():
    gen = np.random.default_rng(11)
    n = 40
    dates = pd.date_range("2010-01-01", periods=n, freq="17D").strftime("%Y-%m-%d")
    raw = pd.DataFrame({
        "Date": dates,
        "Longitude_Geocoded": gen.uniform(-120, -70, n),
        "Latitude_Geocoded": gen.uniform(25, 48, n),
    })
    for col in POLLUTION_TARGET_COLUMNS:
        raw[col] = gen.uniform(0, 50, n)
    return prepare_pollution_frame(raw)
