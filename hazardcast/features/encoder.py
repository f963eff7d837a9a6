"""
Feature Encoders
================
Fixed-order feature vectors shared verbatim by dataset assembly and inference.

CoordinateBoxEncoder (wildfire, 4 columns):
    [lat, lon, year] min-max scaled against DomainBounds, doy / 366

CyclicalDateEncoder (pollution, 7 columns):
    [year_scaled, month_sin, month_cos, day_sin, day_cos, lon, lat]
    year min-max scaled against fixed global year bounds; month period 12,
    day-of-year period 366; lon/lat passed through unscaled.

Single-point encoding runs through the same array code as batch encoding, so
a point encoded at inference is bit-identical to the same point in training.
The encoder (with its bounds) is persisted as JSON next to the model weights.
"""

import json
import os

import numpy as np

from hazardcast.data.bounds import DomainBounds
from hazardcast.utils.date_utils import to_date, day_of_year, MAX_DAY_OF_YEAR
from hazardcast.utils.normalization import min_max_scale, scale_day_of_year

ENCODER_FILENAME = "feature_encoder.json"

MONTH_PERIOD = 12
DAY_PERIOD = 366

DEFAULT_YEAR_MIN = 1990
DEFAULT_YEAR_MAX = 2030


def encode_cyclical(value, period):
    """(sin, cos) of 2*pi*value/period; works on scalars and arrays."""
    angle = 2 * np.pi * np.asarray(value, dtype=np.float64) / period
    return np.sin(angle), np.cos(angle)


class CoordinateBoxEncoder:
    """
    Min-max box scaling for (lat, lon, year, doy) against training DomainBounds.

    Args:
        bounds: DomainBounds computed from the training positives
    """

    kind = "coordinate_box"
    feature_names = ("lat", "lon", "year", "doy")

    def __init__(self, bounds):
        self.bounds = bounds

    @property
    def num_features(self):
        return len(self.feature_names)

    def encode_arrays(self, lat, lon, year, doy):
        """
        Returns:
            (N, 4) float64 array
        """
        b = self.bounds
        return np.stack([
            np.atleast_1d(min_max_scale(np.atleast_1d(lat), b.lat_min, b.lat_max)),
            np.atleast_1d(min_max_scale(np.atleast_1d(lon), b.lon_min, b.lon_max)),
            np.atleast_1d(min_max_scale(np.atleast_1d(year), b.year_min, b.year_max)),
            np.atleast_1d(scale_day_of_year(np.atleast_1d(doy))),
        ], axis=1)

    def encode(self, lat, lon, year, doy):
        """Encode one query point -> (4,) array."""
        return self.encode_arrays([lat], [lon], [year], [doy])[0]

    def encode_frame(self, df):
        """Encode an event frame (latitude, longitude, year, day_of_year)."""
        return self.encode_arrays(
            df["latitude"].to_numpy(dtype=np.float64),
            df["longitude"].to_numpy(dtype=np.float64),
            df["year"].to_numpy(dtype=np.float64),
            df["day_of_year"].to_numpy(dtype=np.float64),
        )

    def to_dict(self):
        return {"encoding": self.kind, "bounds": self.bounds.to_dict()}

    @classmethod
    def from_dict(cls, d):
        return cls(DomainBounds.from_dict(d["bounds"]))


class CyclicalDateEncoder:
    """
    Year scaling plus sine/cosine month and day-of-year, followed by raw lon/lat.

    Args:
        year_min: Global lower year bound (fixed at training time, not per dataset)
        year_max: Global upper year bound
    """

    kind = "cyclical_date"
    feature_names = ("year", "month_sin", "month_cos", "day_sin", "day_cos", "lon", "lat")

    def __init__(self, year_min=DEFAULT_YEAR_MIN, year_max=DEFAULT_YEAR_MAX):
        self.year_min = int(year_min)
        self.year_max = int(year_max)

    @property
    def num_features(self):
        return len(self.feature_names)

    def encode_arrays(self, year, month, doy, lon, lat):
        """
        Args:
            year, month, doy: integer calendar components (doy already in [1, 366])
            lon, lat: raw coordinates

        Returns:
            (N, 7) float64 array
        """
        year = np.atleast_1d(np.asarray(year, dtype=np.float64))
        year_scaled = np.atleast_1d(min_max_scale(year, self.year_min, self.year_max))
        month_sin, month_cos = encode_cyclical(np.atleast_1d(month), MONTH_PERIOD)
        day_sin, day_cos = encode_cyclical(np.atleast_1d(doy), DAY_PERIOD)
        return np.stack([
            year_scaled,
            month_sin, month_cos,
            day_sin, day_cos,
            np.atleast_1d(np.asarray(lon, dtype=np.float64)),
            np.atleast_1d(np.asarray(lat, dtype=np.float64)),
        ], axis=1)

    def encode(self, date_value, lon, lat):
        """Encode one query (date, lon, lat) -> (7,) array."""
        d = to_date(date_value)
        return self.encode_arrays([d.year], [d.month], [day_of_year(d)], [lon], [lat])[0]

    def encode_frame(self, df):
        """Encode a pollution frame (date, longitude, latitude)."""
        dates = df["date"].dt
        doy = dates.dayofyear.to_numpy().clip(1, MAX_DAY_OF_YEAR)
        return self.encode_arrays(
            dates.year.to_numpy(),
            dates.month.to_numpy(),
            doy,
            df["longitude"].to_numpy(dtype=np.float64),
            df["latitude"].to_numpy(dtype=np.float64),
        )

    def to_dict(self):
        return {"encoding": self.kind, "year_min": self.year_min, "year_max": self.year_max}

    @classmethod
    def from_dict(cls, d):
        return cls(year_min=d["year_min"], year_max=d["year_max"])


ENCODERS = {
    CoordinateBoxEncoder.kind: CoordinateBoxEncoder,
    CyclicalDateEncoder.kind: CyclicalDateEncoder,
}


def encoder_from_dict(d):
    kind = d.get("encoding")
    if kind not in ENCODERS:
        raise ValueError(f"Unknown feature encoding: {kind!r}")
    return ENCODERS[kind].from_dict(d)


def save_encoder(encoder, out_dir):
    """Write the encoder (and its bounds) to out_dir/feature_encoder.json."""
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, ENCODER_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(encoder.to_dict(), f, indent=2)
    return path


def load_encoder(model_dir):
    """Load the encoder saved alongside a trained model."""
    path = os.path.join(model_dir, ENCODER_FILENAME)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Feature encoder metadata not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return encoder_from_dict(json.load(f))
