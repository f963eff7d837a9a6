"""
Domain Bounds
=============
Spatial/temporal extent of the positive event set. Computed once per training
run and persisted next to the model; inference must reuse the same values.
"""

from dataclasses import dataclass, asdict

import numpy as np

BOUND_KEYS = ("lat_min", "lat_max", "lon_min", "lon_max", "year_min", "year_max")


@dataclass(frozen=True)
class DomainBounds:
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    year_min: int
    year_max: int

    @property
    def lat_range(self):
        return self.lat_max - self.lat_min

    @property
    def lon_range(self):
        return self.lon_max - self.lon_min

    def clamp_lat(self, lat):
        return clamp(lat, self.lat_min, self.lat_max)

    def clamp_lon(self, lon):
        return clamp(lon, self.lon_min, self.lon_max)

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, d):
        """Rebuild from persisted key/value pairs. Raises KeyError on a missing bound."""
        missing = [k for k in BOUND_KEYS if k not in d]
        if missing:
            raise KeyError(f"Domain bounds missing keys: {missing}")
        return cls(
            lat_min=float(d["lat_min"]),
            lat_max=float(d["lat_max"]),
            lon_min=float(d["lon_min"]),
            lon_max=float(d["lon_max"]),
            year_min=int(d["year_min"]),
            year_max=int(d["year_max"]),
        )


def clamp(value, vmin, vmax):
    """Clamp value into [vmin, vmax]."""
    return max(vmin, min(value, vmax))


def _column_min_max(values):
    # Single linear pass; no recursion or argument unpacking over the whole column.
    arr = np.asarray(values)
    return arr.min(), arr.max()


def summarize_domain(positives) -> DomainBounds:
    """
    Derive DomainBounds from the positive records.

    Args:
        positives: Event frame with latitude, longitude, year columns

    Returns:
        DomainBounds

    Raises:
        ValueError: If there are no positive records
    """
    if len(positives) == 0:
        raise ValueError("No valid positive records; cannot derive domain bounds")

    lat_min, lat_max = _column_min_max(positives["latitude"])
    lon_min, lon_max = _column_min_max(positives["longitude"])
    year_min, year_max = _column_min_max(positives["year"])

    return DomainBounds(
        lat_min=float(lat_min),
        lat_max=float(lat_max),
        lon_min=float(lon_min),
        lon_max=float(lon_max),
        year_min=int(year_min),
        year_max=int(year_max),
    )
