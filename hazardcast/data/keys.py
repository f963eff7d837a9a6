"""
Event Keys
==========
Deduplication fingerprints for space-time points.

A key is "lat,lon,year,doy" with lat/lon fixed to 4 decimals (~11 m), so
near-identical synthetic points collide with each other and with real events.
"""

KEY_DECIMALS = 4


def event_key(latitude, longitude, year, day_of_year):
    """Canonical key for one space-time point."""
    return f"{latitude:.{KEY_DECIMALS}f},{longitude:.{KEY_DECIMALS}f},{int(year)},{int(day_of_year)}"


def frame_keys(df):
    """Event keys for every row of an event frame, in row order."""
    return [
        event_key(lat, lon, year, doy)
        for lat, lon, year, doy in zip(
            df["latitude"].to_numpy(),
            df["longitude"].to_numpy(),
            df["year"].to_numpy(),
            df["day_of_year"].to_numpy(),
        )
    ]


class EventKeySet:
    """
    Mutable set of claimed event keys.

    Built once from the positives, then passed to each negative generator in
    turn; every accepted negative adds its key so no later draw re-emits it.
    """

    def __init__(self, keys=None):
        self._keys = set(keys) if keys is not None else set()

    @classmethod
    def build(cls, records):
        return cls(frame_keys(records))

    def contains(self, key):
        return key in self._keys

    def add(self, key):
        self._keys.add(key)

    def __contains__(self, key):
        return key in self._keys

    def __len__(self):
        return len(self._keys)


def deduplicate_positives(positives):
    """
    Keep the first record for each event key.

    Returns:
        (deduplicated frame, number of rows dropped)
    """
    keys = frame_keys(positives)
    seen = set()
    keep = []
    for k in keys:
        keep.append(k not in seen)
        seen.add(k)
    deduped = positives[keep].reset_index(drop=True)
    return deduped, len(positives) - len(deduped)
