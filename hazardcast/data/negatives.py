"""
Negative Sample Synthesis
=========================
Turn a positive-only event set into contrastive "no event" points.

Three strategies share one signature and one stopping rule:
    generate(positives, bounds, key_set, target_count, rng, ...) -> GenerationResult

    local  - jitter a random positive in space (+/- radius deg) and time (+/- window days)
    global - uniform over the domain bounding box and year range
    never  - uniform inside grid cells that never recorded a positive

Each generator draws until target_count points are accepted or
attempt_multiplier * target_count draws are spent. Candidates whose event key
is already in the shared EventKeySet are rejected; accepted keys are added
immediately. Under-delivery is reported through GenerationResult, not raised.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from hazardcast.data.bounds import clamp
from hazardcast.data.grid import GridOccupancyIndex, DEFAULT_CELL_SIZE
from hazardcast.data.keys import event_key
from hazardcast.data.records import EventRecord, records_to_frame

MIN_DOY = 1
MAX_DOY = 366

LOCAL_RADIUS_DEG = 0.5
LOCAL_DOY_WINDOW = 15
LOCAL_ATTEMPT_MULTIPLIER = 5
GLOBAL_ATTEMPT_MULTIPLIER = 10
NEVER_ATTEMPT_MULTIPLIER = 10

LOCAL_FRACTION = 0.4
GLOBAL_FRACTION = 0.3


@dataclass
class GenerationResult:
    """Outcome of one generator call: the accepted points plus requested vs. achieved."""
    strategy: str
    records: pd.DataFrame
    requested: int
    attempts: int
    # Never-occurred only: number of zero-occupancy cells, and the cell each point was drawn from
    zero_cells: Optional[int] = None
    origin_cells: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def achieved(self):
        return len(self.records)

    @property
    def shortfall(self):
        return self.requested - self.achieved

    @property
    def complete(self):
        return self.shortfall <= 0


@dataclass(frozen=True)
class NegativeQuota:
    local: int
    global_: int
    never: int

    @property
    def total(self):
        return self.local + self.global_ + self.never


def split_negative_quota(total, local_fraction=LOCAL_FRACTION, global_fraction=GLOBAL_FRACTION):
    """
    Split the negative target across the three strategies.

    local = floor(total * local_fraction), global = floor(total * global_fraction),
    never-occurred takes the remainder so the parts always sum to total.
    """
    if total < 0:
        raise ValueError(f"Negative total: {total}")
    if local_fraction < 0 or global_fraction < 0 or local_fraction + global_fraction > 1:
        raise ValueError(
            f"Invalid quota fractions: local={local_fraction}, global={global_fraction}"
        )
    n_local = math.floor(total * local_fraction)
    n_global = math.floor(total * global_fraction)
    return NegativeQuota(local=n_local, global_=n_global, never=total - n_local - n_global)


def _random_in_range(rng, vmin, vmax):
    """Uniform in [vmin, vmax)."""
    return rng.random() * (vmax - vmin) + vmin


def _random_year(rng, bounds):
    # floor of a continuous draw over [year_min, year_max + 1)
    year = math.floor(_random_in_range(rng, bounds.year_min, bounds.year_max + 1))
    return min(year, bounds.year_max)


def _random_doy(rng):
    return min(math.floor(_random_in_range(rng, MIN_DOY, MAX_DOY + 1)), MAX_DOY)


def _try_accept(key_set, accepted, lat, lon, year, doy):
    key = event_key(lat, lon, year, doy)
    if key_set.contains(key):
        return False
    accepted.append(EventRecord(lat, lon, year, doy))
    key_set.add(key)
    return True


def generate_local_negatives(positives, bounds, key_set, target_count, rng,
                             radius_deg=LOCAL_RADIUS_DEG,
                             doy_window=LOCAL_DOY_WINDOW,
                             attempt_multiplier=LOCAL_ATTEMPT_MULTIPLIER):
    """
    Negatives near real events.

    Picks a random positive as anchor, offsets lat/lon uniformly within
    +/- radius_deg (clamped into the domain) and day-of-year by
    floor(uniform(-1, 1) * doy_window) (clamped into [1, 366]). The anchor's
    year is kept.
    """
    accepted = []
    attempts = 0
    max_attempts = target_count * attempt_multiplier
    if len(positives) == 0:
        max_attempts = 0

    lats = positives["latitude"].to_numpy()
    lons = positives["longitude"].to_numpy()
    years = positives["year"].to_numpy()
    doys = positives["day_of_year"].to_numpy()

    while len(accepted) < target_count and attempts < max_attempts:
        attempts += 1
        idx = int(rng.integers(len(lats)))

        lat_offset = (rng.random() * 2 - 1) * radius_deg
        lon_offset = (rng.random() * 2 - 1) * radius_deg
        doy_offset = math.floor((rng.random() * 2 - 1) * doy_window)

        lat = bounds.clamp_lat(float(lats[idx]) + lat_offset)
        lon = bounds.clamp_lon(float(lons[idx]) + lon_offset)
        year = int(years[idx])
        doy = clamp(int(doys[idx]) + doy_offset, MIN_DOY, MAX_DOY)

        _try_accept(key_set, accepted, lat, lon, year, doy)

    return GenerationResult("local", records_to_frame(accepted), target_count, attempts)


def generate_global_negatives(positives, bounds, key_set, target_count, rng,
                              attempt_multiplier=GLOBAL_ATTEMPT_MULTIPLIER):
    """Negatives drawn uniformly over the domain box, year range and [1, 366]."""
    accepted = []
    attempts = 0
    max_attempts = target_count * attempt_multiplier

    while len(accepted) < target_count and attempts < max_attempts:
        attempts += 1
        lat = _random_in_range(rng, bounds.lat_min, bounds.lat_max)
        lon = _random_in_range(rng, bounds.lon_min, bounds.lon_max)
        year = _random_year(rng, bounds)
        doy = _random_doy(rng)
        _try_accept(key_set, accepted, lat, lon, year, doy)

    return GenerationResult("global", records_to_frame(accepted), target_count, attempts)


def generate_never_occurred_negatives(positives, bounds, key_set, target_count, rng,
                                      cell_size=DEFAULT_CELL_SIZE,
                                      attempt_multiplier=NEVER_ATTEMPT_MULTIPLIER,
                                      grid=None):
    """
    Negatives from grid cells with zero recorded positives.

    Picks a random zero-occupancy cell, a uniform point inside it (clamped into
    the domain), then year and day-of-year as the global generator does.

    Clamping can move a point from a partial edge cell into a neighbouring
    cell; origin_cells records the zero-occupancy cell each point was drawn
    from, not the cell it lands in.
    """
    if grid is None:
        grid = GridOccupancyIndex.build(positives, bounds, cell_size)
    zero_cells = grid.zero_fire_cells()

    accepted = []
    origins = []
    attempts = 0
    if not zero_cells or target_count <= 0:
        return GenerationResult("never", records_to_frame(accepted), target_count, attempts,
                                zero_cells=len(zero_cells))

    max_attempts = target_count * attempt_multiplier
    while len(accepted) < target_count and attempts < max_attempts:
        attempts += 1
        cell = zero_cells[int(rng.integers(len(zero_cells)))]
        lat_lo, lat_hi, lon_lo, lon_hi = grid.cell_bounds(cell)

        lat = bounds.clamp_lat(_random_in_range(rng, lat_lo, lat_hi))
        lon = bounds.clamp_lon(_random_in_range(rng, lon_lo, lon_hi))
        year = _random_year(rng, bounds)
        doy = _random_doy(rng)

        if _try_accept(key_set, accepted, lat, lon, year, doy):
            origins.append(cell)

    return GenerationResult("never", records_to_frame(accepted), target_count, attempts,
                            zero_cells=len(zero_cells), origin_cells=origins)


def report_result(result):
    """Print one generator outcome, flagging any shortfall."""
    label = {"local": "Local", "global": "Global", "never": "Never-occurred"}[result.strategy]
    if result.strategy == "never" and result.zero_cells == 0:
        print("[Negatives] No never-occurred cells found, skipping this strategy")
    elif result.strategy == "never":
        print(f"[Negatives] Found {result.zero_cells} never-occurred cells, sampling from them")
    print(f"[Negatives] {label}: {result.achieved}/{result.requested} "
          f"({result.attempts} attempts)")
    if result.shortfall > 0 and not (result.strategy == "never" and result.zero_cells == 0):
        print(f"[Warning] {label} generator short by {result.shortfall} "
              f"after {result.attempts} attempts")


def synthesize_negatives(positives, bounds, key_set, rng,
                         negative_ratio=1.0,
                         local_fraction=LOCAL_FRACTION,
                         global_fraction=GLOBAL_FRACTION,
                         local_radius_deg=LOCAL_RADIUS_DEG,
                         local_doy_window=LOCAL_DOY_WINDOW,
                         cell_size_deg=DEFAULT_CELL_SIZE,
                         local_attempt_multiplier=LOCAL_ATTEMPT_MULTIPLIER,
                         global_attempt_multiplier=GLOBAL_ATTEMPT_MULTIPLIER,
                         never_attempt_multiplier=NEVER_ATTEMPT_MULTIPLIER):
    """
    Run local, global and never-occurred generators in that order on one key set.

    Args:
        positives: Deduplicated positive event frame
        bounds: DomainBounds of the positives
        key_set: EventKeySet built from the positives; grown in place
        rng: numpy.random.Generator
        negative_ratio: Negatives per positive (1.0 = balanced)

    Returns:
        (negatives frame, list of GenerationResult)
    """
    total = int(round(len(positives) * negative_ratio))
    quota = split_negative_quota(total, local_fraction, global_fraction)
    print(f"[Negatives] Will generate {quota.local} local, {quota.global_} global, "
          f"and {quota.never} never-occurred negatives")

    results = [
        generate_local_negatives(
            positives, bounds, key_set, quota.local, rng,
            radius_deg=local_radius_deg,
            doy_window=local_doy_window,
            attempt_multiplier=local_attempt_multiplier,
        ),
        generate_global_negatives(
            positives, bounds, key_set, quota.global_, rng,
            attempt_multiplier=global_attempt_multiplier,
        ),
        generate_never_occurred_negatives(
            positives, bounds, key_set, quota.never, rng,
            cell_size=cell_size_deg,
            attempt_multiplier=never_attempt_multiplier,
        ),
    ]
    for result in results:
        report_result(result)

    frames = [r.records for r in results if len(r.records)]
    negatives = pd.concat(frames, ignore_index=True) if frames else records_to_frame([])
    print(f"[Negatives] Total: {len(negatives)} of {total} requested")
    return negatives, results
