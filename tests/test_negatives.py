import pandas as pd
import pytest

from hazardcast.config import DEFAULTS
from hazardcast.data.bounds import summarize_domain
from hazardcast.data.grid import GridOccupancyIndex
from hazardcast.data.keys import EventKeySet, frame_keys
from hazardcast.data.negatives import (
    generate_global_negatives,
    generate_local_negatives,
    generate_never_occurred_negatives,
    split_negative_quota,
    synthesize_negatives,
)
from hazardcast.data.records import EventRecord, records_to_frame
from hazardcast.utils.seed import make_rng


def test_quota_small_n_arithmetic():
    q = split_negative_quota(2)
    assert (q.local, q.global_, q.never) == (0, 0, 2)
    q = split_negative_quota(10)
    assert (q.local, q.global_, q.never) == (4, 3, 3)
    q = split_negative_quota(7)
    assert (q.local, q.global_, q.never) == (2, 2, 3)


def test_quota_always_sums_to_total():
    for total in range(0, 500):
        assert split_negative_quota(total).total == total


def test_quota_rejects_bad_fractions():
    with pytest.raises(ValueError):
        split_negative_quota(10, local_fraction=0.7, global_fraction=0.5)
    with pytest.raises(ValueError):
        split_negative_quota(10, local_fraction=-0.1)
    with pytest.raises(ValueError):
        split_negative_quota(-1)


def test_local_negatives_stay_near_anchor_and_in_bounds(rng):
    positives = records_to_frame([
        EventRecord(30.0 + 0.1 * i, -85.0 + 0.2 * i, 2015, 180, 1.0, True) for i in range(20)
    ])
    bounds = summarize_domain(positives)
    keys = EventKeySet.build(positives)

    result = generate_local_negatives(positives, bounds, keys, 100, rng)
    neg = result.records
    assert result.achieved == 100
    assert result.complete
    assert neg["latitude"].between(bounds.lat_min, bounds.lat_max).all()
    assert neg["longitude"].between(bounds.lon_min, bounds.lon_max).all()
    assert (neg["year"] == 2015).all()
    assert ((neg["day_of_year"] - 180).abs() <= 15).all()
    assert not neg["label"].any()
    assert (neg["magnitude"] == 0.0).all()


def test_local_doy_clamped_at_year_edges(rng):
    positives = records_to_frame([
        EventRecord(30.0, -85.0, 2015, 2, 1.0, True),
        EventRecord(31.0, -84.0, 2016, 365, 1.0, True),
    ])
    bounds = summarize_domain(positives)
    result = generate_local_negatives(positives, bounds, EventKeySet.build(positives), 200, rng)
    assert result.records["day_of_year"].between(1, 366).all()


def test_global_negatives_cover_domain(clustered_fires, rng):
    bounds = summarize_domain(clustered_fires)
    keys = EventKeySet.build(clustered_fires)
    result = generate_global_negatives(clustered_fires, bounds, keys, 300, rng)
    neg = result.records
    assert result.achieved == 300
    assert neg["latitude"].between(bounds.lat_min, bounds.lat_max).all()
    assert neg["longitude"].between(bounds.lon_min, bounds.lon_max).all()
    assert neg["year"].between(bounds.year_min, bounds.year_max).all()
    assert neg["day_of_year"].between(1, 366).all()


def test_never_occurred_only_uses_zero_cells(clustered_fires, rng):
    bounds = summarize_domain(clustered_fires)
    grid = GridOccupancyIndex.build(clustered_fires, bounds, cell_size=1.0)
    keys = EventKeySet.build(clustered_fires)

    result = generate_never_occurred_negatives(clustered_fires, bounds, keys, 150, rng, grid=grid)
    assert result.achieved == 150
    assert result.zero_cells == len(grid.zero_fire_cells())
    assert len(result.origin_cells) == result.achieved
    assert all(grid.count(cell) == 0 for cell in result.origin_cells)

    for (lat, lon), cell in zip(result.records[["latitude", "longitude"]].to_numpy(), result.origin_cells):
        lat_lo, lat_hi, lon_lo, lon_hi = grid.cell_bounds(cell)
        assert lat_lo <= lat <= min(lat_hi, bounds.lat_max)
        assert lon_lo <= lon <= min(lon_hi, bounds.lon_max)


def test_never_occurred_without_zero_cells_is_empty(rng):
    # Every cell of a 2x1 box holds a fire
    positives = records_to_frame([
        EventRecord(30.5, -80.5, 2020, 10, 1.0, True),
        EventRecord(31.5, -80.5, 2020, 11, 1.0, True),
        EventRecord(30.0, -81.0, 2020, 12, 1.0, True),
        EventRecord(32.0, -80.0, 2020, 13, 1.0, True),
    ])
    bounds = summarize_domain(positives)
    result = generate_never_occurred_negatives(positives, bounds, EventKeySet.build(positives), 5, rng)
    assert result.zero_cells == 0
    assert result.achieved == 0
    assert result.attempts == 0
    assert result.shortfall == 5


def test_under_delivery_is_tolerated(rng):
    # Degenerate box: only 366 distinct global keys exist, one taken by the positive
    positives = records_to_frame([EventRecord(30.0, -80.0, 2020, 100, 1.0, True)])
    bounds = summarize_domain(positives)
    keys = EventKeySet.build(positives)
    result = generate_global_negatives(positives, bounds, keys, 1000, rng)
    assert 0 < result.achieved <= 365
    assert result.shortfall > 0
    assert not result.complete
    assert result.attempts == 10000


def test_zero_target_does_nothing(clustered_fires, rng):
    bounds = summarize_domain(clustered_fires)
    keys = EventKeySet.build(clustered_fires)
    before = len(keys)
    for gen in (generate_local_negatives, generate_global_negatives, generate_never_occurred_negatives):
        result = gen(clustered_fires, bounds, keys, 0, rng)
        assert result.achieved == 0
        assert result.attempts == 0
    assert len(keys) == before


def test_negative_keys_absent_before_and_present_after(clustered_fires, rng):
    bounds = summarize_domain(clustered_fires)
    keys = EventKeySet.build(clustered_fires)
    positive_keys = set(frame_keys(clustered_fires))

    negatives, results = synthesize_negatives(clustered_fires, bounds, keys, rng)
    neg_keys = frame_keys(negatives)

    assert not positive_keys & set(neg_keys)
    assert all(keys.contains(k) for k in neg_keys)
    assert len(keys) == len(positive_keys) + len(neg_keys)

    merged_keys = list(positive_keys) + neg_keys
    assert len(merged_keys) == len(set(merged_keys))
    assert [r.strategy for r in results] == ["local", "global", "never"]
    assert sum(r.requested for r in results) == len(clustered_fires)


def test_two_fire_scenario_yields_two_never_occurred(two_fires, rng):
    bounds = summarize_domain(two_fires)
    keys = EventKeySet.build(two_fires)
    positive_keys = set(frame_keys(two_fires))

    negatives, results = synthesize_negatives(two_fires, bounds, keys, rng)
    local, global_, never = results
    assert (local.requested, global_.requested, never.requested) == (0, 0, 2)
    assert (local.achieved, global_.achieved) == (0, 0)
    assert never.achieved == 2
    assert len(negatives) == 2
    assert not positive_keys & set(frame_keys(negatives))
    assert negatives["latitude"].between(30.0, 31.0).all()
    assert negatives["longitude"].between(-81.0, -80.0).all()


def test_sampling_is_reproducible_with_seed(clustered_fires):
    def run(seed):
        bounds = summarize_domain(clustered_fires)
        keys = EventKeySet.build(clustered_fires)
        negatives, _ = synthesize_negatives(clustered_fires, bounds, keys, make_rng(seed))
        return negatives

    pd.testing.assert_frame_equal(run(5), run(5))
    assert not run(5).equals(run(6))


def test_sampling_accepts_config_section(clustered_fires, rng):
    bounds = summarize_domain(clustered_fires)
    keys = EventKeySet.build(clustered_fires)
    negatives, results = synthesize_negatives(clustered_fires, bounds, keys, rng, **DEFAULTS["sampling"])
    assert len(negatives) == sum(r.achieved for r in results)
