import pytest

from hazardcast.data.bounds import DomainBounds, summarize_domain
from hazardcast.data.grid import GridOccupancyIndex
from hazardcast.data.keys import EventKeySet, deduplicate_positives, event_key, frame_keys
from hazardcast.data.records import records_to_frame, EventRecord


def test_summarize_domain(two_fires):
    b = summarize_domain(two_fires)
    assert b == DomainBounds(30.0, 31.0, -81.0, -80.0, 2020, 2021)
    assert isinstance(b.year_min, int)


def test_summarize_domain_empty():
    with pytest.raises(ValueError):
        summarize_domain(records_to_frame([]))


def test_bounds_dict_roundtrip():
    b = DomainBounds(17.9, 70.3, -179.0, -65.3, 1992, 2020)
    assert DomainBounds.from_dict(b.to_dict()) == b
    d = b.to_dict()
    del d["year_max"]
    with pytest.raises(KeyError):
        DomainBounds.from_dict(d)


def test_event_key_format_and_precision():
    assert event_key(30.0, -80.0, 2020, 100) == "30.0000,-80.0000,2020,100"
    # Points closer than the 4-decimal granularity collide
    assert event_key(30.00001, -80.00002, 2020, 100) == event_key(30.00003, -80.00001, 2020, 100)
    assert event_key(30.0001, -80.0, 2020, 100) != event_key(30.0002, -80.0, 2020, 100)


def test_key_set_build_and_grow(two_fires):
    keys = EventKeySet.build(two_fires)
    assert len(keys) == 2
    assert keys.contains("30.0000,-80.0000,2020,100")
    new = event_key(30.5, -80.5, 2020, 1)
    assert new not in keys
    keys.add(new)
    assert keys.contains(new)
    assert len(keys) == 3


def test_deduplicate_positives():
    df = records_to_frame([
        EventRecord(30.00001, -80.0, 2020, 100, 5.0, True),
        EventRecord(30.00002, -80.0, 2020, 100, 7.0, True),
        EventRecord(30.0, -80.0, 2020, 101, 1.0, True),
    ])
    deduped, dropped = deduplicate_positives(df)
    assert dropped == 1
    assert deduped["magnitude"].tolist() == [5.0, 1.0]
    assert len(set(frame_keys(deduped))) == len(deduped)


def test_grid_two_fire_scenario(two_fires):
    bounds = summarize_domain(two_fires)
    grid = GridOccupancyIndex.build(two_fires, bounds, cell_size=1.0)
    assert (grid.n_lat_cells, grid.n_lon_cells) == (1, 1)
    assert grid.count((0, 1)) == 1
    assert grid.count((1, 0)) == 1
    assert grid.zero_fire_cells() == [(0, 0)]
    assert grid.cell_bounds((0, 0)) == (30.0, 31.0, -81.0, -80.0)


def test_grid_counts(clustered_fires):
    bounds = summarize_domain(clustered_fires)
    grid = GridOccupancyIndex.build(clustered_fires, bounds, cell_size=1.0)
    assert (grid.n_lat_cells, grid.n_lon_cells) == (5, 5)
    assert sum(grid.counts.values()) == len(clustered_fires)
    zero = grid.zero_fire_cells()
    assert zero
    assert all(grid.count(c) == 0 for c in zero)
    # South-west corner is populated
    assert (0, 0) not in zero
    assert grid.cell_of(30.2, -84.9) == (0, 0)


def test_grid_degenerate_box():
    df = records_to_frame([EventRecord(30.0, -80.0, 2020, 100, 1.0, True)])
    grid = GridOccupancyIndex.build(df, summarize_domain(df))
    assert len(grid) == 0
    assert grid.zero_fire_cells() == []


def test_grid_rejects_bad_cell_size(two_fires):
    with pytest.raises(ValueError):
        GridOccupancyIndex.build(two_fires, summarize_domain(two_fires), cell_size=0)
