"""
Spatial Grid Occupancy
======================
Discretize the domain bounding box into square lat/lon cells and count the
positive events in each one. Cells with no events are the sampling regions for
never-occurred negatives.

Cell id = (floor((lat - lat_min) / cell_size), floor((lon - lon_min) / cell_size)).
Cells per axis = ceil(range / cell_size).
"""

import math
from collections import Counter

import numpy as np

DEFAULT_CELL_SIZE = 1.0


class GridOccupancyIndex:
    """
    Per-cell positive counts over the domain bounding box.

    Args:
        bounds: DomainBounds of the positive set
        counts: Mapping (lat_cell, lon_cell) -> number of positives
        cell_size: Cell edge length in degrees
    """

    def __init__(self, bounds, counts, cell_size=DEFAULT_CELL_SIZE):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.bounds = bounds
        self.cell_size = cell_size
        self.counts = dict(counts)
        self.n_lat_cells = math.ceil(bounds.lat_range / cell_size)
        self.n_lon_cells = math.ceil(bounds.lon_range / cell_size)

    @classmethod
    def build(cls, positives, bounds, cell_size=DEFAULT_CELL_SIZE):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        lat_idx = np.floor((positives["latitude"].to_numpy() - bounds.lat_min) / cell_size).astype(np.int64)
        lon_idx = np.floor((positives["longitude"].to_numpy() - bounds.lon_min) / cell_size).astype(np.int64)
        counts = Counter(zip(lat_idx.tolist(), lon_idx.tolist()))
        return cls(bounds, counts, cell_size)

    def cell_of(self, lat, lon):
        return (
            math.floor((lat - self.bounds.lat_min) / self.cell_size),
            math.floor((lon - self.bounds.lon_min) / self.cell_size),
        )

    def count(self, cell):
        return self.counts.get(cell, 0)

    def cell_bounds(self, cell):
        """(lat_lo, lat_hi, lon_lo, lon_hi) of a cell, before clamping to the domain."""
        c_lat, c_lon = cell
        lat_lo = self.bounds.lat_min + c_lat * self.cell_size
        lon_lo = self.bounds.lon_min + c_lon * self.cell_size
        return lat_lo, lat_lo + self.cell_size, lon_lo, lon_lo + self.cell_size

    def zero_fire_cells(self):
        """All in-box cells with no recorded positives, in row-major order."""
        return [
            (c_lat, c_lon)
            for c_lat in range(self.n_lat_cells)
            for c_lon in range(self.n_lon_cells)
            if (c_lat, c_lon) not in self.counts
        ]

    def __len__(self):
        return self.n_lat_cells * self.n_lon_cells
