"""
Data Pipeline
=============
Positive record loading and negative sample synthesis.

Modules:
    records   - CSV -> normalized wildfire / pollution frames (drop and coerce policy)
    bounds    - DomainBounds: lat/lon/year extent of the positives, persisted with the model
    keys      - Event keys and the shared EventKeySet used to reject duplicate points
    grid      - GridOccupancyIndex: per-cell positive counts, zero-occupancy cells
    negatives - Local / global / never-occurred generators, quota split, orchestration
"""
