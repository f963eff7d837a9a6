"""
Shared Utilities
================
Common functions used across the pipeline and entry points.

Modules:
    seed          - Random seed setting (PyTorch + NumPy + Python) and explicit RNG construction
    date_utils    - CLI date parsing, date coercion, day-of-year extraction
    normalization - Min-max scaling with safe degenerate case, day-of-year scaling
"""
