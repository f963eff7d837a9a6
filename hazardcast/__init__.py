"""
Hazardcast
==========
Spatiotemporal hazard prediction: wildfire occurrence/size and multi-pollutant
air quality from (latitude, longitude, year, day-of-year/date).

Modules:
    data/       - Record loading, domain bounds, event keys, grid occupancy, negative sampling
    features/   - Feature encoders shared by training and inference
    datasets/   - Dataset assembly, train/validation split, PyTorch Dataset wrapper
    models/     - Model definitions (two-headed fire MLP, pollution regressor)
    training/   - Training entry points (run via python -m hazardcast.training.xxx)
    prediction/ - Inference entry points (run via python -m hazardcast.prediction.xxx)
    evaluation/ - Validation metrics
    utils/      - Shared utility functions
"""

__version__ = "0.1.0"
