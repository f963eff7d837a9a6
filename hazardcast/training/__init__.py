"""
Training Scripts
================
Model training entry points. Run via:
    python -m hazardcast.training.train_fire --config configs/default.yaml
    python -m hazardcast.training.train_pollution --config configs/default.yaml

Modules:
    engine          - Epoch loop, best-checkpoint fit with optional early stopping, batched prediction
    train_fire      - Negative synthesis + FireRiskNet training on (lat, lon, year, doy)
    train_pollution - PollutionNet training on cyclical date features + lon/lat
"""
