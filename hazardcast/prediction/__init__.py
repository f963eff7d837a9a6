"""
Inference Scripts
=================
Single-point prediction entry points. Run via:
    python -m hazardcast.prediction.predict_fire --lat 29.65 --lon -82.34 --year 2026 --doy 200
    python -m hazardcast.prediction.predict_pollution 2025-07-19 -112.05 33.46

Modules:
    predict_fire      - Fire probability and size from (lat, lon, year, doy)
    predict_pollution - 16 pollutant metrics and overall AQI from (date, lon, lat)
"""
