"""
Feature Encoding
================
Encoders that turn raw space-time records into fixed-order numeric vectors.

Modules:
    encoder - CoordinateBoxEncoder (lat, lon, year, doy), CyclicalDateEncoder
              (year, month/day sin-cos, lon, lat), JSON persistence
"""
