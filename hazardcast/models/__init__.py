"""
Model Definitions
=================
Neural network architectures for hazard prediction.
Contains model classes only -- no training logic.

Modules:
    fire_net      - FireRiskNet: two-headed MLP (fire probability + fire size), FireLoss
    pollution_net - PollutionNet: 16-target multi-pollutant regressor
"""
