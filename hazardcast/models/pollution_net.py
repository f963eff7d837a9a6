"""
Multi-Pollutant Regressor
=========================
Dense network mapping the 7-column cyclical date encoding to 16 pollutant
metrics ({O3, CO, SO2, NO2} x {Mean, 1st Max Value, 1st Max Hour, AQI}).

Architecture:
    Input (B, 7)
        -> Linear(7, 128) -> ReLU
        -> Linear(128, 128) -> ReLU -> Dropout
        -> Linear(128, 64) -> ReLU -> Dropout
        -> Linear(64, 32) -> ReLU
        -> Linear(32, 16)
"""

import torch.nn as nn


class PollutionNet(nn.Module):
    """
    Args:
        in_features: Encoded feature width (7)
        out_features: Number of regression targets (16)
        dropout: Dropout rate
    """

    def __init__(self, in_features=7, out_features=16, dropout=0.2):
        super().__init__()
        self.net = nn.Sequential(
            nn.Linear(in_features, 128), nn.ReLU(),
            nn.Linear(128, 128), nn.ReLU(),
            nn.Dropout(dropout),
            nn.Linear(128, 64), nn.ReLU(),
            nn.Dropout(dropout),
            nn.Linear(64, 32), nn.ReLU(),
            nn.Linear(32, out_features),
        )

    def forward(self, x):
        """x: (B, in_features) -> (B, out_features)"""
        return self.net(x)
