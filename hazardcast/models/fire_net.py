"""
Two-Headed Wildfire MLP
=======================
Shared dense trunk with a classification head (fire probability) and a
regression head (fire size).

Architecture:
    Input (B, 4) [lat, lon, year, doy]
        -> Linear(4, 64) -> ReLU
        -> Linear(64, 32) -> ReLU
        -> class head: Linear(32, 1) -> Sigmoid
        -> size head:  Linear(32, 1)
"""

import torch
import torch.nn as nn


class FireRiskNet(nn.Module):
    """
    Args:
        in_features: Encoded feature width (4 for the coordinate-box encoding)
        hidden: Trunk layer widths
    """

    def __init__(self, in_features=4, hidden=(64, 32)):
        super().__init__()
        layers = []
        prev = in_features
        for width in hidden:
            layers += [nn.Linear(prev, width), nn.ReLU()]
            prev = width
        self.trunk = nn.Sequential(*layers)
        self.class_head = nn.Linear(prev, 1)
        self.size_head = nn.Linear(prev, 1)

    def forward(self, x):
        """
        Args:
            x: (B, in_features)

        Returns:
            prob: (B, 1) fire probability
            size: (B, 1) predicted fire size
        """
        h = self.trunk(x)
        prob = torch.sigmoid(self.class_head(h))
        size = self.size_head(h)
        return prob, size


class FireLoss(nn.Module):
    """
    Weighted sum of BCE on the class head and MSE on the size head.

    Targets are (B, 2) = [label, magnitude].
    """

    def __init__(self, class_weight=1.0, size_weight=0.1):
        super().__init__()
        self.class_weight = class_weight
        self.size_weight = size_weight
        self.bce = nn.BCELoss()
        self.mse = nn.MSELoss()

    def forward(self, pred, target):
        prob, size = pred
        class_loss = self.bce(prob, target[:, 0:1])
        size_loss = self.mse(size, target[:, 1:2])
        return self.class_weight * class_loss + self.size_weight * size_loss
