"""
Tabular Hazard Dataset
======================
PyTorch Dataset over encoded feature rows and their target vectors.
"""

import numpy as np
import torch
from torch.utils.data import Dataset


class HazardTabularDataset(Dataset):
    """
    Each sample is a pair of float32 tensors:
        x: (num_features,) encoded feature vector
        y: (num_targets,) target vector

    Args:
        X: (N, num_features) array
        Y: (N, num_targets) array
    """

    def __init__(self, X, Y):
        if len(X) != len(Y):
            raise ValueError(f"Feature/target length mismatch: {len(X)} vs {len(Y)}")
        self.X = np.ascontiguousarray(X, dtype=np.float32)
        self.Y = np.ascontiguousarray(Y, dtype=np.float32)
        if self.Y.ndim == 1:
            self.Y = self.Y[:, np.newaxis]

    def __len__(self):
        return self.X.shape[0]

    def __getitem__(self, idx):
        x = torch.from_numpy(self.X[idx])
        y = torch.from_numpy(self.Y[idx])
        return x, y
