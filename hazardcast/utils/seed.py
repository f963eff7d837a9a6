"""
Random Seed Utility
===================
Set random seeds for reproducibility across Python, NumPy, and PyTorch, and
build explicit NumPy generators for the sampling code.
"""

import random
import numpy as np
import torch


def set_seed(seed=42):
    """Set random seed for reproducibility."""
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    torch.cuda.manual_seed_all(seed)
    torch.backends.cudnn.deterministic = True
    torch.backends.cudnn.benchmark = False


def make_rng(seed=None):
    """
    Create the random source threaded through negative sampling and splitting.

    Args:
        seed: Integer seed, or None for OS entropy

    Returns:
        numpy.random.Generator
    """
    return np.random.default_rng(seed)
