"""
Dataset Assembly
================
Merge positives with synthesized negatives, encode every record with one
encoder, derive targets, and split train/validation.

The split is an independent Bernoulli trial per record (train with
probability train_ratio), so subset sizes vary between runs unless the
generator is seeded.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from hazardcast.data.keys import frame_keys
from hazardcast.data.records import POLLUTION_TARGET_COLUMNS

FIRE_TARGET_COLUMNS = ("label", "magnitude")
DEFAULT_TRAIN_RATIO = 0.8


@dataclass
class TrainValSplit:
    """Feature/target arrays for the training-loop collaborator."""
    x_train: np.ndarray
    y_train: np.ndarray
    x_val: np.ndarray
    y_val: np.ndarray

    @property
    def n_train(self):
        return len(self.x_train)

    @property
    def n_val(self):
        return len(self.x_val)


def random_split(x, y, rng, train_ratio=DEFAULT_TRAIN_RATIO):
    """
    Bernoulli train/validation partition.

    Args:
        x: (N, F) features
        y: (N, T) targets
        rng: numpy.random.Generator
        train_ratio: Probability a record lands in the training subset

    Returns:
        TrainValSplit (float32 arrays)
    """
    if not 0.0 <= train_ratio <= 1.0:
        raise ValueError(f"train_ratio must be in [0, 1], got {train_ratio}")
    if len(x) != len(y):
        raise ValueError(f"Feature/target length mismatch: {len(x)} vs {len(y)}")

    train_mask = rng.random(len(x)) < train_ratio
    x = np.asarray(x, dtype=np.float32)
    y = np.asarray(y, dtype=np.float32)
    return TrainValSplit(
        x_train=x[train_mask],
        y_train=y[train_mask],
        x_val=x[~train_mask],
        y_val=y[~train_mask],
    )


def merge_records(positives, negatives):
    """
    Concatenate positives and negatives, checking no two rows share an event key.

    Raises:
        ValueError: If duplicate event keys are present
    """
    merged = pd.concat([positives, negatives], ignore_index=True)
    keys = frame_keys(merged)
    n_dupes = len(keys) - len(set(keys))
    if n_dupes:
        raise ValueError(f"{n_dupes} duplicate event keys in merged dataset")
    return merged


def fire_targets(records):
    """(N, 2) targets: [label (0/1), magnitude]."""
    return np.stack([
        records["label"].to_numpy().astype(np.float64),
        records["magnitude"].to_numpy(dtype=np.float64),
    ], axis=1)


def assemble_fire_dataset(positives, negatives, encoder, rng, train_ratio=DEFAULT_TRAIN_RATIO):
    """
    Build the wildfire train/validation split.

    Returns:
        (TrainValSplit with x (N, 4) and y (N, 2) = [label, magnitude], merged frame)
    """
    merged = merge_records(positives, negatives)
    x = encoder.encode_frame(merged)
    y = fire_targets(merged)
    split = random_split(x, y, rng, train_ratio)
    print(f"[Dataset] Combined: {len(merged)} "
          f"(positives {len(positives)}, negatives {len(negatives)})")
    print(f"[Split] Train: {split.n_train}, Val: {split.n_val}")
    return split, merged


def assemble_pollution_dataset(records, encoder, rng, train_ratio=DEFAULT_TRAIN_RATIO):
    """
    Build the pollution train/validation split.

    Returns:
        TrainValSplit with x (N, 7) and y (N, 16) in POLLUTION_TARGET_COLUMNS order
    """
    x = encoder.encode_frame(records)
    y = records[POLLUTION_TARGET_COLUMNS].to_numpy(dtype=np.float64)
    split = random_split(x, y, rng, train_ratio)
    print(f"[Dataset] Feature shape: {x.shape}, Target shape: {y.shape}")
    print(f"[Split] Train: {split.n_train}, Val: {split.n_val}")
    return split
