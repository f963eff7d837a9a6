"""
Dataset Assembly
================
Training set construction and PyTorch Dataset classes.

Modules:
    assembler - Merge positives/negatives, encode, derive targets, Bernoulli train/val split
    tabular   - HazardTabularDataset: (feature row, target vector) pairs for DataLoader
"""
